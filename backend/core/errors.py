# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Error taxonomy and the JSON error contract.

Every failure reaches the caller as ``{"error": "<human readable>"}`` with
the status code carried by the exception class.  Stack traces only ever go
to the log.
"""

from contextlib import contextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

from core.logger import logger


class PortfolioError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PortfolioError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthError(PortfolioError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class NotFound(PortfolioError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(PortfolioError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already exists"


class RateLimited(PortfolioError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS

    def __init__(self, retry_after_minutes: int):
        self.retry_after_minutes = retry_after_minutes
        super().__init__(
            f"Too many failed attempts. Try again in {retry_after_minutes} minutes."
        )


class ServiceUnavailable(PortfolioError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Database not available"


class InternalError(PortfolioError):
    pass


@contextmanager
def translate_errors(message: str):
    """
    Wrap a route body so that anything escaping it maps onto the taxonomy.

    Taxonomy errors pass through untouched; a dead or unreachable database
    becomes 503; everything else is logged and surfaces as 500 carrying
    *message*.
    """
    try:
        yield
    except PortfolioError:
        raise
    except (OperationalError, InterfaceError) as exc:
        logger.error("Database unavailable: %s", exc.__class__.__name__)
        raise ServiceUnavailable() from exc
    except Exception as exc:
        logger.exception("%s", message)
        raise InternalError(message) from exc


def register_error_handlers(app: FastAPI) -> None:
    """Install the JSON renderers for the taxonomy on *app*."""

    @app.exception_handler(PortfolioError)
    async def _portfolio_error(request: Request, exc: PortfolioError):
        headers = None
        if isinstance(exc, RateLimited):
            headers = {"Retry-After": str(exc.retry_after_minutes * 60)}
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message},
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Malformed request body"},
        )

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s %s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
