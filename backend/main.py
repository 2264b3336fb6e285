# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
FastAPI application factory.

Responsibilities
----------------
* Instantiate the FastAPI app.
* Register CORS middleware (credentialed – the admin session is a cookie).
* Register the JSON error contract.
* Mount the three feature routers (auth, admin, content).
* Expose a /health endpoint for container liveness checks.

Production note
---------------
Set ENVIRONMENT=production so the session cookie is marked Secure, and put
the service behind a proxy that overwrites X-Forwarded-For: the rate limiter
trusts that header as supplied.
"""

import time

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from auth.router import router as auth_router
from admin.router import router as admin_router
from content.router import router as content_router
from core.config import settings
from core.errors import register_error_handlers
from core.logger import logger

app = FastAPI(title="Portfolio Admin", version="1.0.0")

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type"],
)


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs every inbound request: method, path, client IP, status, latency.
# Bodies (passwords, setup keys) and cookies are NOT echoed.


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        client_ip = request.client.host if request.client else "unknown"

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            client_ip,
            response.status_code,
            elapsed_ms,
        )
        return response


app.add_middleware(_RequestLogMiddleware)

# ---------------------------------------------------------------------------
# Errors & routers
# ---------------------------------------------------------------------------
register_error_handlers(app)

app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(content_router)

# ---------------------------------------------------------------------------
# Lifecycle & health check
# ---------------------------------------------------------------------------


@app.on_event("startup")
async def _on_startup():
    logger.info("Portfolio admin service starting up")
    if not settings.admin_setup_key:
        logger.info("ADMIN_SETUP_KEY not set – POST /admin/setup is disabled")


@app.on_event("shutdown")
async def _on_shutdown():
    logger.info("Portfolio admin service shutting down")


@app.get("/health")
def health():
    return {"status": "ok"}
