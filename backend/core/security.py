# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Central security module.  Password primitives, request identity and the
admin guard live here.  No other module should touch raw crypto directly.

Responsibilities
----------------
1. Password hashing / verification          (PBKDF2-HMAC-SHA512 via passlib)
2. Username-enumeration timing defense      (decoy hash on unknown users)
3. Request identity                         (client address, user agent)
4. FastAPI dependency guard                 (require_admin)

Hash parameters are fixed: changing any of them invalidates every stored
password hash.
"""

import secrets

from fastapi import Depends, Request
from passlib.crypto.digest import pbkdf2_hmac
from passlib.utils import consteq

from core.errors import AuthError, translate_errors
from core.session import SESSION_COOKIE, resolve_session
from database import get_db

# ---------------------------------------------------------------------------
# 1.  PBKDF2-HMAC-SHA512 – password hashing
# ---------------------------------------------------------------------------

PBKDF2_DIGEST = "sha512"
PBKDF2_ROUNDS = 100_000
PBKDF2_KEYLEN = 64          # bytes → 128 hex characters
SALT_BYTES = 32             # 256-bit salt, stored hex-encoded


def generate_salt() -> str:
    """Fresh 256-bit salt from the OS CSPRNG, hex-encoded."""
    return secrets.token_hex(SALT_BYTES)


def hash_password(password: str, salt: str) -> str:
    """
    Derive the stored digest for *password*.

    The hex *salt* text is used as-is (UTF-8) as the KDF salt, so digests stay
    compatible with rows created by earlier deployments.
    """
    derived = pbkdf2_hmac(PBKDF2_DIGEST, password, salt, PBKDF2_ROUNDS, PBKDF2_KEYLEN)
    return derived.hex()


def verify_password(password: str, password_hash: str, salt: str) -> bool:
    """
    Constant-time check of *password* against a digest produced by
    :func:`hash_password`.  Both digests are compared as raw bytes.
    """
    candidate = bytes.fromhex(hash_password(password, salt))
    try:
        expected = bytes.fromhex(password_hash)
    except ValueError:
        return False
    return consteq(expected, candidate)


# ---------------------------------------------------------------------------
# 2.  Timing defense
# ---------------------------------------------------------------------------

# Never matches anything: only ever compared against a throwaway salt.
_DECOY_HASH = "00" * PBKDF2_KEYLEN


def authenticate(user, password: str) -> bool:
    """
    Verify *password* for *user* (an ``AdminUser`` or None).

    The full key derivation runs whether or not the user exists; an unknown
    user is checked against a decoy digest under a freshly generated salt, and
    the result is discarded only after the hash has been computed.
    """
    if user is None:
        password_hash, salt = _DECOY_HASH, generate_salt()
    else:
        password_hash, salt = user.password_hash, user.salt

    matched = verify_password(password, password_hash, salt)
    return matched and user is not None


# ---------------------------------------------------------------------------
# 3.  Request identity
# ---------------------------------------------------------------------------


def get_client_ip(request: Request) -> str:
    """
    Client address used for rate limiting and audit rows.

    X-Forwarded-For (first hop) wins, then X-Real-IP, then the literal
    ``"unknown"``.  Only the first X-Forwarded-For hop is kept, not the
    whole header, so a proxy appending its own hop does not create a fresh
    lockout key.  The headers are trusted as supplied: nothing checks that
    the immediate peer is a proxy we operate, so a direct client can spoof
    them.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded and forwarded.split(",")[0].strip():
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip and real_ip.strip():
        return real_ip.strip()

    return "unknown"


def get_user_agent(request: Request) -> str:
    return request.headers.get("User-Agent") or "unknown"


# ---------------------------------------------------------------------------
# 4.  FastAPI dependency guard
# ---------------------------------------------------------------------------


def require_admin(request: Request, db=Depends(get_db)):
    """
    Dependency: resolve the ``admin_session`` cookie to an active AdminUser.

    Raises 401 when the cookie is missing, malformed, unknown, expired, or
    belongs to a deactivated account.
    """
    with translate_errors("Authorization failed"):
        user = resolve_session(db, request.cookies.get(SESSION_COOKIE))
    if user is None:
        raise AuthError("Unauthorized")
    return user
