"""Password hashing (Argon2), signed tokens (JWT) and reset-token digests."""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"
OAUTH_STATE_TYPE = "oauth_state"
RESET_TOKEN_BYTES = 24

_hasher = PasswordHasher()


def hash_password(plain_password: str) -> str:
    return _hasher.hash(plain_password)


def verify_password(plain_password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        return _hasher.verify(password_hash, plain_password)
    except VerificationError:
        return False
    except InvalidHashError:
        logger.warning("Stored password hash is not a valid Argon2 hash")
        return False


def password_needs_rehash(password_hash: str) -> bool:
    """True when the hash was made with weaker parameters than the current hasher's."""
    return _hasher.check_needs_rehash(password_hash)


def _signing_key() -> str:
    if not settings.JWT_SECRET:
        raise ValueError("JWT_SECRET must be set")
    return settings.JWT_SECRET


def _encode(token_type: str, lifetime: timedelta, claims: dict[str, Any]) -> str:
    issued_at = datetime.now(timezone.utc)
    payload = {**claims, "type": token_type, "iat": issued_at, "exp": issued_at + lifetime}
    return jwt.encode(payload, _signing_key(), algorithm=settings.JWT_ALG)


def _decode(token: str, token_type: str) -> dict[str, Any]:
    """Verified claims of a token of ``token_type``. Raises jwt.InvalidTokenError otherwise."""
    payload = jwt.decode(token, _signing_key(), algorithms=[settings.JWT_ALG])
    if payload.get("type") != token_type:
        raise jwt.InvalidTokenError(f"Expected a {token_type} token")
    return payload


def create_access_token(user_id: str, role: str) -> str:
    return _encode(
        ACCESS_TOKEN_TYPE,
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        {"sub": str(user_id), "role": role, "jti": str(uuid4())},
    )


def verify_access_token(token: str) -> dict[str, Any]:
    return _decode(token, ACCESS_TOKEN_TYPE)


def create_oauth_state(redirect: str) -> str:
    """Carry the post-login redirect through the provider round trip, signed and short-lived."""
    return _encode(
        OAUTH_STATE_TYPE,
        timedelta(seconds=settings.OAUTH_STATE_TTL),
        {"redirect": redirect, "nonce": secrets.token_urlsafe(16)},
    )


def verify_oauth_state(state: str) -> dict[str, Any]:
    return _decode(state, OAUTH_STATE_TYPE)


def generate_password_reset_token() -> str:
    return secrets.token_hex(RESET_TOKEN_BYTES)


def hash_token(token: str) -> str:
    """Digest stored in place of a reset token; the pepper never leaves the server."""
    if not settings.TOKEN_PEPPER:
        raise ValueError("TOKEN_PEPPER must be set")
    return hashlib.sha256((token + settings.TOKEN_PEPPER).encode()).hexdigest()
