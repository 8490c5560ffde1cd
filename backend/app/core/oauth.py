"""Google Sign-In: authorization-code exchange and id_token verification against Google's JWKS."""

import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlencode

import httpx
from jose import jwk, jwt
from jose.exceptions import JWTError

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_JWKS_URL = "https://www.googleapis.com/oauth2/v3/certs"
GOOGLE_ISSUERS = frozenset({"https://accounts.google.com", "accounts.google.com"})
HTTP_TIMEOUT_SECONDS = 10.0


@dataclass
class CachedKeys:
    keys: list[dict[str, Any]]
    fetched_at: float  # time.monotonic()


# Signing keys per JWKS URL, shared by every adapter in the process
_key_cache: dict[str, CachedKeys] = {}


class GoogleOAuthAdapter:
    def __init__(self) -> None:
        self.client_id = settings.OAUTH_GOOGLE_CLIENT_ID
        self.client_secret = settings.OAUTH_GOOGLE_CLIENT_SECRET
        self.redirect_uri = settings.OAUTH_GOOGLE_REDIRECT_URI

    @property
    def configured(self) -> bool:
        return all((self.client_id, self.client_secret, self.redirect_uri))

    def get_authorize_url(self, state: str) -> str:
        query = urlencode(
            {
                "response_type": "code",
                "client_id": self.client_id,
                "redirect_uri": self.redirect_uri,
                "scope": "openid email profile",
                "prompt": "select_account",
                "state": state,
            }
        )
        return f"{GOOGLE_AUTHORIZE_URL}?{query}"

    async def exchange_code_for_tokens(self, code: str) -> dict[str, Any]:
        form = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS) as http:
            response = await http.post(GOOGLE_TOKEN_URL, data=form)
        response.raise_for_status()
        return response.json()

    async def validate_id_token(self, id_token: str) -> dict[str, Any]:
        """Claims of a Google-signed id_token issued to this client. Raises ValueError otherwise."""
        kid = jwt.get_unverified_header(id_token).get("kid")
        matching = [key for key in await self._signing_keys() if key.get("kid") == kid]
        if not matching:
            raise ValueError("Key not found in JWKS")

        try:
            claims = jwt.decode(
                id_token,
                jwk.construct(matching[0]),
                algorithms=["RS256"],
                audience=self.client_id,
                # Google uses two issuer spellings, checked below
                options={"verify_iss": False, "verify_at_hash": False},
            )
        except JWTError as e:
            raise ValueError(f"Invalid id_token: {e}") from e

        if claims.get("iss") not in GOOGLE_ISSUERS:
            raise ValueError("Invalid issuer")
        if not claims.get("email"):
            raise ValueError("id_token has no email claim")
        return claims

    async def _signing_keys(self) -> list[dict[str, Any]]:
        cached = _key_cache.get(GOOGLE_JWKS_URL)
        if cached and time.monotonic() - cached.fetched_at < settings.JWKS_CACHE_TTL_SECONDS:
            return cached.keys

        async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS) as http:
            response = await http.get(GOOGLE_JWKS_URL)
        response.raise_for_status()
        keys = response.json().get("keys", [])
        _key_cache[GOOGLE_JWKS_URL] = CachedKeys(keys=keys, fetched_at=time.monotonic())
        logger.info("Google signing keys refreshed", extra={"key_count": len(keys)})
        return keys


def get_google_adapter() -> GoogleOAuthAdapter:
    return GoogleOAuthAdapter()
