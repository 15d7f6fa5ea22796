"""JWT authentication provider backed by Supabase Auth.

Supabase-issued access tokens are ES256-signed and verified against the
project's JWKS. HS256 tokens signed with the shared secret are accepted as
well; the test suite and local development mint those.

Access token claims used here:
    {
        "sub": "user-uuid",
        "email": "user@example.com",
        "user_metadata": {"display_name": "Jane", "avatar_url": "https://..."},
        "exp": 1234567890
    }
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID

import httpx
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)


class JWTAuthProvider:
    """Validates access tokens and signs users out of Supabase."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
        jwks_url: str = settings.supabase_jwks_url,
        logout_url: str = settings.supabase_logout_url,
        api_key: str = settings.supabase_anon_key,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes
        self._jwks_url = jwks_url
        self._logout_url = logout_url
        self._api_key = api_key
        self._jwks: dict[str, Any] | None = None

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT and extract the subject.

        The signing algorithm comes from the token header: ES256 is checked
        against the JWKS public key, anything else against the shared secret.

        Returns:
            TokenUser if valid, None if invalid, expired or missing claims
        """
        try:
            header = jwt.get_unverified_header(token)
            if header.get("alg") == "ES256":
                claims = await self._decode_es256(token, header)
            else:
                claims = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )
        except JWTError:
            return None

        if claims is None:
            return None
        return self._token_user_from_claims(claims)

    async def sign_out(self, access_token: str) -> None:
        """Revoke the Supabase session behind an access token.

        Failures are logged; the caller clears its cookies regardless.
        """
        if not self._logout_url:
            return
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self._logout_url,
                    headers={
                        "Authorization": f"Bearer {access_token}",
                        "apikey": self._api_key,
                    },
                    timeout=10.0,
                )
                response.raise_for_status()
        except httpx.HTTPError:
            logger.exception("Failed to revoke session at %s", self._logout_url)

    def create_token(self, user: TokenUser) -> str:
        """Create an HS256 access token for a user (tests, local dev)."""
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": str(user.id),
            "email": user.email,
            "aud": "authenticated",
            "role": "authenticated",
            "exp": expire,
            "user_metadata": {
                "display_name": user.display_name,
                "avatar_url": user.avatar_url,
            },
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    # --- Internal helpers ---

    @staticmethod
    def _token_user_from_claims(claims: dict[str, Any]) -> Optional[TokenUser]:
        user_id = claims.get("sub")
        email = claims.get("email")
        if not user_id or not email:
            return None

        try:
            subject = UUID(user_id)
        except ValueError:
            return None

        metadata = claims.get("user_metadata") or {}
        display_name = (
            metadata.get("display_name")
            or metadata.get("full_name")
            or metadata.get("name")
        )

        return TokenUser(
            id=subject,
            email=email,
            display_name=display_name,
            avatar_url=metadata.get("avatar_url"),
            role=claims.get("role"),
        )

    async def _decode_es256(self, token: str, header: dict) -> Optional[dict]:
        kid = header.get("kid")
        if not kid:
            return None

        key_data = (await self._get_jwks()).get(kid)
        if not key_data:
            # Unknown kid usually means the keys were rotated
            self._jwks = None
            key_data = (await self._get_jwks()).get(kid)
            if not key_data:
                logger.warning("JWKS key not found for kid=%s", kid)
                return None

        return jwt.decode(
            token,
            ECKey(key_data, algorithm="ES256"),
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    async def _get_jwks(self) -> dict[str, Any]:
        """Fetch the JWKS once and keep a kid -> key mapping."""
        if self._jwks is not None:
            return self._jwks
        if not self._jwks_url:
            return {}

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(self._jwks_url, timeout=10.0)
                response.raise_for_status()
        except httpx.HTTPError:
            logger.exception("Failed to fetch JWKS from %s", self._jwks_url)
            return {}

        self._jwks = {
            key["kid"]: key for key in response.json().get("keys", []) if key.get("kid")
        }
        logger.info("Fetched %d JWKS keys", len(self._jwks))
        return self._jwks
