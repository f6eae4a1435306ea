"""Security related functions."""

import logging

import httpx
import jwt
from jwt import InvalidTokenError

from app.core.config import settings
from app.exceptions.base import AuthenticationError

logger = logging.getLogger(__name__)


class SupabaseAuthenticator:
    """
    Verifies bearer tokens issued by Supabase Auth.

    When a JWT secret is configured the token is verified locally (HS256 and
    audience). Otherwise the token is sent to the Supabase Auth ``/user``
    endpoint, which validates it and returns the user.

    :ivar supabase_url: The base URL of the Supabase project.
    :type supabase_url: str
    :ivar jwt_secret: The project's JWT secret, if local verification is enabled.
    :type jwt_secret: str
    """

    def __init__(self):
        self.supabase_url = (settings.supabase_url or "").rstrip("/")
        self.anon_key = settings.supabase_anon_key
        self.jwt_secret = settings.supabase_jwt_secret
        self.audience = settings.jwt_audience

    async def verify_token(self, token: str) -> dict:
        """
        Verify a bearer token and return a payload with at least ``sub``.

        :param token: The JWT issued by the identity provider.
        :return: The decoded claims (local verification) or the user record
            mapped to claims (remote verification).
        :raises AuthenticationError: If the token is invalid or cannot be checked.
        """
        if self.jwt_secret:
            return self._decode_locally(token)
        return await self._fetch_user(token)

    def _decode_locally(self, token: str) -> dict:
        try:
            return jwt.decode(
                token,
                key=self.jwt_secret,
                algorithms=["HS256"],
                audience=self.audience,
            )
        except InvalidTokenError as e:
            raise AuthenticationError(f"Invalid authentication token: {str(e)}") from e

    async def _fetch_user(self, token: str) -> dict:
        if not self.supabase_url:
            raise AuthenticationError("Identity provider is not configured")

        headers = {"Authorization": f"Bearer {token}"}
        if self.anon_key:
            headers["apikey"] = self.anon_key

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(f"{self.supabase_url}/auth/v1/user", headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Identity provider request failed: {str(e)}")
            raise AuthenticationError("Could not verify authentication token") from e

        if response.status_code != 200:
            raise AuthenticationError("Invalid authentication token")

        user = response.json()
        return {
            "sub": user.get("id"),
            "email": user.get("email"),
            "username": (user.get("user_metadata") or {}).get("username"),
        }
