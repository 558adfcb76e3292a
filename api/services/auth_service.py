"""Resolve bearer tokens against the hosted auth service."""

import logging
from typing import Optional

import httpx

from api.core.config import get_settings
from api.core.errors import Unauthorized, UpstreamError

logger = logging.getLogger(__name__)


class AuthService:
    """Looks up the user behind an access token (``GET /auth/v1/user``)."""

    def __init__(self, transport: Optional[httpx.BaseTransport] = None):
        settings = get_settings()
        self.base_url = settings.auth_url.rstrip("/")
        self.anon_key = settings.auth_anon_key
        self.timeout = settings.auth_timeout_seconds
        self._transport = transport

    def get_user_id(self, access_token: str) -> str:
        if not self.base_url:
            logger.error("Auth service URL is not configured")
            raise UpstreamError("Authentication service is not configured")

        headers = {"Authorization": f"Bearer {access_token}"}
        if self.anon_key:
            headers["apikey"] = self.anon_key

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(f"{self.base_url}/auth/v1/user", headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Auth service request failed: {e}")
            raise UpstreamError("Authentication service unavailable") from e

        if response.status_code != 200:
            logger.info(f"Token rejected by auth service (status={response.status_code})")
            raise Unauthorized("Invalid token")

        try:
            user = response.json()
        except ValueError as e:
            logger.error(f"Auth service returned non-JSON body: {response.text[:300]}")
            raise UpstreamError("Authentication service unavailable") from e

        user_id = user.get("id") if isinstance(user, dict) else None
        if not user_id:
            raise Unauthorized("User ID not found in token")
        return str(user_id)


_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get or create the auth service singleton."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
