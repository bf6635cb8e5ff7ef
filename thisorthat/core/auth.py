"""
Bearer token verification against the hosted auth provider.
"""
import logging
from typing import Optional

import requests
from pydantic import BaseModel

from thisorthat.core.config import settings
from thisorthat.core.exceptions import AuthRequired, BackendError

logger = logging.getLogger(__name__)


class AuthUser(BaseModel):
    id: str
    email: Optional[str] = None


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token from an Authorization header, accepting a bare token too."""
    header = (authorization or "").strip()
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip()
    return header


class HostedAuthProvider:
    """Resolves access tokens to users through the provider's /auth/v1/user endpoint."""

    def __init__(self, base_url: str, api_key: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    def get_user(self, token: str) -> AuthUser:
        if not self.base_url or not self.api_key:
            logger.error("Auth provider is not configured (SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY)")
            raise BackendError("Server configuration error")

        try:
            response = requests.get(
                f"{self.base_url}/auth/v1/user",
                headers={
                    "apikey": self.api_key,
                    "Authorization": f"Bearer {token}"
                },
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Auth provider request failed: {e}")
            raise BackendError("Auth provider unavailable") from e

        if response.status_code in (401, 403):
            raise AuthRequired("Invalid or expired token")
        if response.status_code != 200:
            logger.error(f"Auth provider returned {response.status_code}")
            raise BackendError("Auth provider error")

        data = response.json()
        if not data or not data.get("id"):
            raise AuthRequired("Invalid or expired token")
        return AuthUser(id=str(data["id"]), email=data.get("email"))


def build_auth_provider() -> HostedAuthProvider:
    return HostedAuthProvider(
        settings.SUPABASE_URL,
        settings.SUPABASE_SERVICE_ROLE_KEY,
        timeout=settings.AUTH_TIMEOUT
    )
