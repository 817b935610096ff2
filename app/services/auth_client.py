"""
Client for a GoTrue-compatible auth service (Supabase Auth).

Two calls are used:
- password sign-in: POST {AUTH_URL}/auth/v1/token?grant_type=password
- token verification: GET {AUTH_URL}/auth/v1/user with the bearer token

Usage:
    client = SupabaseAuthClient()
    session = await client.sign_in("fan@example.com", "secret")
    user = await client.get_user(session.access_token)
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class AuthenticationError(Exception):
    """Sign-in or token verification failed."""


@dataclass
class AuthSession:
    access_token: str
    user: Dict[str, Any] = field(default_factory=dict)
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"


class SupabaseAuthClient:
    """
    Thin async wrapper over the auth REST API.

    Attributes:
        base_url: Auth service root URL
        anon_key: Public API key sent as the ``apikey`` header
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        anon_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url if base_url is not None else settings.AUTH_URL).rstrip("/")
        self.anon_key = anon_key if anon_key is not None else settings.AUTH_ANON_KEY
        self.timeout = timeout if timeout is not None else settings.AUTH_TIMEOUT
        self._transport = transport

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=5),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        headers = {"apikey": self.anon_key, **kwargs.pop("headers", {})}
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            return await client.request(method, path, headers=headers, **kwargs)

    async def _call(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        if not self.base_url:
            raise AuthenticationError("Authentication service is not configured")

        try:
            response = await self._request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Auth service request failed: {e}")
            raise AuthenticationError("Authentication service unavailable") from e

        if response.status_code >= 400:
            raise AuthenticationError(_error_message(response))
        return response.json()

    async def sign_in(self, email: str, password: str) -> AuthSession:
        """
        Password sign-in.

        Raises:
            AuthenticationError: Wrong credentials or the service failed
        """
        body = await self._call(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        token = body.get("access_token")
        if not token:
            raise AuthenticationError("No access token returned")

        return AuthSession(
            access_token=token,
            user=body.get("user") or {},
            refresh_token=body.get("refresh_token"),
            expires_in=body.get("expires_in"),
        )

    async def get_user(self, token: str) -> Dict[str, Any]:
        """Resolve a bearer token to the user it was issued for."""
        user = await self._call(
            "GET",
            "/auth/v1/user",
            headers={"Authorization": f"Bearer {token}"},
        )
        if not user.get("id"):
            raise AuthenticationError("Invalid token")
        return user
