"""
Supabase Auth client

Talks to the GoTrue REST API directly with httpx:
- GET  /auth/v1/user         resolve an access token to its user
- POST /auth/v1/admin/users  create a confirmed account (service role)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from nimathi.exceptions import (
    SupabaseAPIError,
    ValidationError,
    wrap_external_exception,
)

logger = logging.getLogger(__name__)


@dataclass
class AuthUser:
    """Identity returned by Supabase Auth"""
    id: str
    email: Optional[str] = None
    user_metadata: dict[str, Any] = field(default_factory=dict)


class SupabaseAuthClient:
    """Minimal async client for Supabase Auth"""

    def __init__(
        self,
        url: str,
        service_role_key: str,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.base_url = url.rstrip("/") + "/auth/v1"
        self.service_role_key = service_role_key
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        await self._client.aclose()

    async def get_user(self, access_token: str) -> Optional[AuthUser]:
        """
        Resolve an access token to its user

        Returns:
            AuthUser, or None when Supabase rejects the token

        Raises:
            SupabaseAPIError: Supabase unreachable or failing
        """
        try:
            response = await self._client.get(
                f"{self.base_url}/user",
                headers={
                    "apikey": self.service_role_key,
                    "Authorization": f"Bearer {access_token}",
                },
            )
        except httpx.HTTPError as e:
            raise wrap_external_exception(e, operation="auth_get_user")

        if response.status_code in (401, 403):
            logger.warning(f"Supabase rejected access token {access_token[:10]}...")
            return None
        if response.is_error:
            raise SupabaseAPIError(
                message=f"Supabase returned error: {response.status_code}",
                status_code=response.status_code,
                operation="auth_get_user",
            )

        return _to_auth_user(response.json())

    async def create_user(
        self,
        email: str,
        password: str,
        user_metadata: Optional[dict[str, Any]] = None
    ) -> AuthUser:
        """
        Create an account with the email already confirmed

        Raises:
            ValidationError: Supabase refused the signup (duplicate email, weak password)
            SupabaseAPIError: Supabase unreachable or failing
        """
        try:
            response = await self._client.post(
                f"{self.base_url}/admin/users",
                headers={
                    "apikey": self.service_role_key,
                    "Authorization": f"Bearer {self.service_role_key}",
                },
                json={
                    "email": email,
                    "password": password,
                    "user_metadata": user_metadata or {},
                    "email_confirm": True,
                },
            )
        except httpx.HTTPError as e:
            raise wrap_external_exception(e, operation="auth_create_user")

        if 400 <= response.status_code < 500:
            message = _error_message(response)
            logger.info(f"Signup rejected for {email}: {message}")
            raise ValidationError(message=message, field="email", value=email, operation="auth_create_user")
        if response.is_error:
            raise SupabaseAPIError(
                message=f"Supabase returned error: {response.status_code}",
                status_code=response.status_code,
                operation="auth_create_user",
            )

        user = _to_auth_user(response.json())
        logger.info(f"Created Supabase user {user.id}")
        return user


def _to_auth_user(payload: dict[str, Any]) -> AuthUser:
    # Admin endpoints wrap the user, /user returns it bare
    data = payload.get("user", payload)
    return AuthUser(
        id=data["id"],
        email=data.get("email"),
        user_metadata=data.get("user_metadata") or {},
    )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    return body.get("msg") or body.get("message") or body.get("error_description") or body.get("error") or str(body)
