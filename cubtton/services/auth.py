"""
Auth Service

Thin layer over Supabase auth. The user's role is not part of the auth
record; it lives in the `profiles` table and defaults to "client" while the
profile row does not exist yet.
"""
from typing import Any, Optional

from supabase import AuthError
from supabase._async.client import AsyncClient

from cubtton.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from cubtton.services.models import CurrentUser

logger = get_logger(__name__)

DEFAULT_ROLE = "client"


class AuthenticationError(Exception):
    """Supabase auth refused the credentials or the sign-up."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    @classmethod
    def from_auth_error(cls, error: AuthError) -> "AuthenticationError":
        message = getattr(error, "message", None) or str(error)
        return cls(message, code=getattr(error, "code", None))


class AuthService:
    """Sign-up, login and current-user lookup."""

    def __init__(self, client: AsyncClient):
        self.client = client

    async def sign_up(self, email: str, password: str, full_name: str, username: str) -> Any:
        """
        Register a new user; profile fields go into user metadata.

        Raises:
            AuthenticationError: Supabase refused the sign-up (taken email, weak password)
        """
        try:
            return await self.client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {
                    "data": {
                        "full_name": full_name,
                        "username": username,
                    }
                },
            })
        except AuthError as e:
            logger.warning(f"Sign-up refused: {sanitize_string_for_logging(str(e))}")
            raise AuthenticationError.from_auth_error(e) from e

    async def login(self, email: str, password: str) -> Any:
        """
        Sign in with email and password; the session is kept by the client.

        Raises:
            AuthenticationError: wrong credentials or unconfirmed email
        """
        try:
            return await self.client.auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        except AuthError as e:
            logger.warning(f"Login failed: {sanitize_string_for_logging(str(e))}")
            raise AuthenticationError.from_auth_error(e) from e

    async def logout(self) -> None:
        await self.client.auth.sign_out()

    async def get_current_user(self) -> Optional[CurrentUser]:
        """
        Get the signed-in user with their role, or None when signed out.

        Errors from the auth API propagate; a failed profile lookup only
        degrades the role to the default.
        """
        response = await self.client.auth.get_user()
        user = getattr(response, "user", None)
        if user is None:
            return None

        role = DEFAULT_ROLE
        full_name = None
        try:
            result = await (
                self.client.table("profiles")
                .select("role, full_name")
                .eq("id", user.id)
                .limit(1)
                .execute()
            )
            if result.data:
                role = result.data[0].get("role") or DEFAULT_ROLE
                full_name = result.data[0].get("full_name")
        except Exception as e:
            logger.error(f"Error fetching profile for {sanitize_id_for_logging(user.id)}: {e}")

        return CurrentUser(id=str(user.id), email=user.email, role=role, full_name=full_name)

    async def update_profile(self, full_name: Optional[str] = None, avatar_url: Optional[str] = None) -> Any:
        """Update the signed-in user's metadata; fields left as None are not touched."""
        data = {}
        if full_name is not None:
            data["full_name"] = full_name
        if avatar_url is not None:
            data["avatar_url"] = avatar_url
        return await self.client.auth.update_user({"data": data})
