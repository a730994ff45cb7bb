"""
Shared Dependencies for Routers

The SessionRegistry is created in the application lifespan and kept on
`app.state`. Each browser is identified by the `cubtton_sid` cookie, issued
on its first request; routes receive that session's AppState through
`get_app_state`.
"""
import secrets

from fastapi import HTTPException, Request, Response

from cubtton.errors import ERROR_SERVICE_UNAVAILABLE
from cubtton.logging import bind_session
from cubtton.state import AppState

SESSION_COOKIE = "cubtton_sid"
SESSION_COOKIE_MAX_AGE = 30 * 86400  # matches the cart TTL in Redis
MAX_SESSION_ID_LENGTH = 128


def new_session_id() -> str:
    return secrets.token_urlsafe(24)


async def get_app_state(request: Request, response: Response) -> AppState:
    registry = getattr(request.app.state, "cubtton", None)
    if registry is None:
        raise HTTPException(status_code=503, detail=ERROR_SERVICE_UNAVAILABLE)

    session_id = request.cookies.get(SESSION_COOKIE)
    if not session_id or len(session_id) > MAX_SESSION_ID_LENGTH:
        session_id = new_session_id()
    # Refresh on every response so active sessions do not expire
    response.set_cookie(
        SESSION_COOKIE,
        session_id,
        max_age=SESSION_COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
    )

    bind_session(session_id)
    return await registry.get(session_id)
