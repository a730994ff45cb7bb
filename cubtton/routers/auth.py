"""
Auth Router

Email/password sign-in through Supabase. The signed-in user is held by the
session's own Supabase client, so checkout in the same session sees them.
"""
from fastapi import APIRouter, Depends, HTTPException

from cubtton.errors import ERROR_NOT_SIGNED_IN
from cubtton.logging import get_logger, sanitize_id_for_logging
from cubtton.services.auth import AuthenticationError
from cubtton.state import AppState
from .deps import get_app_state
from .models import LoginRequest, SignUpRequest, UpdateProfileRequest

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/auth/signup")
async def sign_up(request: SignUpRequest, state: AppState = Depends(get_app_state)):
    """Register; `confirmation_required` is true while the email is unconfirmed."""
    try:
        response = await state.auth.sign_up(
            request.email, request.password, request.full_name, request.username
        )
    except AuthenticationError as e:
        raise HTTPException(status_code=400, detail=e.message)

    user = getattr(response, "user", None)
    return {
        "id": str(user.id) if user else None,
        "email": getattr(user, "email", None),
        "confirmation_required": getattr(response, "session", None) is None,
    }


@router.post("/auth/login")
async def login(request: LoginRequest, state: AppState = Depends(get_app_state)):
    try:
        await state.auth.login(request.email, request.password)
    except AuthenticationError as e:
        raise HTTPException(status_code=401, detail=e.message)

    user = await state.auth.get_current_user()
    if user is None:
        raise HTTPException(status_code=401, detail=ERROR_NOT_SIGNED_IN)
    logger.info(f"User {sanitize_id_for_logging(user.id)} signed in")
    return user.model_dump()


@router.post("/auth/logout")
async def logout(state: AppState = Depends(get_app_state)):
    await state.auth.logout()
    return {"status": "ok"}


@router.get("/auth/me")
async def get_me(state: AppState = Depends(get_app_state)):
    user = await state.auth.get_current_user()
    if user is None:
        raise HTTPException(status_code=401, detail=ERROR_NOT_SIGNED_IN)
    return user.model_dump()


@router.patch("/auth/profile")
async def update_profile(request: UpdateProfileRequest, state: AppState = Depends(get_app_state)):
    if await state.auth.get_current_user() is None:
        raise HTTPException(status_code=401, detail=ERROR_NOT_SIGNED_IN)

    await state.auth.update_profile(full_name=request.full_name, avatar_url=request.avatar_url)
    return (await state.auth.get_current_user()).model_dump()
