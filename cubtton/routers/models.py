"""
Request models for the storefront API.
"""
from typing import Optional
from pydantic import BaseModel, Field


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(default=1, ge=1)


class UpdateCartItemRequest(BaseModel):
    product_id: str
    quantity: int  # below 1 removes the line


class SetCartOpenRequest(BaseModel):
    is_open: Optional[bool] = None  # None toggles


# ==================== AUTH MODELS ====================

class SignUpRequest(BaseModel):
    email: str
    password: str
    full_name: str
    username: str


class LoginRequest(BaseModel):
    email: str
    password: str


class UpdateProfileRequest(BaseModel):
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
