"""Database Models - Pydantic models for Supabase rows."""
from decimal import Decimal
from datetime import datetime
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, field_validator

from cubtton.services.money import to_decimal as _to_decimal


class CurrentUser(BaseModel):
    """Authenticated user with the role resolved from `profiles`."""
    model_config = ConfigDict(extra="ignore")

    id: str
    email: Optional[str] = None
    role: str = "client"
    full_name: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class Product(BaseModel):
    """
    Product row as handed to the cart by listing and detail views.

    `price` stays raw: the catalogue stores display strings for some items
    and the cart normalizes at total time.
    """
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str = ""
    price: Union[Decimal, float, int, str, None] = None
    category: Optional[str] = None
    image_url: Optional[str] = None
    description: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        # Supabase serial ids arrive as ints
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v

    @field_validator("title", mode="before")
    @classmethod
    def fold_title(cls, v):
        return v if isinstance(v, str) else ""

    @field_validator("price", mode="before")
    @classmethod
    def keep_scalar_price(cls, v):
        # Structured or boolean prices are unusable; the cart counts them as 0
        if isinstance(v, bool) or not isinstance(v, (Decimal, float, int, str)):
            return None
        return v

    @field_validator("category", "image_url", "description", mode="before")
    @classmethod
    def fold_optional_text(cls, v):
        return v if isinstance(v, str) else None


class Order(BaseModel):
    """Order row."""
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    total_amount: Decimal = Decimal("0")
    status: str = "ordered"
    created_at: Optional[datetime] = None
    profiles: Optional[dict] = None  # joined customer profile (full_name, email)

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def coerce_ids(cls, v):
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v

    @field_validator("total_amount", mode="before")
    @classmethod
    def convert_to_decimal(cls, v):
        return _to_decimal(v)
