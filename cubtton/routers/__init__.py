"""Storefront API routers."""
from .auth import router as auth_router
from .cart import router as cart_router
from .products import router as products_router

__all__ = ["auth_router", "cart_router", "products_router"]
