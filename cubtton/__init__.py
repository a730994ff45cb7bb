"""
Cubtton Storefront Core

- cart: session cart manager, storage backends, presenters
- checkout: cart -> order orchestration
- alerts: user-facing status messages
- services: Supabase auth and repositories
- routers: FastAPI routes for the web client

Note: Imports are lazy so that importing the package does not pull in
Supabase or FastAPI.
"""

__all__ = [
    "AppState",
    "CartManager",
    "CheckoutService",
    "AlertService",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name == "AppState":
        from cubtton.state import AppState
        return AppState
    elif name == "CartManager":
        from cubtton.cart import CartManager
        return CartManager
    elif name == "CheckoutService":
        from cubtton.checkout import CheckoutService
        return CheckoutService
    elif name == "AlertService":
        from cubtton.alerts import AlertService
        return AlertService
    raise AttributeError(f"module 'cubtton' has no attribute {name!r}")
