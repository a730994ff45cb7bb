"""
Cart Router

Exposes the session cart to the web client. Every response carries the
cart summary so the badge and drawer can re-render from one payload.
"""
from fastapi import APIRouter, Depends, HTTPException

from cubtton.checkout import CheckoutOutcome
from cubtton.errors import ERROR_INTERNAL, ERROR_PRODUCT_NOT_FOUND
from cubtton.logging import get_logger
from cubtton.state import AppState
from .deps import get_app_state
from .models import AddToCartRequest, UpdateCartItemRequest, SetCartOpenRequest

logger = get_logger(__name__)

router = APIRouter(tags=["cart"])


@router.get("/cart")
async def get_cart(state: AppState = Depends(get_app_state)):
    return state.cart.summary()


@router.post("/cart/items")
async def add_to_cart(request: AddToCartRequest, state: AppState = Depends(get_app_state)):
    """Add a product by id; opens the cart."""
    try:
        product = await state.products.get_product_by_id(request.product_id)
    except Exception as e:
        logger.error(f"Failed to load product for cart: {e}", exc_info=True)
        raise HTTPException(status_code=502, detail=ERROR_INTERNAL)
    if not product:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)

    try:
        state.cart.add_item(product, request.quantity)
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))

    return state.cart.summary()


@router.patch("/cart/items")
async def update_cart_item(request: UpdateCartItemRequest, state: AppState = Depends(get_app_state)):
    """Set a line's quantity (below 1 removes)."""
    state.cart.update_quantity(request.product_id, request.quantity)
    return state.cart.summary()


@router.delete("/cart/items/{product_id}")
async def remove_cart_item(product_id: str, state: AppState = Depends(get_app_state)):
    state.cart.remove_item(product_id)
    return state.cart.summary()


@router.delete("/cart")
async def clear_cart(state: AppState = Depends(get_app_state)):
    state.cart.clear()
    return state.cart.summary()


@router.post("/cart/open")
async def set_cart_open(request: SetCartOpenRequest, state: AppState = Depends(get_app_state)):
    if request.is_open is None:
        state.cart.toggle_open()
    else:
        state.cart.set_open(request.is_open)
    return state.cart.summary()


@router.post("/cart/checkout")
async def checkout(state: AppState = Depends(get_app_state)):
    """Run checkout; the client follows `redirect` and shows `alert`."""
    outcome = await state.checkout.checkout()
    alert = state.alerts.current
    return {
        "outcome": outcome.value,
        "cart": state.cart.summary(),
        "alert": alert.to_dict() if alert else None,
        "redirect": state.navigator.current_path if outcome is CheckoutOutcome.REDIRECTED_TO_LOGIN else None,
    }
