"""
Cart presenters: view-models for the navigation badge and the cart drawer.

Both subscribe to the CartManager and pull count/total/lines when notified,
so whatever renders them only reads plain attributes.
"""
from typing import TYPE_CHECKING, Any, Optional

from cubtton.services.money import format_money
from .service import CartManager

if TYPE_CHECKING:
    from cubtton.checkout import CheckoutOutcome, CheckoutService


class CartBadge:
    """Item count shown next to the cart icon."""

    def __init__(self, cart: CartManager):
        self.count = cart.count()
        self._unsubscribe = cart.subscribe(self._refresh)

    def _refresh(self, cart: CartManager) -> None:
        self.count = cart.count()

    @property
    def label(self) -> str:
        return str(self.count) if self.count else ""

    def close(self) -> None:
        self._unsubscribe()


class CartDrawer:
    """Cart drawer: line list with quantity controls, subtotal and checkout."""

    def __init__(self, cart: CartManager, checkout: Optional["CheckoutService"] = None):
        self.cart = cart
        self.checkout_service = checkout
        self.state: dict[str, Any] = {}
        self._unsubscribe = cart.subscribe(self._refresh)
        self._refresh(cart)

    def _refresh(self, cart: CartManager) -> None:
        self.state = {
            "is_open": cart.is_open,
            "is_empty": not cart.lines,
            "items": [
                {
                    "product_id": line.product_id,
                    "title": line.display.title,
                    "category": line.display.category,
                    "image_url": line.display.image_url,
                    "quantity": line.quantity,
                    "price": format_money(line.unit_price),
                }
                for line in cart.lines
            ],
            "subtotal": format_money(cart.total()),
        }

    @property
    def is_checking_out(self) -> bool:
        return bool(self.checkout_service and self.checkout_service.is_checking_out)

    def increment(self, product_id: str) -> None:
        line = self.cart.get_line(product_id)
        if line is not None:
            self.cart.update_quantity(product_id, line.quantity + 1)

    def decrement(self, product_id: str) -> None:
        line = self.cart.get_line(product_id)
        if line is not None:
            self.cart.update_quantity(product_id, line.quantity - 1)

    def remove(self, product_id: str) -> None:
        self.cart.remove_item(product_id)

    def close(self) -> None:
        self.cart.set_open(False)

    async def checkout(self) -> "CheckoutOutcome":
        if self.checkout_service is None:
            raise RuntimeError("CartDrawer was created without a checkout service")
        return await self.checkout_service.checkout()

    def detach(self) -> None:
        self._unsubscribe()
