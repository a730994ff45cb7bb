"""Cart manager: in-memory cart state persisted to a durable key-value store."""
import json
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional, Union

from cubtton.errors import ERROR_INVALID_QUANTITY, ERROR_MISSING_PRODUCT_ID
from cubtton.logging import get_logger, sanitize_id_for_logging
from cubtton.services.models import Product
from cubtton.services.money import round_money, to_float
from .models import CartLine, LineDisplay
from .storage import CartStorage, StorageKeys

logger = get_logger(__name__)

CART_STORAGE_KEY = StorageKeys.CART

CartListener = Callable[["CartManager"], None]
ProductLike = Union[Product, Mapping[str, Any], Any]


class CartManager:
    """
    Shopping cart for one storefront session.

    Features:
    - One line per product; adding again increments the quantity
    - Every mutation rewrites the full snapshot to the durable store
    - Listeners are called after every mutation and open/close change
    - Snapshot version counter to detect another session writing the same key

    Storage problems never escape: a failed restore starts an empty cart and
    a failed write leaves the cart working in memory.
    """

    def __init__(self, storage: CartStorage, key: str = CART_STORAGE_KEY):
        self._storage = storage
        self._key = key
        self._listeners: list[CartListener] = []
        self._version = 0
        self._lines: list[CartLine] = self._restore()
        self.is_open = False

    # ==================== PERSISTENCE ====================

    def _restore(self) -> list[CartLine]:
        try:
            raw = self._storage.get(self._key)
        except Exception as e:
            logger.error(f"Failed to load cart from storage: {e}")
            return []

        if not raw:
            return []

        try:
            records, self._version = _decode_snapshot(raw)
        except (json.JSONDecodeError, ValueError, TypeError, RecursionError) as e:
            logger.warning(f"Corrupted cart snapshot, starting empty: {e}")
            return []

        lines: list[CartLine] = []
        seen: set[str] = set()
        for record in records:
            try:
                line = CartLine.from_dict(record)
            except ValueError as e:
                logger.warning(f"Dropping malformed cart line: {e}")
                continue
            if line.product_id in seen:
                logger.warning(
                    f"Dropping duplicate cart line for product {sanitize_id_for_logging(line.product_id)}"
                )
                continue
            seen.add(line.product_id)
            lines.append(line)

        logger.info(f"Cart restored with {len(lines)} line(s)")
        return lines

    def _stored_version(self) -> Optional[int]:
        """Version currently in the store; None when the key is absent (expired or never written)."""
        try:
            raw = self._storage.get(self._key)
            if not raw:
                return None
            return _decode_snapshot(raw)[1]
        except Exception:
            return self._version

    def _persist(self) -> None:
        stored_version = self._stored_version()
        if stored_version is not None and stored_version != self._version:
            logger.warning(
                f"Cart snapshot changed by another session "
                f"(stored v{stored_version}, expected v{self._version}); overwriting"
            )
        version = max(stored_version or 0, self._version) + 1

        snapshot = {
            "version": version,
            "lines": [line.to_dict() for line in self._lines],
        }
        try:
            self._storage.set(self._key, json.dumps(snapshot))
        except Exception as e:
            logger.error(f"Failed to save cart to storage: {e}")
            return
        self._version = version

    # ==================== OBSERVERS ====================

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Cart listener failed")

    def _commit(self) -> None:
        self._persist()
        self._notify()

    # ==================== STATE ====================

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._lines)

    def get_line(self, product_id: Union[str, int]) -> Optional[CartLine]:
        product_id = str(product_id)
        return next((line for line in self._lines if line.product_id == product_id), None)

    def total(self) -> Decimal:
        """Sum of unit price x quantity over all lines, rounded to cents."""
        return round_money(sum((line.unit_price * line.quantity for line in self._lines), Decimal("0")))

    def count(self) -> int:
        """Total number of units in the cart."""
        return sum(line.quantity for line in self._lines)

    # ==================== MUTATIONS ====================

    def add_item(self, product: ProductLike, quantity: int = 1) -> CartLine:
        """
        Add a product, or increase its quantity if already in the cart.

        An existing line keeps the title and price it was first added with.
        Opens the cart.

        Raises:
            ValueError: quantity below 1 or product without an id
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError(ERROR_INVALID_QUANTITY)

        product = _coerce_product(product)

        line = self.get_line(product.id)
        if line is not None:
            line.quantity += quantity
        else:
            price = product.price
            line = CartLine(
                product_id=product.id,
                price=str(price) if isinstance(price, Decimal) else price,
                quantity=quantity,
                display=LineDisplay(
                    title=product.title,
                    category=product.category,
                    image_url=product.image_url,
                ),
            )
            self._lines.append(line)

        logger.debug(f"Added {quantity} x product {sanitize_id_for_logging(product.id)}")
        self.is_open = True
        self._commit()
        return line

    def remove_item(self, product_id: Union[str, int]) -> None:
        """Remove a product's line; unknown ids are ignored."""
        product_id = str(product_id)
        self._lines = [line for line in self._lines if line.product_id != product_id]
        self._commit()

    def update_quantity(self, product_id: Union[str, int], quantity: int) -> None:
        """Set a line's quantity exactly; below 1 removes the line."""
        if quantity < 1:
            self.remove_item(product_id)
            return

        line = self.get_line(product_id)
        if line is not None:
            line.quantity = int(quantity)
        self._commit()

    def clear(self) -> None:
        """Empty the cart. The open state is left as is."""
        self._lines = []
        self._commit()

    def toggle_open(self) -> None:
        self.is_open = not self.is_open
        self._notify()

    def set_open(self, is_open: bool) -> None:
        self.is_open = bool(is_open)
        self._notify()

    # ==================== VIEWS ====================

    def summary(self) -> dict:
        """Plain-data view of the cart for API responses."""
        return {
            "items": [
                {
                    "product_id": line.product_id,
                    "title": line.display.title,
                    "category": line.display.category,
                    "image_url": line.display.image_url,
                    "quantity": line.quantity,
                    "unit_price": to_float(line.unit_price),
                    "line_total": to_float(line.line_total),
                }
                for line in self._lines
            ],
            "count": self.count(),
            "total": to_float(self.total()),
            "is_open": self.is_open,
        }


def _decode_snapshot(raw: str) -> tuple[list, int]:
    """Return (line records, version) from a stored value."""
    data = json.loads(raw)
    # Legacy browser format: bare array of product records
    if isinstance(data, list):
        return data, 0
    if isinstance(data, dict) and isinstance(data.get("lines"), list):
        version = data.get("version", 0)
        if isinstance(version, bool) or not isinstance(version, int):
            version = 0
        return data["lines"], version
    raise ValueError(f"unexpected snapshot shape: {type(data).__name__}")


def _coerce_product(product: ProductLike) -> Product:
    if isinstance(product, Product):
        result = product
    elif isinstance(product, Mapping):
        result = Product.model_validate(dict(product))
    else:
        result = Product.model_validate(product, from_attributes=True)

    if not result.id:
        raise ValueError(ERROR_MISSING_PRODUCT_ID)
    return result
