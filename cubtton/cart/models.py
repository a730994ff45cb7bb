"""Cart models: lines with raw prices and Decimal-based totals."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping, Optional, Union

from cubtton.services.money import normalize_price, round_money, multiply

RawPrice = Union[Decimal, float, int, str, None]


@dataclass
class LineDisplay:
    """Display attributes carried with a line; never interpreted by the cart."""
    title: str = ""
    category: Optional[str] = None
    image_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "category": self.category,
            "image_url": self.image_url,
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LineDisplay":
        title = data.get("title")
        category = data.get("category")
        image_url = data.get("image_url")
        return cls(
            title=title if isinstance(title, str) else "",
            category=category if isinstance(category, str) else None,
            image_url=image_url if isinstance(image_url, str) else None,
        )


@dataclass
class CartLine:
    """One distinct product in the cart."""
    product_id: str
    price: RawPrice
    quantity: int = 1
    display: LineDisplay = field(default_factory=LineDisplay)

    @property
    def unit_price(self) -> Decimal:
        """Non-negative price for a single unit; unparseable prices are 0."""
        return normalize_price(self.price)

    @property
    def line_total(self) -> Decimal:
        return round_money(multiply(self.unit_price, self.quantity))

    def to_dict(self) -> dict:
        """Convert to a JSON-safe record for the durable store."""
        price = self.price
        if isinstance(price, Decimal):
            price = str(price)
        return {
            "product_id": self.product_id,
            "price": price,
            "quantity": self.quantity,
            **self.display.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartLine":
        """
        Create from a stored record.

        Accepts both the current shape (`product_id`) and the legacy browser
        shape (`id` plus flat product columns). Unknown keys are ignored.

        Raises:
            ValueError: if the id is missing or the quantity is not an integer >= 1
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"line record must be an object, got {type(data).__name__}")

        product_id = data.get("product_id", data.get("id"))
        if isinstance(product_id, bool) or not isinstance(product_id, (str, int)) or product_id == "":
            raise ValueError("line record has no product id")

        quantity = data.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValueError(f"line record has invalid quantity {quantity!r}")

        price = data.get("price")
        if not isinstance(price, (str, int, float)) or isinstance(price, bool):
            price = None

        return cls(
            product_id=str(product_id),
            price=price,
            quantity=quantity,
            display=LineDisplay.from_mapping(data),
        )
