"""Order Repository - Order operations."""
from datetime import datetime
from decimal import Decimal
from typing import List

from .base import BaseRepository
from cubtton.logging import get_logger, sanitize_id_for_logging
from cubtton.services.models import Order
from cubtton.services.money import to_decimal, to_float

logger = get_logger(__name__)

# Only completed orders count as revenue
REVENUE_STATUS = "completed"
CLOSED_STATUSES = ("completed", "cancelled")


class OrderRepository(BaseRepository):
    """Order database operations."""

    async def create_order(self, user_id: str, total_amount: float, status: str = "ordered") -> Order:
        """Create a new order.

        Note: line items are not stored; the `orders` table only records the total.
        """
        data = {
            "user_id": user_id,
            "total_amount": total_amount,
            "status": status,
        }
        result = await self.client.table("orders").insert(data).execute()
        order = Order(**result.data[0])
        logger.info(f"Order {sanitize_id_for_logging(order.id)} created for user {sanitize_id_for_logging(user_id)}")
        return order

    async def get_all_orders(self) -> List[Order]:
        """Get every order, newest first, with the customer's name and email."""
        result = await (
            self.client.table("orders")
            .select("*, profiles:user_id (full_name, email)")
            .order("created_at", desc=True)
            .execute()
        )
        return [Order(**o) for o in result.data]

    async def update_order_status(self, order_id: str, status: str) -> Order:
        """Update order status and return the updated row."""
        result = await self.client.table("orders").update({"status": status}).eq("id", order_id).execute()
        if not result.data:
            raise LookupError(f"Order {order_id} not found")
        return Order(**result.data[0])

    async def get_monthly_revenue(self) -> List[dict]:
        """Completed-order revenue grouped by month, e.g. {"month": "March 2025", "amount": 120.0}."""
        result = await (
            self.client.table("orders")
            .select("total_amount, created_at")
            .eq("status", REVENUE_STATUS)
            .execute()
        )

        revenue_by_month: dict[str, Decimal] = {}
        for row in result.data:
            created_at = datetime.fromisoformat(row["created_at"])
            month = created_at.strftime("%B %Y")
            revenue_by_month[month] = revenue_by_month.get(month, Decimal("0")) + to_decimal(row["total_amount"])

        return [
            {"month": month, "amount": to_float(amount)}
            for month, amount in revenue_by_month.items()
        ]

    async def get_stats(self) -> dict:
        """Order counts and completed revenue for the admin dashboard."""
        result = await self.client.table("orders").select("status, total_amount").execute()
        orders = result.data

        total_revenue = sum(
            (to_decimal(o["total_amount"]) for o in orders if o["status"] == REVENUE_STATUS),
            Decimal("0"),
        )
        pending_orders = sum(1 for o in orders if o["status"] not in CLOSED_STATUSES)

        return {
            "total_orders": len(orders),
            "total_revenue": to_float(total_revenue),
            "pending_orders": pending_orders,
        }
