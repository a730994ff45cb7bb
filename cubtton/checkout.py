"""
Checkout Orchestration

Turns the current cart into one submitted order:

    Idle -> Submitting -> Succeeded | Failed | RedirectedToLogin

Each call ends in one terminal state. There is no retry: a failed attempt
needs a fresh user action. While an attempt is awaiting the backend, further
calls return IN_PROGRESS without side effects.
"""
from enum import Enum
from typing import Any, Callable, Optional, Protocol

from cubtton.alerts import AlertKind, AlertService
from cubtton.cart.service import CartManager
from cubtton.errors import MSG_LOGIN_TO_CHECKOUT, MSG_ORDER_FAILED_PREFIX, MSG_ORDER_PLACED
from cubtton.logging import get_logger, sanitize_id_for_logging
from cubtton.services.models import CurrentUser
from cubtton.services.money import to_float

logger = get_logger(__name__)

LOGIN_PATH = "/login"
ORDER_STATUS_ORDERED = "ordered"


class CheckoutOutcome(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REDIRECTED_TO_LOGIN = "redirected_to_login"
    IN_PROGRESS = "in_progress"


class IdentityProvider(Protocol):
    async def get_current_user(self) -> Optional[CurrentUser]:
        ...


class OrderSubmitter(Protocol):
    async def create_order(self, user_id: str, total_amount: float, status: str = ORDER_STATUS_ORDERED) -> Any:
        ...


def _error_message(error: Exception) -> str:
    # Supabase client errors carry a human-readable `message`
    message = getattr(error, "message", None)
    return message if isinstance(message, str) and message else str(error)


class CheckoutService:
    """Coordinates auth, order submission, cart and alerts for one checkout."""

    def __init__(
        self,
        cart: CartManager,
        auth: IdentityProvider,
        orders: OrderSubmitter,
        alerts: AlertService,
        navigate: Callable[[str], None],
    ):
        self.cart = cart
        self.auth = auth
        self.orders = orders
        self.alerts = alerts
        self.navigate = navigate
        self.is_checking_out = False

    async def checkout(self) -> CheckoutOutcome:
        if self.is_checking_out:
            logger.info("Checkout already in progress, ignoring")
            return CheckoutOutcome.IN_PROGRESS

        self.is_checking_out = True
        try:
            user = await self.auth.get_current_user()
            if user is None:
                self.cart.set_open(False)
                self.alerts.show_alert(MSG_LOGIN_TO_CHECKOUT, AlertKind.INFO)
                self.navigate(LOGIN_PATH)
                return CheckoutOutcome.REDIRECTED_TO_LOGIN

            # TODO: send cart lines once the orders schema has an order_items table
            await self.orders.create_order(
                user_id=user.id,
                total_amount=to_float(self.cart.total()),
                status=ORDER_STATUS_ORDERED,
            )

            self.cart.clear()
            self.cart.set_open(False)
            self.alerts.show_alert(MSG_ORDER_PLACED, AlertKind.SUCCESS)
            logger.info(f"Checkout succeeded for user {sanitize_id_for_logging(user.id)}")
            return CheckoutOutcome.SUCCEEDED
        except Exception as e:
            logger.error(f"Checkout error: {e}", exc_info=True)
            self.alerts.show_alert(MSG_ORDER_FAILED_PREFIX + _error_message(e), AlertKind.ERROR)
            return CheckoutOutcome.FAILED
        finally:
            self.is_checking_out = False
