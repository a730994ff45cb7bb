"""
Per-visitor application state.

Every browser session gets its own AppState: its own cart (stored under
its own key), alert surface, navigator and Supabase client holding the
signed-in user. The registry that owns them is created at startup and kept
on `app.state`; nothing in the package reaches it through a module global.
"""
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from supabase._async.client import AsyncClient

from cubtton.alerts import AlertService
from cubtton.cart import CartManager, CartStorage, StorageKeys, CART_STORAGE_KEY
from cubtton.checkout import CheckoutService
from cubtton.logging import get_logger
from cubtton.services.auth import AuthService
from cubtton.services.repositories import OrderRepository, ProductRepository

logger = get_logger(__name__)

ClientFactory = Callable[[], Awaitable[AsyncClient]]

MAX_SESSIONS = 1000


@dataclass
class Navigator:
    """Records where the user was sent; the web client follows `current_path`."""
    current_path: str = "/"
    history: list[str] = field(default_factory=list)

    def navigate(self, path: str) -> None:
        self.history.append(self.current_path)
        self.current_path = path


@dataclass
class AppState:
    cart: CartManager
    alerts: AlertService
    auth: AuthService
    orders: OrderRepository
    products: ProductRepository
    checkout: CheckoutService
    navigator: Navigator

    @classmethod
    def build(
        cls,
        client: AsyncClient,
        storage: CartStorage,
        navigator: Optional[Navigator] = None,
        cart_key: str = CART_STORAGE_KEY,
    ) -> "AppState":
        """Wire the collaborators together around one Supabase client and one store."""
        navigator = navigator or Navigator()
        cart = CartManager(storage, key=cart_key)
        alerts = AlertService()
        auth = AuthService(client)
        orders = OrderRepository(client)
        checkout = CheckoutService(
            cart=cart,
            auth=auth,
            orders=orders,
            alerts=alerts,
            navigate=navigator.navigate,
        )
        return cls(
            cart=cart,
            alerts=alerts,
            auth=auth,
            orders=orders,
            products=ProductRepository(client),
            checkout=checkout,
            navigator=navigator,
        )


class SessionRegistry:
    """
    AppState per session id, built on first use.

    Least recently used sessions are dropped past `max_sessions`. A dropped
    session's cart survives in the durable store and is restored on its next
    request; its Supabase sign-in does not, so the shopper logs in again.
    """

    def __init__(
        self,
        storage: CartStorage,
        client_factory: ClientFactory,
        max_sessions: int = MAX_SESSIONS,
    ):
        self.storage = storage
        self.client_factory = client_factory
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, AppState] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    async def get(self, session_id: str) -> AppState:
        state = self._sessions.get(session_id)
        if state is None:
            client = await self.client_factory()
            # A concurrent first request for the same session may have won the race
            state = self._sessions.get(session_id)
            if state is None:
                state = AppState.build(client, self.storage, cart_key=StorageKeys.cart_key(session_id))
                self._sessions[session_id] = state
                logger.debug(f"Session state created ({len(self._sessions)} active)")

        self._sessions.move_to_end(session_id)
        while len(self._sessions) > self.max_sessions:
            self._sessions.popitem(last=False)
        return state

    @classmethod
    def from_env(cls) -> "SessionRegistry":
        """Build from environment configuration."""
        from cubtton.db import create_session_client, get_cart_storage

        registry = cls(get_cart_storage(), create_session_client)
        logger.info("Session registry initialized")
        return registry
