"""Pytest configuration and fixtures"""
import os
import pytest
from unittest.mock import Mock, AsyncMock

# Set test environment variables
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test_anon_key")

from cubtton.alerts import AlertService
from cubtton.cart import CartManager, MemoryStorage
from cubtton.checkout import CheckoutService
from cubtton.services.models import CurrentUser
from cubtton.state import Navigator, SessionRegistry


def make_supabase_client():
    """Mock async Supabase client; every query builder call returns the same chain."""
    client = Mock()

    table_mock = Mock()
    table_mock.select.return_value = table_mock
    table_mock.insert.return_value = table_mock
    table_mock.update.return_value = table_mock
    table_mock.delete.return_value = table_mock
    table_mock.eq.return_value = table_mock
    table_mock.order.return_value = table_mock
    table_mock.limit.return_value = table_mock
    table_mock.execute = AsyncMock(return_value=Mock(data=[]))

    client.table.return_value = table_mock

    client.auth = Mock()
    client.auth.get_user = AsyncMock(return_value=None)
    client.auth.sign_up = AsyncMock()
    client.auth.sign_in_with_password = AsyncMock()
    client.auth.sign_out = AsyncMock()
    client.auth.update_user = AsyncMock()

    return client


@pytest.fixture
def mock_supabase_client():
    return make_supabase_client()


@pytest.fixture
def storage():
    """Empty in-memory durable store"""
    return MemoryStorage()


@pytest.fixture
def cart(storage):
    """Cart manager on the in-memory store"""
    return CartManager(storage)


@pytest.fixture
def alerts():
    return AlertService()


@pytest.fixture
def navigator():
    return Navigator()


@pytest.fixture
def sample_user():
    """Signed-in customer"""
    return CurrentUser(id="user-123", email="buyer@example.com", role="client")


@pytest.fixture
def sample_product():
    """Product row as returned by Supabase"""
    return {
        "id": 7,
        "title": "Amigurumi Bear",
        "price": "$12.50",
        "category": "Toys",
        "image_url": "https://img.example.com/bear.jpg",
        "description": "Hand-made cotton bear",
        "created_at": "2025-01-01T00:00:00Z",
    }


@pytest.fixture
def mock_auth():
    auth = Mock()
    auth.get_current_user = AsyncMock(return_value=None)
    return auth


@pytest.fixture
def mock_orders():
    orders = Mock()
    orders.create_order = AsyncMock(return_value=Mock(id="order-1"))
    return orders


@pytest.fixture
def checkout_service(cart, mock_auth, mock_orders, alerts, navigator):
    return CheckoutService(
        cart=cart,
        auth=mock_auth,
        orders=mock_orders,
        alerts=alerts,
        navigate=navigator.navigate,
    )


@pytest.fixture
def new_supabase_client():
    """Factory for independent mock Supabase clients"""
    return make_supabase_client


@pytest.fixture
def client_factory(new_supabase_client):
    """Builds a separate mock Supabase client for each session"""
    return AsyncMock(side_effect=new_supabase_client)


@pytest.fixture
def registry(storage, client_factory):
    """Session registry on the in-memory store"""
    return SessionRegistry(storage, client_factory)
