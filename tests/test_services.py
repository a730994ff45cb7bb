"""Tests for Supabase-backed services"""
import pytest
from decimal import Decimal
from unittest.mock import Mock, AsyncMock

from supabase import AuthError

from cubtton.services.auth import AuthService, AuthenticationError
from cubtton.services.repositories import OrderRepository, ProductRepository


def _set_rows(client, rows):
    client.table.return_value.execute = AsyncMock(return_value=Mock(data=rows))


@pytest.mark.asyncio
async def test_get_current_user_signed_out(mock_supabase_client):
    auth = AuthService(mock_supabase_client)
    assert await auth.get_current_user() is None


@pytest.mark.asyncio
async def test_get_current_user_with_role(mock_supabase_client):
    mock_supabase_client.auth.get_user.return_value = Mock(user=Mock(id="u-1", email="a@b.c"))
    _set_rows(mock_supabase_client, [{"role": "admin", "full_name": "Ana"}])

    user = await AuthService(mock_supabase_client).get_current_user()

    assert user.id == "u-1"
    assert user.role == "admin"
    assert user.is_admin is True
    mock_supabase_client.table.assert_called_with("profiles")


@pytest.mark.asyncio
async def test_get_current_user_without_profile(mock_supabase_client):
    """Missing profile row falls back to the client role"""
    mock_supabase_client.auth.get_user.return_value = Mock(user=Mock(id="u-1", email="a@b.c"))

    user = await AuthService(mock_supabase_client).get_current_user()

    assert user.role == "client"


@pytest.mark.asyncio
async def test_get_current_user_profile_error(mock_supabase_client):
    mock_supabase_client.auth.get_user.return_value = Mock(user=Mock(id="u-1", email="a@b.c"))
    mock_supabase_client.table.return_value.execute = AsyncMock(side_effect=RuntimeError("rls"))

    user = await AuthService(mock_supabase_client).get_current_user()

    assert user.role == "client"


@pytest.mark.asyncio
async def test_sign_up_passes_metadata(mock_supabase_client):
    await AuthService(mock_supabase_client).sign_up("a@b.c", "secret", "Ana B", "ana")

    payload = mock_supabase_client.auth.sign_up.await_args.args[0]
    assert payload["options"]["data"] == {"full_name": "Ana B", "username": "ana"}


class FakeAuthError(AuthError):
    """AuthError without the library's constructor signature."""

    def __init__(self, message, code=None):
        Exception.__init__(self, message)
        self.message = message
        self.code = code


@pytest.mark.asyncio
async def test_sign_up_refused(mock_supabase_client):
    mock_supabase_client.auth.sign_up.side_effect = FakeAuthError("User already registered", "user_already_exists")

    with pytest.raises(AuthenticationError) as exc_info:
        await AuthService(mock_supabase_client).sign_up("a@b.c", "secret", "Ana B", "ana")

    assert exc_info.value.message == "User already registered"
    assert exc_info.value.code == "user_already_exists"


@pytest.mark.asyncio
async def test_login_passes_credentials(mock_supabase_client):
    await AuthService(mock_supabase_client).login("a@b.c", "secret")

    mock_supabase_client.auth.sign_in_with_password.assert_awaited_once_with(
        {"email": "a@b.c", "password": "secret"}
    )


@pytest.mark.asyncio
async def test_login_wrong_password(mock_supabase_client):
    mock_supabase_client.auth.sign_in_with_password.side_effect = FakeAuthError("Invalid login credentials")

    with pytest.raises(AuthenticationError) as exc_info:
        await AuthService(mock_supabase_client).login("a@b.c", "wrong")

    assert exc_info.value.message == "Invalid login credentials"


@pytest.mark.asyncio
async def test_logout(mock_supabase_client):
    await AuthService(mock_supabase_client).logout()

    mock_supabase_client.auth.sign_out.assert_awaited_once()


@pytest.mark.asyncio
async def test_update_profile_sends_only_given_fields(mock_supabase_client):
    await AuthService(mock_supabase_client).update_profile(full_name="Ana C")

    mock_supabase_client.auth.update_user.assert_awaited_once_with({"data": {"full_name": "Ana C"}})


@pytest.mark.asyncio
async def test_create_order(mock_supabase_client):
    _set_rows(mock_supabase_client, [{"id": 10, "user_id": "u-1", "total_amount": 24.98, "status": "ordered"}])

    order = await OrderRepository(mock_supabase_client).create_order("u-1", 24.98)

    mock_supabase_client.table.return_value.insert.assert_called_once_with(
        {"user_id": "u-1", "total_amount": 24.98, "status": "ordered"}
    )
    assert order.id == "10"
    assert order.total_amount == Decimal("24.98")


@pytest.mark.asyncio
async def test_update_order_status_not_found(mock_supabase_client):
    with pytest.raises(LookupError):
        await OrderRepository(mock_supabase_client).update_order_status("missing", "completed")


@pytest.mark.asyncio
async def test_monthly_revenue(mock_supabase_client):
    _set_rows(mock_supabase_client, [
        {"total_amount": 10.5, "created_at": "2025-03-02T10:00:00+00:00"},
        {"total_amount": "4.50", "created_at": "2025-03-28T10:00:00+00:00"},
        {"total_amount": 20, "created_at": "2025-04-01T00:00:00+00:00"},
    ])

    revenue = await OrderRepository(mock_supabase_client).get_monthly_revenue()

    assert revenue == [
        {"month": "March 2025", "amount": 15.0},
        {"month": "April 2025", "amount": 20.0},
    ]
    mock_supabase_client.table.return_value.eq.assert_called_with("status", "completed")


@pytest.mark.asyncio
async def test_order_stats(mock_supabase_client):
    _set_rows(mock_supabase_client, [
        {"status": "completed", "total_amount": 30},
        {"status": "completed", "total_amount": "12.25"},
        {"status": "ordered", "total_amount": 5},
        {"status": "cancelled", "total_amount": 8},
    ])

    stats = await OrderRepository(mock_supabase_client).get_stats()

    assert stats == {"total_orders": 4, "total_revenue": 42.25, "pending_orders": 1}


@pytest.mark.asyncio
async def test_get_products(mock_supabase_client, sample_product):
    _set_rows(mock_supabase_client, [sample_product])

    products = await ProductRepository(mock_supabase_client).get_products()

    assert products[0].id == "7"
    assert products[0].price == "$12.50"


@pytest.mark.asyncio
async def test_get_product_by_id_missing(mock_supabase_client):
    assert await ProductRepository(mock_supabase_client).get_product_by_id("404") is None
