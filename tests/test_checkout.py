"""Tests for checkout orchestration"""
import asyncio
import pytest
from unittest.mock import AsyncMock
from postgrest.exceptions import APIError

from cubtton.alerts import AlertKind
from cubtton.checkout import CheckoutOutcome, LOGIN_PATH


def _fill(cart):
    cart.add_item({"id": "a", "title": "Hat", "price": 9.99}, 2)
    cart.add_item({"id": "b", "title": "Pin", "price": "$5.00"})


@pytest.mark.asyncio
async def test_checkout_without_user_redirects_to_login(checkout_service, cart, alerts, navigator, mock_orders):
    """Signed-out users are sent to login and keep their cart"""
    _fill(cart)
    lines_before = cart.lines

    outcome = await checkout_service.checkout()

    assert outcome is CheckoutOutcome.REDIRECTED_TO_LOGIN
    assert cart.is_open is False
    assert cart.lines == lines_before
    assert alerts.current.kind is AlertKind.INFO
    assert navigator.current_path == LOGIN_PATH
    mock_orders.create_order.assert_not_called()
    assert checkout_service.is_checking_out is False


@pytest.mark.asyncio
async def test_checkout_success_clears_cart(checkout_service, cart, alerts, mock_auth, mock_orders, sample_user):
    """Successful order empties and closes the cart"""
    _fill(cart)
    mock_auth.get_current_user.return_value = sample_user

    outcome = await checkout_service.checkout()

    assert outcome is CheckoutOutcome.SUCCEEDED
    mock_orders.create_order.assert_awaited_once_with(
        user_id="user-123",
        total_amount=24.98,
        status="ordered",
    )
    assert cart.count() == 0
    assert cart.is_open is False
    assert alerts.current.kind is AlertKind.SUCCESS
    assert checkout_service.is_checking_out is False


@pytest.mark.asyncio
async def test_checkout_order_failure_keeps_cart(checkout_service, cart, alerts, mock_auth, mock_orders, sample_user):
    """Rejected order leaves the cart untouched and open"""
    _fill(cart)
    mock_auth.get_current_user.return_value = sample_user
    mock_orders.create_order.side_effect = APIError({"message": "insufficient stock", "code": "P0001"})
    count_before = cart.count()

    outcome = await checkout_service.checkout()

    assert outcome is CheckoutOutcome.FAILED
    assert cart.count() == count_before
    assert cart.is_open is True
    assert alerts.current.kind is AlertKind.ERROR
    assert "insufficient stock" in alerts.current.message
    assert checkout_service.is_checking_out is False


@pytest.mark.asyncio
async def test_checkout_plain_exception_message(checkout_service, cart, alerts, mock_auth, sample_user, mock_orders):
    _fill(cart)
    mock_auth.get_current_user.return_value = sample_user
    mock_orders.create_order.side_effect = ConnectionError("network unreachable")

    outcome = await checkout_service.checkout()

    assert outcome is CheckoutOutcome.FAILED
    assert alerts.current.message == "Failed to place order: network unreachable"


@pytest.mark.asyncio
async def test_checkout_auth_failure_is_reported(checkout_service, cart, alerts, mock_auth, mock_orders):
    _fill(cart)
    mock_auth.get_current_user.side_effect = RuntimeError("auth service down")

    outcome = await checkout_service.checkout()

    assert outcome is CheckoutOutcome.FAILED
    assert "auth service down" in alerts.current.message
    assert cart.count() == 3
    mock_orders.create_order.assert_not_called()


@pytest.mark.asyncio
async def test_second_checkout_while_in_flight_is_ignored(checkout_service, cart, mock_auth, mock_orders, sample_user):
    """Only one order request is sent while the first is pending"""
    _fill(cart)
    mock_auth.get_current_user.return_value = sample_user
    release = asyncio.Event()

    async def slow_create_order(**kwargs):
        await release.wait()

    mock_orders.create_order = AsyncMock(side_effect=slow_create_order)

    first = asyncio.create_task(checkout_service.checkout())
    for _ in range(5):
        await asyncio.sleep(0)
    assert checkout_service.is_checking_out is True

    second = await checkout_service.checkout()
    assert second is CheckoutOutcome.IN_PROGRESS

    release.set()
    assert await first is CheckoutOutcome.SUCCEEDED
    mock_orders.create_order.assert_awaited_once()
