"""Tests for the alert surface"""
import pytest

from cubtton.alerts import AlertKind, AlertService, DEFAULT_DURATION_MS


def test_show_alert_defaults(alerts):
    alert = alerts.show_alert("Saved")

    assert alerts.current is alert
    assert alert.kind is AlertKind.INFO
    assert alert.duration_ms == DEFAULT_DURATION_MS


def test_new_alert_replaces_previous(alerts):
    first = alerts.show_alert("Loading...", "loading", duration_ms=None)
    second = alerts.show_alert("Done", AlertKind.SUCCESS)

    assert alerts.current is second
    assert second.id > first.id
    assert first.duration_ms is None


def test_hide_alert(alerts):
    alerts.show_alert("Oops", "error")
    alerts.hide_alert()
    assert alerts.current is None


def test_unknown_kind_rejected(alerts):
    with pytest.raises(ValueError):
        alerts.show_alert("?", "warning")


def test_listeners_notified():
    service = AlertService()
    seen = []
    unsubscribe = service.subscribe(seen.append)

    alert = service.show_alert("Hi")
    service.hide_alert()
    unsubscribe()
    service.show_alert("Ignored")

    assert seen == [alert, None]


def test_to_dict(alerts):
    data = alerts.show_alert("Order placed successfully!", "success").to_dict()
    assert data["kind"] == "success"
    assert data["message"] == "Order placed successfully!"
