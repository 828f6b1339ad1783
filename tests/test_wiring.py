"""
Tests for dependency wiring: gateway choice per environment and gateway cleanup.
"""

from __future__ import annotations

import asyncio

import pytest

from booking_app.core.config import settings
from booking_app.infrastructure.gateway.http_gateway import HttpBookingGateway
from booking_app.infrastructure.gateway.local_gateway import LocalBookingGateway
from booking_app.infrastructure.host.launch_context import LaunchContext
from booking_app.wiring.dependencies import close_booking_gateway, get_booking_gateway, get_session_machine


@pytest.mark.parametrize("env", ["dev", "local", "LOCAL"])
def test_dev_environments_use_local_gateway(monkeypatch, env: str):
    monkeypatch.setattr(settings, "ENV", env)
    assert isinstance(get_booking_gateway(), LocalBookingGateway)


def test_other_environments_use_http_gateway(monkeypatch):
    monkeypatch.setattr(settings, "ENV", "prod")
    gateway = get_booking_gateway()
    try:
        assert isinstance(gateway, HttpBookingGateway)
    finally:
        asyncio.run(close_booking_gateway(gateway))


def test_session_machine_built_through_wiring(monkeypatch):
    monkeypatch.setattr(settings, "ENV", "dev")
    monkeypatch.setattr(settings, "BOOKING_VALID_TOKENS", ["demo123"])
    machine = get_session_machine(LaunchContext(start_param="demo123"))

    state = asyncio.run(machine.start())

    assert isinstance(machine.gateway, LocalBookingGateway)
    assert state.step.value == "select_date"


def test_close_booking_gateway_closes_http_client():
    gateway = HttpBookingGateway(base_url="http://booking.test")
    asyncio.run(close_booking_gateway(gateway))
    assert gateway._client.is_closed


def test_close_booking_gateway_ignores_local_gateway(monkeypatch):
    monkeypatch.setattr(settings, "ENV", "dev")
    asyncio.run(close_booking_gateway(get_booking_gateway()))
