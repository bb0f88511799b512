"""
Tests for status mapping, expiry policy and the StatusResolver round trip.
"""

import pytest

from core.status_resolver import (
    StatusResolver,
    active_resource_label,
    build_status,
    expiry_warning,
    map_connection_state,
)
from utils.errors import Unreachable
from utils.schemas import ConnectionState, ExpiryLevel, ProviderConnectionState

STATUS = "/api/v1/connect/meta/user/status"


class TestMapConnectionState:
    def test_failed_call_is_idle(self):
        assert map_connection_state(False, True, "active") is ProviderConnectionState.IDLE

    def test_not_connected_is_idle(self):
        assert map_connection_state(True, False, "active") is ProviderConnectionState.IDLE
        assert map_connection_state(True, None, None) is ProviderConnectionState.IDLE

    def test_needs_reauth(self):
        assert map_connection_state(True, True, "needs_reauth") is ProviderConnectionState.NEEDS_REAUTH

    def test_revoked_is_idle_never_needs_reauth(self):
        assert map_connection_state(True, True, "revoked") is ProviderConnectionState.IDLE

    @pytest.mark.parametrize("raw", ["active", None, "something_new"])
    def test_anything_else_connected_is_manage(self, raw):
        assert map_connection_state(True, True, raw) is ProviderConnectionState.MANAGE


class TestExpiryWarning:
    def test_three_days_is_urgent(self):
        warning = expiry_warning(3)
        assert warning.level is ExpiryLevel.URGENT
        assert warning.text == "Token expires in 3 days, reconnect soon"

    def test_one_day_is_singular(self):
        assert expiry_warning(1).text == "Token expires in 1 day, reconnect soon"

    def test_ten_days_is_informational(self):
        warning = expiry_warning(10)
        assert warning.level is ExpiryLevel.INFO
        assert warning.text == "Token expires in 10 days"

    def test_eleven_days_has_no_warning(self):
        assert expiry_warning(11) is None

    def test_zero_and_absent_have_no_warning(self):
        assert expiry_warning(0) is None
        assert expiry_warning(None) is None


def test_active_resource_label():
    assert active_resource_label(None, "page") is None
    assert active_resource_label(0, "page") == "0 active pages"
    assert active_resource_label(1, "page") == "1 active page"
    assert active_resource_label(4, "location") == "4 active locations"


def test_build_status_reads_provider_keys(meta, google):
    status = build_status(
        {
            "is_connected": True,
            "connection_status": "needs_reauth",
            "meta_user_name": "Jo Bloggs",
            "meta_user_id": 1234,
            "days_until_expiry": "5",
            "active_pages": 2,
        },
        meta,
    )
    assert status.connection_state is ConnectionState.NEEDS_REAUTH
    assert status.provider_user_name == "Jo Bloggs"
    assert status.provider_user_id == "1234"
    assert status.days_until_expiry == 5
    assert status.active_resource_count == 2

    g = build_status({"is_connected": True, "active_accounts": 3}, google)
    assert g.connection_state is ConnectionState.ACTIVE
    assert g.active_resource_count == 3
    assert g.days_until_expiry is None


class TestStatusResolver:
    @pytest.mark.asyncio
    async def test_active_payload_resolves_to_manage(self, api, meta):
        api.on("GET", STATUS, body={"is_connected": True, "connection_status": "active", "days_until_expiry": 30})
        state, status = await StatusResolver(api, meta).resolve()
        assert state is ProviderConnectionState.MANAGE
        assert status.days_until_expiry == 30

    @pytest.mark.asyncio
    async def test_needs_reauth_keeps_status(self, api, meta):
        api.on("GET", STATUS, body={
            "is_connected": True, "connection_status": "needs_reauth", "meta_user_name": "Jo",
        })
        state, status = await StatusResolver(api, meta).resolve()
        assert state is ProviderConnectionState.NEEDS_REAUTH
        assert status.provider_user_name == "Jo"

    @pytest.mark.asyncio
    async def test_revoked_clears_status(self, api, meta):
        api.on("GET", STATUS, body={"is_connected": True, "connection_status": "revoked"})
        state, status = await StatusResolver(api, meta).resolve()
        assert state is ProviderConnectionState.IDLE
        assert status is None

    @pytest.mark.asyncio
    async def test_error_response_is_idle(self, api, meta):
        api.on("GET", STATUS, status=500, body={"is_connected": True})
        assert await StatusResolver(api, meta).resolve() == (ProviderConnectionState.IDLE, None)

    @pytest.mark.asyncio
    async def test_network_failure_is_idle(self, api, meta):
        api.on("GET", STATUS, exc=Unreachable())
        assert await StatusResolver(api, meta).resolve() == (ProviderConnectionState.IDLE, None)
