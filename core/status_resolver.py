"""
Connection status resolution.

``map_connection_state`` is the single place where a remote status payload
becomes a ProviderConnectionState; it is shared by every provider and has
no network or view dependency.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from api.client import HubApiClient
from connectors.base import BaseProvider
from utils.errors import Unreachable
from utils.schemas import (
    ConnectionState,
    ConnectionStatus,
    ExpiryLevel,
    ExpiryWarning,
    ProviderConnectionState,
)

logger = logging.getLogger(__name__)

URGENT_EXPIRY_DAYS = 3
INFO_EXPIRY_DAYS = 10


def map_connection_state(
    ok: bool,
    is_connected: Any,
    connection_status: Optional[str],
) -> ProviderConnectionState:
    """
    Map the enumerated remote fields onto the screen state.

    * failed call, or not connected  → idle
    * ``needs_reauth``               → needs_reauth
    * ``revoked``                    → idle
    * anything else while connected  → manage
    """
    if not ok or not is_connected:
        return ProviderConnectionState.IDLE
    if connection_status == ConnectionState.NEEDS_REAUTH.value:
        return ProviderConnectionState.NEEDS_REAUTH
    if connection_status == ConnectionState.REVOKED.value:
        return ProviderConnectionState.IDLE
    return ProviderConnectionState.MANAGE


def build_status(payload: Dict[str, Any], provider: BaseProvider) -> ConnectionStatus:
    """Project a connected status payload onto ConnectionStatus."""
    raw_state = payload.get("connection_status")
    try:
        state = ConnectionState(raw_state)
    except ValueError:
        state = ConnectionState.ACTIVE

    user_id = payload.get(provider.user_id_key)
    return ConnectionStatus(
        is_connected=bool(payload.get("is_connected")),
        connection_state=state,
        provider_user_name=payload.get(provider.user_name_key),
        provider_user_id=str(user_id) if user_id is not None else None,
        days_until_expiry=_optional_int(payload.get("days_until_expiry")),
        active_resource_count=_optional_int(payload.get(provider.active_count_key)),
    )


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def expiry_warning(days_until_expiry: Optional[int]) -> Optional[ExpiryWarning]:
    """
    Token-expiry warning policy.

    Absent and zero both mean "nothing to show"; ``<= 3`` is urgent and
    ``<= 10`` informational.
    """
    if days_until_expiry is None or days_until_expiry <= 0:
        return None
    d = days_until_expiry
    if d <= URGENT_EXPIRY_DAYS:
        plural = "" if d == 1 else "s"
        return ExpiryWarning(
            level=ExpiryLevel.URGENT,
            days_until_expiry=d,
            text=f"Token expires in {d} day{plural}, reconnect soon",
        )
    if d <= INFO_EXPIRY_DAYS:
        return ExpiryWarning(
            level=ExpiryLevel.INFO,
            days_until_expiry=d,
            text=f"Token expires in {d} days",
        )
    return None


def active_resource_label(count: Optional[int], noun: str) -> Optional[str]:
    if count is None:
        return None
    plural = "" if count == 1 else "s"
    return f"{count} active {noun}{plural}"


class StatusResolver:
    """One status round trip for one provider."""

    def __init__(self, client: HubApiClient, provider: BaseProvider):
        self.client = client
        self.provider = provider

    async def resolve(self) -> Tuple[ProviderConnectionState, Optional[ConnectionStatus]]:
        """
        Return the screen state and the status worth retaining.

        Transport failures resolve to idle; the caller is never left
        without a state.
        """
        try:
            resp = await self.client.request("GET", self.provider.status_path)
        except Unreachable:
            logger.warning("Status probe for %s failed, treating as not connected", self.provider.provider_name)
            return ProviderConnectionState.IDLE, None

        state = map_connection_state(
            resp.ok,
            resp.body.get("is_connected"),
            resp.body.get("connection_status"),
        )
        logger.info("Status %s: http=%s state=%s", self.provider.provider_name, resp.status_code, state.value)
        if state is ProviderConnectionState.IDLE:
            return state, None
        return state, build_status(resp.body, self.provider)
