"""
DisconnectCoordinator: revoke a provider and return it to its baseline.

The revoke call is best-effort.  Whatever the API answers, the local
connection is cleared: a client that still looks connected after the
operator asked to disconnect is worse than a brief server/client mismatch,
which the next status probe resolves anyway.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from utils.errors import Unreachable

if TYPE_CHECKING:
    from core.provider_connection import ProviderConnection

logger = logging.getLogger(__name__)


class DisconnectCoordinator:
    def __init__(self, connection: "ProviderConnection"):
        self._conn = connection

    async def disconnect(self) -> bool:
        """Revoke remotely, then reset unconditionally.  Returns the revoke outcome."""
        conn = self._conn
        provider = conn.provider
        conn.disconnecting = True
        revoked = False
        try:
            resp = await conn.client.request("DELETE", provider.disconnect_path)
            revoked = resp.ok
            if not resp.ok:
                logger.warning("Revoke %s failed: http=%s", provider.provider_name, resp.status_code)
        except Unreachable:
            logger.warning("Revoke %s failed: unreachable", provider.provider_name)
        finally:
            conn.disconnecting = False
            conn.reset()

        logger.info("Disconnected %s (revoked=%s)", provider.provider_name, revoked)
        return revoked
