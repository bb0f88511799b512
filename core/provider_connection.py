"""
ProviderConnection: one provider's complete client-side state.

The same class serves every provider; only the BaseProvider capability
record differs.  Mutating actions refuse to start while the matching
operation is already in flight, which is the only concurrency control the
hub needs: one logical owner, one mutating action per provider at a time.
"""

from __future__ import annotations

import logging
from typing import Optional

from api.client import HubApiClient
from connectors.base import BaseProvider
from core.disconnect import DisconnectCoordinator
from core.navigation import Navigator, RedirectParams
from core.oauth_exchange import OAuthExchangeController
from core.resource_manager import ResourceManager
from core.status_resolver import StatusResolver, active_resource_label, expiry_warning
from utils.schemas import ConnectionStatus, ProviderConnectionState, ProviderUser, ProviderView

logger = logging.getLogger(__name__)


class ProviderConnection:
    def __init__(self, provider: BaseProvider, client: HubApiClient, navigator: Navigator):
        self.provider = provider
        self.client = client
        self.navigator = navigator

        self.state = ProviderConnectionState.IDLE
        self.status: Optional[ConnectionStatus] = None
        self.provider_user: Optional[ProviderUser] = None
        self.error: Optional[str] = None
        self.disconnecting = False

        self.resolver = StatusResolver(client, provider)
        self.resources = ResourceManager(client, provider)
        self.oauth = OAuthExchangeController(self)
        self.disconnector = DisconnectCoordinator(self)

    @property
    def name(self) -> str:
        return self.provider.provider_name

    @property
    def busy(self) -> bool:
        return (
            self.state is ProviderConnectionState.LOADING
            or self.resources.syncing
            or self.resources.saving
            or self.disconnecting
        )

    def _refuse(self, action: str) -> None:
        logger.info("%s ignored for %s, another operation is in flight", action, self.name)

    # ── status ──────────────────────────────────────────────────────────

    async def reconcile(self, load_resources: bool = True) -> ProviderConnectionState:
        """Re-derive the state from the API; an active connection opens in manage."""
        state, status = await self.resolver.resolve()
        self.status = status
        self.state = state
        if state is ProviderConnectionState.MANAGE and load_resources:
            await self.resources.load()
        return state

    async def refresh_status(self) -> None:
        """Re-read status fields without touching the screen state."""
        _, self.status = await self.resolver.resolve()

    # ── oauth ───────────────────────────────────────────────────────────

    async def begin_connect(self) -> Optional[str]:
        if self.busy:
            self._refuse("begin_connect")
            return None
        return await self.oauth.begin_connect()

    async def resume_from_redirect(self, params: RedirectParams) -> ProviderConnectionState:
        return await self.oauth.resume_from_redirect(params)

    # ── resources ───────────────────────────────────────────────────────

    async def open_manage(self) -> None:
        if self.busy:
            self._refuse("open_manage")
            return
        self.state = ProviderConnectionState.MANAGE
        await self.resources.load()

    async def sync(self) -> None:
        if self.resources.syncing:
            self._refuse("sync")
            return
        await self.resources.sync(select_all=False)

    def toggle(self, account_id: str) -> bool:
        return self.resources.toggle(account_id)

    async def save(self) -> bool:
        if self.resources.saving:
            self._refuse("save")
            return False
        return await self.resources.save()

    def back(self) -> None:
        self.state = ProviderConnectionState.IDLE
        self.error = None

    # ── disconnect ──────────────────────────────────────────────────────

    async def disconnect(self) -> bool:
        if self.disconnecting:
            self._refuse("disconnect")
            return False
        return await self.disconnector.disconnect()

    def reset(self) -> None:
        """Back to the pre-connection baseline."""
        self.status = None
        self.provider_user = None
        self.resources.reset()
        self.error = None
        self.state = ProviderConnectionState.IDLE

    # ── view ────────────────────────────────────────────────────────────

    def view(self) -> ProviderView:
        status = self.status
        return ProviderView(
            provider=self.name,
            display_name=self.provider.display_name,
            resource_noun=self.provider.resource_noun,
            state=self.state,
            status=status,
            provider_user=self.provider_user,
            accounts=list(self.resources.accounts),
            selected=list(self.resources.selected),
            error=self.error,
            resource_error=self.resources.error,
            resource_notice=self.resources.notice,
            expiry=expiry_warning(status.days_until_expiry) if status else None,
            active_label=(
                active_resource_label(status.active_resource_count, self.provider.resource_noun)
                if status else None
            ),
            syncing=self.resources.syncing,
            saving=self.resources.saving,
            disconnecting=self.disconnecting,
        )
