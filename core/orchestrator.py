"""
ConnectHub: top-level sequencing for one page load.

On load it decides between the login prompt, resuming an OAuth redirect,
and reconciling every provider before presenting the hub.  Provider
reconciliation fans out with ``asyncio.gather`` so a slow or broken
provider never delays the others; it is the only concurrent step, every
other flow is strictly sequential.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Dict, List, Optional, Tuple

from api.client import HubApiClient
from auth.session_gate import SessionGate
from config.settings import config
from connectors.base import BaseProvider
from connectors.registry import ProviderRegistry
from core.navigation import Navigator, RedirectParams, strip_redirect_params
from core.provider_connection import ProviderConnection
from utils.errors import ConnectHubError, ExpiredSession, UnknownProvider
from utils.schemas import HubView, LoginCredentials, ProviderConnectionState, Screen

logger = logging.getLogger(__name__)


class ConnectHub:
    def __init__(
        self,
        client: HubApiClient,
        navigator: Navigator,
        providers: Optional[List[BaseProvider]] = None,
        primary_provider: Optional[str] = None,
    ):
        """
        Parameters
        ----------
        client           : this operator's credential-bearing API client
        navigator        : location of this page load
        providers        : providers to manage; defaults to the registry
        primary_provider : redirect target when ``?provider=`` is absent
        """
        if providers is None:
            registry = ProviderRegistry()
            registry.discover()
            providers = registry.all()

        self.client = client
        self.navigator = navigator
        self.gate = SessionGate(client)
        self.connections: Dict[str, ProviderConnection] = {
            p.provider_name: ProviderConnection(p, client, navigator) for p in providers
        }
        self.primary_provider = primary_provider or config.primary_provider
        self.screen = Screen.CHECKING
        self.error: Optional[str] = None
        self.logging_in = False
        self._resumed = False

    def connection(self, provider: str) -> ProviderConnection:
        try:
            return self.connections[provider]
        except KeyError:
            raise UnknownProvider(provider) from None

    # ── page load ───────────────────────────────────────────────────────

    async def on_load(self) -> Screen:
        """
        One-shot initialisation for this page load.

        Redirect parameters are read and stripped before the first await;
        a second call is a no-op, so a code can never be exchanged twice.
        """
        if self._resumed:
            logger.debug("on_load already ran for this page load")
            return self.screen
        self._resumed = True

        params = RedirectParams.from_url(self.navigator.location)
        if params.present:
            self.navigator.replace(strip_redirect_params(self.navigator.location))

        session = await self.gate.probe_session()
        if session is None:
            self.screen = Screen.LOGIN
            return self.screen

        if params.has_result and self.connections:
            target = self._redirect_target(params.provider)
            jobs = [(target, target.resume_from_redirect(params))]
            jobs += [(c, c.reconcile()) for c in self.connections.values() if c is not target]
            await self._gather(jobs)
        else:
            await self.reconcile_all()

        self.screen = Screen.HUB
        return self.screen

    def _redirect_target(self, provider: Optional[str]) -> ProviderConnection:
        if provider and provider in self.connections:
            return self.connections[provider]
        if provider:
            logger.warning("Redirect for unknown provider '%s', using %s", provider, self.primary_provider)
        if self.primary_provider in self.connections:
            return self.connections[self.primary_provider]
        return next(iter(self.connections.values()))

    async def reconcile_all(self) -> None:
        await self._gather([(c, c.reconcile()) for c in self.connections.values()])

    async def _gather(self, jobs: List[Tuple[ProviderConnection, Awaitable]]) -> None:
        results = await asyncio.gather(*[coro for _, coro in jobs], return_exceptions=True)
        for (conn, _), result in zip(jobs, results):
            if isinstance(result, Exception):
                logger.error("Provider %s raised during reconciliation: %s", conn.name, result)
                conn.status = None
                conn.provider_user = None
                conn.state = ProviderConnectionState.IDLE

    # ── session ─────────────────────────────────────────────────────────

    async def login(self, credentials: LoginCredentials) -> Screen:
        if self.logging_in:
            return self.screen
        self.logging_in = True
        self.error = None
        try:
            await self.gate.submit_login(credentials)
        except ConnectHubError as exc:
            self.error = exc.message
            self.screen = Screen.LOGIN
            return self.screen
        finally:
            self.logging_in = False

        await self.reconcile_all()
        self.screen = Screen.HUB
        return self.screen

    def _require_session(self) -> bool:
        if self.gate.authenticated:
            return True
        self.screen = Screen.LOGIN
        return False

    # ── provider actions ────────────────────────────────────────────────

    async def begin_connect(self, provider: str) -> Optional[str]:
        conn = self.connection(provider)
        if not self._require_session():
            return None
        try:
            return await conn.begin_connect()
        except ExpiredSession as exc:
            self.gate.expire()
            self.error = exc.message
            self.screen = Screen.LOGIN
            return None

    async def open_manage(self, provider: str) -> None:
        conn = self.connection(provider)
        if self._require_session():
            await conn.open_manage()

    async def sync(self, provider: str) -> None:
        conn = self.connection(provider)
        if self._require_session():
            await conn.sync()

    def toggle(self, provider: str, account_id: str) -> bool:
        conn = self.connection(provider)
        if not self._require_session():
            return False
        return conn.toggle(account_id)

    async def save(self, provider: str) -> bool:
        conn = self.connection(provider)
        if not self._require_session():
            return False
        return await conn.save()

    def back(self, provider: str) -> None:
        self.connection(provider).back()

    async def disconnect(self, provider: str) -> bool:
        conn = self.connection(provider)
        if not self._require_session():
            return False
        return await conn.disconnect()

    # ── view ────────────────────────────────────────────────────────────

    def view(self) -> HubView:
        session = self.gate.session
        return HubView(
            screen=self.screen,
            session=session,
            operator_name=(session.display_name or session.email) if session else None,
            error=self.error,
            logging_in=self.logging_in,
            location=self.navigator.location,
            navigate_to=self.navigator.navigate_to,
            providers=[c.view() for c in self.connections.values()] if self.screen is Screen.HUB else [],
        )
