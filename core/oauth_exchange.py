"""
OAuthExchangeController: begin connect, resume from redirect, exchange code.

    idle / needs_reauth --begin_connect--> loading --(navigate away)
    loading --(reload with ?code)--> exchange_code --> success
    loading --exchange fails--> idle (+ message)

A code is single-use on the provider side, so a failed exchange is final
for that redirect; the operator starts over with ``begin_connect``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from pydantic import ValidationError

from core.navigation import RedirectParams
from utils.errors import (
    GENERIC_MESSAGE,
    BusinessError,
    ConnectHubError,
    ExpiredSession,
    ProviderError,
)
from utils.schemas import ProviderConnectionState, ProviderUser

if TYPE_CHECKING:
    from core.provider_connection import ProviderConnection

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Authorisation was cancelled."


class OAuthExchangeController:
    def __init__(self, connection: "ProviderConnection"):
        self._conn = connection

    @property
    def _provider(self):
        return self._conn.provider

    # ── begin ───────────────────────────────────────────────────────────

    async def begin_connect(self) -> Optional[str]:
        """
        Ask the API for the provider's authorization URL and navigate there.

        Returns the URL on success, ``None`` on a handled failure.

        Raises
        ------
        ExpiredSession – the host session is gone; the caller must return
                         to the login screen.
        """
        conn = self._conn
        prior = conn.state
        conn.state = ProviderConnectionState.LOADING
        conn.error = None
        try:
            url = await self._request_authorization_url()
        except ExpiredSession:
            conn.state = prior
            raise
        except ConnectHubError as exc:
            conn.error = exc.message
            conn.state = ProviderConnectionState.IDLE
            return None

        conn.navigator.assign(url)
        return url

    async def _request_authorization_url(self) -> str:
        resp = await self._conn.client.request("POST", self._provider.begin_path)
        if resp.status_code == 401:
            logger.info("Begin connect %s: session expired", self._provider.provider_name)
            raise ExpiredSession()
        url = resp.body.get("url")
        if not resp.ok or not isinstance(url, str) or not url:
            logger.warning("Begin connect %s failed: http=%s", self._provider.provider_name, resp.status_code)
            raise BusinessError(GENERIC_MESSAGE, status_code=resp.status_code)
        return url

    # ── resume ──────────────────────────────────────────────────────────

    async def resume_from_redirect(self, params: RedirectParams) -> ProviderConnectionState:
        """
        Act on the parameters the provider redirect carried back.

        Priority: an ``error`` wins over a ``code``; with neither, this is a
        plain status reconciliation.  The caller has already stripped the
        parameters from the location and guarantees one call per page load.
        """
        conn = self._conn
        if params.error:
            logger.info("Authorisation cancelled for %s: %s", self._provider.provider_name, params.error)
            await conn.reconcile()
            conn.error = CANCELLED_MESSAGE
            return conn.state
        if params.code:
            return await self.exchange_code(params.code)
        return await conn.reconcile()

    # ── exchange ────────────────────────────────────────────────────────

    async def exchange_code(self, code: str) -> ProviderConnectionState:
        """
        Trade the one-time code for a provider connection.

        On success the resources are discovered with everything selected
        and the status is re-read before the state reaches ``success``.
        """
        conn = self._conn
        conn.state = ProviderConnectionState.LOADING
        conn.error = None
        try:
            conn.provider_user = await self._exchange(code)
        except ConnectHubError as exc:
            conn.error = exc.message
            conn.state = ProviderConnectionState.IDLE
            return conn.state

        try:
            await conn.resources.sync(select_all=True)
            await conn.refresh_status()
        except Exception:
            logger.exception("Completing %s connection failed", self._provider.provider_name)
            conn.provider_user = None
            conn.error = GENERIC_MESSAGE
            conn.state = ProviderConnectionState.IDLE
            raise
        conn.state = ProviderConnectionState.SUCCESS
        logger.info(
            "Connected %s as %s",
            self._provider.provider_name,
            conn.provider_user.user_name or conn.provider_user.user_id or "unknown",
        )
        return conn.state

    async def _exchange(self, code: str) -> ProviderUser:
        resp = await self._conn.client.request(
            "POST", self._provider.exchange_path, params={"token": code},
        )
        if not resp.ok:
            logger.warning("Code exchange for %s failed: http=%s", self._provider.provider_name, resp.status_code)
            raise ProviderError(resp.message(ProviderError.default_message), status_code=resp.status_code)

        body = dict(resp.body)
        user_id = body.get(self._provider.user_id_key)
        body["user_name"] = body.get(self._provider.user_name_key)
        body["user_id"] = str(user_id) if user_id is not None else None
        try:
            return ProviderUser.model_validate(body)
        except ValidationError as exc:
            logger.warning("Code exchange for %s returned a malformed user: %s", self._provider.provider_name, exc)
            raise ProviderError(status_code=resp.status_code) from exc
