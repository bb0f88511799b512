"""
ResourceManager: a provider's pages/locations and the operator's selection.

Two discovery modes replace the whole collection on success:

  • ``sync``: POST, asks the API to re-discover from the provider.
              Selection is all ids (``select_all``) or the active ones.
  • ``load``: GET, the already-known list.  Selection is the active ids.

Selection is local until ``save`` sends it as the complete desired set.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from api.client import HubApiClient
from connectors.base import BaseProvider
from utils.errors import Unreachable
from utils.schemas import ConnectedAccount

logger = logging.getLogger(__name__)


class ResourceManager:
    def __init__(self, client: HubApiClient, provider: BaseProvider):
        self.client = client
        self.provider = provider
        self.accounts: List[ConnectedAccount] = []
        self.selected: List[str] = []
        self.error: Optional[str] = None
        self.notice: Optional[str] = None
        self.syncing = False
        self.saving = False

    @property
    def selection(self) -> set:
        return set(self.selected)

    @property
    def account_ids(self) -> List[str]:
        return list(dict.fromkeys(a.account_id for a in self.accounts))

    # ── discovery ───────────────────────────────────────────────────────

    async def sync(self, select_all: bool = False) -> bool:
        """Re-discover resources from the provider."""
        return await self._fetch(
            "POST",
            select_all=select_all,
            empty_notice=f"No {self.provider.resource_title} found on this account.",
        )

    async def load(self) -> bool:
        """Reload the already-known resources."""
        return await self._fetch(
            "GET",
            select_all=False,
            empty_notice=f"No {self.provider.resource_noun}s connected yet.",
        )

    async def _fetch(self, method: str, *, select_all: bool, empty_notice: str) -> bool:
        self.syncing = True
        self.error = None
        self.notice = None
        try:
            resp = await self.client.request(method, self.provider.resource_path)
            if not resp.ok:
                self.error = resp.message(f"Could not load {self.provider.resource_noun}s.")
                logger.warning(
                    "%s %s resources failed: http=%s",
                    method, self.provider.provider_name, resp.status_code,
                )
                return False

            raw = resp.body.get("accounts")
            if raw is not None and not isinstance(raw, list):
                self.error = f"Could not load {self.provider.resource_noun}s."
                logger.warning(
                    "%s %s resources failed: accounts is %s, not a list",
                    method, self.provider.provider_name, type(raw).__name__,
                )
                return False

            accounts = self._parse_accounts(raw)
            self.accounts = accounts
            if select_all:
                self.selected = list(dict.fromkeys(a.account_id for a in accounts))
            else:
                self.selected = list(dict.fromkeys(a.account_id for a in accounts if a.is_active))
            if not accounts:
                self.notice = empty_notice

            logger.info(
                "%s %s resources: %d loaded, %d selected",
                method, self.provider.provider_name, len(self.accounts), len(self.selected),
            )
            return True
        except Unreachable as exc:
            self.error = exc.message
            return False
        finally:
            self.syncing = False

    def _parse_accounts(self, raw: Optional[list]) -> List[ConnectedAccount]:
        accounts: List[ConnectedAccount] = []
        for item in raw or []:
            try:
                accounts.append(ConnectedAccount.model_validate(item))
            except ValidationError as exc:
                logger.warning("Skipping malformed %s resource: %s", self.provider.provider_name, exc)
        return accounts

    # ── selection ───────────────────────────────────────────────────────

    def toggle(self, account_id: str) -> bool:
        """Flip ``account_id`` in the selection; unknown ids are ignored."""
        if account_id not in self.account_ids:
            logger.debug("Toggle ignored for unloaded %s id %s", self.provider.provider_name, account_id)
            return False
        chosen = self.selection ^ {account_id}
        self.selected = [i for i in self.account_ids if i in chosen]
        return True

    async def save(self) -> bool:
        """
        Persist the selection as the full desired set.

        Best-effort: a failure is logged and swallowed, the local selection
        stays as the operator left it, and save can simply be retried.
        """
        self.saving = True
        chosen = self.selection
        payload: Dict[str, Any] = {"accountIds": [i for i in self.account_ids if i in chosen]}
        try:
            resp = await self.client.request("PATCH", self.provider.resource_path, json=payload)
            if not resp.ok:
                logger.warning(
                    "Saving %s selection failed: http=%s", self.provider.provider_name, resp.status_code,
                )
            return resp.ok
        except Unreachable:
            logger.warning("Saving %s selection failed: unreachable", self.provider.provider_name)
            return False
        finally:
            self.saving = False

    def reset(self) -> None:
        self.accounts = []
        self.selected = []
        self.error = None
        self.notice = None
