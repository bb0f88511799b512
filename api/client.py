"""
HubApiClient: credential-bearing JSON client for the host-platform API.

One instance is shared by every component so the session cookie set by
login (or already present from an earlier visit) rides along on every
call, the way a browser's ``credentials: 'include'`` does.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from config.settings import config
from utils.errors import Unreachable

logger = logging.getLogger(__name__)


@dataclass
class ApiResponse:
    status_code: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def message(self, fallback: str) -> str:
        """Remote ``message`` when the API supplied one, otherwise *fallback*."""
        msg = self.body.get("message")
        if isinstance(msg, str) and msg.strip():
            return msg
        return fallback


class HubApiClient:
    """Thin async wrapper over ``httpx.AsyncClient``."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or config.api_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else config.http_timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> ApiResponse:
        """
        Issue one call and decode the JSON body.

        Non-2xx answers are returned, not raised; callers decide what a
        status means.  Only transport failures raise (``Unreachable``).
        """
        try:
            response = await self._client.request(method, path, params=params, json=json)
        except httpx.HTTPError as exc:
            logger.warning("%s %s unreachable: %s", method, path, exc)
            raise Unreachable() from exc

        try:
            body: Any = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        logger.debug("%s %s -> %s", method, path, response.status_code)
        return ApiResponse(status_code=response.status_code, body=body)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "HubApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
