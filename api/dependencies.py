"""
FastAPI dependencies (shared across routes).

Each browser is one operator: a ``hub_sid`` cookie keys its own
HubApiClient (whose cookie jar carries that operator's host session) and
the hub of its current page load.  Callers without the cookie never share
another operator's client or hub.
"""

from __future__ import annotations

import logging
import secrets
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional, Tuple

from fastapi import HTTPException, Request, Response, status

from api.client import HubApiClient
from config.settings import config
from core.orchestrator import ConnectHub

logger = logging.getLogger(__name__)

SESSION_COOKIE = "hub_sid"


@dataclass
class OperatorSession:
    client: HubApiClient
    hub: Optional[ConnectHub] = None


class OperatorSessions:
    """Live operator sessions, oldest evicted first once the cap is reached."""

    def __init__(self, max_sessions: Optional[int] = None):
        self.max_sessions = max_sessions or config.max_operator_sessions
        self._sessions: "OrderedDict[str, OperatorSession]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, sid: Optional[str]) -> Optional[OperatorSession]:
        if not sid:
            return None
        operator = self._sessions.get(sid)
        if operator is not None:
            self._sessions.move_to_end(sid)
        return operator

    async def open(self, client: HubApiClient) -> Tuple[str, OperatorSession]:
        while len(self._sessions) >= self.max_sessions:
            _, evicted = self._sessions.popitem(last=False)
            logger.info("Evicting oldest operator session (cap=%d)", self.max_sessions)
            await evicted.client.aclose()
        sid = secrets.token_urlsafe(32)
        operator = OperatorSession(client=client)
        self._sessions[sid] = operator
        return sid, operator

    async def close_all(self) -> None:
        while self._sessions:
            _, operator = self._sessions.popitem()
            await operator.client.aclose()


def _existing(request: Request) -> Optional[OperatorSession]:
    return request.app.state.sessions.get(request.cookies.get(SESSION_COOKIE))


async def get_operator(request: Request, response: Response) -> OperatorSession:
    """
    The operator behind this browser.

    A first visit (or an evicted session) opens a fresh session with its own
    API client and sets the ``hub_sid`` cookie.
    """
    operator = _existing(request)
    if operator is None:
        sid, operator = await request.app.state.sessions.open(request.app.state.client_factory())
        response.set_cookie(SESSION_COOKIE, sid, httponly=True, samesite="lax")
    return operator


def get_hub(request: Request) -> ConnectHub:
    """
    The hub of this operator's current page load.

    Actions only make sense after ``GET /hub`` has loaded a page.
    """
    operator = _existing(request)
    if operator is None or operator.hub is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="No page loaded, call GET /hub first",
        )
    return operator.hub
