"""
SessionGate: is the operator signed in to the host platform?

The session itself lives in the API's cookie; the gate only learns about
it (probe or login) and forgets it when a later call reports it expired.
"""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from api.client import HubApiClient
from config.settings import config
from utils.errors import GENERIC_MESSAGE, BusinessError, IncorrectCredentials, Unreachable
from utils.schemas import LoginCredentials, Session

logger = logging.getLogger(__name__)


class SessionGate:
    def __init__(self, client: HubApiClient, api_prefix: Optional[str] = None):
        self.client = client
        prefix = (api_prefix if api_prefix is not None else config.api_prefix).rstrip("/")
        self.probe_path = f"{prefix}/auth/user/detail"
        self.login_path = f"{prefix}/auth/public/login"
        self.session: Optional[Session] = None

    @property
    def authenticated(self) -> bool:
        return self.session is not None

    async def probe_session(self) -> Optional[Session]:
        """Cookie-based identity lookup.  Never raises; any failure means no session."""
        try:
            resp = await self.client.request("GET", self.probe_path)
        except Unreachable:
            self.session = None
            return None

        if not resp.ok:
            logger.info("Session probe: http=%s, not signed in", resp.status_code)
            self.session = None
            return None

        try:
            self.session = Session.model_validate(resp.body)
        except ValidationError as exc:
            logger.warning("Session probe: malformed identity payload, not signed in: %s", exc)
            self.session = None
            return None
        logger.info("Session probe: signed in as %s", self.session.email or "unknown")
        return self.session

    async def submit_login(self, credentials: LoginCredentials) -> Session:
        """
        Sign in with email + password.

        Raises
        ------
        IncorrectCredentials – the API rejected the login
        BusinessError        – the login answer could not be read
        Unreachable          – no response
        """
        resp = await self.client.request("POST", self.login_path, json=credentials.to_payload())
        if not resp.ok:
            logger.info("Login rejected: http=%s", resp.status_code)
            raise IncorrectCredentials()
        try:
            self.session = Session.model_validate(resp.body)
        except ValidationError as exc:
            logger.warning("Login: malformed identity payload: %s", exc)
            raise BusinessError(GENERIC_MESSAGE, status_code=resp.status_code) from exc
        logger.info("Login: %s", self.session.email or credentials.email)
        return self.session

    def expire(self) -> None:
        if self.session is not None:
            logger.info("Session expired for %s", self.session.email or "unknown")
        self.session = None
