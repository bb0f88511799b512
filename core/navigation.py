"""
Redirect parameters and the navigation seam.

The OAuth provider sends the operator back to the hub page with ``code``
or ``error`` (and optionally ``provider``) in the query string.  These are
one-time values: they are read once per page load and removed from the
visible location before anything else happens.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import parse_qs, urlsplit, urlunsplit

logger = logging.getLogger(__name__)

REDIRECT_PARAMS = ("code", "error", "provider")


@dataclass(frozen=True)
class RedirectParams:
    code: Optional[str] = None
    error: Optional[str] = None
    provider: Optional[str] = None

    @classmethod
    def from_url(cls, url: str) -> "RedirectParams":
        query = parse_qs(urlsplit(url).query)

        def _first(name: str) -> Optional[str]:
            values = query.get(name)
            return values[0] if values and values[0] else None

        return cls(code=_first("code"), error=_first("error"), provider=_first("provider"))

    @property
    def present(self) -> bool:
        """True when any redirect parameter was carried in."""
        return bool(self.code or self.error or self.provider)

    @property
    def has_result(self) -> bool:
        """True when the redirect carries an outcome (code or error)."""
        return bool(self.code or self.error)


def strip_redirect_params(url: str) -> str:
    """Drop the query string and fragment, keeping scheme, host and path."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", "", ""))


class Navigator(ABC):
    """Where the hub reads its location and sends the operator."""

    navigate_to: Optional[str] = None

    @property
    @abstractmethod
    def location(self) -> str:
        ...

    @abstractmethod
    def replace(self, url: str) -> None:
        """Rewrite the visible location without adding a history entry."""
        ...

    @abstractmethod
    def assign(self, url: str) -> None:
        """Full navigation away; the current page load ends here."""
        ...


class PageNavigator(Navigator):
    """In-memory navigator for one page load served over the hub API."""

    def __init__(self, location: str):
        self._location = location
        self.history: List[str] = [location]
        self.navigate_to: Optional[str] = None

    @property
    def location(self) -> str:
        return self._location

    def replace(self, url: str) -> None:
        self._location = url
        self.history[-1] = url

    def assign(self, url: str) -> None:
        logger.info("Navigating away to %s", urlsplit(url).netloc or url)
        self.navigate_to = url
