"""
BaseProvider: capability record for every linkable provider.

Each provider (Meta, Google Business Profile, …) subclasses this and only
declares its identity and resource vocabulary; the remote paths are
derived here so every provider speaks the same connect API.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from config.settings import config


class BaseProvider(ABC):
    """Abstract base for all providers."""

    def __init__(self, api_prefix: Optional[str] = None):
        self.api_prefix = (api_prefix if api_prefix is not None else config.api_prefix).rstrip("/")

    # ── Identity ────────────────────────────────────────────────────────
    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Slug used in remote paths and in ``?provider=``: 'meta', 'google'."""
        ...

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable: 'Facebook', 'Google Business Profile'."""
        ...

    @property
    @abstractmethod
    def resource_segment(self) -> str:
        """Path segment of the resource collection: 'page' or 'account'."""
        ...

    @property
    @abstractmethod
    def resource_noun(self) -> str:
        """Singular noun for one resource: 'page', 'location'."""
        ...

    @property
    def resource_title(self) -> str:
        """Plural title used in discovery messages."""
        return f"{self.display_name} {self.resource_noun}s"

    @property
    def active_count_key(self) -> str:
        """Status payload field carrying the number of active resources."""
        return f"active_{self.resource_segment}s"

    @property
    def user_name_key(self) -> str:
        return f"{self.provider_name}_user_name"

    @property
    def user_id_key(self) -> str:
        return f"{self.provider_name}_user_id"

    # ── Remote paths ────────────────────────────────────────────────────

    @property
    def _connect_root(self) -> str:
        return f"{self.api_prefix}/connect"

    @property
    def begin_path(self) -> str:
        return f"{self._connect_root}/user/{self.provider_name}"

    @property
    def status_path(self) -> str:
        return f"{self._connect_root}/{self.provider_name}/user/status"

    @property
    def exchange_path(self) -> str:
        return f"{self._connect_root}/{self.provider_name}/user/detail"

    @property
    def disconnect_path(self) -> str:
        return self.exchange_path

    @property
    def resource_path(self) -> str:
        return f"{self._connect_root}/{self.provider_name}/{self.resource_segment}"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.provider_name}>"
