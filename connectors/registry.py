"""
ProviderRegistry: discovers and provides access to all providers.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from config.settings import config
from connectors.base import BaseProvider
from connectors.google import GoogleProvider
from connectors.meta import MetaProvider
from utils.errors import UnknownProvider

logger = logging.getLogger(__name__)

# ── All known providers, add new ones here ──────────────────────────────

_ALL_PROVIDERS: List[BaseProvider] = [
    MetaProvider(),
    GoogleProvider(),
]


class ProviderRegistry:
    """Singleton registry for all linkable providers."""

    _instance: Optional["ProviderRegistry"] = None

    def __new__(cls) -> "ProviderRegistry":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._providers = {}
            cls._instance._discovered = False
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None

    def discover(self) -> None:
        """Register every provider enabled in settings."""
        if self._discovered:
            return
        enabled = set(config.enabled_providers)
        for provider in _ALL_PROVIDERS:
            if provider.provider_name in enabled:
                self._providers[provider.provider_name] = provider
                logger.info(
                    "Provider registered: %s (%s)",
                    provider.display_name,
                    provider.provider_name,
                )
            else:
                logger.warning("Provider %s skipped, not enabled", provider.provider_name)
        self._discovered = True

    def get(self, provider: str) -> BaseProvider:
        """Get a provider by name, raising ``UnknownProvider`` if absent."""
        try:
            return self._providers[provider]
        except KeyError:
            raise UnknownProvider(provider) from None

    def all(self) -> List[BaseProvider]:
        return list(self._providers.values())

    def list_providers(self) -> List[Dict[str, object]]:
        """Return info about all known providers."""
        return [
            {
                "provider": p.provider_name,
                "display_name": p.display_name,
                "resource_noun": p.resource_noun,
                "enabled": p.provider_name in self._providers,
            }
            for p in _ALL_PROVIDERS
        ]
