"""
MetaProvider: Facebook Pages for social posting.
"""

from __future__ import annotations

from connectors.base import BaseProvider


class MetaProvider(BaseProvider):
    """Links a Facebook user and the Pages it administers."""

    @property
    def provider_name(self) -> str:
        return "meta"

    @property
    def display_name(self) -> str:
        return "Facebook"

    @property
    def resource_segment(self) -> str:
        return "page"

    @property
    def resource_noun(self) -> str:
        return "page"

    @property
    def resource_title(self) -> str:
        return "Facebook Pages"
