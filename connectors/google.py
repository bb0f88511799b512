"""
GoogleProvider: Business Profile locations for review responses.

The remote API files locations under the ``account`` collection, so the
path segment and the user-facing noun differ for this provider.
"""

from __future__ import annotations

from connectors.base import BaseProvider


class GoogleProvider(BaseProvider):
    """Links a Google account and its Business Profile locations."""

    @property
    def provider_name(self) -> str:
        return "google"

    @property
    def display_name(self) -> str:
        return "Google Business Profile"

    @property
    def resource_segment(self) -> str:
        return "account"

    @property
    def resource_noun(self) -> str:
        return "location"

    @property
    def resource_title(self) -> str:
        return "Business Profile locations"
