"""
Tests for resource discovery, selection seeding and best-effort save.
"""

import pytest

from core.resource_manager import ResourceManager
from utils.errors import Unreachable

PAGES = "/api/v1/connect/meta/page"
LOCATIONS = "/api/v1/connect/google/account"

TWO_ACCOUNTS = {
    "accounts": [
        {"account_id": "a", "account_name": "Alpha", "platform": "facebook", "is_active": False},
        {"account_id": "b", "account_name": "Beta", "platform": "instagram", "is_active": True,
         "account_token": "tok-b"},
    ]
}


class TestSelectionSeeding:
    @pytest.mark.asyncio
    async def test_sync_select_all_selects_everything(self, api, meta):
        api.on("POST", PAGES, body=TWO_ACCOUNTS)
        mgr = ResourceManager(api, meta)
        assert await mgr.sync(select_all=True)
        assert mgr.selection == {"a", "b"}

    @pytest.mark.asyncio
    async def test_sync_without_select_all_uses_is_active(self, api, meta):
        api.on("POST", PAGES, body=TWO_ACCOUNTS)
        mgr = ResourceManager(api, meta)
        await mgr.sync(select_all=False)
        assert mgr.selection == {"b"}

    @pytest.mark.asyncio
    async def test_load_replaces_prior_selection(self, api, meta):
        api.on("POST", PAGES, body=TWO_ACCOUNTS)
        api.on("GET", PAGES, body=TWO_ACCOUNTS)
        mgr = ResourceManager(api, meta)
        await mgr.sync(select_all=True)
        mgr.toggle("b")
        assert mgr.selection == {"a"}

        await mgr.load()
        assert mgr.selection == {"b"}
        assert [a.account_id for a in mgr.accounts] == ["a", "b"]
        assert mgr.accounts[1].account_token == "tok-b"

    @pytest.mark.asyncio
    async def test_selection_is_subset_after_shrinking_list(self, api, meta):
        api.on("POST", PAGES, body=TWO_ACCOUNTS)
        api.on("GET", PAGES, body={"accounts": [{"account_id": "b", "is_active": False}]})
        mgr = ResourceManager(api, meta)
        await mgr.sync(select_all=True)
        await mgr.load()
        assert mgr.selection <= set(mgr.account_ids)
        assert mgr.selection == set()


class TestEmptyAndFailures:
    @pytest.mark.asyncio
    async def test_empty_sync_is_a_notice_not_an_error(self, api, meta):
        api.on("POST", PAGES, body={"accounts": []})
        mgr = ResourceManager(api, meta)
        assert await mgr.sync(select_all=True)
        assert mgr.accounts == []
        assert mgr.selection == set()
        assert mgr.error is None
        assert mgr.notice == "No Facebook Pages found on this account."

    @pytest.mark.asyncio
    async def test_empty_load_notice_uses_resource_noun(self, api, google):
        api.on("GET", LOCATIONS, body={})
        mgr = ResourceManager(api, google)
        await mgr.load()
        assert mgr.notice == "No locations connected yet."

    @pytest.mark.asyncio
    async def test_business_error_message_is_verbatim(self, api, meta):
        api.on("POST", PAGES, body=TWO_ACCOUNTS)
        api.on("GET", PAGES, status=400, body={"message": "Token revoked by Meta"})
        mgr = ResourceManager(api, meta)
        await mgr.sync(select_all=True)

        assert not await mgr.load()
        assert mgr.error == "Token revoked by Meta"
        # previous collection untouched on failure
        assert mgr.selection == {"a", "b"}
        assert mgr.syncing is False

    @pytest.mark.asyncio
    async def test_business_error_fallback_message(self, api, google):
        api.on("POST", LOCATIONS, status=502)
        mgr = ResourceManager(api, google)
        await mgr.sync()
        assert mgr.error == "Could not load locations."

    @pytest.mark.asyncio
    async def test_unreachable(self, api, meta):
        api.on("GET", PAGES, exc=Unreachable())
        mgr = ResourceManager(api, meta)
        assert not await mgr.load()
        assert mgr.error == "Could not reach the server."

    @pytest.mark.asyncio
    async def test_malformed_entries_are_skipped(self, api, meta):
        api.on("GET", PAGES, body={"accounts": [{"account_name": "no id"}, {"account_id": 42, "is_active": True}]})
        mgr = ResourceManager(api, meta)
        await mgr.load()
        assert mgr.account_ids == ["42"]
        assert mgr.selection == {"42"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("accounts", [5, "p1", {"account_id": "p1"}])
    async def test_non_list_accounts_is_a_load_failure(self, api, meta, accounts):
        api.on("POST", PAGES, body=TWO_ACCOUNTS)
        api.on("GET", PAGES, body={"accounts": accounts})
        mgr = ResourceManager(api, meta)
        await mgr.sync(select_all=True)

        assert await mgr.load() is False
        assert mgr.error == "Could not load pages."
        assert mgr.account_ids == ["a", "b"]
        assert mgr.syncing is False


class TestToggleAndSave:
    @pytest.mark.asyncio
    async def test_toggle_unknown_id_is_noop(self, api, meta):
        api.on("GET", PAGES, body=TWO_ACCOUNTS)
        mgr = ResourceManager(api, meta)
        await mgr.load()
        assert mgr.toggle("zzz") is False
        assert mgr.selection == {"b"}

    @pytest.mark.asyncio
    async def test_toggle_flips_membership(self, api, meta):
        api.on("GET", PAGES, body=TWO_ACCOUNTS)
        mgr = ResourceManager(api, meta)
        await mgr.load()
        mgr.toggle("a")
        assert mgr.selection == {"a", "b"}
        mgr.toggle("a")
        assert mgr.selection == {"b"}

    @pytest.mark.asyncio
    async def test_save_sends_full_set(self, api, meta):
        api.on("POST", PAGES, body=TWO_ACCOUNTS)
        api.on("PATCH", PAGES, body={"ok": True})
        mgr = ResourceManager(api, meta)
        await mgr.sync(select_all=True)
        mgr.toggle("a")

        assert await mgr.save()
        _, body = api.last("PATCH", PAGES)
        assert body == {"accountIds": ["b"]}

    @pytest.mark.asyncio
    async def test_failed_save_keeps_selection(self, api, meta):
        api.on("POST", PAGES, body=TWO_ACCOUNTS)
        api.on("PATCH", PAGES, exc=Unreachable())
        mgr = ResourceManager(api, meta)
        await mgr.sync(select_all=True)

        assert await mgr.save() is False
        assert mgr.selection == {"a", "b"}
        assert mgr.saving is False
        assert mgr.error is None

    @pytest.mark.asyncio
    async def test_save_follows_loaded_order_not_toggle_order(self, api, meta):
        api.on("POST", PAGES, body=TWO_ACCOUNTS)
        api.on("PATCH", PAGES, body={})
        mgr = ResourceManager(api, meta)
        await mgr.sync(select_all=False)
        mgr.toggle("b")
        mgr.toggle("b")
        mgr.toggle("a")
        assert mgr.selected == ["a", "b"]

        await mgr.save()
        _, body = api.last("PATCH", PAGES)
        assert body == {"accountIds": ["a", "b"]}
