"""
Unit tests for the ban list entity and repository.
"""
import pytest

from core.domain.exceptions import MalformedDocumentError
from policies.domain.ban_list import BanList, is_banned, normalize_hwid
from policies.infrastructure.repositories.document_ban_list_repository import (
    BAN_LIST_KEY,
    SETTINGS_COLLECTION,
)


class TestBanList:
    """Tests for BanList entity."""

    def test_is_banned_exact(self):
        """Test exact, case-sensitive matching."""
        ban_list = BanList.of(["HW-1"])
        assert is_banned("HW-1", ban_list)
        assert not is_banned("hw-1", ban_list)
        assert "HW-1" in ban_list

    def test_of_drops_duplicates(self):
        """Test that duplicates in stored data collapse."""
        assert BanList.of(["A", "B", "A"]).hwids == ("A", "B")

    def test_ban_strips_and_is_idempotent(self):
        """Test that ban trims whitespace and ignores listed HWIDs."""
        ban_list = BanList().ban("  HW-1 ")
        assert ban_list.hwids == ("HW-1",)
        assert ban_list.ban("HW-1") is ban_list

    @pytest.mark.parametrize("hwid", ["", "   ", None])
    def test_ban_rejects_empty(self, hwid):
        """Test that empty HWIDs cannot be banned."""
        with pytest.raises(ValueError):
            BanList().ban(hwid)

    def test_unban(self):
        """Test that unban removes the HWID and ignores unknown ones."""
        ban_list = BanList.of(["A", "B"])
        assert ban_list.unban("A").hwids == ("B",)
        assert ban_list.unban("C") == ban_list

    def test_unban_strips(self):
        """Test that unban trims whitespace like ban."""
        ban_list = BanList().ban(" HW-1 ")
        assert ban_list.unban(" HW-1 ").hwids == ()

    @pytest.mark.parametrize("hwid", ["", "   ", None])
    def test_normalize_rejects_empty(self, hwid):
        """Test that empty HWIDs cannot be unbanned either."""
        with pytest.raises(ValueError):
            normalize_hwid(hwid)
        with pytest.raises(ValueError):
            BanList.of(["A"]).unban(hwid)


class TestDocumentBanListRepository:
    """Tests for the settings/banlist document."""

    async def test_empty_when_missing(self, ban_list_repository):
        """Test that a missing document is an empty list."""
        assert len(await ban_list_repository.get()) == 0

    async def test_add_and_remove(self, ban_list_repository, store):
        """Test adding and removing HWIDs."""
        assert await ban_list_repository.add("HW-1")
        assert await ban_list_repository.add("HW-2")
        assert not await ban_list_repository.add("HW-1")
        assert (await store.get(SETTINGS_COLLECTION, BAN_LIST_KEY)) == {"hwids": ["HW-1", "HW-2"]}

        assert await ban_list_repository.remove("HW-1")
        assert not await ban_list_repository.remove("HW-1")
        assert (await ban_list_repository.get()).hwids == ("HW-2",)

    async def test_remove_collapses_stored_duplicates(self, ban_list_repository, store):
        """Test that unban removes every stored copy of a HWID."""
        await store.set(SETTINGS_COLLECTION, BAN_LIST_KEY, {"hwids": ["HW-1", "HW-2", "HW-1"]})

        assert await ban_list_repository.remove("HW-1")
        assert (await store.get(SETTINGS_COLLECTION, BAN_LIST_KEY)) == {"hwids": ["HW-2"]}

    async def test_add_and_remove_trim(self, ban_list_repository, store):
        """Test that padded input is stored and matched trimmed."""
        assert await ban_list_repository.add(" HW-1 ")
        assert not await ban_list_repository.add("HW-1")
        assert await ban_list_repository.remove("  HW-1")
        assert (await store.get(SETTINGS_COLLECTION, BAN_LIST_KEY)) == {"hwids": []}

    async def test_malformed(self, ban_list_repository, store):
        """Test that a non-list hwids field is rejected."""
        await store.set(SETTINGS_COLLECTION, BAN_LIST_KEY, {"hwids": "HW-1"})
        with pytest.raises(MalformedDocumentError):
            await ban_list_repository.get()
