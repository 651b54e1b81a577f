"""
Document store implementation of BanListRepository port.

The ban list lives in a single document, settings/banlist, as a list
field named ``hwids``.
"""
import logging
from typing import Callable

from core.domain.exceptions import ConcurrentModificationError, MalformedDocumentError
from core.infrastructure.document_store import DocumentStore
from policies.domain.ban_list import BanList
from policies.ports.ban_list_repository import BanListRepository

logger = logging.getLogger(__name__)

SETTINGS_COLLECTION = "settings"
BAN_LIST_KEY = "banlist"
MAX_WRITE_ATTEMPTS = 3


class DocumentBanListRepository(BanListRepository):
    """
    Document store implementation of BanListRepository.

    Writes are compare-and-swap on the whole ``hwids`` list, retried a
    few times when another writer got there first.
    """

    def __init__(self, store: DocumentStore):
        """Initialize repository with a document store."""
        self.store = store

    async def _read(self):
        document = await self.store.get(SETTINGS_COLLECTION, BAN_LIST_KEY)
        if document is None:
            return None
        hwids = document.get("hwids") or []
        if not isinstance(hwids, list) or not all(isinstance(h, str) for h in hwids):
            raise MalformedDocumentError(
                "Ban list field 'hwids' must be a list of strings", SETTINGS_COLLECTION
            )
        return hwids

    async def get(self) -> BanList:
        """Get the current ban list."""
        return BanList.of(await self._read() or [])

    async def _change(self, change: Callable[[BanList], BanList]) -> bool:
        """
        Apply a ban list change as a compare-and-swap on the stored list.

        Returns:
            True if the list changed, False if the change was a no-op
        """
        for _ in range(MAX_WRITE_ATTEMPTS):
            current = await self._read()
            old = BanList.of(current or [])
            new = change(old)
            if new.hwids == old.hwids:
                return False
            if current is None:
                written = await self.store.create(
                    SETTINGS_COLLECTION, BAN_LIST_KEY, {"hwids": list(new.hwids)}
                )
            else:
                written = await self.store.update(
                    SETTINGS_COLLECTION,
                    BAN_LIST_KEY,
                    {"hwids": list(new.hwids)},
                    expected={"hwids": current},
                )
            if written:
                return True
            logger.info("Ban list changed during write, retrying")
        raise ConcurrentModificationError("Ban list is being modified concurrently")

    async def add(self, hwid: str) -> bool:
        """Add a HWID to the ban list."""
        return await self._change(lambda ban_list: ban_list.ban(hwid))

    async def remove(self, hwid: str) -> bool:
        """Remove every occurrence of a HWID from the ban list."""
        return await self._change(lambda ban_list: ban_list.unban(hwid))
