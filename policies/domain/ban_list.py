"""
Ban list domain entity.

A single, globally scoped set of banned HWIDs. A banned HWID is rejected
for every license.
"""
from dataclasses import dataclass, field
from typing import Iterable, Tuple


def is_banned(hwid: str, ban_list: "BanList") -> bool:
    """
    Check if a HWID is banned.

    Exact, case-sensitive match.

    Args:
        hwid: HWID to check
        ban_list: Current ban list

    Returns:
        True if the HWID is on the list
    """
    return hwid in ban_list.hwids


def normalize_hwid(hwid: str) -> str:
    """
    Strip surrounding whitespace from a HWID given to ban or unban.

    Args:
        hwid: HWID as entered by an operator

    Returns:
        Trimmed HWID

    Raises:
        ValueError: If the HWID is empty or whitespace-only
    """
    value = (hwid or "").strip()
    if not value:
        raise ValueError("HWID cannot be empty")
    return value


@dataclass(frozen=True)
class BanList:
    """
    Ban list entity.

    This is an immutable value object; ban() and unban() return new
    instances.
    """

    hwids: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, hwids: Iterable[str]) -> "BanList":
        """
        Build a BanList from stored values, dropping duplicates.

        Args:
            hwids: HWIDs in stored order

        Returns:
            BanList instance
        """
        unique = []
        for hwid in hwids:
            if hwid not in unique:
                unique.append(hwid)
        return cls(hwids=tuple(unique))

    def __contains__(self, hwid: str) -> bool:
        return is_banned(hwid, self)

    def __len__(self) -> int:
        return len(self.hwids)

    def ban(self, hwid: str) -> "BanList":
        """
        Create a new BanList with a HWID added.

        Surrounding whitespace is stripped. Banning a listed HWID returns
        an equal list.

        Args:
            hwid: HWID to ban

        Returns:
            New BanList instance

        Raises:
            ValueError: If the HWID is empty or whitespace-only
        """
        value = normalize_hwid(hwid)
        if value in self.hwids:
            return self
        return BanList(hwids=self.hwids + (value,))

    def unban(self, hwid: str) -> "BanList":
        """
        Create a new BanList with every occurrence of a HWID removed.

        Surrounding whitespace is stripped, as in ban().

        Args:
            hwid: HWID to unban

        Returns:
            New BanList instance

        Raises:
            ValueError: If the HWID is empty or whitespace-only
        """
        value = normalize_hwid(hwid)
        return BanList(hwids=tuple(h for h in self.hwids if h != value))
