"""
Timestamp helpers shared by the domain and the document repositories.

All timestamps are timezone-aware UTC datetimes in the domain and
ISO-8601 strings in stored documents.
"""
from datetime import datetime, timezone
from typing import Any, Callable, Optional

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """
    Serialize a datetime for storage.

    Args:
        value: Datetime to serialize (naive values are treated as UTC)

    Returns:
        ISO-8601 string or None
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a stored timestamp.

    Empty strings and None mean "unset". A trailing ``Z`` and naive
    values are read as UTC.

    Args:
        value: Stored value

    Returns:
        Aware UTC datetime or None

    Raises:
        ValueError: If the value is not a recognisable timestamp
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported timestamp value: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_time_ago(value: datetime, now: Optional[datetime] = None) -> str:
    """
    Render a coarse "time ago" label (``3d ago``, ``5h ago``, ``Just now``).

    Args:
        value: Past moment
        now: Reference time (defaults to utcnow)

    Returns:
        Human-readable label
    """
    now = now or utcnow()
    seconds = (now - value).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if days > 0:
        return f"{days}d ago"
    if hours > 0:
        return f"{hours}h ago"
    if minutes > 0:
        return f"{minutes}m ago"
    return "Just now"
