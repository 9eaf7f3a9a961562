"""Utility functions for pydrivemirror."""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

# =============================================================================
# Constants
# =============================================================================

# Chunk size used when streaming downloads to disk (64 KB)
DOWNLOAD_CHUNK_SIZE: int = 64 * 1024

# Page size requested from the children listing endpoint
DEFAULT_PAGE_SIZE: int = 200

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_FRACTION_RE = re.compile(r"\.(\d+)")


# =============================================================================
# Timestamp parsing utilities
# =============================================================================


def parse_iso_timestamp(timestamp_str: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp from the Graph API.

    Args:
        timestamp_str: Timestamp such as "2025-01-15T10:30:00.1234567Z"

    Returns:
        Timezone-aware datetime (UTC when no offset is given) or None if
        parsing fails
    """
    if not timestamp_str:
        return None

    try:
        # The 'Z' suffix indicates UTC time
        if timestamp_str.endswith("Z"):
            timestamp_str = timestamp_str[:-1] + "+00:00"

        # Graph may send up to 7 fractional digits, datetime handles 6
        timestamp_str = _FRACTION_RE.sub(
            lambda m: "." + m.group(1)[:6].ljust(6, "0"), timestamp_str, count=1
        )

        dt = datetime.fromisoformat(timestamp_str)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt
    except (ValueError, AttributeError):
        return None


def datetime_to_millis(dt: datetime) -> int:
    """Convert an aware datetime to whole milliseconds since the epoch."""
    return (dt - _EPOCH) // timedelta(milliseconds=1)


def iso_to_millis(timestamp_str: Optional[str]) -> Optional[int]:
    """Parse an ISO timestamp straight to epoch milliseconds."""
    dt = parse_iso_timestamp(timestamp_str)
    if dt is None:
        return None
    return datetime_to_millis(dt)


def millis_to_display(millis: Optional[int]) -> str:
    """Format epoch milliseconds for tables (local time, second precision)."""
    if millis is None:
        return "-"
    dt = _EPOCH + timedelta(milliseconds=millis)
    return dt.astimezone().strftime("%Y-%m-%d %H:%M:%S")


# =============================================================================
# Path utilities
# =============================================================================


def join_remote_path(*parts: str) -> str:
    """Join path segments with forward slashes, dropping empty segments.

    Examples:
        >>> join_remote_path("", "A", "x.txt")
        'A/x.txt'
        >>> join_remote_path("Docs/", "/Reports")
        'Docs/Reports'
    """
    pieces = [p.strip("/") for p in parts]
    return "/".join(p for p in pieces if p)


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"
