"""Date and time utility functions."""
import time
from datetime import datetime, timezone
from typing import Optional


def now_millis() -> int:
    """
    Current wall-clock time as integer milliseconds since the Unix epoch.

    Returns:
        int: Milliseconds since 1970-01-01T00:00:00Z
    """
    return int(time.time() * 1000)


def to_iso_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Render a moment as an ISO 8601 UTC timestamp with millisecond precision.

    Args:
        moment: Datetime to render (default: now). Naive values are
            treated as UTC.

    Returns:
        str: Timestamp such as "2025-10-28T06:32:10.123Z"
    """
    if moment is None:
        moment = datetime.now(timezone.utc)
    elif moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    else:
        moment = moment.astimezone(timezone.utc)

    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_iso_timestamp(timestamp: str) -> datetime:
    """
    Parse an ISO 8601 timestamp, accepting a trailing "Z".

    Args:
        timestamp: Timestamp string

    Returns:
        datetime object

    Raises:
        ValueError: If timestamp format is invalid
    """
    try:
        return datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid timestamp format: {timestamp}") from e
