# File: src/taskflow/utils/datetime.py
"""UTC datetime helpers. All persisted timestamps are naive UTC."""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Get current UTC datetime as NAIVE for database storage."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def seconds_between(earlier: datetime, later: datetime) -> int:
    """Whole seconds from earlier to later, floored. Negative deltas count as zero."""
    delta = (later - earlier).total_seconds()
    if delta <= 0:
        return 0
    return int(delta)
