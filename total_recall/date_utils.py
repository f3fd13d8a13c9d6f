"""Shared timestamp normalization and formatting helpers."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

# Sentinel "no activity" value; sorts before every real timestamp.
MIN_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)

DEFAULT_DISPLAY_FORMAT = "%m/%d %H:%M"


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    dt = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_display(value: datetime | None, fmt: str = DEFAULT_DISPLAY_FORMAT) -> str:
    """Render a timestamp in local time for terminal listings."""
    if value is None or value == MIN_TIMESTAMP:
        return "-"
    return ensure_utc(value).astimezone().strftime(fmt)


def format_duration(duration: timedelta) -> str:
    """Human readable duration: ``2h 5m``, ``12m`` or ``< 1m``."""
    total_minutes = int(duration.total_seconds() // 60)
    hours, minutes = divmod(max(0, total_minutes), 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    if minutes > 0:
        return f"{minutes}m"
    return "< 1m"
