"""Timezone-aware clock utilities.

All timestamps in fraudscope MUST be UTC-aware.  This module is the
single source of "now" so tests can monkey-patch it trivially.
"""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def from_epoch_ms(value: float) -> datetime:
    """Convert a browser-style epoch-millisecond timestamp to UTC."""
    return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
