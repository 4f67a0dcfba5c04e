"""Identifier generation for sessions and degraded device identities."""

from __future__ import annotations

from uuid import uuid4, UUID


def new_id() -> UUID:
    """Generate a new random UUID v4 for session records."""
    return uuid4()


def fallback_visitor_id() -> str:
    """Opaque visitor id used when the device producer could not answer."""
    return f"fallback-{uuid4().hex[:12]}"
