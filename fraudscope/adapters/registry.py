"""Adapter Registry — selects the adapter for each producer kind.

Each SignalKind has exactly one adapter.  The registry routes a raw
payload to it, tracks accepted/rejected counts per adapter, and turns any
adapter failure into an AdaptationError.

No heuristics.  No guessing.  Fail fast if nothing matches.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel

from fraudscope.adapters.base import SignalAdapter
from fraudscope.adapters.behavior import BehaviorAdapter
from fraudscope.adapters.device import DeviceFingerprintAdapter
from fraudscope.adapters.environment import EnvironmentAdapter
from fraudscope.adapters.network import NetworkReputationAdapter
from fraudscope.adapters.privacy import PrivacyModeAdapter
from fraudscope.domain.enums import SignalKind

logger = logging.getLogger(__name__)


class AdapterStats:
    """Per-adapter ingestion statistics for observability."""

    __slots__ = ("kind", "accepted_count", "rejected_count")

    def __init__(self, kind: SignalKind) -> None:
        self.kind = kind
        self.accepted_count: int = 0
        self.rejected_count: int = 0

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "accepted_count": self.accepted_count,
            "rejected_count": self.rejected_count,
        }


class NoAdapterFoundError(Exception):
    """Raised when no adapter is registered for a producer kind."""


class AdaptationError(Exception):
    """Raised when the matched adapter fails to translate the payload."""

    def __init__(self, kind: SignalKind, reason: str) -> None:
        self.kind = kind
        self.reason = reason
        super().__init__(f"Adapter '{kind.value}' failed: {reason}")


class AdapterRegistry:
    """Registry of signal adapters with stats tracking.

    Usage:
        registry = AdapterRegistry.with_defaults()
        signal = registry.adapt(SignalKind.NETWORK, raw_payload)
    """

    def __init__(self) -> None:
        self._adapters: dict[SignalKind, SignalAdapter] = {}
        self._stats: dict[SignalKind, AdapterStats] = {}

    @classmethod
    def with_defaults(cls) -> "AdapterRegistry":
        """Registry holding one adapter for every producer kind."""
        registry = cls()
        registry.register(DeviceFingerprintAdapter())
        registry.register(PrivacyModeAdapter())
        registry.register(NetworkReputationAdapter())
        registry.register(BehaviorAdapter())
        registry.register(EnvironmentAdapter())
        return registry

    def register(self, adapter: SignalAdapter) -> None:
        """Add an adapter, replacing any previous one for the same kind."""
        self._adapters[adapter.kind] = adapter
        self._stats[adapter.kind] = AdapterStats(adapter.kind)
        logger.info("Registered adapter: %s", adapter.kind.value)

    def adapt(self, kind: SignalKind, raw: dict[str, Any]) -> BaseModel:
        """Route a raw payload through the adapter registered for *kind*.

        Raises:
            NoAdapterFoundError: If nothing is registered for *kind*.
            AdaptationError: If the adapter fails to translate.
        """
        adapter = self._adapters.get(kind)
        if adapter is None:
            raise NoAdapterFoundError(f"No adapter registered for '{kind.value}'")

        stats = self._stats[kind]
        try:
            signal = adapter.adapt(raw)
        except Exception as exc:
            stats.rejected_count += 1
            logger.warning("Adapter '%s' rejected payload: %s", kind.value, exc)
            raise AdaptationError(kind, str(exc)) from exc

        stats.accepted_count += 1
        logger.debug("Adapter '%s' accepted payload", kind.value)
        return signal

    @property
    def kinds(self) -> list[SignalKind]:
        """Registered kinds in registration order."""
        return list(self._adapters)

    @property
    def stats(self) -> list[dict]:
        """Per-adapter stats for observability endpoints."""
        return [s.to_dict() for s in self._stats.values()]

    @property
    def total_accepted(self) -> int:
        return sum(s.accepted_count for s in self._stats.values())

    @property
    def total_rejected(self) -> int:
        return sum(s.rejected_count for s in self._stats.values())
