"""SignalCollector — concurrent, failure-tolerant fan-out to producers.

Every producer runs as its own task with its own timeout.  The collector
waits until each task has either answered or been given up on, then hands
back whatever succeeded.  One slow or broken producer never fails the
whole collection:

    - privacy / network / environment failures become absent signals
    - device failures become a degraded fallback identity (confidence 0)
    - behavior failures become an all-zero behavior signal

Cancelling the caller cancels every outstanding producer task.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, Optional

from pydantic import BaseModel

from fraudscope.adapters.registry import AdapterRegistry
from fraudscope.domain.enums import SignalKind
from fraudscope.domain.signal import (
    BehaviorSignal,
    DeviceSignal,
    EnvironmentSignal,
    NetworkSignal,
    PrivacyModeSignal,
)
from fraudscope.foundation.identifiers import fallback_visitor_id

logger = logging.getLogger(__name__)

Producer = Callable[[], Awaitable[BaseModel]]

EXPECTED_TYPES: dict[SignalKind, type[BaseModel]] = {
    SignalKind.DEVICE: DeviceSignal,
    SignalKind.PRIVACY: PrivacyModeSignal,
    SignalKind.NETWORK: NetworkSignal,
    SignalKind.BEHAVIOR: BehaviorSignal,
    SignalKind.ENVIRONMENT: EnvironmentSignal,
}


class ProducerStatus(str, Enum):
    """How a single producer task settled."""

    OK = "ok"
    TIMEOUT = "timeout"
    ERROR = "error"
    MISSING = "missing"


@dataclass(frozen=True)
class ProducerOutcome:
    kind: SignalKind
    status: ProducerStatus
    signal: Optional[BaseModel] = None
    detail: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "status": self.status.value, "detail": self.detail}


@dataclass(frozen=True)
class CollectedSignals:
    """Settled producer results, ready for the risk engine."""

    device: DeviceSignal
    behavior: BehaviorSignal
    privacy: Optional[PrivacyModeSignal] = None
    network: Optional[NetworkSignal] = None
    environment: Optional[EnvironmentSignal] = None
    outcomes: tuple[ProducerOutcome, ...] = field(default_factory=tuple)

    @property
    def device_degraded(self) -> bool:
        """True when ``device`` is a placeholder identity, not a real sighting."""
        return self.status_of(SignalKind.DEVICE) != ProducerStatus.OK

    def status_of(self, kind: SignalKind) -> ProducerStatus:
        for outcome in self.outcomes:
            if outcome.kind == kind:
                return outcome.status
        return ProducerStatus.MISSING


def adapter_producer(
    registry: AdapterRegistry,
    kind: SignalKind,
    raw: dict[str, Any],
) -> Producer:
    """Wrap a raw payload so the collector can run it like any producer."""

    async def produce() -> BaseModel:
        return registry.adapt(kind, raw)

    return produce


class SignalCollector:
    """Runs producers concurrently with independent per-producer timeouts.

    Args:
        timeouts: Seconds allowed per producer kind.
        default_timeout: Used for kinds without an explicit entry.
    """

    def __init__(
        self,
        timeouts: Mapping[SignalKind, float] | None = None,
        default_timeout: float = 5.0,
    ) -> None:
        if default_timeout <= 0:
            raise ValueError("default_timeout must be positive")
        self._timeouts = dict(timeouts or {})
        self._default_timeout = default_timeout

    def timeout_for(self, kind: SignalKind) -> float:
        return self._timeouts.get(kind, self._default_timeout)

    # ── Public API ───────────────────────────────────────────────────────

    async def collect(self, producers: Mapping[SignalKind, Producer]) -> CollectedSignals:
        """Run every producer and settle all of them.

        Kinds without a producer are reported as MISSING.  This method
        does not raise for producer failures.
        """
        kinds = list(producers)
        settled = await asyncio.gather(
            *(self._settle(kind, producers[kind]) for kind in kinds)
        )
        by_kind: dict[SignalKind, ProducerOutcome] = dict(zip(kinds, settled))

        outcomes = tuple(
            by_kind.get(kind) or ProducerOutcome(kind, ProducerStatus.MISSING)
            for kind in SignalKind
        )
        return CollectedSignals(
            device=self._signal(by_kind, SignalKind.DEVICE) or self._fallback_device(),
            behavior=self._signal(by_kind, SignalKind.BEHAVIOR) or BehaviorSignal(),
            privacy=self._signal(by_kind, SignalKind.PRIVACY),
            network=self._signal(by_kind, SignalKind.NETWORK),
            environment=self._signal(by_kind, SignalKind.ENVIRONMENT),
            outcomes=outcomes,
        )

    # ── Internals ────────────────────────────────────────────────────────

    async def _settle(self, kind: SignalKind, producer: Producer) -> ProducerOutcome:
        timeout = self.timeout_for(kind)
        try:
            signal = await asyncio.wait_for(producer(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("Producer '%s' timed out after %.1fs", kind.value, timeout)
            return ProducerOutcome(kind, ProducerStatus.TIMEOUT, detail=f"timed out after {timeout}s")
        except Exception as exc:
            logger.warning("Producer '%s' failed: %s", kind.value, exc)
            return ProducerOutcome(kind, ProducerStatus.ERROR, detail=str(exc))

        expected = EXPECTED_TYPES[kind]
        if not isinstance(signal, expected):
            logger.warning(
                "Producer '%s' returned %s, expected %s",
                kind.value,
                type(signal).__name__,
                expected.__name__,
            )
            return ProducerOutcome(
                kind,
                ProducerStatus.ERROR,
                detail=f"unexpected result type {type(signal).__name__}",
            )
        return ProducerOutcome(kind, ProducerStatus.OK, signal=signal)

    @staticmethod
    def _signal(by_kind: dict[SignalKind, ProducerOutcome], kind: SignalKind) -> Any:
        outcome = by_kind.get(kind)
        if outcome is None or outcome.status != ProducerStatus.OK:
            return None
        return outcome.signal

    @staticmethod
    def _fallback_device() -> DeviceSignal:
        visitor_id = fallback_visitor_id()
        logger.info("Using degraded device identity %s", visitor_id)
        return DeviceSignal(visitor_id=visitor_id, confidence=0.0)
