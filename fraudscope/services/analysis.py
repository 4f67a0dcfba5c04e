"""SessionAnalyzer — the request-level pipeline around the risk engine.

    raw report ─► adapters ─► SignalCollector (concurrent, per-producer timeout)
                                   │
                 HistoryStore ─► snapshot (fail-open)
                                   │
                              RiskEngine.assess ─► recommend(tier)
                                   │
                 record counters, keep session, notify listeners

The engine stays pure: every read and write of history happens here.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

from fraudscope.adapters.registry import AdapterRegistry
from fraudscope.collection.collector import (
    CollectedSignals,
    Producer,
    SignalCollector,
    adapter_producer,
)
from fraudscope.core.advisor import recommend
from fraudscope.core.risk_engine import RiskEngine
from fraudscope.domain.enums import SignalKind
from fraudscope.domain.session import ProducerReport, SessionAnalysis, SessionReport
from fraudscope.domain.signal import HistoryCounters
from fraudscope.foundation.identifiers import new_id
from fraudscope.services.connection_manager import ConnectionManager
from fraudscope.store.history_store import HistoryStore
from fraudscope.store.session_store import SessionStore

logger = logging.getLogger(__name__)


class SessionAnalyzer:
    """Collects signals for a session, scores it and records the outcome."""

    def __init__(
        self,
        engine: RiskEngine,
        collector: SignalCollector,
        registry: AdapterRegistry,
        history: HistoryStore,
        sessions: SessionStore,
        listeners: Optional[ConnectionManager] = None,
    ) -> None:
        self._engine = engine
        self._collector = collector
        self._registry = registry
        self._history = history
        self._sessions = sessions
        self._listeners = listeners

    # ── Public API ───────────────────────────────────────────────────────

    async def analyze(self, report: SessionReport) -> SessionAnalysis:
        """Analyse the raw payloads of one session."""
        producers = {
            kind: adapter_producer(self._registry, kind, raw)
            for kind, raw in report.payloads().items()
        }
        return await self.analyze_producers(producers)

    async def analyze_producers(
        self,
        producers: Mapping[SignalKind, Producer],
    ) -> SessionAnalysis:
        """Analyse a session whose signals come from arbitrary async producers."""
        collected = await self._collector.collect(producers)
        address = collected.network.address if collected.network else None

        counters = await self._snapshot_or_empty(collected.device.visitor_id, address)
        assessment = self._engine.assess(
            collected.device,
            collected.privacy,
            collected.network,
            collected.behavior,
            counters,
            environment=collected.environment,
        )

        analysis = SessionAnalysis(
            session_id=new_id(),
            visitor_id=collected.device.visitor_id,
            address=address,
            assessment=assessment,
            recommendations=recommend(assessment.tier),
            producers=self._producer_reports(collected),
        )
        logger.info(
            "Assessed session %s: score=%d tier=%s factors=%d",
            analysis.session_id,
            assessment.score,
            assessment.tier.value,
            len(assessment.contributing_factors),
        )

        # A degraded identity is random per request and never recurs.
        device_id = None if collected.device_degraded else collected.device.visitor_id
        await self._record(device_id, address)
        await self._sessions.add(analysis)
        await self._notify(analysis)
        return analysis

    # ── Internals ────────────────────────────────────────────────────────

    async def _snapshot_or_empty(self, device_id: str, address: Optional[str]) -> HistoryCounters:
        try:
            return await self._history.snapshot(device_id, address)
        except Exception as exc:
            logger.warning("History unavailable, scoring without it: %s", exc)
            return HistoryCounters()

    async def _record(self, device_id: Optional[str], address: Optional[str]) -> None:
        try:
            await self._history.record(device_id, address)
        except Exception as exc:
            logger.warning("Failed to record history for %s: %s", device_id, exc)

    async def _notify(self, analysis: SessionAnalysis) -> None:
        if self._listeners is None or self._listeners.active_count == 0:
            return
        try:
            await self._listeners.broadcast_json({"type": "session_assessed", **analysis.to_payload()})
        except Exception as exc:
            logger.error("Assessment broadcast failed: %s", exc, exc_info=True)

    @staticmethod
    def _producer_reports(collected: CollectedSignals) -> tuple[ProducerReport, ...]:
        return tuple(
            ProducerReport(kind=o.kind, status=o.status.value, detail=o.detail)
            for o in collected.outcomes
        )
