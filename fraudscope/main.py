"""fraudscope — session fraud-risk assessment service.

This is the application entry point.  It wires the AdapterRegistry,
SignalCollector, RiskEngine, history/session stores, and the HTTP and
WebSocket endpoints together.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from fraudscope.adapters.registry import AdapterRegistry
from fraudscope.api.assess import create_assess_router
from fraudscope.api.sessions import create_sessions_router
from fraudscope.api.ws_assessments import create_assessment_feed_router
from fraudscope.collection.collector import SignalCollector
from fraudscope.config import Settings, settings
from fraudscope.core.risk_engine import RiskEngine, TierThresholds
from fraudscope.services.analysis import SessionAnalyzer
from fraudscope.services.connection_manager import ConnectionManager
from fraudscope.store.history_store import HistoryStore
from fraudscope.store.session_store import SessionStore

# ── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)


def create_app(config: Settings | None = None) -> FastAPI:
    """Build a fully wired application with fresh in-memory state."""
    config = config or settings

    # ── Scoring ──────────────────────────────────────────────────────────
    engine = RiskEngine(
        thresholds=TierThresholds(
            medium=config.tier_medium_min,
            high=config.tier_high_min,
            critical=config.tier_critical_min,
        ),
    )

    # ── State ────────────────────────────────────────────────────────────
    registry = AdapterRegistry.with_defaults()
    collector = SignalCollector(timeouts=config.producer_timeouts())
    history = HistoryStore()
    sessions = SessionStore(capacity=config.session_history_limit)
    listeners = ConnectionManager()

    analyzer = SessionAnalyzer(
        engine=engine,
        collector=collector,
        registry=registry,
        history=history,
        sessions=sessions,
        listeners=listeners,
    )

    # ── App ──────────────────────────────────────────────────────────────
    app = FastAPI(
        title=config.app_name,
        description="Signal aggregation and fraud-risk scoring for visiting sessions",
        version="0.3.0",
        debug=config.debug,
    )

    # ── Routes ───────────────────────────────────────────────────────────
    app.include_router(create_sessions_router(analyzer, history, sessions))
    app.include_router(create_assess_router(engine))
    app.include_router(create_assessment_feed_router(listeners))

    # ── Health ───────────────────────────────────────────────────────────
    @app.get("/health")
    async def health() -> dict:
        return {
            "status": "ok",
            "stored_sessions": await sessions.count(),
            "session_capacity": sessions.capacity,
            "history": await history.size(),
            "live_listeners": listeners.active_count,
            "adapters": registry.stats,
            "total_adapted": registry.total_accepted,
            "total_rejected": registry.total_rejected,
        }

    return app


app = create_app()
