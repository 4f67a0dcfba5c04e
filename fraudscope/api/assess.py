"""Stateless scoring endpoints.

POST /api/assess scores already-typed signals with the caller's own
history counters.  Nothing is recorded.
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from fraudscope.core.advisor import recommend
from fraudscope.core.risk_engine import RiskEngine
from fraudscope.domain.signal import (
    BehaviorSignal,
    DeviceSignal,
    EnvironmentSignal,
    HistoryCounters,
    NetworkSignal,
    PrivacyModeSignal,
)


class AssessRequest(BaseModel):
    device: DeviceSignal
    behavior: BehaviorSignal
    privacy: Optional[PrivacyModeSignal] = None
    network: Optional[NetworkSignal] = None
    history: HistoryCounters = Field(default_factory=HistoryCounters)
    environment: Optional[EnvironmentSignal] = None


def create_assess_router(engine: RiskEngine) -> APIRouter:
    """Factory that wires the scoring endpoints to a RiskEngine."""

    router = APIRouter(prefix="/api", tags=["assessment"])

    @router.post("/assess")
    async def assess(request: AssessRequest) -> dict[str, Any]:
        assessment = engine.assess(
            request.device,
            request.privacy,
            request.network,
            request.behavior,
            request.history,
            environment=request.environment,
        )
        return {
            "assessment": assessment.export(),
            "recommendations": list(recommend(assessment.tier)),
        }

    @router.get("/recommendations/{tier}")
    async def recommendations(tier: str) -> dict[str, Any]:
        try:
            actions = recommend(tier)
        except ValueError:
            raise HTTPException(status_code=404, detail=f"Unknown tier '{tier}'")
        return {"tier": tier.upper(), "recommendations": list(actions)}

    return router
