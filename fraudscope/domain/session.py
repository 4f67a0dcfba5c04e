"""Session records — what a client reports in, and what an analysis returns.

A SessionReport carries the raw payload of each producer exactly as the
browser (or an upstream service) sent it.  Any payload may be missing.
A SessionAnalysis is the immutable result of analysing one report.
"""

from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from fraudscope.domain.assessment import RiskAssessment
from fraudscope.domain.enums import SignalKind


class SessionReport(BaseModel):
    """Raw producer payloads for one visiting session."""

    device: Optional[dict[str, Any]] = None
    privacy: Optional[dict[str, Any]] = None
    network: Optional[dict[str, Any]] = None
    behavior: Optional[dict[str, Any]] = None
    environment: Optional[dict[str, Any]] = None

    def payloads(self) -> dict[SignalKind, dict[str, Any]]:
        """Non-empty payloads keyed by producer kind."""
        return {
            kind: payload
            for kind in SignalKind
            if (payload := getattr(self, kind.value)) is not None
        }


class ProducerReport(BaseModel):
    """How one producer settled during collection."""

    kind: SignalKind
    status: str
    detail: str = ""

    model_config = {"frozen": True}


class SessionAnalysis(BaseModel):
    """Assessment, recommendations and producer outcomes for one session."""

    session_id: UUID
    visitor_id: str
    address: Optional[str] = None
    assessment: RiskAssessment
    recommendations: tuple[str, ...] = Field(default=())
    producers: tuple[ProducerReport, ...] = Field(default=())

    model_config = {"frozen": True}

    def summary(self) -> dict[str, Any]:
        """Compact dict for listings and observability endpoints."""
        return {
            "session_id": str(self.session_id),
            "visitor_id": self.visitor_id,
            "address": self.address,
            "score": self.assessment.score,
            "tier": self.assessment.tier.value,
            "produced_at": self.assessment.produced_at.isoformat(),
        }

    def to_payload(self) -> dict[str, Any]:
        """Full JSON-ready shape used by the API and the live feed."""
        return {
            "session_id": str(self.session_id),
            "visitor_id": self.visitor_id,
            "address": self.address,
            "assessment": self.assessment.export(),
            "recommendations": list(self.recommendations),
            "producers": [
                {"kind": p.kind.value, "status": p.status, "detail": p.detail}
                for p in self.producers
            ],
        }
