"""RiskAssessment — the terminal, self-contained output of the risk engine.

An assessment keeps no reference to the signals it was derived from, so it
can be serialized, persisted and handed to an access-control decision
point on its own.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from fraudscope.domain.enums import RiskFactor, RiskTier


class RiskAssessment(BaseModel):
    """Immutable score, tier and audit trail for one analyzed session."""

    score: int = Field(..., ge=0, le=100, description="Composite risk score")
    tier: RiskTier
    contributing_factors: tuple[RiskFactor, ...] = Field(
        default=(),
        description="Rules that fired, in the order they were applied",
    )
    produced_at: datetime

    model_config = {"frozen": True}

    def export(self) -> dict[str, Any]:
        """Shape consumed by downstream audit and access-control systems."""
        return {
            "score": self.score,
            "tier": self.tier.value,
            "contributing_factors": [f.value for f in self.contributing_factors],
            "produced_at": self.produced_at.isoformat(),
        }
