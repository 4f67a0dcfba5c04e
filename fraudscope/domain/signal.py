"""Signal contracts — the typed reports each producer hands to the engine.

A Signal is a *claim with uncertainty* about one visiting session, made by
one semi-trusted producer.  Every model here is frozen after creation.

Producers are not contractually perfect, so numeric fields are clamped
into range instead of rejected: a confidence of 1.3 becomes 1.0, a
negative event count becomes 0.  Tag fields are the exception: they are
validated against the closed catalogs in ``domain.enums`` and an unknown
label is a validation error.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from fraudscope.domain.enums import AnomalyTag, ThreatTag
from fraudscope.foundation.clock import utc_now


# ── Normalisation helpers ────────────────────────────────────────────────────

def clamp_unit(value: Any) -> float:
    """Coerce *value* to a float in [0, 1]; NaN and infinities become 0."""
    number = float(value if value is not None else 0.0)
    if not math.isfinite(number):
        return 0.0
    return max(0.0, min(number, 1.0))


def clamp_count(value: Any) -> int:
    """Coerce *value* to a non-negative integer."""
    if value is None:
        return 0
    number = float(value)
    if not math.isfinite(number):
        return 0
    return max(0, int(number))


def clamp_rate(value: Any) -> float:
    """Coerce *value* to a finite, non-negative float."""
    number = float(value if value is not None else 0.0)
    if not math.isfinite(number):
        return 0.0
    return max(0.0, number)


# Long enough for a scoped IPv6 literal with a verbose zone suffix.
MAX_ADDRESS_LENGTH = 256


def _ensure_utc(v: datetime) -> datetime:
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v


# ── Device identity ──────────────────────────────────────────────────────────

class DeviceSignal(BaseModel):
    """Stable device identity reported by the fingerprinting producer."""

    visitor_id: str = Field(
        ...,
        min_length=1,
        max_length=256,
        description="Opaque identifier expected to be stable across visits",
    )
    confidence: float = Field(
        ...,
        description="Producer's self-reported certainty in the identifier (0–1)",
    )
    component_count: int = Field(default=0, description="Number of fingerprint components used")
    observed_at: datetime = Field(default_factory=utc_now)

    model_config = {"frozen": True}

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, v: Any) -> float:
        return clamp_unit(v)

    @field_validator("component_count", mode="before")
    @classmethod
    def _clamp_components(cls, v: Any) -> int:
        return clamp_count(v)

    @field_validator("observed_at")
    @classmethod
    def _observed_at_utc(cls, v: datetime) -> datetime:
        return _ensure_utc(v)


# ── Privacy mode ─────────────────────────────────────────────────────────────

class PrivacyModeSignal(BaseModel):
    """Outcome of the private-browsing detection battery."""

    detected: bool
    confidence: float = Field(..., description="Share of tests that indicated private mode (0–1)")
    tests_run: int = Field(default=0, description="Number of detection tests that completed")
    positive_tests: int = Field(default=0, description="Tests that indicated private mode")

    model_config = {"frozen": True}

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, v: Any) -> float:
        return clamp_unit(v)

    @field_validator("tests_run", mode="before")
    @classmethod
    def _clamp_tests_run(cls, v: Any) -> int:
        return clamp_count(v)

    @field_validator("positive_tests", mode="before")
    @classmethod
    def _clamp_positive_tests(cls, v: Any, info: ValidationInfo) -> int:
        tests_run = info.data.get("tests_run", 0)
        return min(clamp_count(v), tests_run)


# ── Network reputation ───────────────────────────────────────────────────────

class NetworkSignal(BaseModel):
    """Reputation of the network address the session arrived from."""

    address: Optional[str] = Field(default=None, max_length=MAX_ADDRESS_LENGTH)
    is_anonymizing_proxy: bool = Field(default=False, description="Commercial VPN exit")
    is_anonymity_network: bool = Field(default=False, description="Tor-class anonymity network")
    is_open_proxy: bool = Field(default=False)
    reputation_score: float = Field(default=0.0, description="Producer-native risk score (0–100)")
    threat_tags: frozenset[ThreatTag] = Field(default_factory=frozenset)

    model_config = {"frozen": True}

    @field_validator("reputation_score", mode="before")
    @classmethod
    def _clamp_reputation(cls, v: Any) -> float:
        return min(clamp_rate(v), 100.0)

    @field_validator("threat_tags", mode="before")
    @classmethod
    def _parse_threat_tags(cls, v: Any) -> frozenset[ThreatTag]:
        if v is None:
            return frozenset()
        return frozenset(
            tag if isinstance(tag, ThreatTag) else ThreatTag.parse(tag) for tag in v
        )


# ── Behavior ─────────────────────────────────────────────────────────────────

class BehaviorSignal(BaseModel):
    """Interaction counters and anomalies gathered while the page was open."""

    pointer_event_count: int = 0
    key_event_count: int = 0
    scroll_event_count: int = 0
    session_duration_ms: int = 0
    interactions_per_minute: float = 0.0
    anomaly_tags: frozenset[AnomalyTag] = Field(default_factory=frozenset)

    model_config = {"frozen": True}

    @field_validator(
        "pointer_event_count",
        "key_event_count",
        "scroll_event_count",
        "session_duration_ms",
        mode="before",
    )
    @classmethod
    def _clamp_counts(cls, v: Any) -> int:
        return clamp_count(v)

    @field_validator("interactions_per_minute", mode="before")
    @classmethod
    def _clamp_rate(cls, v: Any) -> float:
        return clamp_rate(v)

    @field_validator("anomaly_tags", mode="before")
    @classmethod
    def _parse_anomaly_tags(cls, v: Any) -> frozenset[AnomalyTag]:
        if v is None:
            return frozenset()
        return frozenset(
            tag if isinstance(tag, AnomalyTag) else AnomalyTag.parse(tag) for tag in v
        )

    @property
    def total_interactions(self) -> int:
        return self.pointer_event_count + self.key_event_count + self.scroll_event_count


# ── Environment ──────────────────────────────────────────────────────────────

class EnvironmentSignal(BaseModel):
    """Browser environment facts: user agent, screen, locale."""

    user_agent: str = Field(default="", max_length=1024)
    screen_resolution: str = Field(default="", max_length=32)
    timezone: str = Field(default="", max_length=64)
    language: str = Field(default="", max_length=35)

    model_config = {"frozen": True}

    @field_validator("user_agent", "screen_resolution", "timezone", "language", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> str:
        return str(v).strip() if v is not None else ""


# ── History ──────────────────────────────────────────────────────────────────

class HistoryCounters(BaseModel):
    """Read-only snapshot of how often this device and address were seen."""

    device_occurrence_count: int = 0
    address_occurrence_count: int = 0

    model_config = {"frozen": True}

    @field_validator("device_occurrence_count", "address_occurrence_count", mode="before")
    @classmethod
    def _clamp_counts(cls, v: Any) -> int:
        return clamp_count(v)
