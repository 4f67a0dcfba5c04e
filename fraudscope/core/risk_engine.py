"""RiskEngine — deterministic aggregation of session signals into a score.

Design principles:
    1. Pure function: accepts signals + a history snapshot, returns a
       RiskAssessment.
    2. No side effects, no state mutation, no I/O.  History counters are
       resolved by the caller; the engine never reads or writes a store.
    3. Partial information is the steady state.  A missing privacy or
       network signal contributes zero points instead of aborting.
    4. All points and thresholds are explicit and live in ScoringPolicy.

Additive point model (applied in this order):
    device confidence   first matching rung of  <0.3 / <0.5 / <0.7
    privacy mode        if detected: >0.8 / >0.5 / otherwise
    network             reputation * 0.4, each proxy flag, each threat tag
    behavior            12 per anomaly tag, plus a fixed extra per known tag
    interaction speed   first matching rung of  >2000 / >1000  per minute
    burst abuse         <3s with >100 interactions, else <5s with >50
    idle session        >30s with <5 interactions
    history             device >20 / >10, address >50 / >20
    environment         user agent, screen, timezone and language markers

    score = clamp(round_half_up(total), 0, 100)

Tier mapping uses inclusive lower bounds: 85 CRITICAL, 65 HIGH, 35 MEDIUM.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from fraudscope.domain.assessment import RiskAssessment
from fraudscope.domain.enums import AnomalyTag, RiskFactor, RiskTier, ThreatTag
from fraudscope.domain.signal import (
    BehaviorSignal,
    DeviceSignal,
    EnvironmentSignal,
    HistoryCounters,
    NetworkSignal,
    PrivacyModeSignal,
)
from fraudscope.foundation.clock import utc_now


# ── Policy tables ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Rung:
    """One step of a first-match-wins threshold ladder."""

    threshold: float
    points: float
    factor: RiskFactor


@dataclass(frozen=True)
class BurstRung:
    """Short session with too many interactions."""

    max_duration_ms: int
    min_interactions: int
    points: float
    factor: RiskFactor


@dataclass(frozen=True)
class TagPenalty:
    tag: str
    points: float
    factor: RiskFactor


@dataclass(frozen=True)
class MarkerPenalty:
    """Fires when any marker appears in the lower-cased user agent."""

    markers: tuple[str, ...]
    points: float
    factor: RiskFactor


@dataclass(frozen=True)
class ScoringPolicy:
    """Point values and thresholds for every scoring rule.

    Ladders are ordered most severe first; evaluation stops at the first
    rung that matches, so a session never collects two rungs of one ladder.
    """

    # Device confidence: fires when confidence < threshold
    device_confidence: tuple[Rung, ...] = (
        Rung(0.3, 40, RiskFactor.VERY_LOW_FINGERPRINT_CONFIDENCE),
        Rung(0.5, 25, RiskFactor.LOW_FINGERPRINT_CONFIDENCE),
        Rung(0.7, 10, RiskFactor.MEDIUM_FINGERPRINT_CONFIDENCE),
    )

    # Privacy mode: fires when confidence > threshold, fallback otherwise
    privacy_confidence: tuple[Rung, ...] = (
        Rung(0.8, 35, RiskFactor.CONFIRMED_INCOGNITO),
        Rung(0.5, 25, RiskFactor.LIKELY_INCOGNITO),
    )
    privacy_fallback_points: float = 15
    privacy_fallback_factor: RiskFactor = RiskFactor.POSSIBLE_INCOGNITO

    # Network
    reputation_weight: float = 0.4
    anonymizing_proxy_points: float = 30
    anonymity_network_points: float = 50
    open_proxy_points: float = 20
    threat_tags: tuple[TagPenalty, ...] = (
        TagPenalty(ThreatTag.HOSTING_PROVIDER.value, 15, RiskFactor.HOSTING_PROVIDER),
        TagPenalty(ThreatTag.KNOWN_VPN.value, 25, RiskFactor.KNOWN_VPN_SERVICE),
        TagPenalty(ThreatTag.BLACKLISTED.value, 40, RiskFactor.BLACKLISTED_IP),
        TagPenalty(ThreatTag.HIGH_RISK.value, 30, RiskFactor.HIGH_RISK_IP),
    )

    # Behavior: base points per tag, extras are cumulative with the base
    anomaly_base_points: float = 12
    anomaly_tags: tuple[TagPenalty, ...] = (
        TagPenalty(AnomalyTag.INHUMAN_MOUSE_SPEED.value, 20, RiskFactor.BOT_LIKE_MOUSE_MOVEMENT),
        TagPenalty(AnomalyTag.INHUMAN_TYPING_SPEED.value, 25, RiskFactor.BOT_LIKE_TYPING),
        TagPenalty(AnomalyTag.TIMING_REGULARITY.value, 30, RiskFactor.AUTOMATED_INPUT),
        TagPenalty(AnomalyTag.COLLINEAR_PATH.value, 15, RiskFactor.SCRIPTED_MOUSE_MOVEMENT),
    )

    # Interactions per minute: fires when rate > threshold
    interaction_speed: tuple[Rung, ...] = (
        Rung(2000, 25, RiskFactor.SUPERHUMAN_INTERACTION_SPEED),
        Rung(1000, 15, RiskFactor.VERY_FAST_INTERACTIONS),
    )

    burst: tuple[BurstRung, ...] = (
        BurstRung(3000, 100, 35, RiskFactor.RAPID_FIRE_INTERACTIONS),
        BurstRung(5000, 50, 20, RiskFactor.FAST_INTERACTION_BURST),
    )

    idle_min_duration_ms: int = 30000
    idle_max_interactions: int = 5
    idle_points: float = 20

    # History: fires when count > threshold
    device_history: tuple[Rung, ...] = (
        Rung(20, 25, RiskFactor.FREQUENT_DEVICE_REUSE),
        Rung(10, 15, RiskFactor.REPEATED_DEVICE_USAGE),
    )
    address_history: tuple[Rung, ...] = (
        Rung(50, 30, RiskFactor.IP_ABUSE_PATTERN),
        Rung(20, 20, RiskFactor.FREQUENT_IP_USAGE),
    )

    # Environment
    user_agent_markers: tuple[MarkerPenalty, ...] = (
        MarkerPenalty(("headless", "phantom", "selenium", "chromedriver"), 60, RiskFactor.HEADLESS_BROWSER),
        MarkerPenalty(("puppeteer", "playwright", "webdriver"), 55, RiskFactor.AUTOMATION_TOOL),
        MarkerPenalty(("bot", "crawler", "spider"), 40, RiskFactor.BOT_USER_AGENT),
        MarkerPenalty(("msie", "internet explorer"), 10, RiskFactor.OUTDATED_BROWSER),
    )
    invalid_resolutions: frozenset[str] = field(default_factory=lambda: frozenset({"0x0", "1x1"}))
    invalid_resolution_points: float = 45
    suspicious_timezones: frozenset[str] = field(default_factory=lambda: frozenset({"", "UTC"}))
    suspicious_timezone_points: float = 10
    default_languages: frozenset[str] = field(default_factory=lambda: frozenset({"", "en", "en-US"}))
    default_language_points: float = 2


@dataclass(frozen=True)
class TierThresholds:
    """Inclusive lower bounds of each tier above LOW."""

    medium: int = 35
    high: int = 65
    critical: int = 85

    def __post_init__(self) -> None:
        if not (0 < self.medium < self.high < self.critical <= 100):
            raise ValueError(
                "tier thresholds must satisfy 0 < medium < high < critical <= 100"
            )

    def tier_for(self, score: int) -> RiskTier:
        if score >= self.critical:
            return RiskTier.CRITICAL
        if score >= self.high:
            return RiskTier.HIGH
        if score >= self.medium:
            return RiskTier.MEDIUM
        return RiskTier.LOW


# ── Factor trail ─────────────────────────────────────────────────────────────

class _FactorTrail:
    """Insertion-ordered, duplicate-free record of fired rules."""

    __slots__ = ("_order", "_seen")

    def __init__(self) -> None:
        self._order: list[RiskFactor] = []
        self._seen: set[RiskFactor] = set()

    def add(self, factor: RiskFactor) -> None:
        if factor not in self._seen:
            self._seen.add(factor)
            self._order.append(factor)

    def freeze(self) -> tuple[RiskFactor, ...]:
        return tuple(self._order)


def _first_below(value: float, ladder: tuple[Rung, ...]) -> Rung | None:
    for rung in ladder:
        if value < rung.threshold:
            return rung
    return None


def _first_above(value: float, ladder: tuple[Rung, ...]) -> Rung | None:
    for rung in ladder:
        if value > rung.threshold:
            return rung
    return None


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ── Engine ───────────────────────────────────────────────────────────────────

class RiskEngine:
    """Deterministic risk scoring over one session's signals.

    This engine is stateless and safe to share between concurrent
    requests.  The only non-derived field of its output is
    ``produced_at``, taken from the injected clock.
    """

    def __init__(
        self,
        policy: ScoringPolicy | None = None,
        thresholds: TierThresholds | None = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._policy = policy or ScoringPolicy()
        self._thresholds = thresholds or TierThresholds()
        self._clock = clock

    @property
    def thresholds(self) -> TierThresholds:
        return self._thresholds

    # ── Public API ───────────────────────────────────────────────────────

    def assess(
        self,
        device: DeviceSignal,
        privacy: PrivacyModeSignal | None,
        network: NetworkSignal | None,
        behavior: BehaviorSignal,
        history: HistoryCounters | None,
        environment: EnvironmentSignal | None = None,
    ) -> RiskAssessment:
        """Score a session and map it to a tier.

        Never raises for validated signal models.  ``None`` for privacy,
        network, history or environment means the producer was unavailable
        and contributes nothing.
        """
        trail = _FactorTrail()
        score = 0.0

        score += self._device_points(device, trail)
        if privacy is not None:
            score += self._privacy_points(privacy, trail)
        if network is not None:
            score += self._network_points(network, trail)
        score += self._anomaly_points(behavior, trail)
        score += self._speed_points(behavior, trail)
        score += self._burst_points(behavior, trail)
        score += self._idle_points(behavior, trail)
        score += self._history_points(history or HistoryCounters(), network is not None, trail)
        if environment is not None:
            score += self._environment_points(environment, trail)

        final = max(0, min(100, round_half_up(score)))
        return RiskAssessment(
            score=final,
            tier=self._thresholds.tier_for(final),
            contributing_factors=trail.freeze(),
            produced_at=self._clock() if self._clock else utc_now(),
        )

    # ── Device & privacy ─────────────────────────────────────────────────

    def _device_points(self, device: DeviceSignal, trail: _FactorTrail) -> float:
        rung = _first_below(device.confidence, self._policy.device_confidence)
        if rung is None:
            return 0.0
        trail.add(rung.factor)
        return rung.points

    def _privacy_points(self, privacy: PrivacyModeSignal, trail: _FactorTrail) -> float:
        if not privacy.detected:
            return 0.0
        p = self._policy
        rung = _first_above(privacy.confidence, p.privacy_confidence)
        if rung is None:
            trail.add(p.privacy_fallback_factor)
            return p.privacy_fallback_points
        trail.add(rung.factor)
        return rung.points

    # ── Network ──────────────────────────────────────────────────────────

    def _network_points(self, network: NetworkSignal, trail: _FactorTrail) -> float:
        p = self._policy
        points = network.reputation_score * p.reputation_weight
        if points > 0:
            trail.add(RiskFactor.NETWORK_REPUTATION)

        if network.is_anonymizing_proxy:
            points += p.anonymizing_proxy_points
            trail.add(RiskFactor.VPN_DETECTED)
        if network.is_anonymity_network:
            points += p.anonymity_network_points
            trail.add(RiskFactor.TOR_DETECTED)
        if network.is_open_proxy:
            points += p.open_proxy_points
            trail.add(RiskFactor.PROXY_DETECTED)

        tags = {t.value for t in network.threat_tags}
        for penalty in p.threat_tags:
            if penalty.tag in tags:
                points += penalty.points
                trail.add(penalty.factor)
        return points

    # ── Behavior ─────────────────────────────────────────────────────────

    def _anomaly_points(self, behavior: BehaviorSignal, trail: _FactorTrail) -> float:
        p = self._policy
        if not behavior.anomaly_tags:
            return 0.0
        points = len(behavior.anomaly_tags) * p.anomaly_base_points
        trail.add(RiskFactor.BEHAVIOR_ANOMALIES)

        tags = {t.value for t in behavior.anomaly_tags}
        for penalty in p.anomaly_tags:
            if penalty.tag in tags:
                points += penalty.points
                trail.add(penalty.factor)
        return points

    def _speed_points(self, behavior: BehaviorSignal, trail: _FactorTrail) -> float:
        rung = _first_above(behavior.interactions_per_minute, self._policy.interaction_speed)
        if rung is None:
            return 0.0
        trail.add(rung.factor)
        return rung.points

    def _burst_points(self, behavior: BehaviorSignal, trail: _FactorTrail) -> float:
        total = behavior.total_interactions
        for rung in self._policy.burst:
            if behavior.session_duration_ms < rung.max_duration_ms and total > rung.min_interactions:
                trail.add(rung.factor)
                return rung.points
        return 0.0

    def _idle_points(self, behavior: BehaviorSignal, trail: _FactorTrail) -> float:
        p = self._policy
        if (
            behavior.session_duration_ms > p.idle_min_duration_ms
            and behavior.total_interactions < p.idle_max_interactions
        ):
            trail.add(RiskFactor.MINIMAL_INTERACTION)
            return p.idle_points
        return 0.0

    # ── History ──────────────────────────────────────────────────────────

    def _history_points(
        self,
        history: HistoryCounters,
        has_network: bool,
        trail: _FactorTrail,
    ) -> float:
        points = 0.0
        rung = _first_above(history.device_occurrence_count, self._policy.device_history)
        if rung is not None:
            trail.add(rung.factor)
            points += rung.points

        # Address counters only mean something when the address is known
        if has_network:
            rung = _first_above(history.address_occurrence_count, self._policy.address_history)
            if rung is not None:
                trail.add(rung.factor)
                points += rung.points
        return points

    # ── Environment ──────────────────────────────────────────────────────

    def _environment_points(self, env: EnvironmentSignal, trail: _FactorTrail) -> float:
        p = self._policy
        points = 0.0
        ua = env.user_agent.lower()
        for penalty in p.user_agent_markers:
            if any(marker in ua for marker in penalty.markers):
                points += penalty.points
                trail.add(penalty.factor)

        if env.screen_resolution in p.invalid_resolutions:
            points += p.invalid_resolution_points
            trail.add(RiskFactor.INVALID_SCREEN_RESOLUTION)
        if env.timezone in p.suspicious_timezones:
            points += p.suspicious_timezone_points
            trail.add(RiskFactor.SUSPICIOUS_TIMEZONE)
        if env.language in p.default_languages:
            points += p.default_language_points
            trail.add(RiskFactor.DEFAULT_LANGUAGE)
        return points
