"""BehaviorAdapter — translates interaction tracker reports.

Expected raw format:
{
    "mouseMovements": 412,
    "keystrokes": 37,
    "scrollEvents": 12,
    "timeOnPage": 48000,
    "interactionSpeed": 576.25,
    "suspiciousPatterns": ["straight-mouse-lines"]
}
"""

from __future__ import annotations

from typing import Any

from fraudscope.adapters.base import SignalAdapter, known_tags
from fraudscope.domain.enums import AnomalyTag, SignalKind
from fraudscope.domain.signal import BehaviorSignal, clamp_count


class BehaviorAdapter(SignalAdapter):
    """Maps behavior tracker reports to BehaviorSignal."""

    @property
    def kind(self) -> SignalKind:
        return SignalKind.BEHAVIOR

    def adapt(self, raw: dict[str, Any]) -> BehaviorSignal:
        pointer = clamp_count(raw.get("mouseMovements"))
        keys = clamp_count(raw.get("keystrokes"))
        scrolls = clamp_count(raw.get("scrollEvents"))
        duration_ms = clamp_count(raw.get("timeOnPage"))

        speed = raw.get("interactionSpeed")
        if speed is None:
            # Same derivation the tracker uses: interactions per minute on page
            total = pointer + keys + scrolls
            speed = total / (duration_ms / 60000.0) if duration_ms > 0 else 0.0

        return BehaviorSignal.model_validate({
            "pointer_event_count": pointer,
            "key_event_count": keys,
            "scroll_event_count": scrolls,
            "session_duration_ms": duration_ms,
            "interactions_per_minute": speed,
            "anomaly_tags": known_tags(raw.get("suspiciousPatterns"), AnomalyTag.parse, "anomaly"),
        })
