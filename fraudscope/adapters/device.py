"""DeviceFingerprintAdapter — translates browser fingerprint reports.

Expected raw format:
{
    "visitorId": "a1b2c3d4e5f6",
    "confidence": 0.94,
    "components": {"canvas": {...}, "fonts": {...}},
    "timestamp": 1760880000000
}
"""

from __future__ import annotations

from typing import Any

from fraudscope.adapters.base import SignalAdapter
from fraudscope.domain.enums import SignalKind
from fraudscope.domain.signal import DeviceSignal
from fraudscope.foundation.clock import from_epoch_ms, utc_now


class DeviceFingerprintAdapter(SignalAdapter):
    """Maps fingerprint reports to DeviceSignal."""

    @property
    def kind(self) -> SignalKind:
        return SignalKind.DEVICE

    def adapt(self, raw: dict[str, Any]) -> DeviceSignal:
        visitor_id = raw.get("visitorId")
        if not visitor_id:
            raise ValueError("device payload missing 'visitorId'")

        confidence = raw.get("confidence")
        if confidence is None:
            raise ValueError("device payload missing 'confidence'")
        # FingerprintJS nests the score: {"confidence": {"score": 0.5}}
        if isinstance(confidence, dict):
            confidence = confidence.get("score", 0.0)

        components = raw.get("components")
        if isinstance(components, (dict, list, tuple)):
            component_count = len(components)
        else:
            component_count = components or 0

        timestamp = raw.get("timestamp")
        if isinstance(timestamp, (int, float)):
            observed_at = from_epoch_ms(timestamp)
        else:
            observed_at = timestamp or utc_now()

        return DeviceSignal.model_validate({
            "visitor_id": str(visitor_id),
            "confidence": confidence,
            "component_count": component_count,
            "observed_at": observed_at,
        })
