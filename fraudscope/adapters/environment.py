"""EnvironmentAdapter — translates browser environment facts."""

from __future__ import annotations

from typing import Any

from fraudscope.adapters.base import SignalAdapter
from fraudscope.domain.enums import SignalKind
from fraudscope.domain.signal import EnvironmentSignal


class EnvironmentAdapter(SignalAdapter):
    """Maps ``userAgent`` / ``screenResolution`` / ``timezone`` / ``language``."""

    @property
    def kind(self) -> SignalKind:
        return SignalKind.ENVIRONMENT

    def adapt(self, raw: dict[str, Any]) -> EnvironmentSignal:
        return EnvironmentSignal.model_validate({
            "user_agent": raw.get("userAgent"),
            "screen_resolution": raw.get("screenResolution"),
            "timezone": raw.get("timezone"),
            "language": raw.get("language"),
        })
