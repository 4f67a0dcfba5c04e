"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings

from fraudscope.domain.enums import SignalKind


class Settings(BaseSettings):
    app_name: str = "fraudscope"
    debug: bool = False
    log_level: str = "INFO"

    # Per-producer timeouts (seconds)
    device_timeout_seconds: float = 5.0
    privacy_timeout_seconds: float = 5.0
    network_timeout_seconds: float = 8.0
    behavior_timeout_seconds: float = 5.0
    environment_timeout_seconds: float = 5.0

    # Session log
    session_history_limit: int = 50

    # Tier lower bounds (inclusive)
    tier_medium_min: int = 35
    tier_high_min: int = 65
    tier_critical_min: int = 85

    model_config = {"env_prefix": "FRAUDSCOPE_"}

    def producer_timeouts(self) -> dict[SignalKind, float]:
        return {
            SignalKind.DEVICE: self.device_timeout_seconds,
            SignalKind.PRIVACY: self.privacy_timeout_seconds,
            SignalKind.NETWORK: self.network_timeout_seconds,
            SignalKind.BEHAVIOR: self.behavior_timeout_seconds,
            SignalKind.ENVIRONMENT: self.environment_timeout_seconds,
        }


settings = Settings()
