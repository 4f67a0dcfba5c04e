"""Controlled enumerations for the fraudscope domain.

Every categorical field in the domain MUST reference an enum defined here.
Free-form strings are not acceptable for tags or factor labels: a typo in
an open-ended string would silently suppress a penalty.
"""

from __future__ import annotations

from enum import Enum


class SignalKind(str, Enum):
    """The producer a signal report comes from."""

    DEVICE = "device"
    PRIVACY = "privacy"
    NETWORK = "network"
    BEHAVIOR = "behavior"
    ENVIRONMENT = "environment"


class RiskTier(str, Enum):
    """Discrete risk category derived from the numeric score."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class ThreatTag(str, Enum):
    """Labels a network-reputation producer may attach to an address."""

    HOSTING_PROVIDER = "hosting-provider"
    KNOWN_VPN = "known-vpn"
    BLACKLISTED = "blacklisted"
    HIGH_RISK = "high-risk"
    # Informational only, no points attached.
    PROXY = "proxy"
    VPN = "vpn"
    TOR = "tor"
    PRIVATE_IP = "private-ip"

    @classmethod
    def parse(cls, value: str) -> "ThreatTag":
        """Resolve a producer-supplied label, raising ValueError if unknown."""
        return cls(value.strip().lower())


class AnomalyTag(str, Enum):
    """Interaction anomalies a behavior producer may report."""

    INHUMAN_MOUSE_SPEED = "inhuman-mouse-speed"
    INHUMAN_TYPING_SPEED = "inhuman-typing-speed"
    TIMING_REGULARITY = "consistent-keystroke-timing"
    COLLINEAR_PATH = "straight-mouse-lines"
    REPETITIVE_PATH = "repetitive-mouse-pattern"

    @classmethod
    def parse(cls, value: str) -> "AnomalyTag":
        """Resolve a canonical label or a known producer alias.

        Raises:
            ValueError: If *value* is not in the catalog.
        """
        key = value.strip().lower()
        return _ANOMALY_ALIASES.get(key) or cls(key)


_ANOMALY_ALIASES: dict[str, AnomalyTag] = {
    "mouse-speed": AnomalyTag.INHUMAN_MOUSE_SPEED,
    "typing-speed": AnomalyTag.INHUMAN_TYPING_SPEED,
    "timing-regularity": AnomalyTag.TIMING_REGULARITY,
    "constant-keystroke-interval": AnomalyTag.TIMING_REGULARITY,
    "collinear-path": AnomalyTag.COLLINEAR_PATH,
    "collinear-pointer-path": AnomalyTag.COLLINEAR_PATH,
    "repetitive-pointer-path": AnomalyTag.REPETITIVE_PATH,
}


class RiskFactor(str, Enum):
    """Audit labels recording which scoring rule fired."""

    # Device identity
    VERY_LOW_FINGERPRINT_CONFIDENCE = "very-low-fingerprint-confidence"
    LOW_FINGERPRINT_CONFIDENCE = "low-fingerprint-confidence"
    MEDIUM_FINGERPRINT_CONFIDENCE = "medium-fingerprint-confidence"

    # Privacy mode
    CONFIRMED_INCOGNITO = "confirmed-incognito"
    LIKELY_INCOGNITO = "likely-incognito"
    POSSIBLE_INCOGNITO = "possible-incognito"

    # Network
    NETWORK_REPUTATION = "network-reputation"
    VPN_DETECTED = "vpn-detected"
    TOR_DETECTED = "tor-detected"
    PROXY_DETECTED = "proxy-detected"
    HOSTING_PROVIDER = "hosting-provider"
    KNOWN_VPN_SERVICE = "known-vpn-service"
    BLACKLISTED_IP = "blacklisted-ip"
    HIGH_RISK_IP = "high-risk-ip"

    # Behavior
    BEHAVIOR_ANOMALIES = "behavior-anomalies"
    BOT_LIKE_MOUSE_MOVEMENT = "bot-like-mouse-movement"
    BOT_LIKE_TYPING = "bot-like-typing"
    AUTOMATED_INPUT = "automated-input"
    SCRIPTED_MOUSE_MOVEMENT = "scripted-mouse-movement"
    SUPERHUMAN_INTERACTION_SPEED = "superhuman-interaction-speed"
    VERY_FAST_INTERACTIONS = "very-fast-interactions"
    RAPID_FIRE_INTERACTIONS = "rapid-fire-interactions"
    FAST_INTERACTION_BURST = "fast-interaction-burst"
    MINIMAL_INTERACTION = "minimal-interaction"

    # History
    FREQUENT_DEVICE_REUSE = "frequent-device-reuse"
    REPEATED_DEVICE_USAGE = "repeated-device-usage"
    IP_ABUSE_PATTERN = "ip-abuse-pattern"
    FREQUENT_IP_USAGE = "frequent-ip-usage"

    # Environment
    HEADLESS_BROWSER = "headless-browser"
    AUTOMATION_TOOL = "automation-tool"
    BOT_USER_AGENT = "bot-user-agent"
    OUTDATED_BROWSER = "outdated-browser"
    INVALID_SCREEN_RESOLUTION = "invalid-screen-resolution"
    SUSPICIOUS_TIMEZONE = "suspicious-timezone"
    DEFAULT_LANGUAGE = "default-language"
