"""Tests for producer adapters and the adapter registry.

Tests field mapping, tag filtering, derived values, payload rejection,
and registry stats.
"""

from __future__ import annotations

import pytest

from fraudscope.adapters.behavior import BehaviorAdapter
from fraudscope.adapters.device import DeviceFingerprintAdapter
from fraudscope.adapters.environment import EnvironmentAdapter
from fraudscope.adapters.network import NetworkReputationAdapter
from fraudscope.adapters.privacy import PrivacyModeAdapter
from fraudscope.adapters.registry import (
    AdaptationError,
    AdapterRegistry,
    NoAdapterFoundError,
)
from fraudscope.domain.enums import AnomalyTag, SignalKind, ThreatTag
from fraudscope.domain.signal import DeviceSignal, NetworkSignal


# ── Realistic Raw Payloads ───────────────────────────────────────────────────


def _device_payload(**overrides) -> dict:
    base = {
        "visitorId": "3f9a1c0b7e2d",
        "confidence": 0.94,
        "components": {"canvas": {"value": "x"}, "fonts": {"value": []}, "audio": {"value": 35.7}},
        "timestamp": 1760880000000,
    }
    base.update(overrides)
    return base


def _network_payload(**overrides) -> dict:
    base = {
        "ip": "203.0.113.7",
        "country": "Netherlands",
        "isp": "Example Hosting BV",
        "isVPN": True,
        "isTor": False,
        "isProxy": False,
        "riskScore": 66,
        "threatTypes": ["vpn", "hosting-provider"],
    }
    base.update(overrides)
    return base


def _behavior_payload(**overrides) -> dict:
    base = {
        "mouseMovements": 412,
        "keystrokes": 37,
        "scrollEvents": 12,
        "timeOnPage": 48000,
        "interactionSpeed": 576.25,
        "suspiciousPatterns": ["straight-mouse-lines"],
    }
    base.update(overrides)
    return base


class TestDeviceAdapter:
    def test_maps_fields(self) -> None:
        signal = DeviceFingerprintAdapter().adapt(_device_payload())
        assert signal.visitor_id == "3f9a1c0b7e2d"
        assert signal.confidence == 0.94
        assert signal.component_count == 3
        assert signal.observed_at.year == 2025

    def test_nested_confidence_score(self) -> None:
        signal = DeviceFingerprintAdapter().adapt(_device_payload(confidence={"score": 0.4}))
        assert signal.confidence == 0.4

    def test_missing_visitor_id_rejected(self) -> None:
        with pytest.raises(ValueError, match="visitorId"):
            DeviceFingerprintAdapter().adapt(_device_payload(visitorId=""))

    def test_missing_confidence_rejected(self) -> None:
        payload = _device_payload()
        del payload["confidence"]
        with pytest.raises(ValueError, match="confidence"):
            DeviceFingerprintAdapter().adapt(payload)

    def test_payload_not_mutated(self) -> None:
        payload = _device_payload()
        snapshot = dict(payload)
        DeviceFingerprintAdapter().adapt(payload)
        assert payload == snapshot


class TestPrivacyAdapter:
    def test_majority_of_tests_detects(self) -> None:
        tests = [
            {"method": "quota-api", "isIncognito": True},
            {"method": "indexeddb", "isIncognito": True},
            {"method": "local-storage", "isIncognito": False},
            {"method": "webrtc", "isIncognito": True},
        ]
        signal = PrivacyModeAdapter().adapt({"tests": tests})
        assert signal.detected is True
        assert signal.confidence == 0.75
        assert signal.tests_run == 4
        assert signal.positive_tests == 3

    def test_half_is_not_detected(self) -> None:
        tests = [{"isIncognito": True}, {"isIncognito": False}]
        signal = PrivacyModeAdapter().adapt({"tests": tests})
        assert signal.detected is False
        assert signal.confidence == 0.5

    def test_empty_test_list(self) -> None:
        signal = PrivacyModeAdapter().adapt({"tests": []})
        assert signal.detected is False
        assert signal.confidence == 0.0

    def test_summary_format(self) -> None:
        signal = PrivacyModeAdapter().adapt({
            "isIncognito": True,
            "confidence": 0.71,
            "details": {"totalTests": 7, "incognitoCount": 5},
        })
        assert signal.detected is True
        assert signal.tests_run == 7
        assert signal.positive_tests == 5

    def test_unusable_payload_rejected(self) -> None:
        with pytest.raises(ValueError):
            PrivacyModeAdapter().adapt({"method": "error"})

    def test_string_verdict_parsed_not_truthy(self) -> None:
        signal = PrivacyModeAdapter().adapt({"isIncognito": "false", "confidence": 0.9})
        assert signal.detected is False
        assert PrivacyModeAdapter().adapt({"isIncognito": "true", "confidence": 0.9}).detected is True

    def test_string_test_results_parsed(self) -> None:
        tests = [{"isIncognito": "false"}, {"isIncognito": "false"}, {"isIncognito": "true"}]
        signal = PrivacyModeAdapter().adapt({"tests": tests})
        assert signal.positive_tests == 1
        assert signal.detected is False


class TestNetworkAdapter:
    def test_maps_flags_and_tags(self) -> None:
        signal = NetworkReputationAdapter().adapt(_network_payload())
        assert isinstance(signal, NetworkSignal)
        assert signal.address == "203.0.113.7"
        assert signal.is_anonymizing_proxy is True
        assert signal.is_anonymity_network is False
        assert signal.reputation_score == 66
        assert signal.threat_tags == frozenset({ThreatTag.VPN, ThreatTag.HOSTING_PROVIDER})

    def test_unknown_tags_dropped(self) -> None:
        signal = NetworkReputationAdapter().adapt(
            _network_payload(threatTypes=["blacklisted", "spaceship"])
        )
        assert signal.threat_tags == frozenset({ThreatTag.BLACKLISTED})

    def test_missing_risk_score_rejected(self) -> None:
        payload = _network_payload()
        del payload["riskScore"]
        with pytest.raises(ValueError):
            NetworkReputationAdapter().adapt(payload)

    def test_string_flags_parsed_not_truthy(self) -> None:
        signal = NetworkReputationAdapter().adapt(
            _network_payload(isVPN="false", isTor="true", isProxy="false", riskScore=0, threatTypes=[])
        )
        assert signal.is_anonymizing_proxy is False
        assert signal.is_anonymity_network is True
        assert signal.is_open_proxy is False

    def test_unparseable_flag_rejected(self) -> None:
        with pytest.raises(ValueError):
            NetworkReputationAdapter().adapt(_network_payload(isTor="sometimes"))

    def test_long_address_truncated_not_rejected(self) -> None:
        address = "fe80::1ff:fe23:4567:890a%" + "x" * 300
        signal = NetworkReputationAdapter().adapt(_network_payload(ip=address, isTor=True))
        assert signal.is_anonymity_network is True
        assert signal.address == address[:256]


class TestBehaviorAdapter:
    def test_maps_counters(self) -> None:
        signal = BehaviorAdapter().adapt(_behavior_payload())
        assert signal.total_interactions == 461
        assert signal.session_duration_ms == 48000
        assert signal.anomaly_tags == frozenset({AnomalyTag.COLLINEAR_PATH})

    def test_speed_derived_when_absent(self) -> None:
        payload = _behavior_payload(mouseMovements=90, keystrokes=20, scrollEvents=10, timeOnPage=30000)
        del payload["interactionSpeed"]
        signal = BehaviorAdapter().adapt(payload)
        assert signal.interactions_per_minute == 240.0

    def test_speed_zero_for_zero_duration(self) -> None:
        payload = _behavior_payload(timeOnPage=0)
        del payload["interactionSpeed"]
        assert BehaviorAdapter().adapt(payload).interactions_per_minute == 0.0

    def test_unknown_patterns_dropped(self) -> None:
        signal = BehaviorAdapter().adapt(
            _behavior_payload(suspiciousPatterns=["inhuman-typing-speed", "moon-walk"])
        )
        assert signal.anomaly_tags == frozenset({AnomalyTag.INHUMAN_TYPING_SPEED})

    def test_empty_payload_gives_zero_signal(self) -> None:
        signal = BehaviorAdapter().adapt({})
        assert signal.total_interactions == 0
        assert signal.anomaly_tags == frozenset()


class TestEnvironmentAdapter:
    def test_maps_fields(self) -> None:
        signal = EnvironmentAdapter().adapt({
            "userAgent": "Mozilla/5.0",
            "screenResolution": "1920x1080",
            "timezone": "Europe/Berlin",
            "language": "de-DE",
        })
        assert signal.timezone == "Europe/Berlin"
        assert signal.screen_resolution == "1920x1080"


class TestAdapterRegistry:
    def test_defaults_cover_every_kind(self) -> None:
        registry = AdapterRegistry.with_defaults()
        assert set(registry.kinds) == set(SignalKind)

    def test_adapt_routes_by_kind(self) -> None:
        registry = AdapterRegistry.with_defaults()
        signal = registry.adapt(SignalKind.DEVICE, _device_payload())
        assert isinstance(signal, DeviceSignal)

    def test_unregistered_kind_raises(self) -> None:
        registry = AdapterRegistry()
        with pytest.raises(NoAdapterFoundError):
            registry.adapt(SignalKind.DEVICE, _device_payload())

    def test_adapter_failure_wrapped(self) -> None:
        registry = AdapterRegistry.with_defaults()
        with pytest.raises(AdaptationError) as exc_info:
            registry.adapt(SignalKind.DEVICE, {"confidence": 0.5})
        assert exc_info.value.kind == SignalKind.DEVICE

    def test_stats_track_accepts_and_rejects(self) -> None:
        registry = AdapterRegistry.with_defaults()
        registry.adapt(SignalKind.NETWORK, _network_payload())
        registry.adapt(SignalKind.NETWORK, _network_payload())
        with pytest.raises(AdaptationError):
            registry.adapt(SignalKind.NETWORK, {"ip": "192.0.2.1"})
        assert registry.total_accepted == 2
        assert registry.total_rejected == 1
        network_stats = next(s for s in registry.stats if s["kind"] == "network")
        assert network_stats == {"kind": "network", "accepted_count": 2, "rejected_count": 1}
