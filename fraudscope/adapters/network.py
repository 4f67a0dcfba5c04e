"""NetworkReputationAdapter — translates IP reputation reports.

Expected raw format:
{
    "ip": "203.0.113.7",
    "isVPN": false,
    "isTor": true,
    "isProxy": false,
    "riskScore": 80,
    "threatTypes": ["tor", "high-risk"]
}

Geolocation fields (country, city, isp) may be present and are ignored.
"""

from __future__ import annotations

from typing import Any

from fraudscope.adapters.base import SignalAdapter, as_flag, known_tags
from fraudscope.domain.enums import SignalKind, ThreatTag
from fraudscope.domain.signal import MAX_ADDRESS_LENGTH, NetworkSignal


class NetworkReputationAdapter(SignalAdapter):
    """Maps reputation reports to NetworkSignal."""

    @property
    def kind(self) -> SignalKind:
        return SignalKind.NETWORK

    def adapt(self, raw: dict[str, Any]) -> NetworkSignal:
        if "riskScore" not in raw:
            raise ValueError("network payload missing 'riskScore'")

        address = raw.get("ip") or None
        if address is not None:
            address = str(address).strip()[:MAX_ADDRESS_LENGTH] or None

        return NetworkSignal.model_validate({
            "address": address,
            "is_anonymizing_proxy": as_flag(raw.get("isVPN")),
            "is_anonymity_network": as_flag(raw.get("isTor")),
            "is_open_proxy": as_flag(raw.get("isProxy")),
            "reputation_score": raw["riskScore"],
            "threat_tags": known_tags(raw.get("threatTypes"), ThreatTag.parse, "threat"),
        })
