"""Action advisor — static mitigation playbook per risk tier."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from fraudscope.domain.enums import RiskTier

RECOMMENDATIONS: Mapping[RiskTier, tuple[str, ...]] = MappingProxyType({
    RiskTier.CRITICAL: (
        "Block access immediately",
        "Require phone verification",
        "Send security alert to admins",
        "Implement temporary IP ban",
    ),
    RiskTier.HIGH: (
        "Require additional verification",
        "Request SMS verification",
        "Enable enhanced monitoring",
        "Rate limit API requests",
    ),
    RiskTier.MEDIUM: (
        "Monitor user behavior closely",
        "Track usage patterns",
        "Set up alerts for unusual activity",
        "Implement soft rate limiting",
    ),
    RiskTier.LOW: (
        "Allow normal access",
        "Continue standard monitoring",
    ),
})


def recommend(tier: RiskTier | str) -> tuple[str, ...]:
    """Return the ordered mitigation actions for *tier*.

    Raises:
        ValueError: If *tier* is not a known tier label.
    """
    if not isinstance(tier, RiskTier):
        tier = RiskTier(tier.strip().upper())
    return RECOMMENDATIONS[tier]
