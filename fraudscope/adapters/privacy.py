"""PrivacyModeAdapter — translates private-browsing detection reports.

Two raw formats are accepted.  A per-test breakdown:
{
    "tests": [
        {"method": "quota-api", "isIncognito": true},
        {"method": "indexeddb", "isIncognito": false}
    ]
}
or an already-summarised verdict:
{"isIncognito": true, "confidence": 0.71, "details": {"totalTests": 7, "incognitoCount": 5}}

With a breakdown, confidence is the share of positive tests and the
session counts as detected when more than half of the tests agree.
"""

from __future__ import annotations

from typing import Any

from fraudscope.adapters.base import SignalAdapter, as_flag
from fraudscope.domain.enums import SignalKind
from fraudscope.domain.signal import PrivacyModeSignal

MAJORITY = 0.5


class PrivacyModeAdapter(SignalAdapter):
    """Maps incognito detection reports to PrivacyModeSignal."""

    @property
    def kind(self) -> SignalKind:
        return SignalKind.PRIVACY

    def adapt(self, raw: dict[str, Any]) -> PrivacyModeSignal:
        tests = raw.get("tests")
        if isinstance(tests, list):
            return self._from_tests(tests)

        if "isIncognito" not in raw or "confidence" not in raw:
            raise ValueError("privacy payload needs 'tests' or 'isIncognito' + 'confidence'")

        details = raw.get("details") or {}
        return PrivacyModeSignal.model_validate({
            "detected": as_flag(raw["isIncognito"]),
            "confidence": raw["confidence"],
            "tests_run": details.get("totalTests", 0),
            "positive_tests": details.get("incognitoCount", 0),
        })

    @staticmethod
    def _from_tests(tests: list[Any]) -> PrivacyModeSignal:
        results = [t for t in tests if isinstance(t, dict) and "isIncognito" in t]
        positives = sum(1 for t in results if as_flag(t["isIncognito"]))
        confidence = positives / len(results) if results else 0.0
        return PrivacyModeSignal(
            detected=confidence > MAJORITY,
            confidence=confidence,
            tests_run=len(results),
            positive_tests=positives,
        )
