"""In-memory occurrence counters for device identifiers and addresses.

Design notes:
    - An asyncio.Lock guards all mutations so concurrent requests never
      corrupt counts.
    - Reads are plain lookups with no transactional guarantee.  A counter
      that is one increment behind is acceptable.
    - The store never scores anything.  It hands out HistoryCounters
      snapshots; the risk engine consumes them.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fraudscope.domain.signal import HistoryCounters

logger = logging.getLogger(__name__)


class HistoryStore:
    """Async-safe key → count map for devices and network addresses."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._devices: dict[str, int] = {}
        self._addresses: dict[str, int] = {}

    # ── Reads ────────────────────────────────────────────────────────────

    async def lookup_device(self, device_id: str) -> int:
        """Times *device_id* was recorded; 0 if unknown."""
        async with self._lock:
            return self._devices.get(device_id, 0)

    async def lookup_address(self, address: str) -> int:
        """Times *address* was recorded; 0 if unknown."""
        async with self._lock:
            return self._addresses.get(address, 0)

    async def snapshot(self, device_id: str, address: Optional[str]) -> HistoryCounters:
        """Read both counters at once.  A missing address reads as 0."""
        async with self._lock:
            return HistoryCounters(
                device_occurrence_count=self._devices.get(device_id, 0),
                address_occurrence_count=self._addresses.get(address, 0) if address else 0,
            )

    # ── Writes ───────────────────────────────────────────────────────────

    async def record(self, device_id: Optional[str], address: Optional[str] = None) -> None:
        """Count one more sighting of *device_id* and *address*, skipping either if None."""
        async with self._lock:
            if device_id:
                self._devices[device_id] = self._devices.get(device_id, 0) + 1
            if address:
                self._addresses[address] = self._addresses.get(address, 0) + 1
        logger.debug("Recorded sighting of device %s (address=%s)", device_id, address)

    async def clear(self) -> None:
        async with self._lock:
            self._devices.clear()
            self._addresses.clear()
        logger.info("Cleared device and address history")

    async def size(self) -> dict[str, int]:
        async with self._lock:
            return {"devices": len(self._devices), "addresses": len(self._addresses)}
