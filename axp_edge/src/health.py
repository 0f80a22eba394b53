"""
Health file writer for the collector.

Writes a JSON health file at a configurable path with three fields:
- last_cycle_ts: ISO timestamp of the most recent completed cycle.
- cycles: Number of cycles completed since startup.
- last_latency_us: Sample-and-report latency of that cycle in microseconds.

The file is overwritten on every cycle, providing a simple liveness signal
that a watchdog or monitoring can inspect independently of netdata.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-009)

TODO:
- None
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path


class HealthWriter:
    """Writes collector health status to a JSON file.

    Args:
        path: Filesystem path for the health JSON file. Accepts str or Path.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._last_cycle_ts: str | None = None
        self._cycles: int = 0
        self._last_latency_us: int | None = None

    def record_cycle(self, latency_us: int) -> None:
        """Record a completed cycle and write health file.

        Args:
            latency_us: Time spent sampling and reporting, in microseconds.
        """
        self._last_cycle_ts = datetime.now(tz=UTC).isoformat()
        self._cycles += 1
        self._last_latency_us = latency_us
        self._write()

    def _write(self) -> None:
        """Write the health JSON file with current state."""
        data = {
            "last_cycle_ts": self._last_cycle_ts,
            "cycles": self._cycles,
            "last_latency_us": self._last_latency_us,
        }
        self.path.write_text(json.dumps(data))
