"""
Unit tests for the collector health writer module.

Tests verify:
- HealthWriter.record_cycle() writes health.json with last_cycle_ts.
- The cycle counter and latency are updated on each call.
- Health file always contains all three fields.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-009)

TODO:
- None
"""

from __future__ import annotations

import json
from pathlib import Path

from axp_edge.src.health import HealthWriter


class TestRecordCycleWritesHealthFile:
    """record_cycle() creates/updates the health JSON file."""

    def test_record_cycle_writes_health_file(self, tmp_path: Path) -> None:
        """Calling record_cycle() creates health.json with last_cycle_ts set."""
        health_path = tmp_path / "health.json"
        writer = HealthWriter(health_path)

        writer.record_cycle(1234)

        assert health_path.exists()
        data = json.loads(health_path.read_text())
        assert isinstance(data["last_cycle_ts"], str)
        # Should be a valid ISO timestamp
        assert "T" in data["last_cycle_ts"]
        assert data["cycles"] == 1
        assert data["last_latency_us"] == 1234

    def test_counter_and_latency_update(self, tmp_path: Path) -> None:
        health_path = tmp_path / "health.json"
        writer = HealthWriter(health_path)

        writer.record_cycle(100)
        writer.record_cycle(250)
        writer.record_cycle(90)

        data = json.loads(health_path.read_text())
        assert data["cycles"] == 3
        assert data["last_latency_us"] == 90

    def test_health_file_has_all_fields(self, tmp_path: Path) -> None:
        health_path = tmp_path / "health.json"
        HealthWriter(health_path).record_cycle(0)

        data = json.loads(health_path.read_text())
        assert set(data) == {"last_cycle_ts", "cycles", "last_latency_us"}

    def test_accepts_string_path(self, tmp_path: Path) -> None:
        health_path = tmp_path / "health.json"
        writer = HealthWriter(str(health_path))
        writer.record_cycle(5)
        assert writer.path == health_path
        assert health_path.exists()

    def test_nothing_written_before_first_cycle(self, tmp_path: Path) -> None:
        health_path = tmp_path / "health.json"
        HealthWriter(health_path)
        assert not health_path.exists()
