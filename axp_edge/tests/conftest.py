"""
Shared test fixtures for collector tests.

Provides environment isolation for AxpSettings and a dictionary-backed
register channel that records every transfer, so sampler and ADC tests run
without I2C hardware.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-001)

TODO:
- None
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
from axp_edge.src.bus import BusError

# All AxpSettings environment variable names, used for cleanup.
_ALL_ENV_VARS = (
    "I2C_BUS",
    "PMIC_ADDRESS",
    "UPDATE_EVERY_S",
    "ADC_SETTLE_MS",
    "HEALTH_PATH",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: str) -> None:
    """Remove all collector env vars and isolate from .env files before each test.

    Changes working directory to tmp_path so no .env file is accidentally
    loaded by Pydantic BaseSettings.
    """
    for var in _ALL_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Iterator[None]:
    """Drop handlers installed by configure_logging() after each test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


class FakeChannel:
    """In-memory register channel.

    Unset registers read as 0.  ``reads`` and ``writes`` record every
    transfer in order.  Registers listed in ``fail_on`` raise BusError.
    """

    def __init__(self, registers: dict[int, int] | None = None) -> None:
        self.registers: dict[int, int] = dict(registers or {})
        self.reads: list[int] = []
        self.writes: list[tuple[int, int]] = []
        self.fail_on: set[int] = set()

    def read_register(self, register: int) -> int:
        if register in self.fail_on:
            raise BusError(f"Unable to read register {register:#04x}")
        self.reads.append(register)
        return self.registers.get(register, 0)

    def write_register(self, register: int, value: int) -> None:
        if register in self.fail_on:
            raise BusError(f"Unable to write register {register:#04x}")
        self.writes.append((register, value))
        self.registers[register] = value


@pytest.fixture()
def fake_channel() -> FakeChannel:
    """An empty fake channel: no battery, no ACIN, charging disabled."""
    return FakeChannel()


@pytest.fixture()
def full_channel() -> FakeChannel:
    """A fake channel with battery and ACIN present and charging enabled.

    Register values and the quantities they decode to:
        0x01 power_status 0xA0  -> battery present, ACIN present
        0x33 charge_ctl   0x9C  -> enabled, 1500 mA limit, 225 mA termination
        0x5E/0x5F 0x50/0x00     -> 1280 * 0.18 - 228.46 = 1.94 internal temp
        0x7A/0x7B 0x10/0x04     -> 260 / 2 = 130.0 mA charge
        0x7C/0x7D 0x02/0x21     -> (2 << 5) | 1 = 65 mA discharge
        0xB9      0xD5          -> 0x55 = 85 %
        0x78/0x79 0xD0/0x05     -> 3333 * 1.1 = 3666.3 mV battery
        0x56/0x57 0xB8/0x00     -> 2944 * 1.7 = 5004.8 mV ACIN
        0x58/0x59 0x20/0x00     -> 512 * 0.625 = 320.000 mA ACIN
        0x5A/0x5B 0xB8/0x00     -> 5004.8 mV VBUS
        0x5C/0x5D 0x10/0x00     -> 256 * 0.375 = 96.000 mA VBUS
        0x30      0x61          -> limit active: 12*100+4000 = 5200 mV, 500 mA
    """
    return FakeChannel(
        {
            0x01: 0xA0,
            0x33: 0x9C,
            0x5E: 0x50,
            0x5F: 0x00,
            0x7A: 0x10,
            0x7B: 0x04,
            0x7C: 0x02,
            0x7D: 0x21,
            0xB9: 0xD5,
            0x78: 0xD0,
            0x79: 0x05,
            0x56: 0xB8,
            0x57: 0x00,
            0x58: 0x20,
            0x59: 0x00,
            0x5A: 0xB8,
            0x5B: 0x00,
            0x5C: 0x10,
            0x5D: 0x00,
            0x30: 0x61,
        }
    )
