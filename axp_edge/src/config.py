"""
Collector configuration loaded from environment variables.

Uses Pydantic BaseSettings for automatic env var loading and validation.
Every value has a default matching the C.H.I.P. hardware, so the collector
runs unconfigured under netdata.  The update period can also be given as
the single positional CLI argument, which takes precedence.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-001)

TODO:
- None
"""

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings

from axp_edge.src.registers import AXP209_ADDRESS, DEFAULT_I2C_BUS

MIN_UPDATE_EVERY_S = 1
MAX_UPDATE_EVERY_S = 360


class AxpSettings(BaseSettings):
    """AXP209 collector configuration.

    Attributes:
        i2c_bus: I2C bus number (``/dev/i2c-<n>``).
        pmic_address: 7-bit I2C address of the AXP209 (decimal in env).
        update_every_s: Seconds between reports (1-360).
        adc_settle_ms: Milliseconds to wait after enabling ADC channels.
        health_path: JSON health file path; empty disables it.
        log_level: Root log level name.
    """

    i2c_bus: int = DEFAULT_I2C_BUS
    pmic_address: int = AXP209_ADDRESS
    update_every_s: int = 1
    adc_settle_ms: int = 40
    health_path: str = ""
    log_level: str = "INFO"

    @field_validator("i2c_bus")
    @classmethod
    def i2c_bus_must_be_non_negative(cls, v: int) -> int:
        """Validate the bus number is non-negative."""
        if v < 0:
            raise ValueError("I2C_BUS must be >= 0")
        return v

    @field_validator("pmic_address")
    @classmethod
    def pmic_address_must_be_valid(cls, v: int) -> int:
        """Validate the peripheral address is a non-reserved 7-bit address."""
        if v < 0x03 or v > 0x77:
            raise ValueError("PMIC_ADDRESS must be between 3 and 119 (0x03-0x77)")
        return v

    @field_validator("update_every_s")
    @classmethod
    def update_every_must_be_in_range(cls, v: int) -> int:
        """Validate the update period matches what netdata accepts."""
        if v < MIN_UPDATE_EVERY_S or v > MAX_UPDATE_EVERY_S:
            raise ValueError(
                f"UPDATE_EVERY_S must be between {MIN_UPDATE_EVERY_S} "
                f"and {MAX_UPDATE_EVERY_S}"
            )
        return v

    @field_validator("adc_settle_ms")
    @classmethod
    def adc_settle_must_be_non_negative(cls, v: int) -> int:
        """Validate the ADC settle delay is non-negative."""
        if v < 0:
            raise ValueError("ADC_SETTLE_MS must be >= 0")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        """Validate and normalise the log level name."""
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL '{v}' is not a logging level")
        return level

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}
