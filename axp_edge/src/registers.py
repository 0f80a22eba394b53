"""
AXP209 power-management IC register map -- single source of truth.

Defines every register address, bit mask and 12-bit ADC register pair the
collector touches on the AXP209 found on the C.H.I.P. computer (I2C bus
``i2c-0``, 7-bit peripheral address 0x34).

ADC results are split across two registers: the high register holds bits
11..4 and the low register holds bits 3..0 in its low nibble.  The battery
discharge current is the one exception, a 13-bit value whose low register
contributes five bits.

References:
    - X-Powers AXP209 datasheet, sections 9.5 (ADC data) and 9.1 (power status)
    - https://gist.github.com/yoursunny/b89f86c9f5911cea322f3047ff99c576

CHANGELOG:
- 2026-10-18: Initial creation (STORY-002)

TODO:
- None
"""

from __future__ import annotations

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Bus location
# ---------------------------------------------------------------------------

DEFAULT_I2C_BUS: int = 0
"""Bus number of ``/dev/i2c-0`` where the AXP209 sits on the C.H.I.P."""

AXP209_ADDRESS: int = 0x34
"""7-bit I2C address of the AXP209."""


# ---------------------------------------------------------------------------
# Data definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RegisterDef:
    """Definition of a single byte-wide register.

    Attributes:
        address: Register address on the peripheral.
        name: Unique human-readable identifier.
        description: Free-text description of the register.
    """

    address: int
    name: str
    description: str = ""


@dataclass(frozen=True, slots=True)
class RegisterPair:
    """Two registers that together hold one ADC result.

    Attributes:
        name: Unique human-readable identifier.
        high: Register holding the most significant bits.
        low: Register holding the least significant bits.
        low_bits: Number of significant bits taken from *low* (4 for the
            12-bit ADC channels, 5 for the 13-bit discharge current).
        description: Free-text description including the LSB weight.
    """

    name: str
    high: int
    low: int
    low_bits: int = 4
    description: str = ""


# ---------------------------------------------------------------------------
# Status and control registers
# ---------------------------------------------------------------------------

POWER_STATUS = RegisterDef(
    address=0x01,
    name="power_status",
    description="Power mode and charge status",
)
BATTERY_PRESENT_BIT: int = 0x20
ACIN_PRESENT_BIT: int = 0x80

VBUS_IPSOUT = RegisterDef(
    address=0x30,
    name="vbus_ipsout",
    description="VBUS-IPSOUT path management",
)
VBUS_VOLTAGE_LIMIT_BIT: int = 0x40
VBUS_CURRENT_LIMIT_MASK: int = 0x03

CHARGE_CONTROL = RegisterDef(
    address=0x33,
    name="charge_control",
    description="Charge control 1: enable, target current, end-of-charge current",
)
CHARGE_ENABLED_BIT: int = 0x80
CHARGE_TERMINATION_HIGH_BIT: int = 0x10
CHARGE_CURRENT_MASK: int = 0x0F

FUEL_GAUGE = RegisterDef(
    address=0xB9,
    name="fuel_gauge",
    description="Battery percentage computed by the coulomb counter",
)
FUEL_GAUGE_MASK: int = 0x7F

# ---------------------------------------------------------------------------
# ADC enable registers
# Both must carry the listed bits before ADC readings are meaningful.
# ---------------------------------------------------------------------------

ADC_ENABLE_1 = RegisterDef(
    address=0x82,
    name="adc_enable_1",
    description="Battery voltage/current, ACIN voltage/current ADC enable",
)
ADC_ENABLE_1_BITS: int = 0xCC

ADC_ENABLE_2 = RegisterDef(
    address=0x83,
    name="adc_enable_2",
    description="Internal temperature ADC enable",
)
ADC_ENABLE_2_BITS: int = 0x80

ADC_ENABLE_REGISTERS: list[tuple[RegisterDef, int]] = [
    (ADC_ENABLE_1, ADC_ENABLE_1_BITS),
    (ADC_ENABLE_2, ADC_ENABLE_2_BITS),
]
"""(register, required bits) in the order they are checked at startup."""

# ---------------------------------------------------------------------------
# ADC result pairs
# ---------------------------------------------------------------------------

ACIN_VOLTAGE = RegisterPair("acin_voltage", 0x56, 0x57, description="1.7 mV/LSB")
ACIN_CURRENT = RegisterPair("acin_current", 0x58, 0x59, description="0.625 mA/LSB")
VBUS_VOLTAGE = RegisterPair("vbus_voltage", 0x5A, 0x5B, description="1.7 mV/LSB")
VBUS_CURRENT = RegisterPair("vbus_current", 0x5C, 0x5D, description="0.375 mA/LSB")
INTERNAL_TEMP = RegisterPair(
    "internal_temp", 0x5E, 0x5F, description="0.18 deg/LSB, offset -228.46"
)
BATTERY_VOLTAGE = RegisterPair("battery_voltage", 0x78, 0x79, description="1.1 mV/LSB")
BATTERY_CHARGE_CURRENT = RegisterPair(
    "battery_charge_current", 0x7A, 0x7B, description="0.5 mA/LSB"
)
BATTERY_DISCHARGE_CURRENT = RegisterPair(
    "battery_discharge_current",
    0x7C,
    0x7D,
    low_bits=5,
    description="13-bit, 1 mA/LSB",
)

ALL_PAIRS: list[RegisterPair] = [
    ACIN_VOLTAGE,
    ACIN_CURRENT,
    VBUS_VOLTAGE,
    VBUS_CURRENT,
    INTERNAL_TEMP,
    BATTERY_VOLTAGE,
    BATTERY_CHARGE_CURRENT,
    BATTERY_DISCHARGE_CURRENT,
]
"""Every ADC register pair read by the sampler."""
