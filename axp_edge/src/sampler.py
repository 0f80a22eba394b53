"""
Sampler that reads the AXP209 registers and decodes them into a Snapshot.

Each call starts from an empty snapshot, reads the status registers, and
then reads and decodes only the ADC channels whose subsystem is present.
Quantities for absent subsystems (no battery, no ACIN) stay invalid for
that cycle.

The decode helpers are pure functions over raw register bytes so they can
be tested without a bus.  Register failures propagate as ``BusError``; there
is no retry and no default substitution.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-006)

TODO:
- None
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from axp_edge.src.metrics import new_snapshot
from axp_edge.src.registers import (
    ACIN_CURRENT,
    ACIN_PRESENT_BIT,
    ACIN_VOLTAGE,
    BATTERY_CHARGE_CURRENT,
    BATTERY_DISCHARGE_CURRENT,
    BATTERY_PRESENT_BIT,
    BATTERY_VOLTAGE,
    CHARGE_CONTROL,
    CHARGE_CURRENT_MASK,
    CHARGE_ENABLED_BIT,
    CHARGE_TERMINATION_HIGH_BIT,
    FUEL_GAUGE,
    FUEL_GAUGE_MASK,
    INTERNAL_TEMP,
    POWER_STATUS,
    VBUS_CURRENT,
    VBUS_CURRENT_LIMIT_MASK,
    VBUS_IPSOUT,
    VBUS_VOLTAGE,
    VBUS_VOLTAGE_LIMIT_BIT,
    RegisterPair,
)

if TYPE_CHECKING:
    from axp_edge.src.bus import RegisterChannel
    from axp_edge.src.models import Snapshot

logger = logging.getLogger(__name__)

VBUS_CURRENT_LIMITS_MA: tuple[int, ...] = (900, 500, 100)
"""VBUS current limit in mA indexed by the 2-bit selector; 3 means no limit."""


# ---------------------------------------------------------------------------
# Pure decode helpers
# ---------------------------------------------------------------------------


def combine_12bit(high: int, low: int) -> int:
    """Compose a 12-bit ADC result from its high byte and low nibble."""
    return ((high & 0xFF) << 4) | (low & 0x0F)


def combine_13bit(high: int, low: int) -> int:
    """Compose the 13-bit discharge current from its high byte and low 5 bits."""
    return ((high & 0xFF) << 5) | (low & 0x1F)


def decode_internal_temp(raw: int) -> float:
    """Convert the 12-bit internal temperature reading to degrees."""
    return raw * 0.18 - 228.46


def decode_charge_limit(charge_ctl: int) -> int:
    """Target charge current in mA from the charge-control byte."""
    return (charge_ctl & CHARGE_CURRENT_MASK) * 100 + 300


def decode_charge_termination(charge_limit: int, charge_ctl: int) -> int:
    """End-of-charge current in mA: 10% of the limit, or 15% when selected."""
    termination = charge_limit // 10
    if charge_ctl & CHARGE_TERMINATION_HIGH_BIT:
        termination += termination >> 1
    return termination


def decode_vbus_voltage_limit(vbus_ipsout: int) -> int | None:
    """VBUS hold voltage limit in mV, or None when the limit is disabled."""
    if not vbus_ipsout & VBUS_VOLTAGE_LIMIT_BIT:
        return None
    return (vbus_ipsout >> 3) * 100 + 4000


def decode_vbus_current_limit(vbus_ipsout: int) -> int | None:
    """VBUS current limit in mA, or None when the selector means unlimited."""
    selector = vbus_ipsout & VBUS_CURRENT_LIMIT_MASK
    if selector >= len(VBUS_CURRENT_LIMITS_MA):
        return None
    return VBUS_CURRENT_LIMITS_MA[selector]


# ---------------------------------------------------------------------------
# Bus-backed reads
# ---------------------------------------------------------------------------


def read_pair(channel: RegisterChannel, pair: RegisterPair) -> int:
    """Read both registers of *pair*, high first, and compose the result."""
    high = channel.read_register(pair.high)
    low = channel.read_register(pair.low)
    if pair.low_bits == 5:
        return combine_13bit(high, low)
    return combine_12bit(high, low)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def sample(channel: RegisterChannel) -> Snapshot:
    """Read the peripheral once and return a freshly populated snapshot.

    Args:
        channel: Register channel with the AXP209 selected and its ADC
            enabled.

    Returns:
        A new :class:`~axp_edge.src.models.Snapshot`.  Quantities whose
        subsystem is absent this cycle are left invalid.

    Raises:
        BusError: On any register read failure.
    """
    snapshot = new_snapshot()

    power_status = channel.read_register(POWER_STATUS.address)
    charge_ctl = channel.read_register(CHARGE_CONTROL.address)

    snapshot.set("internaltemp", decode_internal_temp(read_pair(channel, INTERNAL_TEMP)))

    if charge_ctl & CHARGE_ENABLED_BIT:
        charge_limit = decode_charge_limit(charge_ctl)
        snapshot.set("chargelimit", charge_limit)
        snapshot.set("chargeterm", decode_charge_termination(charge_limit, charge_ctl))

    battery_present = bool(power_status & BATTERY_PRESENT_BIT)

    if battery_present:
        snapshot.set("batcharge", read_pair(channel, BATTERY_CHARGE_CURRENT) / 2.0)
        snapshot.set("batdischarge", read_pair(channel, BATTERY_DISCHARGE_CURRENT))
        snapshot.set(
            "batlevel", channel.read_register(FUEL_GAUGE.address) & FUEL_GAUGE_MASK
        )
        snapshot.set("batvoltage", read_pair(channel, BATTERY_VOLTAGE) * 1.1)

    if power_status & ACIN_PRESENT_BIT:
        snapshot.set("acinvoltage", read_pair(channel, ACIN_VOLTAGE) * 1.7)
        snapshot.set("acincurrent", read_pair(channel, ACIN_CURRENT) * 0.625)

    # VBUS readings share the battery-present gate rather than a VBUS bit.
    if battery_present:
        snapshot.set("vbusvoltage", read_pair(channel, VBUS_VOLTAGE) * 1.7)
        snapshot.set("vbuscurrent", read_pair(channel, VBUS_CURRENT) * 0.375)

    vbus_ipsout = channel.read_register(VBUS_IPSOUT.address)

    voltage_limit = decode_vbus_voltage_limit(vbus_ipsout)
    if voltage_limit is not None:
        snapshot.set("vbusvoltagelimit", voltage_limit)

    current_limit = decode_vbus_current_limit(vbus_ipsout)
    if current_limit is not None:
        snapshot.set("vbuscurrentlimit", current_limit)

    logger.debug(
        "Sampled power_status=%#04x charge_ctl=%#04x vbus_ipsout=%#04x valid=%s",
        power_status,
        charge_ctl,
        vbus_ipsout,
        snapshot.valid_names(),
    )
    return snapshot
