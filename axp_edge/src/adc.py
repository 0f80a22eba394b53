"""
One-time ADC enable step run before the first sample.

The AXP209 only updates its ADC result registers for channels whose enable
bits are set.  Firmware usually leaves some of them off, so at startup both
enable registers are read and any missing bits are forced on.  When anything
had to be written, the caller waits one conversion period so the first
sample reads settled values.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-005)

TODO:
- None
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from axp_edge.src.registers import ADC_ENABLE_REGISTERS

if TYPE_CHECKING:
    from axp_edge.src.bus import RegisterChannel

logger = logging.getLogger(__name__)

ADC_SETTLE_S: float = 0.04
"""One ADC conversion period at the default 25 Hz sample rate."""


def enable_adc(
    channel: RegisterChannel,
    *,
    settle_s: float = ADC_SETTLE_S,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Ensure every required ADC enable bit is set on the peripheral.

    Args:
        channel: Register channel with the AXP209 already selected.
        settle_s: Seconds to wait after enabling a channel.
        sleep: Sleep function, injectable for tests.

    Returns:
        True if any register was rewritten (and the settle delay was
        applied), False if the ADC was already fully enabled.

    Raises:
        BusError: On any register read or write failure.
    """
    changed = False

    for register, required in ADC_ENABLE_REGISTERS:
        value = channel.read_register(register.address)
        if value & required != required:
            channel.write_register(register.address, value | required)
            logger.info(
                "Enabled ADC bits %#04x in register %s (%#04x -> %#04x)",
                required,
                register.name,
                value,
                value | required,
            )
            changed = True

    if changed and settle_s > 0:
        sleep(settle_s)

    return changed
