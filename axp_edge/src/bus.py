"""
Synchronous register channel to the AXP209 over I2C.

Wraps :class:`smbus2.SMBus` behind the three operations the collector needs:
``select`` a peripheral address, ``read_register`` and ``write_register``.
Every transport failure is raised as :class:`BusError`; callers never retry,
a failed transfer ends the process.

The peripheral is addressed with ``I2C_SLAVE_FORCE`` because the AXP209 is
normally claimed by the kernel's ``axp20x`` driver.

CHANGELOG:
- 2026-10-18: Initial creation (STORY-003)

TODO:
- None
"""

from __future__ import annotations

import logging

from smbus2 import SMBus

logger = logging.getLogger(__name__)

# 7-bit addresses outside this range are reserved by the I2C specification.
_MIN_ADDRESS = 0x03
_MAX_ADDRESS = 0x77


class BusError(Exception):
    """Fatal failure to open, address, read or write the peripheral."""


class RegisterChannel:
    """Byte-wide register access to one peripheral on one I2C bus.

    Use as a context manager so the bus file descriptor is always released::

        with RegisterChannel(0) as channel:
            channel.select(0x34)
            status = channel.read_register(0x01)

    Args:
        bus: I2C bus number (``/dev/i2c-<bus>``).
    """

    def __init__(self, bus: int) -> None:
        self._bus_number = bus
        self._bus: SMBus | None = None
        self._address: int | None = None

    def open(self) -> None:
        """Open the I2C bus device.

        Raises:
            BusError: If the bus device cannot be opened.
        """
        try:
            self._bus = SMBus(self._bus_number)
        except OSError as exc:
            raise BusError(
                f"Unable to open a handle to the I2C bus /dev/i2c-{self._bus_number}"
            ) from exc
        logger.info("Opened I2C bus /dev/i2c-%d", self._bus_number)

    def close(self) -> None:
        """Close the bus device if open."""
        if self._bus is not None:
            self._bus.close()
            self._bus = None

    def __enter__(self) -> RegisterChannel:
        self.open()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def select(self, address: int) -> None:
        """Direct all following register transfers at *address*.

        Raises:
            BusError: If the bus is not open or *address* is not a valid
                7-bit peripheral address.
        """
        if self._bus is None:
            raise BusError("I2C bus is not open")
        if not (_MIN_ADDRESS <= address <= _MAX_ADDRESS):
            raise BusError(f"Unable to address peripheral {address:#04x}")
        self._address = address

    def read_register(self, register: int) -> int:
        """Read one byte from *register* on the selected peripheral."""
        bus, address = self._require_selected()
        try:
            value = bus.read_byte_data(address, register, force=True)
        except OSError as exc:
            raise BusError(f"Unable to read register {register:#04x}") from exc
        return value & 0xFF

    def write_register(self, register: int, value: int) -> None:
        """Write one byte to *register* on the selected peripheral."""
        bus, address = self._require_selected()
        try:
            bus.write_byte_data(address, register, value & 0xFF, force=True)
        except OSError as exc:
            raise BusError(f"Unable to write register {register:#04x}") from exc

    def _require_selected(self) -> tuple[SMBus, int]:
        if self._bus is None or self._address is None:
            raise BusError("No peripheral selected on the I2C bus")
        return self._bus, self._address
