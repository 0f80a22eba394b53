"""
Tests for the smbus2-backed register channel.

SMBus is patched out, so these run without an I2C adapter.  They verify that
transfers go to the selected address with I2C_SLAVE_FORCE, and that every
OSError surfaces as BusError naming the register.

CHANGELOG:
- 2026-10-18: Initial creation -- TDD tests written first (STORY-003)

TODO:
- None
"""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest
from axp_edge.src.bus import BusError, RegisterChannel


@pytest.fixture()
def mock_smbus() -> Iterator[MagicMock]:
    """Patch SMBus in the bus module and return the instance mock."""
    with patch("axp_edge.src.bus.SMBus") as smbus_cls:
        yield smbus_cls.return_value


class TestOpenClose:
    """Opening and closing the bus device."""

    def test_open_uses_bus_number(self) -> None:
        with patch("axp_edge.src.bus.SMBus") as smbus_cls:
            with RegisterChannel(2):
                pass
        smbus_cls.assert_called_once_with(2)
        smbus_cls.return_value.close.assert_called_once()

    def test_open_failure_raises_bus_error(self) -> None:
        with patch("axp_edge.src.bus.SMBus", side_effect=FileNotFoundError(2, "nope")):
            channel = RegisterChannel(0)
            with pytest.raises(BusError, match="/dev/i2c-0"):
                channel.open()

    def test_close_is_idempotent(self, mock_smbus: MagicMock) -> None:
        channel = RegisterChannel(0)
        channel.open()
        channel.close()
        channel.close()
        mock_smbus.close.assert_called_once()


class TestSelect:
    """Peripheral addressing."""

    def test_select_before_open_fails(self) -> None:
        with pytest.raises(BusError):
            RegisterChannel(0).select(0x34)

    @pytest.mark.parametrize("address", [0x00, 0x02, 0x78, 0x100])
    def test_reserved_address_rejected(
        self, mock_smbus: MagicMock, address: int
    ) -> None:
        with RegisterChannel(0) as channel, pytest.raises(BusError):
            channel.select(address)

    def test_read_without_select_fails(self, mock_smbus: MagicMock) -> None:
        with RegisterChannel(0) as channel, pytest.raises(BusError):
            channel.read_register(0x01)


class TestTransfers:
    """Reads and writes go to the selected peripheral."""

    def test_read_register(self, mock_smbus: MagicMock) -> None:
        mock_smbus.read_byte_data.return_value = 0xA0
        with RegisterChannel(0) as channel:
            channel.select(0x34)
            assert channel.read_register(0x01) == 0xA0
        mock_smbus.read_byte_data.assert_called_once_with(0x34, 0x01, force=True)

    def test_write_register(self, mock_smbus: MagicMock) -> None:
        with RegisterChannel(0) as channel:
            channel.select(0x34)
            channel.write_register(0x82, 0xCF)
        mock_smbus.write_byte_data.assert_called_once_with(0x34, 0x82, 0xCF, force=True)

    def test_read_error_wrapped(self, mock_smbus: MagicMock) -> None:
        mock_smbus.read_byte_data.side_effect = OSError(121, "Remote I/O error")
        with RegisterChannel(0) as channel:
            channel.select(0x34)
            with pytest.raises(BusError, match="read register 0x5e") as exc_info:
                channel.read_register(0x5E)
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_write_error_wrapped(self, mock_smbus: MagicMock) -> None:
        mock_smbus.write_byte_data.side_effect = OSError(121, "Remote I/O error")
        with RegisterChannel(0) as channel:
            channel.select(0x34)
            with pytest.raises(BusError, match="write register 0x83"):
                channel.write_register(0x83, 0x80)
