"""MCP9800 ambient temperature sensor on an I2C bus, with optional filtering."""

from __future__ import annotations

import struct
from enum import IntEnum

from roastkit.adc import I2CBus, RCFilter

__all__ = [
    "DEFAULT_ADDRESS",
    "AmbientResolution",
    "ConversionMode",
    "MCP9800",
]

DEFAULT_ADDRESS = 0x48

_REG_TEMPERATURE = 0x00
_REG_CONFIG = 0x01
_SHUTDOWN = 0x01

_FACTOR = 10  # extra resolution bits given to the filter
_LSB = 0.0625 / 1024  # °C per filtered count
_LSB_INV = 16.0 * 1024


def _f32(value: float) -> float:
    """Round a value to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


class AmbientResolution(IntEnum):
    """Resolution bits of the configuration register."""

    BITS_9 = 0x00
    BITS_10 = 0x20
    BITS_11 = 0x40
    BITS_12 = 0x60


class ConversionMode(IntEnum):
    """One-shot or continuous conversion bits of the configuration register."""

    CONTINUOUS = 0x00
    ONE_SHOT = 0x81


# resolution -> (conversion time in ms, count of undefined low bits)
_TIMING: dict[int, tuple[int, int]] = {
    AmbientResolution.BITS_9: (38, 7),
    AmbientResolution.BITS_10: (75, 6),
    AmbientResolution.BITS_11: (150, 5),
    AmbientResolution.BITS_12: (290, 4),
}


class MCP9800:
    """Driver for the MCP9800 ambient sensor.

    ``offset`` is a calibration correction in °C added to every reading.
    """

    def __init__(self, bus: I2CBus, address: int = DEFAULT_ADDRESS) -> None:
        self.bus = bus
        self.address = address
        self.offset = 0.0
        self.mode = int(ConversionMode.CONTINUOUS)
        self.cfg = 0
        self.raw = 0
        self.filtered = 0
        self._filter = RCFilter(0)
        self._conv_time = 0
        self._shift = 0
        self._amb_c = 0.0
        self._amb_f = 0.0
        self.configure(AmbientResolution.BITS_12)

    def setup(
        self, filter_percent: int = 0, mode: int = ConversionMode.ONE_SHOT
    ) -> None:
        """Set the filtering level and conversion mode.

        In one-shot mode the chip is put into shutdown, as that mode requires.
        The mode takes effect in the configuration byte at the next
        :meth:`configure`.
        """
        self._filter.reset(filter_percent)
        self.mode = int(mode)
        if self.mode == ConversionMode.ONE_SHOT:
            self.shutdown()

    def configure(self, resolution: int) -> None:
        """Select the resolution; an unknown value keeps the previous timing."""
        self.cfg = (int(resolution) | self.mode) & 0xFF
        timing = _TIMING.get(int(resolution))
        if timing is not None:
            self._conv_time, self._shift = timing

    def conversion_time(self) -> int:
        """Minimum milliseconds between conversions at this resolution."""
        return self._conv_time

    def shutdown(self) -> None:
        """Put the chip into shutdown."""
        self.bus.write(self.address, bytes([_REG_CONFIG, _SHUTDOWN]))

    def start_conversion(self) -> None:
        """Ask the chip to perform a conversion."""
        self.bus.write(self.address, bytes([_REG_CONFIG, self.cfg]))

    def read(self) -> int:
        """Read the temperature register and return the filtered raw value.

        The filtered value is the temperature code shifted left by 10 bits;
        :meth:`ambient_c` and :meth:`ambient_f` give it in degrees.
        """
        self.bus.write(self.address, bytes([_REG_TEMPERATURE]))
        data = bytes(self.bus.read(self.address, 2))
        if len(data) < 2:
            raise OSError(
                f"short read from 0x{self.address:02x}: "
                f"expected 2 bytes, got {len(data)}"
            )
        high, low = data[0], data[1]
        raw = ((high - 0x100 if high & 0x80 else high) << 8) | low
        raw >>= self._shift
        raw <<= self._shift
        raw >>= 4
        self.raw = raw
        self.filtered = self._filter.filter(raw << _FACTOR)
        amb_c = _f32(_f32(float(self.filtered)) + self.offset * _LSB_INV)
        self._amb_c = _f32(amb_c * _LSB)
        self._amb_f = _f32(1.8 * self._amb_c + 32.0)
        return self.filtered

    def ambient_c(self) -> float:
        """The most recent reading in °C."""
        return self._amb_c

    def ambient_f(self) -> float:
        """The most recent reading in °F."""
        return self._amb_f