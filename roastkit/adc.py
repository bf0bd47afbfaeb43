"""MCP3424 18-bit delta-sigma ADC on an I2C bus, plus a simple RC filter."""

from __future__ import annotations

import math
import struct
from enum import IntEnum
from typing import Protocol

__all__ = [
    "BITS_TO_UV",
    "DEFAULT_ADDRESS",
    "MAX_CHANNELS",
    "Conversion",
    "Gain",
    "I2CBus",
    "MCP3424",
    "RCFilter",
    "Resolution",
]

DEFAULT_ADDRESS = 0x68
BITS_TO_UV = 15.625  # LSB in microvolts, 18-bit mode
MAX_CHANNELS = 4

_CHANNEL_SHIFT = 5
_GAIN_MASK = 0x03
_RESOLUTION_MASK = 0x0C


def _f32(value: float) -> float:
    """Round a value to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _signed_byte(value: int) -> int:
    return value - 0x100 if value & 0x80 else value


class I2CBus(Protocol):
    """The bus operations the ADC needs."""

    def write(self, address: int, data: bytes) -> None:
        """Send ``data`` to the device at ``address`` in one transmission."""

    def read(self, address: int, count: int) -> bytes:
        """Request ``count`` bytes from the device at ``address``."""


class RCFilter:
    """First-order digital low-pass filter working on integers.

    ``level`` is the filtering strength in percent: 0 passes input
    through, 100 holds the first value forever.
    """

    def __init__(self, level: int = 0) -> None:
        self.level = int(level)
        self._y = 0
        self._first = True

    def reset(self, level: int) -> None:
        """Set a new filtering level and start over with the next sample."""
        self.level = int(level)
        self._first = True

    def filter(self, xi: int) -> int:
        """Feed one sample and return the filtered value."""
        if self._first:
            self._y = int(xi)
            self._first = False
            return self._y
        fresh = _f32(_f32(_f32(100 - self.level) * _f32(xi)) * 0.01)
        held = _f32(_f32(_f32(self.level) * _f32(self._y)) * 0.01)
        self._y = _round_half_away(_f32(fresh + held))
        return self._y


class Resolution(IntEnum):
    """Sample resolution bits of the configuration register."""

    BITS_12 = 0x00
    BITS_14 = 0x04
    BITS_16 = 0x08
    BITS_18 = 0x0C


class Gain(IntEnum):
    """Programmable gain bits of the configuration register."""

    GAIN_1 = 0x00
    GAIN_2 = 0x01
    GAIN_4 = 0x02
    GAIN_8 = 0x03


class Conversion(IntEnum):
    """Conversion mode bits of the configuration register."""

    CONTINUOUS = 0x10
    ONE_SHOT = 0x80


# resolution -> (conversion time in ms, shift count = resolution bits - 12)
_TIMING: dict[int, tuple[int, int]] = {
    Resolution.BITS_12: (5, 0),
    Resolution.BITS_14: (20, 2),
    Resolution.BITS_16: (80, 4),
    Resolution.BITS_18: (300, 6),
}


class MCP3424:
    """Driver for the MCP3424 four-channel ADC."""

    def __init__(self, bus: I2CBus, address: int = DEFAULT_ADDRESS) -> None:
        self.bus = bus
        self.address = address
        # The calibration term is stored as (gain - 1); the power-on value
        # is the raw default constant, as set_calibration has not run yet.
        self._cal_gain = 1.0
        self._cal_offset = 0
        self.cfg = 0
        self._conv_time = 0
        self._shift = 0
        self.configure()

    def configure(
        self,
        resolution: int = Resolution.BITS_18,
        gain: int = Gain.GAIN_8,
        conversion: int = Conversion.ONE_SHOT,
    ) -> None:
        """Set resolution, gain and conversion mode."""
        self.cfg = (int(resolution) | int(gain) | int(conversion)) & 0xFF
        self._conv_time, self._shift = _TIMING.get(
            int(resolution), _TIMING[Resolution.BITS_18]
        )

    def conversion_time(self) -> int:
        """Milliseconds one conversion takes at the configured resolution."""
        return self._conv_time

    def set_calibration(self, gain: float, offset: int) -> None:
        """Set the calibration gain factor and the offset in microvolts."""
        self._cal_gain = _f32(gain - 1.0)
        self._cal_offset = int(offset)

    def start_conversion(self, channel: int) -> None:
        """Ask the chip to convert ``channel`` (0 to 3)."""
        value = self.cfg | ((channel & 0x03) << _CHANNEL_SHIFT)
        self.bus.write(self.address, bytes([value & 0xFF]))

    def read_microvolts(self) -> int:
        """Read the last conversion and return the calibrated microvolts."""
        eighteen_bit = (self.cfg & _RESOLUTION_MASK) == Resolution.BITS_18
        count = 4 if eighteen_bit else 3
        data = bytes(self.bus.read(self.address, count))
        if len(data) < count:
            raise OSError(
                f"short read from 0x{self.address:02x}: "
                f"expected {count} bytes, got {len(data)}"
            )
        *sample, status = data[:count]
        value = _signed_byte(sample[0])
        for byte in sample[1:]:
            value = (value << 8) | byte
        value *= 1000
        value >>= self._shift + (status & _GAIN_MASK)
        delta = _round_half_away(
            _f32(_f32(_f32(value) * self._cal_gain) + self._cal_offset)
        )
        return value + delta