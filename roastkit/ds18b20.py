"""DS18B20 one-wire temperature sensor, for a bus with a single device."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

__all__ = [
    "CrcError",
    "DS18B20",
    "DeviceDisconnectedError",
    "OneWireBus",
    "crc8",
]

_START_CONVERSION = 0x44
_READ_SCRATCHPAD = 0xBE
_WRITE_SCRATCHPAD = 0x4E

_RESOLUTION_CONFIG = {12: 0x7F, 11: 0x5F, 10: 0x3F}
_DEFAULT_CONFIG = 0x1F  # 9 bit


def crc8(data: Iterable[int]) -> int:
    """Dallas/Maxim one-wire CRC-8 of ``data``."""
    crc = 0
    for byte in data:
        for _ in range(8):
            mix = (crc ^ byte) & 0x01
            crc >>= 1
            if mix:
                crc ^= 0x8C
            byte >>= 1
    return crc


class OneWireBus(Protocol):
    """The one-wire bus operations the sensor needs."""

    def reset(self) -> None:
        """Send a reset pulse."""

    def reset_search(self) -> None:
        """Start a new device search from the beginning."""

    def search(self) -> bytes | None:
        """The next 8-byte ROM address found, or None."""

    def skip(self) -> None:
        """Address all devices on the bus."""

    def select(self, address: bytes) -> None:
        """Address the device with this ROM address."""

    def write(self, value: int) -> None:
        """Write one byte."""

    def read(self) -> int:
        """Read one byte."""

    def read_bit(self) -> int:
        """Read one bit."""


class DeviceDisconnectedError(OSError):
    """The sensor did not answer or returned an impossible reading."""


class CrcError(OSError):
    """The scratchpad failed its CRC check."""


class DS18B20:
    """Driver for a DS18B20 sensor.

    ``offset`` is added to every Celsius reading. When ``crc_check`` is set
    the whole scratchpad is read and verified; :meth:`begin` turns it off.
    """

    def __init__(self, bus: OneWireBus, resolution: int = 9) -> None:
        self.bus = bus
        self.resolution = resolution
        self.crc_check = False
        self.offset = 0.0
        self._address = bytes(8)
        self._found = False

    def begin(self, retries: int = 3) -> bool:
        """Find the sensor and program its resolution; True if found."""
        self.crc_check = False
        if self.is_connected(retries):
            self._write_resolution()
        return self._found

    def is_connected(self, retries: int = 3) -> bool:
        """Search the bus up to ``retries`` times for a valid address."""
        self._found = False
        for _ in range(retries):
            self.bus.reset()
            self.bus.reset_search()
            found = self.bus.search()
            address = bytes(found) if found is not None else bytes(8)
            self._address = address
            self._found = (
                len(address) == 8
                and address[0] != 0x00
                and crc8(address[:7]) == address[7]
            )
            if self._found:
                break
        return self._found

    def request_temperatures(self) -> None:
        """Start a conversion on every device on the bus."""
        self.bus.reset()
        self.bus.skip()
        self.bus.write(_START_CONVERSION)

    def is_conversion_complete(self) -> bool:
        """True once the running conversion has finished."""
        return self.bus.read_bit() == 1

    def temp_c(self, check_connect: bool = True) -> float:
        """The last converted temperature in °C, offset included."""
        if check_connect and not self.is_connected(3):
            raise DeviceDisconnectedError("DS18B20 not found on the bus")
        if self.crc_check:
            scratchpad = self._read_scratchpad(9)
            if crc8(scratchpad[:8]) != scratchpad[8]:
                raise CrcError("DS18B20 scratchpad CRC mismatch")
        else:
            scratchpad = self._read_scratchpad(2)
        raw = int.from_bytes(scratchpad[:2], "little", signed=True)
        temp = 0.0625 * raw
        if temp < -55:
            raise DeviceDisconnectedError(f"implausible reading {temp} °C")
        return temp + self.offset

    def temp_f(self) -> float:
        """The last converted temperature in °F."""
        return 32.0 + self.temp_c() * 1.8

    def address(self) -> bytes | None:
        """The ROM address of the sensor, or None if it was not found."""
        return self._address if self._found else None

    def set_resolution(self, resolution: int = 9) -> bool:
        """Program a new resolution (9 to 12 bits); True if the sensor answered."""
        if self.is_connected():
            self.resolution = resolution
            self._write_resolution()
        return self._found

    def _read_scratchpad(self, fields: int) -> bytes:
        self.bus.reset()
        self.bus.select(self._address)
        self.bus.write(_READ_SCRATCHPAD)
        data = bytes(self.bus.read() & 0xFF for _ in range(fields))
        self.bus.reset()
        return data

    def _write_resolution(self) -> None:
        config = _RESOLUTION_CONFIG.get(self.resolution, _DEFAULT_CONFIG)
        self.bus.reset()
        self.bus.select(self._address)
        self.bus.write(_WRITE_SCRATCHPAD)
        # Alarm thresholds are unused; write placeholders.
        self.bus.write(0)
        self.bus.write(100)
        self.bus.write(config)
        self.bus.reset()