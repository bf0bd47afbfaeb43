"""Phase-angle control of two triac outputs synchronised to mains zero crossings.

The timer hardware is modelled in software. :meth:`TriacDimmer.zero_crossing`
stands in for the input-capture event. It measures the mains period and
schedules the trigger pulses of the enabled channels. It also advances the
integral-cycle control (ICC) output.
"""

from __future__ import annotations

import math
import struct
from collections.abc import Callable
from dataclasses import dataclass
from enum import IntEnum

__all__ = [
    "ICC_PIN",
    "PHASE_DELAY",
    "RATIO_M",
    "ZC_LEAD",
    "Channel",
    "TriacDimmer",
]

RATIO_M = 100  # length of the N:M integral-cycle sequence
ZC_LEAD = 1000  # ticks from the zero-crossing edge to the actual crossing
ICC_PIN = 7

_TICK_MASK = 0xFFFF

# Phase delays in timer ticks for 0..100 % power at 50 Hz, linearised for power.
PHASE_DELAY: tuple[int, ...] = (
    20000, 17680, 17061, 16621, 16265, 15961, 15692, 15448, 15225, 15017,
    14822, 14638, 14462, 14295, 14134, 13979, 13830, 13685, 13544, 13407,
    13274, 13143, 13016, 12891, 12768, 12647, 12529, 12412, 12297, 12184,
    12072, 11961, 11851, 11743, 11636, 11529, 11423, 11319, 11215, 11111,
    11008, 10906, 10804, 10703, 10602, 10501, 10401, 10300, 10200, 10100,
    10000, 9900, 9800, 9700, 9599, 9499, 9398, 9297, 9196, 9094,
    8992, 8889, 8785, 8681, 8577, 8471, 8364, 8257, 8149, 8039,
    7928, 7816, 7703, 7588, 7471, 7353, 7232, 7109, 6984, 6857,
    6726, 6593, 6456, 6315, 6170, 6021, 5866, 5705, 5538, 5362,
    5178, 4983, 4775, 4552, 4308, 4039, 3735, 3379, 2939, 2320,
    0,
)


def _f32(value: float) -> float:
    """Round a value to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


def _clamp(value: int, low: int, high: int) -> int:
    if value < low:
        return low
    if value > high:
        return high
    return value


class Channel(IntEnum):
    """Output channels, valued by the pin that drives them."""

    A = 9
    B = 10

    @classmethod
    def for_pin(cls, pin: int) -> Channel:
        try:
            return cls(pin)
        except ValueError:
            raise ValueError(f"pin {pin} is not a dimmer output; use 9 or 10") from None


@dataclass
class _ChannelState:
    enabled: bool = False
    up: int = 0
    dn: int = 0


class TriacDimmer:
    """Two-channel triac dimmer with an integral-cycle control output.

    ``write_pin(pin, level)`` is called whenever an output pin is driven
    directly; ``level`` is True for high. ``outputs`` collects the pins that
    have been switched to output mode.
    """

    def __init__(self, write_pin: Callable[[int, bool], object] | None = None) -> None:
        self._write_pin = write_pin
        self.pulse_length = 20
        self.min_trigger = 2000
        self.on_thresh = 2.0
        self.off_thresh = 0.01
        self.period = 20000
        self.running = False
        self.outputs: set[int] = set()
        self._channels = {channel: _ChannelState() for channel in Channel}
        self._last_capture = 0
        self._icc_duty = 0
        self._icc_current = 0
        self._icc_restart = True

    def begin(
        self,
        pulse_length: int = 20,
        min_trigger: int = 2000,
        on_thresh: float = 2.0,
        off_thresh: float = 0.01,
    ) -> None:
        """Store the pulse parameters and start reacting to zero crossings.

        ``pulse_length`` and ``min_trigger`` are in timer ticks. A brightness
        above ``on_thresh`` switches the output fully on; one below
        ``off_thresh`` switches it fully off.
        """
        self.pulse_length = int(pulse_length) & _TICK_MASK
        self.min_trigger = int(min_trigger) & _TICK_MASK
        self.on_thresh = _f32(on_thresh)
        self.off_thresh = _f32(off_thresh)
        self.running = True

    def end(self) -> None:
        """Stop reacting to zero crossings."""
        self.running = False

    def set_icc(self, value: int) -> None:
        """Set the integral-cycle duty in percent (clamped to 0..100)."""
        self._icc_duty = _clamp(int(value), 0, 100)
        self._icc_restart = True
        self.outputs.add(ICC_PIN)

    def set_duty(self, pin: int, value: int) -> None:
        """Set the power of a channel in percent using the linearised table."""
        channel = Channel.for_pin(pin)
        value = _clamp(int(value), 0, 100)
        on_limit = int(_f32(self.on_thresh * 100))
        off_limit = int(_f32(self.off_thresh * 100))
        if value > on_limit:
            self._drive(channel, True)
        elif value < off_limit:
            self._drive(channel, False)
        else:
            self.set_channel_direct(channel, PHASE_DELAY[value] + ZC_LEAD)
            self._channels[channel].enabled = True
        self.outputs.add(int(channel))

    def set_brightness(self, pin: int, value: float) -> None:
        """Set the brightness of a channel from 0.0 to 1.0."""
        channel = Channel.for_pin(pin)
        value = _f32(value)
        if value > self.on_thresh:
            self._drive(channel, True)
        elif value < self.off_thresh:
            self._drive(channel, False)
        else:
            self.set_channel(channel, 1 - value)
            self._channels[channel].enabled = True
        self.outputs.add(int(channel))

    def disable(self, pin: int) -> None:
        """Stop triggering the channel driven by ``pin``."""
        self._channels[Channel.for_pin(pin)].enabled = False

    def brightness(self, pin: int) -> float:
        """The brightness of a channel, derived from :meth:`channel_phase`."""
        return 1 - self.channel_phase(Channel.for_pin(pin))

    def set_channel(self, channel: Channel | int, value: float) -> None:
        """Set the phase angle as a fraction of the mains period.

        0.0 fires at once and 1.0 a full period later. The channel is not
        enabled by this call.
        """
        self._store(channel, int(_f32(self.period * _f32(value))))

    def set_channel_direct(self, channel: Channel | int, value: int) -> None:
        """Set the trigger delay in timer ticks; the channel is not enabled."""
        self._store(channel, int(value))

    def channel_phase(self, channel: Channel | int) -> float:
        """Ratio of the mains period to the trigger delay of ``channel``."""
        up = self._channels[Channel.for_pin(channel)].up
        if up == 0:
            return math.inf if self.period else math.nan
        return _f32(self.period / up)

    def zero_crossing(self, capture: int) -> dict[Channel, tuple[int, int]]:
        """Handle a zero crossing captured at timer value ``capture``.

        Returns, for each enabled channel, the timer values at which its
        trigger pulse starts and ends.
        """
        if not self.running:
            raise RuntimeError("dimmer not started; call begin() first")
        capture = int(capture) & _TICK_MASK
        pulses = {
            channel: (
                (capture + state.up) & _TICK_MASK,
                (capture + state.dn) & _TICK_MASK,
            )
            for channel, state in self._channels.items()
            if state.enabled
        }
        self.period = (capture - self._last_capture) & _TICK_MASK
        self._last_capture = capture
        self._advance_icc()
        return pulses

    def _store(self, channel: Channel | int, up: int) -> None:
        state = self._channels[Channel.for_pin(channel)]
        up &= _TICK_MASK
        down = (up + self.pulse_length) & _TICK_MASK
        state.up = up
        state.dn = _clamp(down, self.min_trigger, self.period)

    def _drive(self, channel: Channel, level: bool) -> None:
        self._write(int(channel), level)
        self._channels[channel].enabled = False

    def _advance_icc(self) -> None:
        if self._icc_restart:
            self._icc_current = RATIO_M
            self._icc_restart = False
        self._icc_current -= 1
        if self._icc_current < 1:
            self._icc_current = RATIO_M
        self._write(ICC_PIN, self._icc_current <= self._icc_duty)

    def _write(self, pin: int, level: bool) -> None:
        if self._write_pin is not None:
            self._write_pin(pin, level)