"""ITS-90 linearisation of type K thermocouples."""

from __future__ import annotations

import math
from collections.abc import Sequence

__all__ = ["ThermocoupleRangeError", "TypeK", "c_to_f", "f_to_c"]


class ThermocoupleRangeError(ValueError):
    """Raised when a voltage or temperature lies outside the type K tables."""


def c_to_f(value: float) -> float:
    """Convert degrees Celsius to degrees Fahrenheit."""
    return 1.8 * value + 32.0


def f_to_c(value: float) -> float:
    """Convert degrees Fahrenheit to degrees Celsius."""
    return (value - 32.0) / 1.8


def _polynomial(coefficients: Sequence[float], x: float) -> float:
    return sum(c * x**power for power, c in enumerate(coefficients))


# Inverse tables (mV -> °C): (low mV, high mV, coefficients).
# When ranges touch, the later one wins, as in the reference tables.
_INVERSE_RANGES: tuple[tuple[float, float, tuple[float, ...]], ...] = (
    (
        -5.891,
        0.000,
        (
            0.0000000e00,
            2.5173462e01,
            -1.1662878e00,
            -1.0833638e00,
            -8.9773540e-01,
            -3.7342377e-01,
            -8.6632643e-02,
            -1.0450598e-02,
            -5.1920577e-04,
            0.0000000e00,
        ),
    ),
    (
        0.000,
        20.644,
        (
            0.000000e00,
            2.508355e01,
            7.860106e-02,
            -2.503131e-01,
            8.315270e-02,
            -1.228034e-02,
            9.804036e-04,
            -4.413030e-05,
            1.057734e-06,
            -1.052755e-08,
        ),
    ),
    (
        20.644,
        54.886,
        (
            -1.318058e02,
            4.830222e01,
            -1.646031e00,
            5.464731e-02,
            -9.650715e-04,
            8.802193e-06,
            -3.110810e-08,
            0.000000e00,
            0.000000e00,
            0.000000e00,
        ),
    ),
)

# Direct tables (°C -> mV).
_DIRECT_BELOW_ZERO: tuple[float, ...] = (
    0.000000000000e00,
    0.394501280250e-01,
    0.236223735980e-04,
    -0.328589067840e-06,
    -0.499048287770e-08,
    -0.675090591730e-10,
    -0.574103274280e-12,
    -0.310888728940e-14,
    -0.104516093650e-16,
    -0.198892668780e-19,
    -0.163226974860e-22,
)

_DIRECT_ABOVE_ZERO: tuple[float, ...] = (
    -0.176004136860e-01,
    0.389212049750e-01,
    0.185587700320e-04,
    -0.994575928740e-07,
    0.318409457190e-09,
    -0.560728448890e-12,
    0.560750590590e-15,
    -0.320207200030e-18,
    0.971511471520e-22,
    -0.121047212750e-25,
)

# Exponential correction term for the range above 0 °C.
_A0, _A1, _A2 = 0.118597600000e00, -0.118343200000e-03, 0.126968600000e03


class TypeK:
    """Voltage/temperature conversion for a type K thermocouple."""

    MV_MIN = -5.891
    MV_MAX = 54.886
    C_MIN = -270.0
    C_MAX = 1372.0

    @property
    def f_min(self) -> float:
        return c_to_f(self.C_MIN)

    @property
    def f_max(self) -> float:
        return c_to_f(self.C_MAX)

    def inrange_mv(self, mv: float) -> bool:
        """True if the emf lies inside the inverse table."""
        return self.MV_MIN <= mv <= self.MV_MAX

    def inrange_c(self, amb_c: float) -> bool:
        """True if the Celsius temperature lies inside the direct table."""
        return self.C_MIN <= amb_c <= self.C_MAX

    def inrange_f(self, amb_f: float) -> bool:
        """True if the Fahrenheit temperature lies inside the direct table."""
        return self.f_min <= amb_f <= self.f_max

    def temp_c(self, mv: float, amb_c: float | None = None) -> float:
        """Temperature at the tip in °C.

        Without ``amb_c`` the reading is referenced to 0 °C; with it the
        cold junction at ``amb_c`` is compensated for.
        """
        if amb_c is not None:
            mv = mv + self.mv_c(amb_c)
        if not self.inrange_mv(mv):
            raise ThermocoupleRangeError(f"emf {mv} mV outside type K range")
        coefficients = _INVERSE_RANGES[0][2]
        for low, high, coeffs in _INVERSE_RANGES:
            if low <= mv <= high:
                coefficients = coeffs
        return _polynomial(coefficients, mv)

    def temp_f(self, mv: float, amb_f: float | None = None) -> float:
        """Temperature at the tip in °F, optionally compensated for ``amb_f``."""
        amb_c = None if amb_f is None else f_to_c(amb_f)
        return c_to_f(self.temp_c(mv, amb_c))

    def mv_c(self, amb_c: float) -> float:
        """Emf in mV produced at ``amb_c`` °C, for cold junction compensation."""
        if not self.inrange_c(amb_c):
            raise ThermocoupleRangeError(f"temperature {amb_c} °C outside type K range")
        if amb_c <= 0.0:
            return _polynomial(_DIRECT_BELOW_ZERO, amb_c)
        exponential = _A0 * math.exp(_A1 * (amb_c - _A2) * (amb_c - _A2))
        return _polynomial(_DIRECT_ABOVE_ZERO, amb_c) + exponential

    def mv_f(self, amb_f: float) -> float:
        """Emf in mV produced at ``amb_f`` °F."""
        if not self.inrange_f(amb_f):
            raise ThermocoupleRangeError(f"temperature {amb_f} °F outside type K range")
        return self.mv_c(f_to_c(amb_f))