"""Anti-parallel diode clipper solved per sample with damped Newton iteration."""

from __future__ import annotations

import math

DEFAULT_SAMPLE_RATE = 44100.0

_ETA = 2.0
_SATURATION_CURRENT = 1.0e-6
_THERMAL_VOLTAGE = 26.0e-3
_C2 = 1.0e-9
_R5 = 10.0e3
_TOLERANCE = 1.0e-8
_MAX_ITERATIONS = 50


def _checked_rate(sample_rate: float) -> float:
    rate = float(sample_rate)
    if not rate > 0.0:
        raise ValueError(f"sample rate must be positive, got {sample_rate!r}")
    return rate


class Clipping:
    """Diode pair clipping stage followed by an output level potentiometer."""

    def __init__(self, level_knob: float) -> None:
        self._sample_rate = DEFAULT_SAMPLE_RATE
        self._x2 = 0.0
        self._vd = 0.0
        self._pot_level: float | None = None
        self._r2 = 0.0
        self._g = 0.0
        self._update_coefficients()
        self.set_knob(level_knob)

    @property
    def sample_rate(self) -> float:
        """Sample rate the stage is currently discretised at."""
        return self._sample_rate

    @property
    def level(self) -> float:
        """Effective output gain applied to the diode voltage."""
        return self._pot_level if self._pot_level is not None else 0.0

    def _residual(self, vi: float, vd: float) -> float:
        return (
            -vi / self._r2
            + _SATURATION_CURRENT * math.sinh(vd / (_ETA * _THERMAL_VOLTAGE))
            + self._g * vd
            - self._x2
        )

    def _derivative(self, vd: float) -> float:
        scale = _ETA * _THERMAL_VOLTAGE
        return (_SATURATION_CURRENT / scale) * math.cosh(vd / scale) + self._g

    def process_sample(self, vi: float) -> float:
        """Solve the diode voltage for one input sample and return the scaled output."""
        damping = 1.0
        fd = self._residual(vi, self._vd)
        for _ in range(_MAX_ITERATIONS):
            if abs(fd) <= _TOLERANCE:
                break
            candidate = self._vd - damping * fd / self._derivative(self._vd)
            fn = self._residual(vi, candidate)
            if abs(fn) < abs(fd):
                self._vd = candidate
                damping = 1.0
                fd = fn
            else:
                damping *= 0.5
        self._x2 = 2.0 * self._vd / self._r2 - self._x2
        return self.level * self._vd

    def prepare(self, sample_rate: float) -> None:
        """Re-discretise the circuit for a new sample rate."""
        rate = _checked_rate(sample_rate)
        if rate != self._sample_rate:
            self._sample_rate = rate
            self._update_coefficients()

    def set_knob(self, level_knob: float) -> None:
        """Move the level knob, mapping 0..1 onto a gain of 0.00001..0.99999."""
        if self._pot_level != level_knob:
            self._pot_level = 0.00001 + 0.99998 * float(level_knob)

    def _update_coefficients(self) -> None:
        ts = 1.0 / self._sample_rate
        self._r2 = ts / (2.0 * _C2)
        self._g = 1.0 / _R5 + 1.0 / self._r2