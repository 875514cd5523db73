"""Gain stage of an op-amp overdrive circuit, discretised with the trapezoidal rule."""

from __future__ import annotations

DEFAULT_SAMPLE_RATE = 44100.0
OUTPUT_LIMIT = 4.5

_C1 = 47.0e-9
_R3 = 4.7e3
_R4 = 1.0e6
_POT_RESISTANCE = 1.0e6


def _checked_rate(sample_rate: float) -> float:
    rate = float(sample_rate)
    if not rate > 0.0:
        raise ValueError(f"sample rate must be positive, got {sample_rate!r}")
    return rate


class Distortion:
    """Non-inverting op-amp gain stage whose gain is set by a distortion knob.

    The series capacitor is modelled as a resistor plus a state current
    source; the op-amp output saturates at the supply rails (+/-4.5 V).
    """

    def __init__(self, knob: float) -> None:
        self._sample_rate = DEFAULT_SAMPLE_RATE
        self._r1 = (1.0 / self._sample_rate) / (2.0 * _C1)
        self._x1 = 0.0
        self._knob = 0.0
        self._rp = 0.0
        self._g = self._gb = self._gi = self._gx1 = 0.0
        self.set_knob(knob)
        self._update_coefficients()

    @property
    def sample_rate(self) -> float:
        """Sample rate the stage is currently discretised at."""
        return self._sample_rate

    @property
    def knob(self) -> float:
        """Current distortion knob position."""
        return self._knob

    def process_sample(self, vi: float) -> float:
        """Run one input sample through the stage and return the output voltage."""
        vb = self._gb * vi - self._r1 * self._gb * self._x1
        vr1 = vi - vb
        vo = self._gi * vi - self._gx1 * self._x1
        vo = max(-OUTPUT_LIMIT, min(OUTPUT_LIMIT, vo))
        self._x1 = 2.0 * vr1 / self._r1 - self._x1
        return vo

    def prepare(self, sample_rate: float) -> None:
        """Re-discretise the circuit for a new sample rate."""
        rate = _checked_rate(sample_rate)
        if rate != self._sample_rate:
            self._sample_rate = rate
            self._update_coefficients()

    def set_knob(self, knob: float) -> None:
        """Move the distortion knob; 1.0 removes the potentiometer resistance."""
        if knob != self._knob:
            self._knob = float(knob)
            self._rp = _POT_RESISTANCE * (1.0 - self._knob)
            self._update_grouped_resistances()

    def _update_coefficients(self) -> None:
        self._r1 = (1.0 / self._sample_rate) / (2.0 * _C1)
        self._update_grouped_resistances()

    def _update_grouped_resistances(self) -> None:
        self._g = 1.0 / (self._r1 + _R3 + self._rp)
        self._gb = (_R3 + self._rp) * self._g
        self._gi = 1.0 + _R4 * self._g
        self._gx1 = self._r1 * _R4 * self._g