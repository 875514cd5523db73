"""Overdrive signal chain: gain stage, diode clipper and a fixed low-pass filter."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from .clipping import Clipping
from .distortion import Distortion

NAME = "distortion-plugin"
DEFAULT_DISTORTION = 0.5
DEFAULT_LEVEL = 1.0
FILTER_CUTOFF = 5000.0
MAX_CHANNELS = 2
SUPPORTED_CHANNEL_COUNTS = (1, 2)


def is_layout_supported(input_channels: int, output_channels: int) -> bool:
    """Return True for mono or stereo output whose input has the same channel count."""
    if output_channels not in SUPPORTED_CHANNEL_COUNTS:
        return False
    return input_channels == output_channels


def _clamp_unit(value: float) -> float:
    return min(1.0, max(0.0, float(value)))


class LowPassFilter:
    """Second-order Butterworth low-pass filter in transposed direct form II."""

    def __init__(self, sample_rate: float, cutoff: float) -> None:
        rate = float(sample_rate)
        frequency = float(cutoff)
        if not rate > 0.0:
            raise ValueError(f"sample rate must be positive, got {sample_rate!r}")
        if not 0.0 < frequency < rate / 2.0:
            raise ValueError(
                f"cutoff must lie between 0 and half the sample rate, got {cutoff!r}"
            )
        n = 1.0 / math.tan(math.pi * frequency / rate)
        n_squared = n * n
        inv_q = math.sqrt(2.0)
        c1 = 1.0 / (1.0 + inv_q * n + n_squared)
        self._b0 = c1
        self._b1 = 2.0 * c1
        self._b2 = c1
        self._a1 = c1 * 2.0 * (1.0 - n_squared)
        self._a2 = c1 * (1.0 - inv_q * n + n_squared)
        self._s1 = 0.0
        self._s2 = 0.0

    def process_sample(self, x: float) -> float:
        """Filter one sample and return the output."""
        out = self._b0 * x + self._s1
        self._s1 = self._b1 * x - self._a1 * out + self._s2
        self._s2 = self._b2 * x - self._a2 * out
        return out

    def reset(self) -> None:
        """Clear the filter's internal state."""
        self._s1 = 0.0
        self._s2 = 0.0


class DistortionProcessor:
    """Processes mono or stereo blocks through the overdrive chain.

    The gain stage and the clipper are shared between channels, so their
    state carries over from one channel to the next; each channel has its
    own low-pass filter, which is applied whether or not the effect is on.
    """

    def __init__(
        self,
        distortion: float = DEFAULT_DISTORTION,
        level: float = DEFAULT_LEVEL,
        enabled: bool = True,
    ) -> None:
        self.distortion = distortion
        self.level = level
        self.enabled = enabled
        self._gain_stage = Distortion(self.distortion)
        self._clipper = Clipping(self.level)
        self._filters: list[LowPassFilter] | None = None
        self._block_size = 0

    @property
    def distortion(self) -> float:
        """Distortion knob position, kept within 0..1."""
        return self._distortion

    @distortion.setter
    def distortion(self, value: float) -> None:
        self._distortion = _clamp_unit(value)

    @property
    def level(self) -> float:
        """Output level knob position, kept within 0..1."""
        return self._level

    @level.setter
    def level(self, value: float) -> None:
        self._level = _clamp_unit(value)

    @property
    def enabled(self) -> bool:
        """Whether the distortion and clipping stages are applied."""
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = bool(value)

    @property
    def block_size(self) -> int:
        """Largest block size announced by the last prepare_to_play call."""
        return self._block_size

    def prepare_to_play(self, sample_rate: float, block_size: int) -> None:
        """Set the sample rate and reset the output filters."""
        if int(block_size) <= 0:
            raise ValueError(f"block size must be positive, got {block_size!r}")
        filters = [LowPassFilter(sample_rate, FILTER_CUTOFF) for _ in range(MAX_CHANNELS)]
        self._gain_stage.prepare(sample_rate)
        self._clipper.prepare(sample_rate)
        self._filters = filters
        self._block_size = int(block_size)

    def process_block(self, channels: Iterable[Sequence[float]]) -> list[list[float]]:
        """Process one block given as a sequence of channels; return the new channels."""
        if self._filters is None:
            raise RuntimeError("prepare_to_play must be called before process_block")
        inputs = [list(channel) for channel in channels]
        if len(inputs) > len(self._filters):
            raise ValueError(
                f"at most {len(self._filters)} channels are supported, got {len(inputs)}"
            )
        if len({len(channel) for channel in inputs}) > 1:
            raise ValueError("all channels must hold the same number of samples")

        self._gain_stage.set_knob(self._distortion)
        self._clipper.set_knob(self._level)

        outputs = []
        for channel in inputs:
            if self._enabled:
                channel = [
                    self._clipper.process_sample(self._gain_stage.process_sample(x))
                    for x in channel
                ]
            outputs.append(channel)

        return [
            [lowpass.process_sample(x) for x in channel]
            for lowpass, channel in zip(self._filters, outputs)
        ]