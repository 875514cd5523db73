"""Command-line front end that runs WAV files through the overdrive chain."""

from __future__ import annotations

import argparse
import sys
import wave
from collections.abc import Sequence

from .processor import (
    DEFAULT_DISTORTION,
    DEFAULT_LEVEL,
    DistortionProcessor,
    is_layout_supported,
)

BLOCK_SIZE = 512


def _decode(data: bytes, width: int) -> list[float]:
    if width == 1:
        return [(byte - 128) / 128.0 for byte in data]
    if width not in (2, 3, 4):
        raise ValueError(f"unsupported sample width: {width} bytes")
    full_scale = float(1 << (8 * width - 1))
    return [
        int.from_bytes(data[start:start + width], "little", signed=True) / full_scale
        for start in range(0, len(data), width)
    ]


def _encode(samples: Sequence[float], width: int) -> bytes:
    if width == 1:
        return bytes(min(255, max(0, round(x * 128.0) + 128)) for x in samples)
    if width not in (2, 3, 4):
        raise ValueError(f"unsupported sample width: {width} bytes")
    full_scale = 1 << (8 * width - 1)
    return b"".join(
        min(full_scale - 1, max(-full_scale, round(x * full_scale))).to_bytes(
            width, "little", signed=True
        )
        for x in samples
    )


def process_wav(
    input_path: str,
    output_path: str,
    distortion: float = DEFAULT_DISTORTION,
    level: float = DEFAULT_LEVEL,
    enabled: bool = True,
) -> int:
    """Process a PCM WAV file into a new file of the same format; return the frame count."""
    with wave.open(str(input_path), "rb") as source:
        channel_count = source.getnchannels()
        width = source.getsampwidth()
        sample_rate = source.getframerate()
        data = source.readframes(source.getnframes())

    if not is_layout_supported(channel_count, channel_count):
        raise ValueError(f"only mono and stereo files are supported, got {channel_count} channels")

    interleaved = _decode(data, width)
    channels = [interleaved[index::channel_count] for index in range(channel_count)]
    frame_count = len(channels[0])

    processor = DistortionProcessor(distortion, level, enabled)
    processor.prepare_to_play(sample_rate, BLOCK_SIZE)

    processed: list[list[float]] = [[] for _ in range(channel_count)]
    for start in range(0, frame_count, BLOCK_SIZE):
        block = processor.process_block(
            channel[start:start + BLOCK_SIZE] for channel in channels
        )
        for target, samples in zip(processed, block):
            target.extend(samples)

    output = [sample for frame in zip(*processed) for sample in frame]
    with wave.open(str(output_path), "wb") as sink:
        sink.setnchannels(channel_count)
        sink.setsampwidth(width)
        sink.setframerate(sample_rate)
        sink.writeframes(_encode(output, width))
    return frame_count


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diodedrive", description="Run a WAV file through a diode overdrive."
    )
    parser.add_argument("input", help="input PCM WAV file")
    parser.add_argument("output", help="output WAV file")
    parser.add_argument(
        "--distortion", type=float, default=DEFAULT_DISTORTION,
        help="distortion knob, 0..1 (default: %(default)s)",
    )
    parser.add_argument(
        "--level", type=float, default=DEFAULT_LEVEL,
        help="output level knob, 0..1 (default: %(default)s)",
    )
    parser.add_argument(
        "--bypass", action="store_true",
        help="skip the distortion and clipping stages",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, process the file and return an exit status."""
    args = _build_parser().parse_args(argv)
    try:
        frames = process_wav(
            args.input, args.output, args.distortion, args.level, not args.bypass
        )
    except (OSError, ValueError, EOFError, wave.Error) as exc:
        print(f"diodedrive: {exc}", file=sys.stderr)
        return 1
    print(f"processed {frames} frames into {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())