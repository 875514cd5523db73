# diodedrive

An overdrive effect that models its analogue circuit instead of using a
lookup curve. The signal goes through three stages:

1. **Distortion** (`diodedrive.distortion.Distortion`): a non-inverting op-amp
   gain stage. A potentiometer, the *distortion* knob, sets its gain. The
   output is limited to ±4.5.
2. **Clipping** (`diodedrive.clipping.Clipping`): a pair of anti-parallel
   diodes. The diode voltage is solved for each sample by damped Newton
   iteration, with at most 50 steps. An output level potentiometer, the
   *level* knob, follows. It maps 0..1 onto a gain of 0.00001..0.99999.
3. **Low-pass filter** (`diodedrive.processor.LowPassFilter`): a second-order
   Butterworth filter at 5 kHz that removes harsh high frequencies.

The package uses only the standard library.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install .[test]
```

## Command line

```
diodedrive input.wav output.wav
```

The input must be a mono or stereo PCM WAV file with 8, 16, 24 or 32-bit
samples. The output file has the same channel count, sample width and sample
rate as the input. Samples that go past full scale are clipped when the file
is written.

The options are:

- `--distortion X`: the distortion knob, 0..1. The default is 0.5.
- `--level X`: the output level knob, 0..1. The default is 1.0.
- `--bypass`: skip the distortion and clipping stages. The 5 kHz low-pass
  filter is still applied.

Knob values outside 0..1 are clamped to that range.

On success the command prints the number of frames it processed and exits
with status 0. If the file cannot be read or written, or its format is not
supported, the command prints an error to stderr and exits with status 1.

## Library use

```python
from diodedrive.processor import DistortionProcessor

proc = DistortionProcessor(distortion=0.7, level=0.8, enabled=True)
proc.prepare_to_play(48000, 512)

left = [0.0, 0.1, 0.2, 0.1, 0.0]
right = [0.0, -0.1, -0.2, -0.1, 0.0]
out_left, out_right = proc.process_block([left, right])
```

How `DistortionProcessor` behaves:

- `process_block` takes one or two channels of equal length and returns new
  lists. It raises `RuntimeError` if `prepare_to_play` has not been called.
  It raises `ValueError` if there are more than two channels or the channels
  differ in length.
- The `distortion`, `level` and `enabled` attributes can be changed between
  blocks. The knob values are clamped to 0..1.
- The gain stage and the clipper are shared between channels, so their state
  carries over from one channel to the next. Each channel has its own
  low-pass filter.
- `prepare_to_play` resets the filters. The sample rate must be above
  10 kHz, because the 5 kHz cutoff has to lie below half the sample rate.
  The block size must be positive.

You can also use the stages on their own:

```python
from diodedrive.distortion import Distortion
from diodedrive.clipping import Clipping

drive = Distortion(0.5)
clip = Clipping(1.0)
drive.prepare(48000)
clip.prepare(48000)

y = clip.process_sample(drive.process_sample(0.05))
```

Both stages start at 44100 Hz. `prepare` raises `ValueError` for a sample
rate that is not positive.

`is_layout_supported(input_channels, output_channels)` in
`diodedrive.processor` returns True only for mono or stereo output whose
input has the same channel count.

To render a file from Python, call
`diodedrive.cli.process_wav(input_path, output_path, distortion, level, enabled)`.
It returns the number of frames processed.

## What it does not do

diodedrive works on sample lists and WAV files only. It does not play or
record audio in real time, it cannot be loaded into a host application, and it
has no graphical controls. It also does not save or restore knob settings.