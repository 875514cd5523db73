"""Circuit-modelled overdrive: gain stage, diode clipper, low-pass filter and WAV command line."""

__version__ = "0.0.1"
__all__ = ["clipping", "distortion", "processor", "cli"]