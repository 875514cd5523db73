[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "diodedrive"
version = "0.0.1"
description = "Circuit-modelled overdrive: an op-amp gain stage, diode clipper and low-pass filter for audio samples and WAV files"
requires-python = ">=3.10"
dependencies = []
keywords = ["audio", "distortion", "overdrive", "dsp", "diode clipper", "wav"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Sound/Audio",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
diodedrive = "diodedrive.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["diodedrive"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
