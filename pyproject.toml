[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "songwalker"
version = "0.2.1"
description = "Multi-timbral instrument rack: voice pools, ADSR envelopes, sampler zones, pattern runners and preset library indexes"
requires-python = ">=3.10"
dependencies = []
keywords = ["audio", "synthesizer", "sampler", "midi", "instrument", "presets"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
    "Topic :: Multimedia :: Sound/Audio :: MIDI",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["songwalker"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
