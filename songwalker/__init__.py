"""Multi-timbral instrument rack: slots, voice pools, sampler presets, pattern runners, MIDI parsing and preset library indexes."""

__version__ = "0.2.1"