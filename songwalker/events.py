"""MIDI note events and decoding of raw MIDI messages."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class NoteOn:
    """A key press; velocity runs from 0.0 to 1.0."""

    note: int
    velocity: float
    channel: int = 0
    timing: int = 0
    voice_id: int | None = None


@dataclass(frozen=True)
class NoteOff:
    """A key release; velocity runs from 0.0 to 1.0."""

    note: int
    velocity: float = 0.0
    channel: int = 0
    timing: int = 0
    voice_id: int | None = None


@dataclass(frozen=True)
class PolyPressure:
    """Polyphonic aftertouch for a single note."""

    note: int
    pressure: float
    channel: int = 0
    timing: int = 0
    voice_id: int | None = None


@dataclass(frozen=True)
class MidiCC:
    """A control change; value runs from 0.0 to 1.0."""

    cc: int
    value: float
    channel: int = 0
    timing: int = 0


@dataclass(frozen=True)
class MidiPitchBend:
    """A pitch bend; value runs from 0.0 to 1.0 with 0.5 at the centre."""

    value: float
    channel: int = 0
    timing: int = 0


@dataclass(frozen=True)
class MidiChannelPressure:
    """Channel-wide aftertouch."""

    pressure: float
    channel: int = 0
    timing: int = 0


NoteEvent = NoteOn | NoteOff | PolyPressure | MidiCC | MidiPitchBend | MidiChannelPressure


def parse_midi_bytes(data: bytes) -> NoteEvent | None:
    """Decode one raw MIDI message, or return None if it is not understood.

    A Note On with velocity zero is reported as a Note Off.
    """
    if not data:
        return None

    status = data[0] & 0xF0
    channel = data[0] & 0x0F
    size = len(data)

    if status == 0x80 and size >= 3:
        return NoteOff(note=data[1], velocity=data[2] / 127.0, channel=channel)
    if status == 0x90 and size >= 3:
        velocity = data[2] / 127.0
        if velocity == 0.0:
            return NoteOff(note=data[1], velocity=0.0, channel=channel)
        return NoteOn(note=data[1], velocity=velocity, channel=channel)
    if status == 0xA0 and size >= 3:
        return PolyPressure(note=data[1], pressure=data[2] / 127.0, channel=channel)
    if status == 0xB0 and size >= 3:
        return MidiCC(cc=data[1], value=data[2] / 127.0, channel=channel)
    if status == 0xE0 and size >= 3:
        raw = (data[2] << 7) | data[1]
        return MidiPitchBend(value=raw / 16383.0, channel=channel)
    if status == 0xD0 and size >= 2:
        return MidiChannelPressure(pressure=data[1] / 127.0, channel=channel)
    return None