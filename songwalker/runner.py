"""Running compiled note patterns, one instance per held MIDI note."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from songwalker.transport import TransportState
from songwalker.voices import EnvelopeParams, VoicePool, midi_to_freq

DEFAULT_ROOT_NOTE = 60
"""Root note for transposition (C4)."""

MAX_RUNNER_INSTANCES = 16
"""Maximum simultaneous runner instances."""

_NOTE_BASES = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
_ACCIDENTALS = {"#": 1, "s": 1, "b": -1}
_OCTAVE = re.compile(r"[+-]?[0-9]+")


def parse_pitch(pitch: str) -> int | None:
    """Parse a pitch such as "C4", "D#5" or "Eb3" to a MIDI note, or None."""
    if not pitch:
        return None
    base = _NOTE_BASES.get(pitch[0])
    if base is None:
        return None
    accidental = _ACCIDENTALS.get(pitch[1:2], 0)
    octave_text = pitch[2:] if pitch[1:2] in _ACCIDENTALS else pitch[1:]
    if not _OCTAVE.fullmatch(octave_text):
        return None
    midi = (int(octave_text) + 1) * 12 + base + accidental
    return midi if 0 <= midi <= 127 else None


@dataclass(frozen=True)
class ScheduledNote:
    """A note event at a beat position within a pattern."""

    time: float
    pitch: str
    velocity: float = 1.0
    gate: float = 1.0


@dataclass
class EventList:
    """A compiled pattern: note events ordered by time, and its length in beats."""

    events: list[ScheduledNote] = field(default_factory=list)
    total_beats: float = 0.0


@dataclass
class _RunnerInstance:
    trigger_note: int
    transpose: int
    velocity: float
    bpm: float
    cursor: int = 0
    position_beats: float = 0.0
    active: bool = True
    releasing: bool = False


@dataclass
class RunnerSlotState:
    """Pattern-runner state of a slot."""

    event_list: EventList | None = None
    source_code: str = ""
    root_note: int = DEFAULT_ROOT_NOTE
    compile_error: str | None = None
    pitch_bend: float = 0.0
    envelope: EnvelopeParams = field(default_factory=EnvelopeParams)
    _instances: list[_RunnerInstance] = field(default_factory=list, repr=False)

    @property
    def trigger_notes(self) -> tuple[int, ...]:
        """MIDI notes of the instances still held in the runner."""
        return tuple(inst.trigger_note for inst in self._instances)

    def reset(self) -> None:
        """Drop every running instance."""
        self._instances.clear()

    def spawn_instance(self, note: int, velocity: float, transport: TransportState) -> None:
        """Start an instance transposed by (note - root_note) semitones."""
        if self.event_list is None or len(self._instances) >= MAX_RUNNER_INSTANCES:
            return
        self._instances.append(
            _RunnerInstance(
                trigger_note=note,
                transpose=note - self.root_note,
                velocity=velocity,
                bpm=transport.bpm,
            )
        )

    def release_instance(self, note: int) -> None:
        """Mark the instances triggered by the note as releasing."""
        for inst in self._instances:
            if inst.trigger_note == note and inst.active and not inst.releasing:
                inst.releasing = True

    def advance(
        self,
        voice_pool: VoicePool,
        num_samples: int,
        sample_rate: float,
        transport: TransportState,
    ) -> None:
        """Advance every instance by num_samples, starting voices for events in the window.

        Releasing instances are removed without firing further events; an instance
        that reaches the end of the pattern starts it again from the beginning.
        """
        event_list = self.event_list
        if event_list is None:
            return

        events = event_list.events
        beat_advance = transport.bpm / 60.0 / sample_rate * num_samples

        for inst in self._instances:
            if inst.releasing:
                inst.active = False
        self._instances = [inst for inst in self._instances if inst.active]

        for inst in self._instances:
            start_beat = inst.position_beats
            end_beat = start_beat + beat_advance

            while inst.cursor < len(events):
                event = events[inst.cursor]
                if event.time >= end_beat:
                    break
                if event.time >= start_beat:
                    self._fire(event, inst, voice_pool, sample_rate)
                inst.cursor += 1

            inst.position_beats = end_beat
            if inst.cursor >= len(events) and inst.position_beats >= event_list.total_beats:
                inst.cursor = 0
                inst.position_beats = 0.0

    @staticmethod
    def _fire(
        event: ScheduledNote,
        inst: _RunnerInstance,
        voice_pool: VoicePool,
        sample_rate: float,
    ) -> None:
        base_pitch = parse_pitch(event.pitch)
        if base_pitch is None:
            return
        pitch = max(0, min(127, base_pitch + inst.transpose))
        voice = voice_pool.allocate(pitch, event.velocity * inst.velocity)
        if voice is not None:
            voice.phase_inc = midi_to_freq(pitch) / sample_rate
            voice.transpose = inst.transpose