"""Sample zones, loaded preset instances and per-slot preset playback state."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from songwalker.voices import EnvelopeParams


def sample_playback_rate(
    note: int, root_note: int, fine_tune_cents: float, a4_freq: float = 440.0
) -> float:
    """Rate at which a sample recorded at root_note must play to sound at note.

    The reference pitch a4_freq scales both notes equally and so cancels out;
    it must still be positive.
    """
    if a4_freq <= 0:
        raise ValueError("a4_freq must be positive")
    semitones = (note - root_note) + fine_tune_cents / 100.0
    return 2.0 ** (semitones / 12.0)


@dataclass(frozen=True)
class SampleZone:
    """Key and velocity range covered by one sample, with its pitch and rate.

    The velocity range, if given, is on the MIDI scale 0–127 and inclusive.
    """

    key_low: int = 0
    key_high: int = 127
    root_note: int = 60
    fine_tune_cents: float = 0.0
    sample_rate: int = 44100
    velocity_range: tuple[int, int] | None = None

    def matches(self, note: int, velocity: float) -> bool:
        """Whether the zone covers the note at the given velocity (0.0–1.0)."""
        if not self.key_low <= note <= self.key_high:
            return False
        if self.velocity_range is not None:
            low, high = self.velocity_range
            midi_velocity = int(round(velocity * 127.0))
            if not low <= midi_velocity <= high:
                return False
        return True


@dataclass
class LoadedZone:
    """A sample zone with its decoded PCM data (interleaved when stereo)."""

    zone: SampleZone
    pcm_data: Sequence[float]
    channels: int = 1
    sample_rate: int | None = None

    def __post_init__(self) -> None:
        if self.channels < 1:
            raise ValueError("channels must be at least 1")
        if self.sample_rate is None:
            self.sample_rate = self.zone.sample_rate

    @property
    def frame_count(self) -> int:
        """Number of sample frames in the PCM data."""
        return len(self.pcm_data) // self.channels


@dataclass
class PresetInstance:
    """A preset whose zones are decoded and ready for playback."""

    zones: list[LoadedZone] = field(default_factory=list)
    name: str = ""

    def find_zone_indexed(self, note: int, velocity: float) -> tuple[int, LoadedZone] | None:
        """Return the first zone covering the note and velocity with its index, or None."""
        return next(
            ((i, z) for i, z in enumerate(self.zones) if z.zone.matches(note, velocity)),
            None,
        )


@dataclass
class PresetSlotState:
    """Preset playback state of a slot: the loaded preset and controller values."""

    active_preset: PresetInstance | None = None
    preset_id: str | None = None
    pitch_bend: float = 0.0
    mod_wheel: float = 0.0
    expression: float = 1.0
    envelope: EnvelopeParams = field(default_factory=EnvelopeParams)

    def handle_cc(self, cc: int, value: float) -> None:
        """Apply a MIDI control change; volume and pan are handled by the slot."""
        if cc == 1:
            self.mod_wheel = value
        elif cc == 11:
            self.expression = value

    def load_preset(self, preset_id: str, instance: PresetInstance) -> None:
        """Make a fully decoded preset the active one."""
        self.preset_id = preset_id
        self.active_preset = instance

    def unload_preset(self) -> None:
        """Drop the active preset."""
        self.preset_id = None
        self.active_preset = None