"""Voices, the pre-allocated voice pool and the ADSR envelope."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import IntEnum


class EnvStage(IntEnum):
    """Stages of the ADSR envelope."""

    ATTACK = 0
    DECAY = 1
    SUSTAIN = 2
    RELEASE = 3
    OFF = 4


@dataclass
class Voice:
    """State of one voice in a pool."""

    active: bool = False
    note: int = 0
    velocity: float = 0.0
    phase: float = 0.0
    phase_inc: float = 0.0
    env_gain: float = 0.0
    env_stage: int = EnvStage.OFF
    env_samples: int = 0
    releasing: bool = False
    sample_pos: float = 0.0
    sample_rate_ratio: float = 1.0
    transpose: int = 0
    zone_index: int | None = None


@dataclass
class EnvelopeParams:
    """ADSR envelope parameters."""

    attack_secs: float = 0.01
    decay_secs: float = 0.1
    sustain_level: float = 0.8
    release_secs: float = 0.3


@dataclass
class VoicePool:
    """Fixed-size set of voices with voice stealing."""

    max_polyphony: int
    voices: list[Voice] = field(init=False)

    def __post_init__(self) -> None:
        self.voices = [Voice() for _ in range(self.max_polyphony)]

    def allocate(self, note: int, velocity: float) -> Voice | None:
        """Start a voice for a note, stealing a releasing voice (or the first) when full."""
        if not self.voices:
            return None
        voice = next((v for v in self.voices if not v.active), None)
        if voice is None:
            voice = next((v for v in self.voices if v.releasing), self.voices[0])
        voice.active = True
        voice.note = note
        voice.velocity = velocity
        voice.env_stage = EnvStage.ATTACK
        voice.env_samples = 0
        voice.env_gain = 0.0
        voice.releasing = False
        voice.phase = 0.0
        voice.sample_pos = 0.0
        return voice

    def _start_release(self, voice: Voice) -> None:
        voice.releasing = True
        voice.env_stage = EnvStage.RELEASE
        voice.env_samples = 0

    def release(self, note: int) -> None:
        """Send every active voice playing the note into its release stage."""
        for voice in self.voices:
            if voice.active and voice.note == note and not voice.releasing:
                self._start_release(voice)

    def release_all(self) -> None:
        """Send every active voice into its release stage."""
        for voice in self.voices:
            if voice.active and not voice.releasing:
                self._start_release(voice)

    def kill_all(self) -> None:
        """Deactivate every voice at once, with no release tail."""
        for voice in self.voices:
            voice.active = False
            voice.env_stage = EnvStage.OFF

    def active_voices(self) -> Iterator[Voice]:
        """Iterate over the active voices."""
        return (v for v in self.voices if v.active)

    def active_count(self) -> int:
        """Number of active voices."""
        return sum(1 for v in self.voices if v.active)

    def cleanup_finished(self) -> None:
        """Deactivate voices whose envelope has finished."""
        for voice in self.voices:
            if voice.active and voice.env_stage >= EnvStage.OFF:
                voice.active = False


def advance_envelope(voice: Voice, adsr: EnvelopeParams, sample_rate: float) -> float:
    """Advance a voice's envelope by one sample and return its gain."""
    stage = voice.env_stage
    if stage == EnvStage.ATTACK:
        total = int(adsr.attack_secs * sample_rate)
        if total == 0 or voice.env_samples >= total:
            voice.env_stage = EnvStage.DECAY
            voice.env_samples = 0
            voice.env_gain = 1.0
            return 1.0
        gain = voice.env_samples / total
        voice.env_gain = gain
        voice.env_samples += 1
        return gain
    if stage == EnvStage.DECAY:
        total = int(adsr.decay_secs * sample_rate)
        if total == 0 or voice.env_samples >= total:
            voice.env_stage = EnvStage.SUSTAIN
            voice.env_samples = 0
            voice.env_gain = adsr.sustain_level
            return adsr.sustain_level
        t = voice.env_samples / total
        gain = 1.0 - t * (1.0 - adsr.sustain_level)
        voice.env_gain = gain
        voice.env_samples += 1
        return gain
    if stage == EnvStage.SUSTAIN:
        return adsr.sustain_level
    if stage == EnvStage.RELEASE:
        total = int(adsr.release_secs * sample_rate)
        if total == 0 or voice.env_samples >= total:
            voice.env_stage = EnvStage.OFF
            voice.env_gain = 0.0
            return 0.0
        t = voice.env_samples / total
        voice.env_samples += 1
        return voice.env_gain * (1.0 - t)
    return 0.0


def midi_to_freq(note: int) -> float:
    """Equal-tempered frequency of a MIDI note, with A4 (69) at 440 Hz."""
    return 440.0 * 2.0 ** ((note - 69) / 12.0)