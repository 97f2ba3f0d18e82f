"""A single instrument slot: MIDI handling and voice rendering."""

from __future__ import annotations

import math
from collections.abc import MutableSequence

from songwalker.events import MidiCC, MidiPitchBend, NoteEvent, NoteOff, NoteOn
from songwalker.instrument import PresetSlotState, sample_playback_rate
from songwalker.runner import RunnerSlotState
from songwalker.transport import TransportState
from songwalker.voices import EnvelopeParams, EnvStage, Voice, VoicePool, advance_envelope, midi_to_freq

DEFAULT_POLYPHONY = 64


class Slot:
    """One instrument in the rack.

    Without source code the slot plays its loaded preset (or a sine wave when
    none is loaded); with source code, notes start pattern-runner instances.
    """

    def __init__(self, index: int) -> None:
        self.index = index
        self.voice_pool = VoicePool(DEFAULT_POLYPHONY)
        self.volume = 1.0
        self.pan = 0.0
        self.muted = False
        self.solo = False
        self._midi_channel = 0
        self.sample_rate = 44100.0
        self.preset_state = PresetSlotState()
        self.runner_state = RunnerSlotState()
        self.has_source = False
        self.name = f"Slot {index + 1}"

    @property
    def midi_channel(self) -> int:
        """MIDI channel the slot responds to: 0 for all, 1–16 for one channel."""
        return self._midi_channel

    @midi_channel.setter
    def midi_channel(self, channel: int) -> None:
        self._midi_channel = max(0, min(16, channel))

    def initialize(self, sample_rate: float) -> None:
        """Set the host sample rate."""
        self.sample_rate = sample_rate

    def reset(self) -> None:
        """Release every voice and drop every runner instance."""
        self.voice_pool.release_all()
        self.runner_state.reset()

    def active_voice_count(self) -> int:
        """Number of voices currently sounding."""
        return self.voice_pool.active_count()

    def handle_midi_event(self, event: NoteEvent, transport: TransportState) -> None:
        """Route an event to the pattern runner or to preset playback."""
        if self.has_source:
            self._handle_runner_event(event, transport)
        else:
            self._handle_preset_event(event)

    def _handle_preset_event(self, event: NoteEvent) -> None:
        if isinstance(event, NoteOn):
            voice = self.voice_pool.allocate(event.note, event.velocity)
            if voice is None:
                return
            voice.phase_inc = midi_to_freq(event.note) / self.sample_rate
            preset = self.preset_state.active_preset
            if preset is None:
                return
            found = preset.find_zone_indexed(event.note, event.velocity)
            if found is None:
                return
            zone_index, loaded = found
            rate = sample_playback_rate(
                event.note, loaded.zone.root_note, loaded.zone.fine_tune_cents, 440.0
            )
            voice.sample_rate_ratio = rate * (loaded.sample_rate / self.sample_rate)
            voice.sample_pos = 0.0
            voice.zone_index = zone_index
        elif isinstance(event, NoteOff):
            self.voice_pool.release(event.note)
        elif isinstance(event, MidiPitchBend):
            self.preset_state.pitch_bend = event.value
        elif isinstance(event, MidiCC):
            self.preset_state.handle_cc(event.cc, event.value)

    def _handle_runner_event(self, event: NoteEvent, transport: TransportState) -> None:
        if isinstance(event, NoteOn):
            self.runner_state.spawn_instance(event.note, event.velocity, transport)
        elif isinstance(event, NoteOff):
            self.runner_state.release_instance(event.note)
            self.voice_pool.release(event.note)
        elif isinstance(event, MidiPitchBend):
            self.runner_state.pitch_bend = event.value

    def render(
        self,
        left: MutableSequence[float],
        right: MutableSequence[float],
        num_samples: int,
        sample_rate: float,
        transport: TransportState,
    ) -> None:
        """Add this slot's audio for num_samples frames into left and right."""
        if self.has_source:
            self.runner_state.advance(self.voice_pool, num_samples, sample_rate, transport)
            adsr = self.runner_state.envelope
        else:
            adsr = self.preset_state.envelope
        self._render_voices(left, right, num_samples, sample_rate, adsr)
        self.voice_pool.cleanup_finished()

    def _render_voices(
        self,
        left: MutableSequence[float],
        right: MutableSequence[float],
        num_samples: int,
        sample_rate: float,
        adsr: EnvelopeParams,
    ) -> None:
        for voice in self.voice_pool.active_voices():
            for i in range(num_samples):
                env = advance_envelope(voice, adsr, sample_rate)
                if voice.env_stage >= EnvStage.OFF:
                    break
                frame = self._next_frame(voice)
                if frame is None:
                    voice.env_stage = EnvStage.OFF
                    break
                sample_l, sample_r = frame
                gain = env * voice.velocity
                left[i] += sample_l * gain
                right[i] += sample_r * gain

    def _next_frame(self, voice: Voice) -> tuple[float, float] | None:
        """Produce the voice's next stereo frame, or None when its sample has ended."""
        preset = self.preset_state.active_preset
        zone_index = voice.zone_index
        if preset is not None and zone_index is not None and zone_index < len(preset.zones):
            loaded = preset.zones[zone_index]
            pcm = loaded.pcm_data
            total_frames = loaded.frame_count
            if total_frames == 0 or voice.sample_pos >= total_frames:
                return None
            pos = voice.sample_pos
            idx0 = int(pos)
            frac = pos - idx0
            idx1 = min(idx0 + 1, total_frames - 1)
            if loaded.channels >= 2:
                l0, l1 = pcm[idx0 * 2], pcm[idx1 * 2]
                r0, r1 = pcm[idx0 * 2 + 1], pcm[idx1 * 2 + 1]
                frame = (l0 + (l1 - l0) * frac, r0 + (r1 - r0) * frac)
            else:
                s0, s1 = pcm[idx0], pcm[idx1]
                s = s0 + (s1 - s0) * frac
                frame = (s, s)
            voice.sample_pos += voice.sample_rate_ratio
            return frame

        s = math.sin(voice.phase * math.tau)
        voice.phase += voice.phase_inc
        if voice.phase >= 1.0:
            voice.phase -= 1.0
        return s, s