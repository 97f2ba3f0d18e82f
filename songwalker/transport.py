"""Snapshot of the host transport state."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TransportState:
    """Host transport state, refreshed once per processing block."""

    bpm: float = 120.0
    time_sig_numerator: int = 4
    time_sig_denominator: int = 4
    playing: bool = False
    position_beats: float = 0.0
    position_samples: int = 0
    sample_rate: float = 44100.0
    looping: bool = False
    loop_start_beats: float = 0.0
    loop_end_beats: float = 0.0

    def update(
        self,
        tempo: float | None = None,
        time_sig_numerator: int | None = None,
        time_sig_denominator: int | None = None,
        playing: bool = False,
        pos_beats: float | None = None,
        pos_samples: int | None = None,
    ) -> None:
        """Apply values reported by the host; absent values keep their previous state.

        The time signature changes only when both its parts are given.
        """
        if tempo is not None:
            self.bpm = tempo
        if time_sig_numerator is not None and time_sig_denominator is not None:
            self.time_sig_numerator = time_sig_numerator
            self.time_sig_denominator = time_sig_denominator
        self.playing = playing
        if pos_beats is not None:
            self.position_beats = pos_beats
        if pos_samples is not None:
            self.position_samples = pos_samples

    def beats_to_samples(self, beats: float) -> float:
        """Convert a duration in beats to samples."""
        seconds_per_beat = 60.0 / self.bpm
        return beats * seconds_per_beat * self.sample_rate

    def samples_to_beats(self, samples: float) -> float:
        """Convert a number of samples to beats."""
        seconds_per_beat = 60.0 / self.bpm
        return samples / (seconds_per_beat * self.sample_rate)