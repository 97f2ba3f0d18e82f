"""Pre-allocated stereo mix buffer."""

from __future__ import annotations

import math


class MixBuffer:
    """Stereo buffer of a fixed number of frames, stored as two channel lists."""

    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        self._left = [0.0] * capacity
        self._right = [0.0] * capacity

    @property
    def capacity(self) -> int:
        """Number of sample frames this buffer holds."""
        return self._capacity

    @property
    def left(self) -> list[float]:
        """Left channel samples (mutable)."""
        return self._left

    @property
    def right(self) -> list[float]:
        """Right channel samples (mutable)."""
        return self._right

    @property
    def channels(self) -> tuple[list[float], list[float]]:
        """Both channels as a (left, right) pair."""
        return self._left, self._right

    def clear(self) -> None:
        """Zero the whole buffer."""
        self.clear_n(self._capacity)

    def clear_n(self, n: int) -> None:
        """Zero the first n frames."""
        end = max(0, min(n, self._capacity))
        self._left[:end] = [0.0] * end
        self._right[:end] = [0.0] * end

    def add(self, i: int, left: float, right: float) -> None:
        """Add a stereo pair at frame i; out-of-range frames are ignored."""
        if 0 <= i < self._capacity:
            self._left[i] += left
            self._right[i] += right

    def get(self, i: int) -> tuple[float, float]:
        """Read the stereo pair at frame i, or silence when out of range."""
        if 0 <= i < self._capacity:
            return self._left[i], self._right[i]
        return 0.0, 0.0

    def set(self, i: int, left: float, right: float) -> None:
        """Set the stereo pair at frame i; out-of-range frames are ignored."""
        if 0 <= i < self._capacity:
            self._left[i] = left
            self._right[i] = right

    def mix_from(self, other: MixBuffer, n: int) -> None:
        """Add the first n frames of another buffer into this one."""
        n = max(0, min(n, self._capacity, other._capacity))
        self._left[:n] = [a + b for a, b in zip(self._left[:n], other._left[:n])]
        self._right[:n] = [a + b for a, b in zip(self._right[:n], other._right[:n])]

    def apply_gain(self, gain: float, n: int) -> None:
        """Multiply the first n frames by gain."""
        self._scale(gain, gain, n)

    def apply_pan(self, pan: float, n: int) -> None:
        """Constant-power pan of the first n frames; pan runs from -1 (left) to +1 (right)."""
        angle = (max(-1.0, min(1.0, pan)) + 1.0) * (math.pi / 4)
        self._scale(math.cos(angle), math.sin(angle), n)

    def _scale(self, gain_l: float, gain_r: float, n: int) -> None:
        n = max(0, min(n, self._capacity))
        self._left[:n] = [s * gain_l for s in self._left[:n]]
        self._right[:n] = [s * gain_r for s in self._right[:n]]