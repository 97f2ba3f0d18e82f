"""Buffer-level audio utilities."""

from __future__ import annotations

from collections.abc import MutableSequence, Sequence
from itertools import islice


def mix_add(dst: MutableSequence[float], src: Sequence[float], gain: float, n: int) -> None:
    """Add src * gain into dst in place, for at most n samples."""
    n = min(n, len(dst), len(src))
    for i, (d, s) in enumerate(zip(islice(dst, n), islice(src, n))):
        dst[i] = d + s * gain


def apply_gain(buf: MutableSequence[float], gain: float, n: int) -> None:
    """Multiply the first n samples of buf by gain, in place."""
    n = min(n, len(buf))
    for i, s in enumerate(islice(buf, n)):
        buf[i] = s * gain