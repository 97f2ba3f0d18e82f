"""The rack of instrument slots."""

from __future__ import annotations

from songwalker.slot import Slot

MAX_SLOTS = 16
"""Maximum number of simultaneous slots."""


class SlotManager:
    """Holds the slots of the rack, up to MAX_SLOTS of them."""

    def __init__(self) -> None:
        self._slots: list[Slot] = []
        self.sample_rate = 44100.0

    @property
    def slots(self) -> list[Slot]:
        """The slots, in rack order."""
        return self._slots

    @property
    def slot_count(self) -> int:
        """Number of slots in the rack."""
        return len(self._slots)

    def _new_slot(self, index: int) -> Slot:
        slot = Slot(index)
        slot.initialize(self.sample_rate)
        return slot

    def allocate_all(self) -> None:
        """Fill an empty rack with MAX_SLOTS slots; a non-empty rack is left alone."""
        if not self._slots:
            self._slots.extend(self._new_slot(i) for i in range(MAX_SLOTS))

    def initialize(self, sample_rate: float) -> None:
        """Set the sample rate of the rack and every slot in it."""
        self.sample_rate = sample_rate
        for slot in self._slots:
            slot.initialize(sample_rate)

    def reset(self) -> None:
        """Reset every slot."""
        for slot in self._slots:
            slot.reset()

    def add_slot(self) -> int | None:
        """Append a slot and return its index, or None when the rack is full."""
        if len(self._slots) >= MAX_SLOTS:
            return None
        index = len(self._slots)
        self._slots.append(self._new_slot(index))
        return index

    def remove_slot(self, index: int) -> bool:
        """Remove a slot and renumber the rest; the last remaining slot is kept."""
        if 0 <= index < len(self._slots) and len(self._slots) > 1:
            del self._slots[index]
            for i, slot in enumerate(self._slots):
                slot.index = i
            return True
        return False

    def any_solo(self) -> bool:
        """Whether any slot is soloed."""
        return any(slot.solo for slot in self._slots)