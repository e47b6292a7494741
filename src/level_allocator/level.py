"""Levels and the slots they hold.

A level is a fixed-capacity pool. Slots are created on demand up to the
capacity and are never removed, so a slot id stays bound to the same
position for the lifetime of the level. Releasing a slot marks it empty in
place; the next allocation reuses the lowest empty slot id.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .errors import LevelFullError, SlotNotFoundError

_LOGGER = logging.getLogger(__name__)


@dataclass
class Slot:
    """A single unit of capacity within a level.

    Attributes:
        slot_id: Identifier within the owning level (its position).
        occupant: Tag of the current occupant, or None when empty.
        occupied: Whether the slot is held. Tracked separately from the
            tag, since the tag is opaque and may itself be None.
    """

    slot_id: int
    occupant: Optional[str] = None
    occupied: bool = False

    @property
    def is_free(self) -> bool:
        return not self.occupied


class Level:
    """A bounded, ordered collection of slots."""

    def __init__(self, index: int, capacity: int) -> None:
        """Initialize an empty level.

        Args:
            index: Position of the level in the facility (creation order).
            capacity: Maximum number of occupied slots.
        """
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self.index = index
        self.capacity = capacity
        self._slots: list[Slot] = []
        self._free = capacity

    def __repr__(self) -> str:
        return f"Level(index={self.index}, free={self._free}/{self.capacity})"

    @property
    def slots(self) -> tuple[Slot, ...]:
        return tuple(self._slots)

    @property
    def occupied_count(self) -> int:
        return self.capacity - self._free

    def has_space(self) -> bool:
        return self._free > 0

    def free_capacity(self) -> int:
        return self._free

    def try_add_occupant(self, occupant: str) -> int:
        """Place an occupant in the lowest empty slot.

        Args:
            occupant: Opaque tag describing the occupant.

        Returns:
            The slot id the occupant now holds.

        Raises:
            LevelFullError: If the level has no free slot.
        """
        if self._free == 0:
            raise LevelFullError(self.index)

        slot = next((s for s in self._slots if s.is_free), None)
        if slot is None:
            # Grow up to the capacity high-water mark
            slot = Slot(slot_id=len(self._slots))
            self._slots.append(slot)

        slot.occupant = occupant
        slot.occupied = True
        self._free -= 1
        _LOGGER.debug(
            f"  Level {self.index}: slot {slot.slot_id} <- {occupant!r} "
            f"(free={self._free})"
        )
        return slot.slot_id

    def remove_occupant(self, slot_id: int) -> Optional[str]:
        """Empty an occupied slot.

        Args:
            slot_id: The slot to empty.

        Returns:
            The tag of the occupant that was removed.

        Raises:
            SlotNotFoundError: If no slot with that id is currently occupied.
        """
        if not 0 <= slot_id < len(self._slots) or self._slots[slot_id].is_free:
            raise SlotNotFoundError(self.index, slot_id)

        slot = self._slots[slot_id]
        occupant = slot.occupant
        slot.occupant = None
        slot.occupied = False
        self._free += 1
        _LOGGER.debug(
            f"  Level {self.index}: slot {slot_id} emptied (free={self._free})"
        )
        return occupant

    def occupant_of(self, slot_id: int) -> Optional[str]:
        """Return the occupant of a slot, or None if empty or unknown."""
        if 0 <= slot_id < len(self._slots):
            return self._slots[slot_id].occupant
        return None
