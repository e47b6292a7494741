"""Exceptions raised by the level allocator library."""


class AllocatorError(Exception):
    """Base class for allocator errors."""


class LevelFullError(AllocatorError):
    """A level has no free slot."""

    def __init__(self, level_index: int) -> None:
        super().__init__(f"Level {level_index} is full")
        self.level_index = level_index


class SlotNotFoundError(AllocatorError):
    """A slot id is not currently occupied in a level."""

    def __init__(self, level_index: int, slot_id: int) -> None:
        super().__init__(f"Slot {slot_id} is not occupied in level {level_index}")
        self.level_index = level_index
        self.slot_id = slot_id


class InvariantViolationError(AllocatorError):
    """Ticket table and level state disagree.

    Raised when an outstanding ticket points at a slot its level does not
    consider occupied. The allocator cannot recover from this.
    """
