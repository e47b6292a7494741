"""Data models for the level allocator library.

This module defines the core data structures used throughout the library.
Configuration, tickets and operation results are frozen (immutable) so they
can be handed to callers and observers without exposing allocator state.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class PlacementPolicy(Enum):
    """Built-in level placement policy."""

    FIRST_FIT = "first_fit"  # First level (creation order) with space
    BEST_FIT = "best_fit"  # Level with the most free slots
    ROUND_ROBIN = "round_robin"  # Least recently chosen level with space
    RANDOM_FIT = "random_fit"  # Any level with space, chosen at random


class RejectReason(Enum):
    """Why an allocation was rejected."""

    AT_CAPACITY = "at_capacity"  # Every level full and level ceiling reached
    RACE_LOST = "race_lost"  # Chosen level filled up twice in a row


class ReleaseStatus(Enum):
    """Outcome of a release request."""

    RELEASED = "released"
    UNKNOWN = "unknown"  # Never issued, or already released


@dataclass(frozen=True)
class AllocatorConfig:
    """Configuration for an allocator.

    Attributes:
        max_levels: Ceiling on the number of levels the facility may create.
        level_capacity: Number of slots in every level.
        placement: Policy used to build the default placement strategy.
        seed: Optional seed for the RANDOM_FIT policy.
    """

    max_levels: int = 3
    level_capacity: int = 5
    placement: PlacementPolicy = PlacementPolicy.FIRST_FIT
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.max_levels < 0:
            raise ValueError(f"max_levels must be >= 0, got {self.max_levels}")
        if self.level_capacity < 0:
            raise ValueError(
                f"level_capacity must be >= 0, got {self.level_capacity}"
            )

    @property
    def total_capacity(self) -> int:
        """Slots available once every level has been created."""
        return self.max_levels * self.level_capacity


@dataclass(frozen=True)
class Ticket:
    """Binding between an issued ticket and the slot it occupies.

    Attributes:
        ticket_id: Strictly increasing identifier, never reused.
        level_index: Index of the owning level (creation order).
        slot_id: Stable slot identifier within that level.
        occupant: Opaque tag supplied by the caller.
    """

    ticket_id: int
    level_index: int
    slot_id: int
    occupant: str


@dataclass(frozen=True)
class AllocationResult:
    """Result of an allocate call.

    Attributes:
        ticket_id: Issued ticket, or None when rejected.
        reason: Rejection reason, or None on success.
        free_capacity: Facility-wide free slots after the call.
    """

    ticket_id: Optional[int]
    reason: Optional[RejectReason] = None
    free_capacity: int = 0

    @property
    def ok(self) -> bool:
        return self.ticket_id is not None


@dataclass(frozen=True)
class ReleaseResult:
    """Result of a release call."""

    ticket_id: int
    status: ReleaseStatus
    free_capacity: int = 0

    @property
    def released(self) -> bool:
        return self.status == ReleaseStatus.RELEASED


@dataclass(frozen=True)
class LevelSnapshot:
    """Point-in-time view of one level."""

    index: int
    capacity: int
    free: int
    occupied_slots: dict[int, str] = field(default_factory=dict)


@dataclass(frozen=True)
class FacilitySnapshot:
    """Point-in-time view of the whole facility.

    Attributes:
        max_levels: Configured level ceiling.
        level_capacity: Configured slots per level.
        free_capacity: Sum of free slots across created levels.
        outstanding_tickets: Number of tickets not yet released.
        last_ticket_id: Most recently issued ticket id (0 if none).
        levels: Per-level snapshots in creation order.
    """

    max_levels: int
    level_capacity: int
    free_capacity: int
    outstanding_tickets: int
    last_ticket_id: int
    levels: list[LevelSnapshot] = field(default_factory=list)
