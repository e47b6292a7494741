"""Level Allocator - A multi-level slot allocation engine."""

from level_allocator.engine import Allocator
from level_allocator.errors import (
    AllocatorError,
    InvariantViolationError,
    LevelFullError,
    SlotNotFoundError,
)
from level_allocator.level import Level, Slot
from level_allocator.model import (
    AllocationResult,
    AllocatorConfig,
    FacilitySnapshot,
    LevelSnapshot,
    PlacementPolicy,
    RejectReason,
    ReleaseResult,
    ReleaseStatus,
    Ticket,
)
from level_allocator.observers import DisplayBoard, Observer
from level_allocator.strategy import (
    PlacementStrategy,
    RandomFit,
    RoundRobin,
    best_fit,
    build_strategy,
    first_fit,
)

__version__ = "0.1.0"

__all__ = [
    "Allocator",
    "AllocationResult",
    "AllocatorConfig",
    "AllocatorError",
    "DisplayBoard",
    "FacilitySnapshot",
    "InvariantViolationError",
    "Level",
    "LevelFullError",
    "LevelSnapshot",
    "Observer",
    "PlacementPolicy",
    "PlacementStrategy",
    "RandomFit",
    "RejectReason",
    "ReleaseResult",
    "ReleaseStatus",
    "RoundRobin",
    "Slot",
    "SlotNotFoundError",
    "Ticket",
    "best_fit",
    "build_strategy",
    "first_fit",
]
