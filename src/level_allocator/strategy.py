"""Placement strategies.

A placement strategy is any callable taking the facility's levels in
creation order and returning the level that should receive the next
occupant, or None when no existing level qualifies. Strategies only read
level state; the allocator does the mutation.
"""

import logging
import random
from typing import Callable, Optional, Sequence

from .level import Level
from .model import PlacementPolicy

_LOGGER = logging.getLogger(__name__)

PlacementStrategy = Callable[[Sequence[Level]], Optional[Level]]


def first_fit(levels: Sequence[Level]) -> Optional[Level]:
    """Return the first level, in creation order, that has space."""
    for level in levels:
        if level.has_space():
            return level
    return None


def best_fit(levels: Sequence[Level]) -> Optional[Level]:
    """Return the level with the most free slots (earliest on ties)."""
    best: Optional[Level] = None
    for level in levels:
        if level.has_space() and (
            best is None or level.free_capacity() > best.free_capacity()
        ):
            best = level
    return best


class RoundRobin:
    """Choose the least recently chosen level that has space.

    Scanning starts just after the level picked last time and wraps around,
    so consecutive allocations spread across levels.
    """

    def __init__(self) -> None:
        self._last_index: int | None = None

    def __call__(self, levels: Sequence[Level]) -> Optional[Level]:
        if not levels:
            return None

        start = 0 if self._last_index is None else self._last_index + 1
        count = len(levels)
        for offset in range(count):
            level = levels[(start + offset) % count]
            if level.has_space():
                self._last_index = level.index
                return level
        return None


class RandomFit:
    """Choose uniformly among the levels that have space."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def __call__(self, levels: Sequence[Level]) -> Optional[Level]:
        candidates = [level for level in levels if level.has_space()]
        if not candidates:
            return None
        return self._rng.choice(candidates)


def build_strategy(
    policy: PlacementPolicy, seed: int | None = None
) -> PlacementStrategy:
    """Create the strategy implementing a built-in policy.

    Args:
        policy: The placement policy.
        seed: Seed for RANDOM_FIT; ignored by the other policies.

    Returns:
        A fresh strategy callable.
    """
    _LOGGER.debug(f"Building placement strategy for {policy.value}")
    if policy == PlacementPolicy.FIRST_FIT:
        return first_fit
    if policy == PlacementPolicy.BEST_FIT:
        return best_fit
    if policy == PlacementPolicy.ROUND_ROBIN:
        return RoundRobin()
    if policy == PlacementPolicy.RANDOM_FIT:
        return RandomFit(seed)
    raise ValueError(f"Unsupported placement policy: {policy}")
