"""The allocation engine for Level Allocator.

This module owns the facility state: the levels (created lazily up to a
ceiling), the ticket table and the registered observers. Every state change
goes through ``allocate`` or ``release`` and is broadcast to observers with
the new facility-wide free capacity.
"""

import logging
import threading
from collections import deque
from typing import Optional

from .errors import InvariantViolationError, LevelFullError, SlotNotFoundError
from .level import Level
from .model import (
    AllocationResult,
    AllocatorConfig,
    FacilitySnapshot,
    LevelSnapshot,
    RejectReason,
    ReleaseResult,
    ReleaseStatus,
    Ticket,
)
from .observers import Observer
from .strategy import PlacementStrategy, build_strategy

_LOGGER = logging.getLogger(__name__)

# One retry after the chosen level turns out to be full
_MAX_ATTEMPTS = 2


class Allocator:
    """A multi-level, capacity-constrained slot allocator."""

    def __init__(
        self,
        config: AllocatorConfig | None = None,
        strategy: PlacementStrategy | None = None,
    ) -> None:
        """Initialize an empty facility.

        Args:
            config: Facility limits and default placement policy.
            strategy: Optional placement strategy overriding the one built
                from ``config.placement``.
        """
        self.config = config or AllocatorConfig()
        self._strategy: PlacementStrategy = strategy or build_strategy(
            self.config.placement, self.config.seed
        )
        self._levels: list[Level] = []
        self._tickets: dict[int, Ticket] = {}
        self._observers: list[Observer] = []
        self._last_issued = 0
        # Free totals waiting to be broadcast, in commit order
        self._pending: deque[int] = deque()
        self._broadcasting = False
        # Re-entrant so observers may query the allocator during fan-out
        self._lock = threading.RLock()

    @classmethod
    def create(
        cls,
        max_levels: int,
        level_capacity: int,
        strategy: PlacementStrategy | None = None,
    ) -> "Allocator":
        """Build an allocator from explicit limits."""
        config = AllocatorConfig(max_levels=max_levels, level_capacity=level_capacity)
        return cls(config, strategy)

    @property
    def levels(self) -> tuple[Level, ...]:
        with self._lock:
            return tuple(self._levels)

    def set_strategy(self, strategy: PlacementStrategy) -> None:
        """Replace the placement strategy."""
        with self._lock:
            self._strategy = strategy
            _LOGGER.info(f"Placement strategy set to {strategy!r}")

    def register_observer(self, observer: Observer) -> None:
        with self._lock:
            self._observers.append(observer)

    def unregister_observer(self, observer: Observer) -> None:
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)

    def allocate(self, occupant: str) -> AllocationResult:
        """Assign an occupant to a slot and issue a ticket.

        Args:
            occupant: Opaque tag describing the occupant.

        Returns:
            AllocationResult carrying the new ticket id, or a rejection
            reason when the facility cannot take the occupant.

        Raises:
            ValueError: If the placement strategy returns a level this
                allocator does not own.
        """
        with self._lock:
            for attempt in range(1, _MAX_ATTEMPTS + 1):
                level = self._select_level()
                if level is None:
                    _LOGGER.warning(
                        f"Rejected {occupant!r}: facility at capacity "
                        f"({len(self._levels)}/{self.config.max_levels} levels)"
                    )
                    return AllocationResult(
                        ticket_id=None,
                        reason=RejectReason.AT_CAPACITY,
                        free_capacity=self._free_total(),
                    )

                try:
                    slot_id = level.try_add_occupant(occupant)
                except LevelFullError:
                    _LOGGER.warning(
                        f"Level {level.index} full on attempt {attempt} "
                        f"for {occupant!r}"
                    )
                    continue

                self._last_issued += 1
                ticket = Ticket(
                    ticket_id=self._last_issued,
                    level_index=level.index,
                    slot_id=slot_id,
                    occupant=occupant,
                )
                self._tickets[ticket.ticket_id] = ticket
                free_total = self._free_total()
                _LOGGER.info(
                    f"Allocated ticket {ticket.ticket_id}: {occupant!r} -> "
                    f"level {level.index} slot {slot_id} (free={free_total})"
                )
                self._notify(free_total)
                return AllocationResult(
                    ticket_id=ticket.ticket_id, free_capacity=free_total
                )

            _LOGGER.warning(f"Rejected {occupant!r}: lost placement race twice")
            return AllocationResult(
                ticket_id=None,
                reason=RejectReason.RACE_LOST,
                free_capacity=self._free_total(),
            )

    def release(self, ticket_id: int) -> ReleaseResult:
        """Free the slot bound to a ticket.

        Args:
            ticket_id: A ticket previously returned by ``allocate``.

        Returns:
            ReleaseResult with RELEASED, or UNKNOWN if the ticket was never
            issued or has already been released.

        Raises:
            InvariantViolationError: If the ticket's level does not hold the
                slot the ticket points at.
        """
        with self._lock:
            # True == 1 as a dict key, so bools never match an issued ticket
            ticket = None
            if not isinstance(ticket_id, bool):
                ticket = self._tickets.get(ticket_id)
            if ticket is None:
                _LOGGER.warning(f"Release of unknown ticket {ticket_id} ignored")
                return ReleaseResult(
                    ticket_id=ticket_id,
                    status=ReleaseStatus.UNKNOWN,
                    free_capacity=self._free_total(),
                )

            level = self._levels[ticket.level_index]
            try:
                level.remove_occupant(ticket.slot_id)
            except SlotNotFoundError as err:
                _LOGGER.error(
                    f"Ticket {ticket_id} bound to level {ticket.level_index} "
                    f"slot {ticket.slot_id}, but the slot is empty"
                )
                raise InvariantViolationError(
                    f"Ticket {ticket_id} points at an unoccupied slot"
                ) from err

            del self._tickets[ticket_id]
            free_total = self._free_total()
            _LOGGER.info(
                f"Released ticket {ticket_id}: level {ticket.level_index} "
                f"slot {ticket.slot_id} (free={free_total})"
            )
            self._notify(free_total)
            return ReleaseResult(
                ticket_id=ticket_id,
                status=ReleaseStatus.RELEASED,
                free_capacity=free_total,
            )

    def current_free_capacity(self) -> int:
        """Free slots summed across the levels created so far."""
        with self._lock:
            return self._free_total()

    def remaining_capacity(self) -> int:
        """Free slots including levels that have not been created yet."""
        with self._lock:
            return self.config.total_capacity - len(self._tickets)

    def outstanding_tickets(self) -> int:
        with self._lock:
            return len(self._tickets)

    def get_ticket(self, ticket_id: int) -> Optional[Ticket]:
        with self._lock:
            return self._tickets.get(ticket_id)

    def snapshot(self) -> FacilitySnapshot:
        """Capture the current facility state for reporting."""
        with self._lock:
            levels = [
                LevelSnapshot(
                    index=level.index,
                    capacity=level.capacity,
                    free=level.free_capacity(),
                    occupied_slots={
                        slot.slot_id: slot.occupant
                        for slot in level.slots
                        if not slot.is_free
                    },
                )
                for level in self._levels
            ]
            return FacilitySnapshot(
                max_levels=self.config.max_levels,
                level_capacity=self.config.level_capacity,
                free_capacity=self._free_total(),
                outstanding_tickets=len(self._tickets),
                last_ticket_id=self._last_issued,
                levels=levels,
            )

    def _select_level(self) -> Level | None:
        """Ask the strategy for a level, creating one as a fallback.

        Returns:
            A level expected to have space, or None if the facility is full.
        """
        level = self._strategy(tuple(self._levels))
        if level is not None:
            if not any(level is own for own in self._levels):
                _LOGGER.error(f"Strategy returned a foreign level: {level!r}")
                raise ValueError(
                    f"Placement strategy returned {level!r}, "
                    f"which does not belong to this allocator"
                )
            _LOGGER.debug(f"  Strategy chose level {level.index}")
            return level

        if (
            len(self._levels) >= self.config.max_levels
            or self.config.level_capacity == 0
        ):
            return None

        level = Level(index=len(self._levels), capacity=self.config.level_capacity)
        self._levels.append(level)
        _LOGGER.info(
            f"Created level {level.index} "
            f"({len(self._levels)}/{self.config.max_levels})"
        )
        return level

    def _free_total(self) -> int:
        return sum(level.free_capacity() for level in self._levels)

    def _notify(self, free_total: int) -> None:
        """Queue a free total and broadcast pending totals in commit order.

        An observer that calls back into ``allocate`` or ``release`` only
        queues its total; the outermost operation delivers it once every
        observer has seen the earlier one.

        Args:
            free_total: Facility-wide free capacity after the change.
        """
        self._pending.append(free_total)
        if self._broadcasting:
            return

        self._broadcasting = True
        try:
            while self._pending:
                total = self._pending.popleft()
                for observer in list(self._observers):
                    _LOGGER.debug(f"  Notifying {observer!r} (free={total})")
                    try:
                        observer(total)
                    except Exception:
                        _LOGGER.exception(f"Observer {observer!r} failed")
        finally:
            self._broadcasting = False
