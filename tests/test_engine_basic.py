"""Basic tests for allocate and release."""

import pytest

from level_allocator.engine import Allocator
from level_allocator.model import (
    AllocatorConfig,
    PlacementPolicy,
    RejectReason,
    ReleaseStatus,
)
from level_allocator.strategy import first_fit


@pytest.fixture
def allocator():
    """Create a 3x2 first-fit facility."""
    return Allocator.create(max_levels=3, level_capacity=2, strategy=first_fit)


def test_fresh_facility_is_empty():
    """Test initial state: no levels, no tickets."""
    allocator = Allocator()
    assert allocator.levels == ()
    assert allocator.current_free_capacity() == 0
    assert allocator.remaining_capacity() == 15
    assert allocator.outstanding_tickets() == 0


def test_first_allocation_creates_level(allocator):
    """Test a level is created lazily on first allocation."""
    result = allocator.allocate("car")

    assert result.ok is True
    assert result.ticket_id == 1
    assert len(allocator.levels) == 1
    assert result.free_capacity == 1
    ticket = allocator.get_ticket(1)
    assert (ticket.level_index, ticket.slot_id, ticket.occupant) == (0, 0, "car")


def test_first_fit_scenario(allocator):
    """Fill level 0, spill to level 1, then refill level 0 after a release."""
    t1 = allocator.allocate("car").ticket_id
    t2 = allocator.allocate("car").ticket_id
    assert (t1, t2) == (1, 2)
    assert allocator.get_ticket(t1).level_index == 0
    assert allocator.get_ticket(t2).level_index == 0
    assert allocator.levels[0].has_space() is False

    t3 = allocator.allocate("car").ticket_id
    assert t3 == 3
    assert len(allocator.levels) == 2
    assert allocator.get_ticket(t3).level_index == 1

    assert allocator.release(t1).status == ReleaseStatus.RELEASED
    assert allocator.levels[0].free_capacity() == 1

    t4 = allocator.allocate("car").ticket_id
    assert t4 == 4
    ticket = allocator.get_ticket(t4)
    assert ticket.level_index == 0
    assert ticket.slot_id == 0
    assert len(allocator.levels) == 2


def test_exhaustion_scenario():
    """Test a full facility rejects with AT_CAPACITY."""
    allocator = Allocator.create(max_levels=1, level_capacity=1)

    assert allocator.allocate("car").ticket_id == 1

    result = allocator.allocate("car")
    assert result.ok is False
    assert result.ticket_id is None
    assert result.reason == RejectReason.AT_CAPACITY
    assert result.free_capacity == 0
    assert allocator.current_free_capacity() == 0
    assert len(allocator.levels) == 1


@pytest.mark.parametrize(
    "max_levels,level_capacity",
    [(0, 5), (3, 0), (0, 0)],
)
def test_zero_ceiling_rejects_everything(max_levels, level_capacity):
    """Test a facility without capacity never creates levels."""
    allocator = Allocator.create(max_levels=max_levels, level_capacity=level_capacity)

    result = allocator.allocate("car")

    assert result.reason == RejectReason.AT_CAPACITY
    assert allocator.levels == ()


def test_release_twice_is_unknown(allocator):
    """Test release is idempotent: RELEASED then UNKNOWN."""
    ticket_id = allocator.allocate("car").ticket_id

    first = allocator.release(ticket_id)
    second = allocator.release(ticket_id)

    assert first.status == ReleaseStatus.RELEASED
    assert first.released is True
    assert second.status == ReleaseStatus.UNKNOWN
    assert allocator.current_free_capacity() == 2


def test_release_unknown_ticket_on_fresh_facility():
    """Test releasing a never-issued ticket changes nothing."""
    allocator = Allocator()

    result = allocator.release(999)

    assert result.status == ReleaseStatus.UNKNOWN
    assert result.ticket_id == 999
    assert allocator.current_free_capacity() == 0
    assert allocator.levels == ()


def test_ticket_ids_never_reused(allocator):
    """Test ticket ids keep increasing across releases."""
    issued = []
    for _ in range(5):
        ticket_id = allocator.allocate("car").ticket_id
        issued.append(ticket_id)
        allocator.release(ticket_id)

    assert issued == [1, 2, 3, 4, 5]
    assert allocator.snapshot().last_ticket_id == 5


def test_release_only_frees_bound_level(allocator):
    """Test a release empties the bound slot and no other."""
    allocator.allocate("a")
    allocator.allocate("b")
    t3 = allocator.allocate("c").ticket_id

    allocator.release(t3)

    assert allocator.levels[0].free_capacity() == 0
    assert allocator.levels[0].occupant_of(0) == "a"
    assert allocator.levels[1].free_capacity() == 2


def test_allocation_fills_to_ceiling(allocator):
    """Test the facility accepts exactly max_levels * level_capacity."""
    results = [allocator.allocate(f"car-{n}") for n in range(7)]

    assert [r.ok for r in results] == [True] * 6 + [False]
    assert len(allocator.levels) == 3
    assert allocator.remaining_capacity() == 0


def test_config_policy_builds_strategy():
    """Test the configured policy drives placement."""
    config = AllocatorConfig(
        max_levels=2, level_capacity=2, placement=PlacementPolicy.BEST_FIT
    )
    allocator = Allocator(config)

    allocator.allocate("a")  # creates level 0
    allocator.allocate("b")  # level 0 again (only level with space)
    allocator.allocate("c")  # creates level 1
    allocator.release(1)

    # Level 0 has 1 free, level 1 has 1 free: tie goes to level 0
    assert allocator.get_ticket(allocator.allocate("d").ticket_id).level_index == 0


def test_set_strategy_changes_placement(allocator):
    """Test swapping the strategy at runtime."""
    for _ in range(3):
        allocator.allocate("car")
    allocator.release(1)  # level 0: 1 free, level 1: 1 free

    allocator.set_strategy(lambda levels: levels[-1] if levels[-1].has_space() else None)
    ticket_id = allocator.allocate("car").ticket_id

    assert allocator.get_ticket(ticket_id).level_index == 1


def test_snapshot_reports_levels(allocator):
    """Test snapshot captures per-level occupancy."""
    allocator.allocate("car")
    allocator.allocate("bike")
    allocator.allocate("truck")
    allocator.release(1)

    snapshot = allocator.snapshot()

    assert snapshot.max_levels == 3
    assert snapshot.level_capacity == 2
    assert snapshot.free_capacity == 2
    assert snapshot.outstanding_tickets == 2
    assert [level.occupied_slots for level in snapshot.levels] == [
        {1: "bike"},
        {0: "truck"},
    ]


def test_none_tag_gets_its_own_slot():
    """Test an allocation tagged None never shares a slot with the next one."""
    allocator = Allocator.create(max_levels=1, level_capacity=2)

    t1 = allocator.allocate(None).ticket_id
    t2 = allocator.allocate("car").ticket_id

    first = allocator.get_ticket(t1)
    second = allocator.get_ticket(t2)
    assert (first.level_index, first.slot_id) != (second.level_index, second.slot_id)
    assert allocator.allocate("bike").reason == RejectReason.AT_CAPACITY
    assert allocator.release(t1).released is True
    assert allocator.release(t2).released is True
    assert allocator.current_free_capacity() == 2


@pytest.mark.parametrize("ticket_id", [True, False])
def test_release_bool_ticket_is_unknown(allocator, ticket_id):
    """Test bools are not treated as ticket ids 1 and 0."""
    allocator.allocate("car")

    result = allocator.release(ticket_id)

    assert result.status == ReleaseStatus.UNKNOWN
    assert allocator.get_ticket(1) is not None
    assert allocator.current_free_capacity() == 1
