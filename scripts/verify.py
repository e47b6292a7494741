"""Real-world walkthrough script for level allocator."""

from level_allocator.engine import Allocator
from level_allocator.model import AllocatorConfig
from level_allocator.observers import DisplayBoard


# 1. Setup Config (3 levels of 5 slots, first-fit placement)
allocator = Allocator(AllocatorConfig(max_levels=3, level_capacity=5))
board = DisplayBoard("entrance")
allocator.register_observer(board)

# 2. Park two cars
first = allocator.allocate("car")
second = allocator.allocate("car")
print(f"Parked with ticket: {first.ticket_id}")
print(f"Parked with ticket: {second.ticket_id}")

# 3. Exit with the first ticket
result = allocator.release(first.ticket_id)
print(f"Exited ticket: {result.ticket_id} ({result.status.value})")

# 4. Check Result
print(f"Display readings: {board.readings}")  # Should be [4, 3, 4]
print(f"Free slots now: {allocator.current_free_capacity()}")
for level in allocator.snapshot().levels:
    print(f"Level {level.index}: {level.free}/{level.capacity} free, {level.occupied_slots}")
