"""Observer contract and a ready-made display sink.

An observer is any callable accepting the facility-wide free capacity. The
allocator calls every registered observer after each committed change.
"""

import logging
from typing import Callable, Optional

_LOGGER = logging.getLogger(__name__)

Observer = Callable[[int], None]


class DisplayBoard:
    """Reporting sink that logs each reading and keeps a history.

    Attributes:
        name: Label used in log messages.
        readings: Every free-capacity value received, oldest first.
    """

    def __init__(self, name: str = "display") -> None:
        self.name = name
        self.readings: list[int] = []

    def __call__(self, free_capacity: int) -> None:
        self.readings.append(free_capacity)
        _LOGGER.info(f"[{self.name}] Display updated. Free slots: {free_capacity}")

    def __repr__(self) -> str:
        return f"DisplayBoard(name={self.name!r})"

    @property
    def latest(self) -> Optional[int]:
        return self.readings[-1] if self.readings else None
