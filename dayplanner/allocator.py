# dayplanner/allocator.py
from dataclasses import dataclass
from typing import Iterator, List, Optional

from loguru import logger

from .config import DEFAULT_CONFIG, PlannerConfig
from .models import Interval


@dataclass(frozen=True)
class Placement:
    start: int
    overlap: bool = False       # collides with an already occupied interval
    past_day_end: bool = False  # ends after the boundary it was placed against

    @property
    def degraded(self) -> bool:
        return self.overlap or self.past_day_end


class TimeAllocator:
    """
    Occupied intervals for one day plus the day-end boundary.

    One instance belongs to exactly one schedule generation run.
    """

    def __init__(self, config: Optional[PlannerConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.occupied: List[Interval] = []

    @property
    def day_end(self) -> int:
        return self.config.day_end

    def _boundary(self, end_by: Optional[int]) -> int:
        return self.day_end if end_by is None else min(self.day_end, end_by)

    def conflicts(self, start: int, end: int) -> bool:
        """True if [start, end) overlaps any occupied interval."""
        return any(start < other.end and end > other.start for other in self.occupied)

    def is_free(self, start: int, end: int, end_by: Optional[int] = None) -> bool:
        """Free of conflicts and ending by the day end (or the earlier end_by)."""
        if end > self._boundary(end_by):
            return False
        return not self.conflicts(start, end)

    def _backward(self, from_start: int, duration: int, end_by: Optional[int]) -> Iterator[int]:
        step = self.config.search_step
        for mins in range(from_start, self.config.day_start - 1, -step):
            if self.is_free(mins, mins + duration, end_by):
                yield mins

    def place_near(self, preferred_start: int, duration: int,
                   end_by: Optional[int] = None) -> int:
        """
        Nearest free start to preferred_start for an item of `duration` minutes.

        end_by tightens the day-end boundary for this item only. Never fails:
        when nothing in range is free the preferred start comes back unchanged
        and the caller may end up overlapping another item.
        """
        if duration <= 0:
            raise ValueError(f"duration must be positive, got {duration}")
        step = self.config.search_step
        boundary = self._boundary(end_by)

        if preferred_start + duration > boundary:
            for mins in self._backward(boundary - duration, duration, end_by):
                return mins

        if self.is_free(preferred_start, preferred_start + duration, end_by):
            return preferred_start

        for mins in range(preferred_start + step, boundary - duration + 1, step):
            if self.is_free(mins, mins + duration, end_by):
                return mins

        for mins in self._backward(preferred_start - step, duration, end_by):
            return mins

        return preferred_start

    def reserve(self, start: int, duration: int) -> Interval:
        interval = Interval(start, start + duration)
        self.occupied.append(interval)
        return interval

    def place(self, preferred_start: int, duration: int, exempt: bool = False,
              end_by: Optional[int] = None) -> Placement:
        """
        Pick a start, register the interval and report how it was degraded.

        Exempt items keep their preferred start regardless of the boundary
        and of other items, but are still registered as obstacles.
        """
        if exempt:
            start = preferred_start
            placement = Placement(start, overlap=self.conflicts(start, start + duration))
        else:
            start = self.place_near(preferred_start, duration, end_by)
            placement = Placement(
                start,
                overlap=self.conflicts(start, start + duration),
                past_day_end=start + duration > self._boundary(end_by),
            )
        if placement.degraded:
            logger.warning(
                "Degraded placement of {}-minute item near minute {} at {} "
                "(overlap={}, past_day_end={})",
                duration,
                preferred_start,
                start,
                placement.overlap,
                placement.past_day_end,
            )
        self.reserve(start, duration)
        return placement
