from __future__ import annotations

from typing import Iterable, List, TypeVar

from .models import ScheduledSlice

T = TypeVar("T")


def sort_by_arrival(processes: Iterable[T]) -> List[T]:
    """
    Ascending sort on arrival_time. sorted() is stable, so processes that
    arrive together keep their input order.
    """
    return sorted(processes, key=lambda p: p.arrival_time)


def busy_time(slices: Iterable[ScheduledSlice]) -> int:
    return sum(s.end_time - s.start_time for s in slices)
