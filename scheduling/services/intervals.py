"""
intervals.py
------------
Interval rules shared by schedule slots, single-slot writes and template items.

Intervals are half-open [start, end):
- end must be strictly after start
- two intervals conflict when a.start < b.end AND b.start < a.end
- touching intervals (a.end == b.start) do NOT conflict

Everything here is pure: no database access, no side effects.
"""

from collections import namedtuple

from ..exceptions import InvalidRange, TimeSlotConflict
from .time_utils import to_time

Interval = namedtuple("Interval", ["start", "end"])

# An already persisted interval; `id` lets an update exclude itself.
ExistingInterval = namedtuple("ExistingInterval", ["id", "start", "end"])


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    return a_start < b_end and b_start < a_end


class IntervalValidator:
    @staticmethod
    def check_range(start, end) -> Interval:
        """
        Parse one interval and require end > start.

        Args:
            start, end: time objects or 'HH:MM' strings

        Raises:
            InvalidTimeFormat: unparsable value
            InvalidRange: end equal to or before start
        """
        start = to_time(start)
        end = to_time(end)
        if end <= start:
            raise InvalidRange()
        return Interval(start, end)

    @staticmethod
    def validate(intervals) -> list:
        """
        Validate a set of intervals against each other.

        Args:
            intervals: iterable of (start, end) pairs

        Returns:
            list[Interval] sorted by start time

        Raises:
            InvalidRange: any interval with end <= start
            TimeSlotConflict: any two intervals intersect
        """
        parsed = [IntervalValidator.check_range(start, end) for start, end in intervals]
        parsed.sort(key=lambda interval: (interval.start, interval.end))

        for previous, current in zip(parsed, parsed[1:]):
            if current.start < previous.end:
                raise TimeSlotConflict()
        return parsed

    @staticmethod
    def validate_against(start, end, existing, exclude_id=None) -> Interval:
        """
        Validate one new interval against persisted ones.

        Args:
            start, end: the candidate interval
            existing: iterable of ExistingInterval (or (id, start, end) tuples)
            exclude_id: id of the row being updated, skipped in the comparison

        Raises:
            InvalidRange: end <= start
            TimeSlotConflict: intersects any other existing interval
        """
        candidate = IntervalValidator.check_range(start, end)

        for row_id, other_start, other_end in existing:
            if exclude_id is not None and row_id == exclude_id:
                continue
            if overlaps(candidate.start, candidate.end, other_start, other_end):
                raise TimeSlotConflict()
        return candidate
