"""
Occupancy matrices for trainers, rooms and classes.

Each matrix maps an entity id to a day -> list of booleans, indexed by period
number (index 0 unused). True means the period is free.
"""

from typing import Dict, Iterable, List
from models.domain import Day, DAYS, SlotAssignment

Matrix = Dict[str, Dict[Day, List[bool]]]


class AvailabilityMatrix:
    """
    O(1) availability lookup used by the placement engine and optimizer.

    Unknown ids are treated as unavailable, and mutations on unknown ids
    are ignored.
    """

    def __init__(self, trainer_ids: Iterable[str], room_ids: Iterable[str],
                 class_ids: Iterable[str], max_periods: int):
        self.max_periods = max_periods
        self.trainer_matrix: Matrix = self._build_matrix(trainer_ids)
        self.room_matrix: Matrix = self._build_matrix(room_ids)
        self.class_matrix: Matrix = self._build_matrix(class_ids)

    def _build_matrix(self, ids: Iterable[str]) -> Matrix:
        return {
            entity_id: {day: [True] * (self.max_periods + 1) for day in DAYS}
            for entity_id in ids
        }

    def _is_free(self, matrix: Matrix, entity_id: str, day: Day, period: int) -> bool:
        if period < 1 or period > self.max_periods:
            return False
        days = matrix.get(entity_id)
        if days is None:
            return False
        return days[day][period]

    def _set(self, matrix: Matrix, entity_id: str, day: Day, period: int, free: bool):
        days = matrix.get(entity_id)
        if days is not None and 1 <= period <= self.max_periods:
            days[day][period] = free

    # ===========================
    # Lookups
    # ===========================

    def is_trainer_available(self, trainer_id: str, day: Day, period: int) -> bool:
        return self._is_free(self.trainer_matrix, trainer_id, day, period)

    def is_room_available(self, room_id: str, day: Day, period: int) -> bool:
        return self._is_free(self.room_matrix, room_id, day, period)

    def is_class_available(self, class_id: str, day: Day, period: int) -> bool:
        return self._is_free(self.class_matrix, class_id, day, period)

    # ===========================
    # Mutations
    # ===========================

    def mark_occupied(self, trainer_id: str, room_id: str, class_id: str, day: Day, period: int):
        self._set(self.trainer_matrix, trainer_id, day, period, False)
        self._set(self.room_matrix, room_id, day, period, False)
        self._set(self.class_matrix, class_id, day, period, False)

    def mark_available(self, trainer_id: str, room_id: str, class_id: str, day: Day, period: int):
        self._set(self.trainer_matrix, trainer_id, day, period, True)
        self._set(self.room_matrix, room_id, day, period, True)
        self._set(self.class_matrix, class_id, day, period, True)

    def occupy_assignment(self, assignment: SlotAssignment):
        """Mark an assignment's slot, and its partner period for double periods."""
        self._apply(assignment, free=False)

    def release_assignment(self, assignment: SlotAssignment):
        self._apply(assignment, free=True)

    def _apply(self, assignment: SlotAssignment, free: bool):
        mark = self.mark_available if free else self.mark_occupied
        mark(assignment.trainer_id, assignment.room_id, assignment.class_id,
             assignment.day, assignment.period_number)
        if assignment.is_double_period:
            mark(assignment.trainer_id, assignment.room_id, assignment.class_id,
                 assignment.day, assignment.period_number + 1)

    # ===========================
    # Trainer Load
    # ===========================

    def get_trainer_daily_load(self, trainer_id: str, day: Day) -> int:
        """Count periods used by a trainer on a given day."""
        days = self.trainer_matrix.get(trainer_id)
        if days is None:
            return 0
        return sum(1 for free in days[day][1:] if not free)

    def get_trainer_weekly_load(self, trainer_id: str) -> int:
        return sum(self.get_trainer_daily_load(trainer_id, day) for day in DAYS)

    def has_trainer_gap(self, trainer_id: str, day: Day, period: int) -> bool:
        """
        Check whether placing a lesson at `period` leaves the trainer idle
        between occupied periods on that day.

        A placement directly extending a block (occupied on one side, free on
        the other) never counts as a gap.
        """
        days = self.trainer_matrix.get(trainer_id)
        if days is None:
            return False
        periods = days[day]

        prev_occupied = period > 1 and not periods[period - 1]
        next_occupied = period < self.max_periods and not periods[period + 1]
        prev_free = period > 1 and periods[period - 1]
        next_free = period < self.max_periods and periods[period + 1]

        if prev_occupied and next_free:
            return False
        if next_occupied and prev_free:
            return False

        any_before = any(not free for free in periods[1:period])
        any_after = any(not free for free in periods[period + 1:])
        return any_before and any_after

    def apply_locked_assignments(self, assignments: Iterable[SlotAssignment]):
        """Seed occupancy from locked timetable entries."""
        for assignment in assignments:
            if assignment.is_locked:
                self.occupy_assignment(assignment)
