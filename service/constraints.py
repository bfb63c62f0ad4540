"""
Hard and soft constraint evaluation for candidate slots.

Both functions are pure: all state they read is passed in.
"""

from typing import Dict, Iterable
from models.domain import (
    Day, LessonInstance, RoomInfo, TrainerInfo, SlotAssignment,
    SoftConstraintWeights, DEFAULT_WEIGHTS
)
from service.availability_matrix import AvailabilityMatrix


def check_hard_constraints(
    lesson: LessonInstance,
    day: Day,
    period: int,
    room: RoomInfo,
    trainers: Dict[str, TrainerInfo],
    matrix: AvailabilityMatrix,
    max_periods: int
) -> bool:
    """Return True if the lesson may legally occupy (day, period, room)."""
    # 1-3. No double-booking of trainer, room or class
    if not matrix.is_trainer_available(lesson.trainer_id, day, period):
        return False
    if not matrix.is_room_available(room.id, day, period):
        return False
    if not matrix.is_class_available(lesson.class_id, day, period):
        return False

    # 4. Room capacity
    if room.capacity < lesson.class_size:
        return False

    # 5. Room type
    if room.room_type != lesson.required_room_type:
        return False

    # 6. Double periods need the following period too
    if lesson.is_double_period:
        next_period = period + 1
        if next_period > max_periods:
            return False
        if not matrix.is_trainer_available(lesson.trainer_id, day, next_period):
            return False
        if not matrix.is_room_available(room.id, day, next_period):
            return False
        if not matrix.is_class_available(lesson.class_id, day, next_period):
            return False

    # 7. Trainer weekly ceiling
    trainer = trainers.get(lesson.trainer_id)
    if trainer is not None:
        cost = 2 if lesson.is_double_period else 1
        if matrix.get_trainer_weekly_load(lesson.trainer_id) + cost > trainer.max_weekly_periods:
            return False

    return True


def score_soft_constraints(
    lesson: LessonInstance,
    day: Day,
    period: int,
    room: RoomInfo,
    current_assignments: Iterable[SlotAssignment],
    matrix: AvailabilityMatrix,
    trainers: Dict[str, TrainerInfo],
    weights: SoftConstraintWeights = DEFAULT_WEIGHTS
) -> float:
    """
    Additive penalty for placing the lesson at (day, period, room).

    Every rule contributes its weight independently. The building_mismatch
    weight is configurable but not applied here.
    """
    penalty = 0.0

    if matrix.has_trainer_gap(lesson.trainer_id, day, period):
        penalty += weights.trainer_gap

    same_subject_today = 0
    same_subject_total = 0
    subject_days = {day}
    for a in current_assignments:
        if a.class_id != lesson.class_id or a.course_id != lesson.course_id:
            continue
        same_subject_total += 1
        subject_days.add(a.day)
        if a.day == day:
            same_subject_today += 1

    if same_subject_today >= 2:
        penalty += weights.subject_repeat_in_day

    trainer = trainers.get(lesson.trainer_id)
    if trainer is not None:
        if matrix.get_trainer_daily_load(lesson.trainer_id, day) >= trainer.preferred_daily_periods:
            penalty += weights.trainer_daily_overload

    # Count this placement as well
    if same_subject_total + 1 > 2 and len(subject_days) < 2:
        penalty += weights.subject_spread

    return penalty
