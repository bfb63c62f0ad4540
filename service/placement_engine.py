"""
Greedy placement with bounded backtracking.

Lessons are placed in the given (difficulty) order. For each lesson every
(day, period, room) triple passing the hard constraints is scored, and the
lowest-penalty candidate is taken. When a lesson has no candidate, the most
recent placement is undone and its next candidate tried, up to
max_backtrack_depth times per run.
"""

from typing import Dict, Iterable, List, Optional, Tuple
import logging

from models.domain import (
    DAYS, CandidateSlot, ConflictReport, LessonInstance, RoomInfo,
    SchedulerConfig, SlotAssignment, TrainerInfo
)
from service.availability_matrix import AvailabilityMatrix
from service.constraints import check_hard_constraints, score_soft_constraints

logger = logging.getLogger(__name__)


class _StackFrame:
    """A placed lesson together with the ranked candidates it was chosen from."""

    __slots__ = ("lesson", "candidates", "choice_index", "assignment")

    def __init__(self, lesson: LessonInstance, candidates: List[CandidateSlot],
                 choice_index: int, assignment: SlotAssignment):
        self.lesson = lesson
        self.candidates = candidates
        self.choice_index = choice_index
        self.assignment = assignment


def run_placement(
    lessons: List[LessonInstance],
    rooms: List[RoomInfo],
    trainers: Dict[str, TrainerInfo],
    matrix: AvailabilityMatrix,
    max_periods: int,
    config: SchedulerConfig,
    locked_assignments: Iterable[SlotAssignment] = ()
) -> Tuple[List[SlotAssignment], List[ConflictReport]]:
    """
    Place lessons onto the grid.

    The matrix must already contain the locked assignments. Returns the
    assignment list (locked assignments first) and one conflict per lesson
    that could not be placed.
    """
    assignments: List[SlotAssignment] = list(locked_assignments)
    conflicts: List[ConflictReport] = []
    stack: List[_StackFrame] = []

    i = 0
    backtrack_count = 0

    while i < len(lessons):
        lesson = lessons[i]
        candidates = generate_candidates(
            lesson, rooms, trainers, matrix, assignments, max_periods, config
        )

        if candidates:
            assignment = _apply_candidate(lesson, candidates[0], matrix, assignments)
            stack.append(_StackFrame(lesson, candidates, 0, assignment))
            i += 1
            continue

        if backtrack_count >= config.max_backtrack_depth or not stack:
            conflicts.append(build_conflict(lesson, rooms))
            logger.debug(f"No slot for {lesson.id}, backtracking unavailable")
            i += 1
            continue

        backtrack_count += 1
        frame = stack.pop()
        assignments.pop()
        matrix.release_assignment(frame.assignment)
        logger.debug(
            f"Backtrack {backtrack_count}/{config.max_backtrack_depth}: "
            f"undoing {frame.lesson.id} to make room for {lesson.id}"
        )

        next_index = _next_valid_choice(frame, rooms, trainers, matrix, max_periods)
        if next_index is not None:
            frame.assignment = _apply_candidate(
                frame.lesson, frame.candidates[next_index], matrix, assignments
            )
            frame.choice_index = next_index
            stack.append(frame)
            # Retry the current lesson against the new layout
        else:
            # Previous lesson exhausted as well: give up on both
            conflicts.append(build_conflict(frame.lesson, rooms))
            conflicts.append(build_conflict(lesson, rooms))
            i += 1

    logger.info(
        f"Placement finished: {len(assignments)} assignments, "
        f"{len(conflicts)} conflicts, {backtrack_count} backtracks"
    )
    return assignments, conflicts


def generate_candidates(
    lesson: LessonInstance,
    rooms: List[RoomInfo],
    trainers: Dict[str, TrainerInfo],
    matrix: AvailabilityMatrix,
    current_assignments: List[SlotAssignment],
    max_periods: int,
    config: SchedulerConfig
) -> List[CandidateSlot]:
    """
    All hard-valid slots for the lesson, best (lowest penalty) first.

    Iteration runs day -> period -> room in input order, and the sort is
    stable, so equal penalties keep that order.
    """
    candidates = []
    period_limit = max_periods - 1 if lesson.is_double_period else max_periods

    for day in DAYS:
        for period in range(1, period_limit + 1):
            for room in rooms:
                if not check_hard_constraints(lesson, day, period, room, trainers, matrix, max_periods):
                    continue
                penalty = score_soft_constraints(
                    lesson, day, period, room, current_assignments, matrix, trainers, config.weights
                )
                candidates.append(CandidateSlot(
                    day=day, period_number=period, room_id=room.id, penalty_score=penalty
                ))

    candidates.sort(key=lambda c: c.penalty_score)
    return candidates


def create_assignment(lesson: LessonInstance, slot: CandidateSlot) -> SlotAssignment:
    return SlotAssignment(
        lesson_instance_id=lesson.id,
        class_id=lesson.class_id,
        course_id=lesson.course_id,
        trainer_id=lesson.trainer_id,
        room_id=slot.room_id,
        day=slot.day,
        period_number=slot.period_number,
        soft_penalty_score=slot.penalty_score,
        is_locked=False,
        is_double_period=lesson.is_double_period,
    )


def build_conflict(lesson: LessonInstance, rooms: List[RoomInfo]) -> ConflictReport:
    """Classify why a lesson could not be placed."""
    suitable_rooms = [
        r for r in rooms
        if r.room_type == lesson.required_room_type and r.capacity >= lesson.class_size
    ]

    conflict_type = "no_valid_slot"
    details = f"No valid slot found for {lesson.course_id} in class {lesson.class_id}"

    if not suitable_rooms:
        conflict_type = "room_capacity" if lesson.class_size > 0 else "no_room"
        details = f"No {lesson.required_room_type} room with capacity >= {lesson.class_size}"
    elif lesson.is_double_period:
        conflict_type = "double_period_impossible"
        details = "Cannot find consecutive periods for double-period lesson"

    return ConflictReport(
        type=conflict_type,
        lesson_instance_id=lesson.id,
        class_id=lesson.class_id,
        course_id=lesson.course_id,
        trainer_id=lesson.trainer_id,
        details=details,
    )


def _apply_candidate(lesson: LessonInstance, slot: CandidateSlot,
                     matrix: AvailabilityMatrix, assignments: List[SlotAssignment]) -> SlotAssignment:
    assignment = create_assignment(lesson, slot)
    assignments.append(assignment)
    matrix.occupy_assignment(assignment)
    return assignment


def _next_valid_choice(frame: _StackFrame, rooms: List[RoomInfo], trainers: Dict[str, TrainerInfo],
                       matrix: AvailabilityMatrix, max_periods: int) -> Optional[int]:
    """Index of the frame's next candidate that is still legal, or None."""
    rooms_by_id = {room.id: room for room in rooms}
    for index in range(frame.choice_index + 1, len(frame.candidates)):
        slot = frame.candidates[index]
        room = rooms_by_id.get(slot.room_id)
        if room is not None and check_hard_constraints(
            frame.lesson, slot.day, slot.period_number, room, trainers, matrix, max_periods
        ):
            return index
    return None
