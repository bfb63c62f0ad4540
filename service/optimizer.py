"""
Local-search refinement of a placed timetable.

Each pass visits every unlocked assignment, frees its slot, and moves it to
the lowest-penalty legal slot if that is strictly better than its current
score. Passes stop early once a pass moves nothing.
"""

from typing import Dict, List, Tuple
import logging

from models.domain import (
    DAYS, LessonInstance, RoomInfo, SchedulerConfig, SlotAssignment, TrainerInfo
)
from service.availability_matrix import AvailabilityMatrix
from service.constraints import check_hard_constraints, score_soft_constraints

logger = logging.getLogger(__name__)


def global_penalty(assignments: List[SlotAssignment]) -> float:
    return sum(a.soft_penalty_score for a in assignments)


def optimize_timetable(
    assignments: List[SlotAssignment],
    lessons: List[LessonInstance],
    rooms: List[RoomInfo],
    trainers: Dict[str, TrainerInfo],
    matrix: AvailabilityMatrix,
    max_periods: int,
    config: SchedulerConfig
) -> Tuple[List[SlotAssignment], float]:
    """
    Relocate unlocked assignments to lower-penalty slots.

    The matrix must reflect `assignments` on entry and reflects the returned
    list on exit. Assignments whose lesson is not in `lessons` stay put.
    """
    current = list(assignments)
    lesson_map = {lesson.id: lesson for lesson in lessons}
    total = global_penalty(current)
    passes_run = 0

    for pass_number in range(config.optimization_passes):
        improved = False
        moves = 0

        for idx, assignment in enumerate(current):
            if assignment.is_locked:
                continue
            lesson = lesson_map.get(assignment.lesson_instance_id)
            if lesson is None:
                continue

            matrix.release_assignment(assignment)
            others = current[:idx] + current[idx + 1:]

            best = assignment
            best_penalty = assignment.soft_penalty_score
            period_limit = max_periods - 1 if lesson.is_double_period else max_periods

            for day in DAYS:
                for period in range(1, period_limit + 1):
                    for room in rooms:
                        if not check_hard_constraints(lesson, day, period, room, trainers, matrix, max_periods):
                            continue
                        penalty = score_soft_constraints(
                            lesson, day, period, room, others, matrix, trainers, config.weights
                        )
                        if penalty < best_penalty:
                            best_penalty = penalty
                            best = assignment.model_copy(update={
                                "day": day,
                                "period_number": period,
                                "room_id": room.id,
                                "soft_penalty_score": penalty,
                            })

            # Either the improved slot or the original one
            matrix.occupy_assignment(best)

            if best is not assignment:
                current[idx] = best
                improved = True
                moves += 1

        passes_run = pass_number + 1
        previous = total
        total = global_penalty(current)
        logger.debug(f"Optimization pass {passes_run}: {moves} moves, penalty {previous} -> {total}")

        if not improved:
            break

    logger.info(f"Optimization finished after {passes_run} passes, global penalty {total}")
    return current, total
