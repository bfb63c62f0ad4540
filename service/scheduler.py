"""
Heuristic timetable scheduler.

`run_scheduler` is the engine entry point: lesson generation, difficulty
ordering, greedy placement with backtracking and local-search optimization
over a single availability matrix. `HeuristicScheduler` wraps it for the API
with input validation, timing and a per-day timetable view.
"""

from typing import List, Dict, Optional, Tuple
from datetime import datetime
import logging

from models.domain import (
    DAYS, ClassCourseMapping, SchedulerConfig, SchedulerConfigOverride,
    SchedulerResult, SoftConstraintWeights, SlotAssignment, TrainerInfo,
    DEFAULT_CONFIG
)
from models.schemas import (
    SchedulingRequest, SchedulingResponse, DaySchedule, ScheduleSlot,
    Messages, ErrorMessage
)
from service.availability_matrix import AvailabilityMatrix
from service.lesson_generator import (
    generate_lesson_instances, compute_difficulty_scores, sort_by_difficulty
)
from service.placement_engine import run_placement
from service.optimizer import optimize_timetable

logger = logging.getLogger(__name__)

DEFAULT_CLASS_SIZE = 30


# ===========================
# Engine Entry Point
# ===========================

def merge_config(base: SchedulerConfig, override: Optional[SchedulerConfigOverride]) -> SchedulerConfig:
    """Apply a caller's partial config on top of the base config."""
    if override is None:
        return base

    update = {}
    if override.max_backtrack_depth is not None:
        update["max_backtrack_depth"] = override.max_backtrack_depth
    if override.optimization_passes is not None:
        update["optimization_passes"] = override.optimization_passes
    if override.weights:
        known = SoftConstraintWeights.model_fields
        unknown = sorted(k for k in override.weights if k not in known)
        if unknown:
            logger.warning(f"Ignoring unknown soft constraint weights: {unknown}")
        update["weights"] = base.weights.model_copy(update={
            k: v for k, v in override.weights.items() if k in known
        })
    return base.model_copy(update=update)


def build_class_course_mappings(
    request: SchedulingRequest,
    default_class_size: int = DEFAULT_CLASS_SIZE
) -> List[ClassCourseMapping]:
    """
    Pair each class with the courses of its trade and level and resolve its
    trainer. Classes without courses or without a trainer are dropped.
    """
    mappings = []
    for cls in request.classes:
        courses = [
            c for c in request.courses
            if c.trade_id == cls.trade_id and c.level == cls.level
        ]

        trainer_id = cls.trainer_id or ""
        if not trainer_id:
            trainer = next((t for t in request.trainers if cls.trade_id in t.trade_ids), None)
            trainer_id = trainer.id if trainer else ""

        if not courses or not trainer_id:
            logger.info(f"Skipping class {cls.id}: {len(courses)} courses, trainer '{trainer_id}'")
            continue

        mappings.append(ClassCourseMapping(
            class_id=cls.id,
            class_size=cls.capacity or default_class_size,
            trade_id=cls.trade_id,
            trainer_id=trainer_id,
            courses=courses,
        ))
    return mappings


def run_scheduler(
    request: SchedulingRequest,
    base_config: SchedulerConfig = DEFAULT_CONFIG,
    default_class_size: int = DEFAULT_CLASS_SIZE
) -> SchedulerResult:
    """Run the full pipeline over an in-memory snapshot."""
    config = merge_config(base_config, request.config)
    trainer_map: Dict[str, TrainerInfo] = {t.id: t for t in request.trainers}

    # Step 1-3: Generate, score and order lessons
    mappings = build_class_course_mappings(request, default_class_size)
    lessons = generate_lesson_instances(mappings)
    lessons = compute_difficulty_scores(lessons, request.rooms, trainer_map)
    lessons = sort_by_difficulty(lessons)

    # Step 4: Occupancy, seeded with locked entries
    matrix = AvailabilityMatrix(
        [t.id for t in request.trainers],
        [r.id for r in request.rooms],
        [c.id for c in request.classes],
        request.max_periods,
    )
    locked = request.locked_assignments
    matrix.apply_locked_assignments(locked)

    logger.info(
        f"Scheduling {len(lessons)} lessons for {len(mappings)} classes "
        f"({len(locked)} locked, {request.max_periods} periods/day)"
    )

    # Step 5: Placement
    assignments, conflicts = run_placement(
        lessons, request.rooms, trainer_map, matrix, request.max_periods, config, locked
    )

    # Step 6: Optimization
    optimized, penalty = optimize_timetable(
        assignments, lessons, request.rooms, trainer_map, matrix, request.max_periods, config
    )

    return SchedulerResult(
        assignments=optimized,
        conflicts=conflicts,
        global_penalty_score=penalty,
        total_lessons=len(lessons) + len(locked),
        placed_lessons=len(optimized),
        failed_lessons=len(conflicts),
    )


# ===========================
# API Service
# ===========================

class HeuristicScheduler:
    """
    Validating wrapper around `run_scheduler` used by the API.
    """

    def __init__(self, max_backtrack_depth: int = 50, optimization_passes: int = 100,
                 default_class_size: int = DEFAULT_CLASS_SIZE):
        """
        Args:
            max_backtrack_depth: Default backtrack budget per run
            optimization_passes: Default number of optimizer passes
            default_class_size: Class size assumed when a class has no capacity
        """
        self.base_config = DEFAULT_CONFIG.model_copy(update={
            "max_backtrack_depth": max_backtrack_depth,
            "optimization_passes": optimization_passes,
        })
        self.default_class_size = default_class_size
        self.request: Optional[SchedulingRequest] = None

    def solve_scheduling(self, request: SchedulingRequest) -> SchedulingResponse:
        """
        Main entry point to solve the scheduling problem.

        Args:
            request: Full input snapshot

        Returns:
            SchedulingResponse with the result and timetable view, or error messages
        """
        self.request = request

        try:
            validation_errors = self._validate_input()
            if validation_errors:
                logger.warning(f"Rejected scheduling request: {len(validation_errors)} validation errors")
                return self._create_infeasible_response(validation_errors)

            start_time = datetime.now()
            result = run_scheduler(request, self.base_config, self.default_class_size)
            solve_time = (datetime.now() - start_time).total_seconds()

            return self._build_response(result, solve_time)

        except Exception as e:
            logger.error(f"Scheduling error: {str(e)}", exc_info=True)
            return self._create_error_response(str(e))

    # ===========================
    # Validation
    # ===========================

    def _validate_input(self) -> List[str]:
        """Validate cross-entity references and return list of errors."""
        errors = []
        request = self.request

        for label, items in (
            ("class", request.classes),
            ("course", request.courses),
            ("trainer", request.trainers),
            ("room", request.rooms),
        ):
            errors.extend(self._find_duplicate_ids(label, [item.id for item in items]))

        trainer_ids = {t.id for t in request.trainers}
        room_ids = {r.id for r in request.rooms}
        class_ids = {c.id for c in request.classes}

        for cls in request.classes:
            if cls.trainer_id and cls.trainer_id not in trainer_ids:
                errors.append(f"Class {cls.id} is pinned to unknown trainer {cls.trainer_id}")

        errors.extend(self._validate_locked_assignments(trainer_ids, room_ids, class_ids))
        return errors

    def _find_duplicate_ids(self, label: str, ids: List[str]) -> List[str]:
        seen = set()
        duplicates = []
        for entity_id in ids:
            if entity_id in seen and entity_id not in duplicates:
                duplicates.append(entity_id)
            seen.add(entity_id)
        return [f"Duplicate {label} id: {entity_id}" for entity_id in duplicates]

    def _validate_locked_assignments(self, trainer_ids, room_ids, class_ids) -> List[str]:
        errors = []
        max_periods = self.request.max_periods
        occupied: Dict[Tuple[str, str, str, int], str] = {}

        for a in self.request.locked_assignments:
            label = f"Locked assignment {a.lesson_instance_id}"
            if a.trainer_id not in trainer_ids:
                errors.append(f"{label} references unknown trainer {a.trainer_id}")
            if a.room_id not in room_ids:
                errors.append(f"{label} references unknown room {a.room_id}")
            if a.class_id not in class_ids:
                errors.append(f"{label} references unknown class {a.class_id}")

            last_period = a.period_number + 1 if a.is_double_period else a.period_number
            if last_period > max_periods:
                errors.append(f"{label} at period {a.period_number} exceeds max periods ({max_periods})")
                continue

            if not a.is_locked:
                errors.append(f"{label} is not flagged as locked")
                continue
            for period in range(a.period_number, last_period + 1):
                for kind, entity_id in (("trainer", a.trainer_id), ("room", a.room_id), ("class", a.class_id)):
                    key = (kind, entity_id, a.day.value, period)
                    if key in occupied:
                        errors.append(
                            f"{label} overlaps {occupied[key]} for {kind} {entity_id} "
                            f"on {a.day.value} period {period}"
                        )
                    else:
                        occupied[key] = a.lesson_instance_id
        return errors

    # ===========================
    # Response Building
    # ===========================

    def _build_response(self, result: SchedulerResult, solve_time: float) -> SchedulingResponse:
        status = "COMPLETE" if not result.conflicts else "PARTIAL"
        messages = []
        if result.conflicts:
            messages.append(ErrorMessage(
                title="Unplaced Lessons",
                message=f"{result.failed_lessons} of {result.total_lessons} lessons could not be placed",
                code="PARTIAL_SCHEDULE",
            ))

        logger.info(
            f"Scheduling {status}: placed {result.placed_lessons}/{result.total_lessons}, "
            f"penalty {result.global_penalty_score}, {solve_time:.3f}s"
        )

        return SchedulingResponse(
            **result.model_dump(),
            status=status,
            timetable=self._build_timetable(result.assignments),
            messages=Messages(error_message=messages),
            solve_time_seconds=solve_time,
        )

    def _build_timetable(self, assignments: List[SlotAssignment]) -> List[DaySchedule]:
        """Group assignments per day, ordered by period then room; empty days omitted."""
        class_names = {c.id: c.class_name or c.class_code for c in self.request.classes}
        course_names = {c.id: c.name or c.code for c in self.request.courses}
        trainer_names = {t.id: t.full_name for t in self.request.trainers}
        room_names = {r.id: r.name or r.code for r in self.request.rooms}

        timetable = []
        for day in DAYS:
            day_assignments = sorted(
                (a for a in assignments if a.day == day),
                key=lambda a: (a.period_number, a.room_id)
            )
            if not day_assignments:
                continue

            slots = [
                ScheduleSlot(
                    period_number=a.period_number,
                    periods=2 if a.is_double_period else 1,
                    class_id=a.class_id,
                    class_name=class_names.get(a.class_id),
                    course_id=a.course_id,
                    course_name=course_names.get(a.course_id),
                    trainer_id=a.trainer_id,
                    trainer_name=trainer_names.get(a.trainer_id),
                    room_id=a.room_id,
                    room_name=room_names.get(a.room_id),
                    is_locked=a.is_locked,
                )
                for a in day_assignments
            ]
            timetable.append(DaySchedule(day=day.value, slots=slots))
        return timetable

    def _create_infeasible_response(self, errors: List[str]) -> SchedulingResponse:
        """Create response for a rejected input snapshot."""
        return SchedulingResponse(
            status="INFEASIBLE",
            messages=Messages(error_message=[
                ErrorMessage(title="Invalid Input", message=err, code="INVALID_INPUT")
                for err in errors
            ]),
            solve_time_seconds=0.0,
        )

    def _create_error_response(self, error: str) -> SchedulingResponse:
        """Create response for an unexpected failure."""
        return SchedulingResponse(
            status="ERROR",
            messages=Messages(error_message=[
                ErrorMessage(title="Solver Error", message=error, code="SOLVER_ERROR")
            ]),
            solve_time_seconds=0.0,
        )
