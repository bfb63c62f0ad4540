"""
Heuristic scheduling engine.
"""
from .availability_matrix import AvailabilityMatrix
from .constraints import check_hard_constraints, score_soft_constraints
from .lesson_generator import (
    generate_lesson_instances,
    compute_difficulty_scores,
    sort_by_difficulty
)
from .placement_engine import run_placement, build_conflict
from .optimizer import optimize_timetable
from .conflict_reporter import format_conflicts, summarize_conflicts
from .scheduler import run_scheduler, HeuristicScheduler

__all__ = [
    "AvailabilityMatrix",
    "check_hard_constraints",
    "score_soft_constraints",
    "generate_lesson_instances",
    "compute_difficulty_scores",
    "sort_by_difficulty",
    "run_placement",
    "build_conflict",
    "optimize_timetable",
    "format_conflicts",
    "summarize_conflicts",
    "run_scheduler",
    "HeuristicScheduler"
]
