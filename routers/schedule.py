from fastapi import APIRouter
from typing import Dict, List
from config import settings
from models.domain import ConflictReport
from models.schemas import (
    SchedulingRequest, SchedulingResponse, ConflictFormatRequest, FormattedConflict
)
from service.scheduler import HeuristicScheduler
from service.conflict_reporter import format_conflicts, summarize_conflicts

# Create a router instance
router = APIRouter()


@router.post("/schedule/generate", response_model=SchedulingResponse)
def generate_schedule(request: SchedulingRequest):
    """
    Generate a weekly timetable from a full input snapshot.

    Lessons that cannot be placed are returned as conflicts; the run
    itself always completes with every lesson it managed to place.
    """
    scheduler = HeuristicScheduler(
        max_backtrack_depth=settings.scheduler_max_backtrack_depth,
        optimization_passes=settings.scheduler_optimization_passes,
        default_class_size=settings.default_class_size,
    )
    return scheduler.solve_scheduling(request)


@router.post("/schedule/conflicts/format", response_model=List[FormattedConflict])
def format_schedule_conflicts(request: ConflictFormatRequest):
    """Turn conflict records into display-ready entries with resolved names."""
    return format_conflicts(
        request.conflicts,
        request.course_names,
        request.class_names,
        request.trainer_names,
    )


@router.post("/schedule/conflicts/summary", response_model=Dict[str, int])
def summarize_schedule_conflicts(conflicts: List[ConflictReport]):
    """Count conflicts by type."""
    return summarize_conflicts(conflicts)
