"""
Display formatting for conflict reports.

Used by API consumers after a run; the engine itself never calls it.
"""

from typing import Dict, List, Mapping
from models.domain import ConflictReport
from models.schemas import FormattedConflict

DEFAULT_ICON = "⚠️"
DEFAULT_TITLE = "Scheduling Conflict"

# conflict type -> (icon, title)
CONFLICT_LABELS: Dict[str, tuple] = {
    "no_room": ("🏗️", "No Available Room"),
    "trainer_overloaded": ("👨‍🏫", "Trainer Overloaded"),
    "double_period_impossible": ("⏱️", "Double Period Impossible"),
    "room_capacity": ("📏", "Room Capacity Insufficient"),
    "no_valid_slot": ("❌", "No Valid Slot"),
}

# Only a conflict with no identifiable cause is an error
ERROR_TYPES = {"no_valid_slot"}


def format_conflicts(
    conflicts: List[ConflictReport],
    course_names: Mapping[str, str],
    class_names: Mapping[str, str],
    trainer_names: Mapping[str, str]
) -> List[FormattedConflict]:
    formatted = []
    for conflict in conflicts:
        icon, title = CONFLICT_LABELS.get(conflict.type, (DEFAULT_ICON, DEFAULT_TITLE))
        formatted.append(FormattedConflict(
            icon=icon,
            title=title,
            description=conflict.details,
            severity="error" if conflict.type in ERROR_TYPES else "warning",
            course_name=course_names.get(conflict.course_id) or conflict.course_id,
            class_name=class_names.get(conflict.class_id) or conflict.class_id,
            trainer_name=trainer_names.get(conflict.trainer_id) or conflict.trainer_id,
        ))
    return formatted


def summarize_conflicts(conflicts: List[ConflictReport]) -> Dict[str, int]:
    """Tally conflicts by type."""
    summary: Dict[str, int] = {}
    for conflict in conflicts:
        summary[conflict.type] = summary.get(conflict.type, 0) + 1
    return summary
