"""
Data models and Pydantic schemas for the scheduling API.
"""
from .domain import (
    Day,
    DAYS,
    RoomType,
    LockType,
    ConflictType,
    ClassInfo,
    TrainerInfo,
    RoomInfo,
    CourseInfo,
    ClassCourseMapping,
    LessonInstance,
    SlotAssignment,
    CandidateSlot,
    ConflictReport,
    SoftConstraintWeights,
    SchedulerConfig,
    SchedulerConfigOverride,
    DEFAULT_WEIGHTS,
    DEFAULT_CONFIG,
    SchedulerResult
)
from .schemas import (
    SchedulingRequest,
    ConflictFormatRequest,
    ScheduleSlot,
    DaySchedule,
    ErrorMessage,
    Messages,
    SchedulingResponse,
    FormattedConflict
)

__all__ = [
    "Day",
    "DAYS",
    "RoomType",
    "LockType",
    "ConflictType",
    "ClassInfo",
    "TrainerInfo",
    "RoomInfo",
    "CourseInfo",
    "ClassCourseMapping",
    "LessonInstance",
    "SlotAssignment",
    "CandidateSlot",
    "ConflictReport",
    "SoftConstraintWeights",
    "SchedulerConfig",
    "SchedulerConfigOverride",
    "DEFAULT_WEIGHTS",
    "DEFAULT_CONFIG",
    "SchedulerResult",
    "SchedulingRequest",
    "ConflictFormatRequest",
    "ScheduleSlot",
    "DaySchedule",
    "ErrorMessage",
    "Messages",
    "SchedulingResponse",
    "FormattedConflict"
]
