"""
Domain value types for the heuristic scheduling engine.
"""
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


# ===========================
# Time Grid
# ===========================

class Day(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"


# Iteration order for every day loop in the engine
DAYS: List[Day] = [Day.MONDAY, Day.TUESDAY, Day.WEDNESDAY, Day.THURSDAY, Day.FRIDAY]

RoomType = Literal["classroom", "lab", "workshop"]
LockType = Literal["trainer", "room", "time", "full"]
ConflictType = Literal[
    "no_room",
    "trainer_overloaded",
    "double_period_impossible",
    "room_capacity",
    "no_valid_slot",
]


# ===========================
# Input Entities
# ===========================

class ClassInfo(BaseModel):
    id: str
    class_name: str = ""
    class_code: str = ""
    trade_id: str
    capacity: int = Field(default=0, ge=0)  # 0 means unset
    level: int
    trainer_id: Optional[str] = None  # Pinned trainer


class TrainerInfo(BaseModel):
    id: str
    full_name: str = ""
    max_weekly_periods: int = Field(ge=0)
    preferred_daily_periods: int = Field(ge=0)
    trade_ids: List[str] = []


class RoomInfo(BaseModel):
    id: str
    name: str = ""
    code: str = ""
    building_id: str = ""
    room_type: RoomType
    capacity: int = Field(default=0, ge=0)


class CourseInfo(BaseModel):
    id: str
    name: str = ""
    code: str = ""
    trade_id: str
    level: int
    periods_per_week: int = Field(ge=0)
    required_room_type: RoomType
    is_double_period: bool = False


# ===========================
# Engine Working Types
# ===========================

class ClassCourseMapping(BaseModel):
    """A class with its resolved trainer and the courses it must take"""
    class_id: str
    class_size: int
    trade_id: str
    trainer_id: str
    courses: List[CourseInfo]


class LessonInstance(BaseModel):
    """One atomic unit of teaching time waiting to be placed"""
    id: str
    class_id: str
    course_id: str
    trainer_id: str
    required_room_type: RoomType
    is_double_period: bool
    class_size: int
    trade_id: str
    difficulty_score: int = 0


class SlotAssignment(BaseModel):
    """A placed lesson. Double periods also occupy period_number + 1."""
    lesson_instance_id: str
    class_id: str
    course_id: str
    trainer_id: str
    room_id: str
    day: Day
    period_number: int = Field(ge=1)
    soft_penalty_score: float = 0
    is_locked: bool = False
    lock_type: Optional[LockType] = None
    is_double_period: bool = False


class CandidateSlot(BaseModel):
    day: Day
    period_number: int
    room_id: str
    penalty_score: float


class ConflictReport(BaseModel):
    type: ConflictType
    lesson_instance_id: str
    class_id: str
    course_id: str
    trainer_id: str
    details: str


# ===========================
# Configuration
# ===========================

class SoftConstraintWeights(BaseModel):
    trainer_gap: float = 10
    subject_repeat_in_day: float = 8
    building_mismatch: float = 6  # Configurable, not applied by the scorer
    trainer_daily_overload: float = 5
    subject_spread: float = 3


class SchedulerConfig(BaseModel):
    max_backtrack_depth: int = Field(default=50, ge=0)
    optimization_passes: int = Field(default=100, ge=0)
    weights: SoftConstraintWeights = SoftConstraintWeights()


class SchedulerConfigOverride(BaseModel):
    """Partial configuration supplied by a caller"""
    max_backtrack_depth: Optional[int] = Field(default=None, ge=0)
    optimization_passes: Optional[int] = Field(default=None, ge=0)
    weights: Optional[Dict[str, float]] = None


DEFAULT_WEIGHTS = SoftConstraintWeights()
DEFAULT_CONFIG = SchedulerConfig(weights=DEFAULT_WEIGHTS)


# ===========================
# Result
# ===========================

class SchedulerResult(BaseModel):
    assignments: List[SlotAssignment] = []
    conflicts: List[ConflictReport] = []
    global_penalty_score: float = 0
    total_lessons: int = 0
    placed_lessons: int = 0
    failed_lessons: int = 0
