from pydantic import BaseModel, Field
from typing import List, Dict, Optional, Literal
from models.domain import (
    ClassInfo, TrainerInfo, RoomInfo, CourseInfo, SlotAssignment,
    ConflictReport, SchedulerConfigOverride, SchedulerResult
)


# ===========================
# Request Schema
# ===========================

class SchedulingRequest(BaseModel):
    """Full input snapshot for one scheduling run"""
    classes: List[ClassInfo] = []
    courses: List[CourseInfo] = []
    trainers: List[TrainerInfo] = []
    rooms: List[RoomInfo] = []
    max_periods: int = Field(ge=1)  # Periods per day, 1-indexed
    config: Optional[SchedulerConfigOverride] = None
    locked_assignments: List[SlotAssignment] = []


class ConflictFormatRequest(BaseModel):
    """Conflicts plus id -> display name lookups"""
    conflicts: List[ConflictReport]
    course_names: Dict[str, str] = {}
    class_names: Dict[str, str] = {}
    trainer_names: Dict[str, str] = {}


# ===========================
# Response Schema
# ===========================

class ScheduleSlot(BaseModel):
    """Individual lesson in the timetable view"""
    period_number: int
    periods: int = 1  # 2 for double periods
    class_id: str
    class_name: Optional[str] = None
    course_id: str
    course_name: Optional[str] = None
    trainer_id: str
    trainer_name: Optional[str] = None
    room_id: str
    room_name: Optional[str] = None
    is_locked: bool = False


class DaySchedule(BaseModel):
    """Schedule for a single day"""
    day: str
    slots: List[ScheduleSlot]


class ErrorMessage(BaseModel):
    """Error or warning message"""
    title: str
    message: str
    code: Optional[str] = None


class Messages(BaseModel):
    """Collection of error/warning messages"""
    error_message: List[ErrorMessage] = []


class SchedulingResponse(SchedulerResult):
    """Engine result plus a per-day view and run metadata"""
    status: Literal["COMPLETE", "PARTIAL", "INFEASIBLE", "ERROR"]
    timetable: List[DaySchedule] = []
    messages: Messages = Messages()
    solve_time_seconds: Optional[float] = None


class FormattedConflict(BaseModel):
    """Display-ready conflict"""
    icon: str
    title: str
    description: str
    severity: Literal["error", "warning"]
    course_name: Optional[str] = None
    class_name: Optional[str] = None
    trainer_name: Optional[str] = None
