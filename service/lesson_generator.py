"""
Lesson instance generation and most-constrained-first ordering.
"""

import math
from collections import Counter
from typing import Dict, List
from models.domain import ClassCourseMapping, LessonInstance, RoomInfo, TrainerInfo

# Difficulty term scales
ROOM_TYPE_SCARCITY_WEIGHT = 30
TRAINER_CEILING_BASELINE = 30
DOUBLE_PERIOD_BONUS = 20
SUITABLE_ROOM_SCARCITY_WEIGHT = 20


def generate_lesson_instances(mappings: List[ClassCourseMapping]) -> List[LessonInstance]:
    """
    Expand every class x course pairing into lesson instances.

    A double-period course needs ceil(periods_per_week / 2) instances, each
    consuming two grid periods.
    """
    lessons = []
    counter = 0

    for mapping in mappings:
        for course in mapping.courses:
            if course.is_double_period:
                instances_needed = math.ceil(course.periods_per_week / 2)
            else:
                instances_needed = course.periods_per_week

            for _ in range(instances_needed):
                lessons.append(LessonInstance(
                    id=f"lesson-{counter}",
                    class_id=mapping.class_id,
                    course_id=course.id,
                    trainer_id=mapping.trainer_id,
                    required_room_type=course.required_room_type,
                    is_double_period=course.is_double_period,
                    class_size=mapping.class_size,
                    trade_id=mapping.trade_id,
                ))
                counter += 1

    return lessons


def compute_difficulty_scores(
    lessons: List[LessonInstance],
    rooms: List[RoomInfo],
    trainers: Dict[str, TrainerInfo]
) -> List[LessonInstance]:
    """Return copies of the lessons with difficulty_score filled in."""
    room_type_counts = Counter(room.room_type for room in rooms)
    total_rooms = len(rooms) or 1

    scored = []
    for lesson in lessons:
        difficulty = 0

        # Fewer rooms of the required type
        type_count = room_type_counts.get(lesson.required_room_type, 0)
        difficulty += round((1 - type_count / total_rooms) * ROOM_TYPE_SCARCITY_WEIGHT)

        # Lower weekly ceiling
        trainer = trainers.get(lesson.trainer_id)
        if trainer is not None:
            difficulty += max(0, TRAINER_CEILING_BASELINE - trainer.max_weekly_periods)

        if lesson.is_double_period:
            difficulty += DOUBLE_PERIOD_BONUS

        # Fewer rooms that fit both type and class size
        suitable = sum(
            1 for room in rooms
            if room.room_type == lesson.required_room_type and room.capacity >= lesson.class_size
        )
        difficulty += round((1 - suitable / total_rooms) * SUITABLE_ROOM_SCARCITY_WEIGHT)

        scored.append(lesson.model_copy(update={"difficulty_score": difficulty}))

    return scored


def sort_by_difficulty(lessons: List[LessonInstance]) -> List[LessonInstance]:
    """Most constrained first; equal scores keep generation order."""
    return sorted(lessons, key=lambda lesson: lesson.difficulty_score, reverse=True)
