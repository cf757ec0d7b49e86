from __future__ import annotations

from classboard.core.config import Settings, get_settings
from classboard.models.school_class import SchoolClass
from classboard.schemas.teacher import TeacherWorkload


def teacher_workload(classes: list[SchoolClass], settings: Settings | None = None) -> TeacherWorkload:
    settings = settings or get_settings()
    class_count = len(classes)
    # One schedule entry is one teaching period.
    weekly_hours = sum(len(cls.schedules) for cls in classes)
    total_students = sum(cls.capacity or 0 for cls in classes)
    return TeacherWorkload(
        class_count=class_count,
        total_students=total_students,
        weekly_hours=weekly_hours,
        is_overloaded=weekly_hours > settings.teacher_max_weekly_hours or class_count > settings.teacher_max_classes,
    )
