"""Seed a small demo school: periods, rooms, one teacher and unassigned classes.

Run:
  PYTHONPATH=backend python scripts/seed_demo_timetable.py
"""

from __future__ import annotations

import logging
import os

from sqlalchemy import select

from classboard.core.config import get_settings
from classboard.core.logging import setup_logging
from classboard.db.bootstrap import ensure_runtime_schema_compatibility
from classboard.db.session import SessionLocal
from classboard.models.room import Room
from classboard.models.school_class import SchoolClass
from classboard.models.teacher import Teacher
from classboard.models.time_slot import TimeSlot
from classboard.models.user import User, UserRole

logger = logging.getLogger("seed_demo_timetable")

PERIODS = [
    ("08:00", "09:00", "Period 1"),
    ("09:00", "10:00", "Period 2"),
    ("10:00", "11:00", "Period 3"),
    ("11:00", "12:00", "Period 4"),
    ("13:00", "14:00", "Period 5"),
    ("14:00", "15:00", "Period 6"),
]

ROOMS = [
    ("Room 101", 30, ["projector"]),
    ("Room 102", 30, []),
    ("Lab 203", 24, ["fume hood", "sinks"]),
    ("Lab 204", 24, ["computers"]),
]

CLASSES = [
    ("Advanced Mathematics", "Mathematics"),
    ("Physics 101", "Physics"),
    ("Chemistry Lab", "Chemistry"),
    ("English Literature", "English"),
]


def _seed_teacher(session) -> Teacher:
    email = os.getenv("DEMO_TEACHER_EMAIL", "teacher.demo@example.com").strip().lower()
    user = session.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if user is None:
        user = User(name="Demo Teacher", email=email, role=UserRole.teacher)
        session.add(user)
        session.flush()
    teacher = session.execute(select(Teacher).where(Teacher.user_id == user.id)).scalar_one_or_none()
    if teacher is None:
        teacher = Teacher(user_id=user.id, department="Sciences")
        session.add(teacher)
        session.flush()
    return teacher


def main() -> None:
    setup_logging(get_settings().log_level)
    ensure_runtime_schema_compatibility()

    with SessionLocal() as session:
        existing_labels = set(session.execute(select(TimeSlot.label)).scalars())
        for start_time, end_time, label in PERIODS:
            if label not in existing_labels:
                session.add(TimeSlot(start_time=start_time, end_time=end_time, label=label))

        existing_rooms = set(session.execute(select(Room.name)).scalars())
        for name, capacity, features in ROOMS:
            if name not in existing_rooms:
                session.add(Room(name=name, capacity=capacity, features=features))

        teacher = _seed_teacher(session)
        existing_classes = set(
            session.execute(select(SchoolClass.name).where(SchoolClass.teacher_id == teacher.id)).scalars()
        )
        created = 0
        for name, subject in CLASSES:
            if name in existing_classes:
                logger.info("Class %s already exists", name)
                continue
            session.add(SchoolClass(name=name, subject=subject, teacher_id=teacher.id))
            created += 1

        session.commit()
        logger.info("Seed completed: %d new class(es)", created)


if __name__ == "__main__":
    main()
