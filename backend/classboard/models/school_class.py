import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from classboard.db.base import Base
from classboard.models.room import Room
from classboard.models.time_slot import TimeSlot


class SchoolClass(Base):
    __tablename__ = "classes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    subject: Mapped[str] = mapped_column(String(200), nullable=False)
    teacher_id: Mapped[str | None] = mapped_column(
        ForeignKey("teachers.id", ondelete="SET NULL"), index=True, nullable=True
    )
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    schedules: Mapped[list["ClassSchedule"]] = relationship(
        back_populates="school_class",
        cascade="all, delete-orphan",
    )


class ClassSchedule(Base):
    __tablename__ = "class_schedules"
    __table_args__ = (UniqueConstraint("class_id", "day", "time_slot_id", name="uq_class_schedule_slot"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    class_id: Mapped[str] = mapped_column(ForeignKey("classes.id", ondelete="CASCADE"), index=True, nullable=False)
    day: Mapped[str] = mapped_column(String(20), nullable=False)
    time: Mapped[str | None] = mapped_column(String(50), nullable=True)
    time_slot_id: Mapped[str | None] = mapped_column(
        ForeignKey("time_slots.id", ondelete="SET NULL"), index=True, nullable=True
    )
    room_id: Mapped[str | None] = mapped_column(ForeignKey("rooms.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    school_class: Mapped[SchoolClass] = relationship(back_populates="schedules")
    time_slot: Mapped[TimeSlot | None] = relationship(lazy="joined")
    room: Mapped[Room | None] = relationship(lazy="joined")
