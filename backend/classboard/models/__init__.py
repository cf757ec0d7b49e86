from classboard.models.room import Room  # noqa: F401
from classboard.models.school_class import ClassSchedule, SchoolClass  # noqa: F401
from classboard.models.teacher import Teacher  # noqa: F401
from classboard.models.time_slot import TimeSlot  # noqa: F401
from classboard.models.user import User, UserRole  # noqa: F401
