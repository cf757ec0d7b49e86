from pydantic import BaseModel, EmailStr, Field


class TeacherUser(BaseModel):
    name: str
    email: str

    model_config = {"from_attributes": True}


class TeacherWorkload(BaseModel):
    class_count: int = 0
    total_students: int = 0
    weekly_hours: float = 0
    is_overloaded: bool = False


class TeacherCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    department: str | None = Field(default=None, max_length=200)


class TeacherOut(BaseModel):
    id: str
    user: TeacherUser
    department: str | None = None
    workload: TeacherWorkload | None = None

    model_config = {"from_attributes": True}

    @property
    def display_name(self) -> str:
        return self.user.name
