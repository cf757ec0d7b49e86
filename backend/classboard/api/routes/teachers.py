from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from classboard.api.deps import get_db
from classboard.models.school_class import SchoolClass
from classboard.models.teacher import Teacher
from classboard.models.user import User, UserRole
from classboard.schemas.teacher import TeacherCreate, TeacherOut
from classboard.services.workload import teacher_workload

router = APIRouter()


@router.get("/", response_model=list[TeacherOut])
def list_teachers(include_workload: bool = False, db: Session = Depends(get_db)) -> list[TeacherOut]:
    teachers = list(db.execute(select(Teacher).join(Teacher.user).order_by(User.name)).scalars())
    if not include_workload:
        return [TeacherOut.model_validate(teacher) for teacher in teachers]

    classes_by_teacher: dict[str, list[SchoolClass]] = {}
    classes = db.execute(
        select(SchoolClass).options(selectinload(SchoolClass.schedules)).where(SchoolClass.teacher_id.is_not(None))
    ).scalars()
    for school_class in classes:
        classes_by_teacher.setdefault(school_class.teacher_id, []).append(school_class)

    return [
        TeacherOut.model_validate(teacher).model_copy(
            update={"workload": teacher_workload(classes_by_teacher.get(teacher.id, []))}
        )
        for teacher in teachers
    ]


@router.post("/", response_model=TeacherOut, status_code=status.HTTP_201_CREATED)
def create_teacher(payload: TeacherCreate, db: Session = Depends(get_db)) -> TeacherOut:
    email = payload.email.lower()
    existing = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A user with this email already exists")

    user = User(name=payload.name.strip(), email=email, role=UserRole.teacher)
    teacher = Teacher(user=user, department=payload.department)
    db.add(teacher)
    db.commit()
    db.refresh(teacher)
    return TeacherOut.model_validate(teacher)
