import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coursehub.core.deps import get_db, get_storage
from coursehub.core.errors import InvalidInput
from coursehub.core.lookups import get_course
from coursehub.core.permissions import get_principal
from coursehub.models.course import Course
from coursehub.models.enrollment import Enrollment
from coursehub.schemas.course import (
    CourseCreate,
    CourseDetail,
    CourseRead,
    CourseUpdate,
    EnrollRequest,
    EnrollResponse,
)
from coursehub.services import cascade, enrollment
from coursehub.services.policy import Action, Principal, Role, authorize
from coursehub.services.storage import FileStorage

logger = logging.getLogger(__name__)

router = APIRouter()


def _ensure_code_available(db: Session, code: str, exclude_id: int | None = None) -> None:
    q = db.query(Course).filter(Course.code == code)
    if exclude_id is not None:
        q = q.filter(Course.id != exclude_id)
    if q.first() is not None:
        raise InvalidInput("Course code already exists")


def _commit_course(db: Session, course: Course) -> Course:
    try:
        db.commit()
    except IntegrityError:
        # unique code lost a race with another request
        db.rollback()
        raise InvalidInput("Course code already exists")
    db.refresh(course)
    return course


# roster is only included for instructors, students get it omitted entirely
@router.get("/", response_model=list[CourseDetail], response_model_exclude_unset=True)
def list_courses(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    authorize(principal, Action.COURSE_LIST)

    if principal.role is Role.INSTRUCTOR:
        courses = (
            db.query(Course)
            .filter(Course.instructor_id == principal.id)
            .order_by(Course.code.asc())
            .all()
        )
        return [CourseDetail.model_validate(c) for c in courses]

    courses = db.query(Course).order_by(Course.code.asc()).all()
    return [CourseRead.model_validate(c).model_dump() for c in courses]


@router.post("/", response_model=CourseDetail, status_code=status.HTTP_201_CREATED)
def create_course(
    payload: CourseCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    authorize(principal, Action.COURSE_CREATE)

    code = enrollment.normalize_code(payload.code)
    _ensure_code_available(db, code)

    course = Course(
        name=payload.name.strip(),
        description=payload.description,
        code=code,
        instructor_id=principal.id,
    )
    db.add(course)
    course = _commit_course(db, course)
    logger.info("course %s created by instructor %s", course.code, principal.id)
    return course


@router.get("/enrolled", response_model=list[CourseRead])
def enrolled_courses(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    authorize(principal, Action.COURSE_LIST_ENROLLED)
    return (
        db.query(Course)
        .join(Enrollment, Enrollment.course_id == Course.id)
        .filter(Enrollment.student_id == principal.id)
        .order_by(Course.code.asc())
        .all()
    )


@router.post("/enroll", response_model=EnrollResponse)
def enroll_in_course(
    payload: EnrollRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    authorize(principal, Action.COURSE_ENROLL)
    course = enrollment.enroll(db, principal.id, payload.code)
    return {"message": "Enrolled successfully", "course": course}


@router.get("/{course_id}", response_model=CourseDetail)
def read_course(
    course_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    course = get_course(db, course_id)
    authorize(principal, Action.COURSE_READ, course)
    return course


@router.put("/{course_id}", response_model=CourseDetail)
def update_course(
    course_id: int,
    payload: CourseUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    course = get_course(db, course_id)
    authorize(principal, Action.COURSE_UPDATE, course)

    if payload.code is not None:
        code = enrollment.normalize_code(payload.code)
        if code != course.code:
            _ensure_code_available(db, code, exclude_id=course.id)
            course.code = code
    if payload.name is not None:
        course.name = payload.name.strip()
    if payload.description is not None:
        course.description = payload.description

    return _commit_course(db, course)


@router.delete("/{course_id}")
def delete_course(
    course_id: int,
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
    principal: Principal = Depends(get_principal),
):
    course = get_course(db, course_id)
    authorize(principal, Action.COURSE_DELETE, course)
    cascade.delete_course(db, storage, course)
    return {"message": "Course deleted successfully"}


@router.post("/{course_id}/unenroll")
def unenroll_from_course(
    course_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    authorize(principal, Action.COURSE_UNENROLL)
    enrollment.unenroll(db, principal.id, course_id)
    return {"message": "Unenrolled successfully"}
