import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coursehub.core.errors import InvalidInput, NotFound
from coursehub.models.course import Course
from coursehub.models.enrollment import Enrollment

logger = logging.getLogger(__name__)


def normalize_code(code: str | None) -> str:
    return (code or "").strip().upper()


def enrolled_course_ids(db: Session, student_id: int) -> frozenset:
    rows = db.query(Enrollment.course_id).filter(Enrollment.student_id == student_id).all()
    return frozenset(r.course_id for r in rows)


def is_enrolled(db: Session, student_id: int, course_id: int) -> bool:
    return (
        db.query(Enrollment)
        .filter(Enrollment.student_id == student_id, Enrollment.course_id == course_id)
        .first()
        is not None
    )


def enroll(db: Session, student_id: int, code: str) -> Course:
    """
    Add ``student_id`` to the course identified by ``code``.

    Membership is a single row, so there is nothing to compensate on failure.
    The unique constraint catches the race where two requests both pass the
    existence check.
    """
    code = normalize_code(code)
    if not code:
        raise InvalidInput("Please provide course code")

    course = db.query(Course).filter(Course.code == code).first()
    if not course:
        raise NotFound("Course not found with that code")

    if is_enrolled(db, student_id, course.id):
        raise InvalidInput("Already enrolled in this course")

    db.add(Enrollment(student_id=student_id, course_id=course.id))
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise InvalidInput("Already enrolled in this course")

    db.refresh(course)
    logger.info("student %s enrolled in %s", student_id, course.code)
    return course


def unenroll(db: Session, student_id: int, course_id: int) -> None:
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise NotFound("Course not found")

    removed = (
        db.query(Enrollment)
        .filter(Enrollment.student_id == student_id, Enrollment.course_id == course_id)
        .delete(synchronize_session=False)
    )
    db.commit()

    if removed:
        logger.info("student %s unenrolled from %s", student_id, course.code)
