from sqlalchemy.orm import Session

from coursehub.core.errors import NotFound
from coursehub.models.assignment import Assignment
from coursehub.models.course import Course
from coursehub.models.material import Material
from coursehub.models.submission import Submission


def get_course(db: Session, course_id: int) -> Course:
    course = db.query(Course).filter(Course.id == course_id).first()
    if not course:
        raise NotFound("Course not found")
    return course


def get_assignment(db: Session, assignment_id: int) -> Assignment:
    a = db.query(Assignment).filter(Assignment.id == assignment_id).first()
    if not a:
        raise NotFound("Assignment not found")
    return a


def get_material(db: Session, material_id: int) -> Material:
    m = db.query(Material).filter(Material.id == material_id).first()
    if not m:
        raise NotFound("Material not found")
    return m


def get_submission(db: Session, submission_id: int) -> Submission:
    s = db.query(Submission).filter(Submission.id == submission_id).first()
    if not s:
        raise NotFound("Submission not found")
    return s
