"""
Deletes that reach past a single row.

Rows go through the ORM cascades declared on the models (course ->
enrollments, assignments, materials; assignment -> submissions). Backing
files are collected first and removed only after the commit succeeds.
"""
import logging

from sqlalchemy.orm import Session

from coursehub.models.assignment import Assignment
from coursehub.models.course import Course
from coursehub.models.material import Material
from coursehub.models.submission import Submission
from coursehub.services.storage import FileStorage

logger = logging.getLogger(__name__)


def _delete_files(storage: FileStorage, urls: list[str]) -> None:
    for url in urls:
        storage.delete(url)


def delete_assignment(db: Session, storage: FileStorage, assignment: Assignment) -> None:
    assignment_id = assignment.id
    urls = [
        row.file_url
        for row in db.query(Submission.file_url).filter(Submission.assignment_id == assignment_id)
    ]

    db.delete(assignment)
    db.commit()

    _delete_files(storage, urls)
    logger.info("assignment %s deleted with %d submission(s)", assignment_id, len(urls))


def delete_material(db: Session, storage: FileStorage, material: Material) -> None:
    material_id, url = material.id, material.file_url
    db.delete(material)
    db.commit()
    storage.delete(url)
    logger.info("material %s deleted", material_id)


def delete_course(db: Session, storage: FileStorage, course: Course) -> None:
    course_id, code = course.id, course.code

    submission_urls = [
        row.file_url
        for row in db.query(Submission.file_url)
        .join(Assignment, Submission.assignment_id == Assignment.id)
        .filter(Assignment.course_id == course_id)
    ]
    material_urls = [
        row.file_url for row in db.query(Material.file_url).filter(Material.course_id == course_id)
    ]

    db.delete(course)
    db.commit()

    _delete_files(storage, submission_urls + material_urls)
    logger.info(
        "course %s deleted (%d submission file(s), %d material file(s))",
        code,
        len(submission_urls),
        len(material_urls),
    )
