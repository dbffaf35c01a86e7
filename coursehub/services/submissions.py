"""
Submission lifecycle: unsubmitted -> submitted(ungraded) -> submitted(graded).

Deleting a submission is the only way back to unsubmitted, after which the
student may submit again.
"""
import enum
import logging
import math
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coursehub.core.clock import as_utc, utcnow
from coursehub.core.errors import InvalidInput
from coursehub.models.assignment import Assignment
from coursehub.models.submission import Submission
from coursehub.services.grading import Graded
from coursehub.services.storage import FileStorage, StoredFile

logger = logging.getLogger(__name__)


class SubmissionStatus(str, enum.Enum):
    MISSING = "missing"
    SUBMITTED = "submitted"
    GRADED = "graded"


def status_of(submission: Submission | None) -> SubmissionStatus:
    if submission is None:
        return SubmissionStatus.MISSING
    if isinstance(submission.grading, Graded):
        return SubmissionStatus.GRADED
    return SubmissionStatus.SUBMITTED


def is_late(due_at: datetime, submitted_at: datetime) -> bool:
    # strictly after the due instant
    return as_utc(submitted_at) > as_utc(due_at)


def find_submission(db: Session, assignment_id: int, student_id: int) -> Submission | None:
    return (
        db.query(Submission)
        .filter(
            Submission.assignment_id == assignment_id,
            Submission.student_id == student_id,
        )
        .first()
    )


def ensure_not_submitted(db: Session, assignment_id: int, student_id: int) -> None:
    if find_submission(db, assignment_id, student_id) is not None:
        raise InvalidInput(
            "Already submitted this assignment. Please delete previous submission first."
        )


def create_submission(
    db: Session,
    *,
    student_id: int,
    assignment: Assignment,
    stored_file: StoredFile,
    now: datetime | None = None,
) -> Submission:
    ensure_not_submitted(db, assignment.id, student_id)

    submitted_at = as_utc(now) if now is not None else utcnow()
    submission = Submission(
        assignment_id=assignment.id,
        student_id=student_id,
        file_url=stored_file.url,
        file_name=stored_file.file_name,
        submitted_at=submitted_at,
        is_late=is_late(assignment.due_at, submitted_at),
    )
    db.add(submission)

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise InvalidInput(
            "Already submitted this assignment. Please delete previous submission first."
        )

    db.refresh(submission)
    logger.info(
        "submission %s created for assignment %s by student %s (late=%s)",
        submission.id,
        assignment.id,
        student_id,
        submission.is_late,
    )
    return submission


def grade_submission(
    db: Session,
    submission: Submission,
    *,
    assignment: Assignment,
    grader_id: int,
    grade: float,
    feedback: str | None = None,
    now: datetime | None = None,
) -> Submission:
    if grade is None or not math.isfinite(grade) or not 0 <= grade <= assignment.max_points:
        raise InvalidInput(f"Grade must be between 0 and {assignment.max_points:g}")

    # re-grading overwrites, no history is kept
    submission.grading = Graded(
        grade=grade,
        feedback=feedback or "",
        graded_at=as_utc(now) if now is not None else utcnow(),
        graded_by_id=grader_id,
    )

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(submission)
    logger.info("submission %s graded %s by %s", submission.id, grade, grader_id)
    return submission


def delete_submission(db: Session, storage: FileStorage, submission: Submission) -> None:
    submission_id, file_url = submission.id, submission.file_url
    db.delete(submission)
    db.commit()
    storage.delete(file_url)
    logger.info("submission %s deleted", submission_id)
