from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from coursehub.core.deps import get_db, get_storage
from coursehub.core.errors import CourseHubError
from coursehub.core.lookups import get_assignment, get_submission
from coursehub.core.permissions import get_principal
from coursehub.models.submission import Submission
from coursehub.schemas.submission import SubmissionGradeUpdate, SubmissionRead
from coursehub.services import submissions as lifecycle
from coursehub.services.policy import Action, Principal, authorize
from coursehub.services.storage import FileStorage

router = APIRouter()


@router.post(
    "/assignments/{assignment_id}/submissions",
    response_model=SubmissionRead,
    status_code=status.HTTP_201_CREATED,
)
def submit_assignment(
    assignment_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
    principal: Principal = Depends(get_principal),
):
    assignment = get_assignment(db, assignment_id)
    authorize(principal, Action.SUBMISSION_CREATE, assignment)

    # reject duplicates before anything touches the disk
    lifecycle.ensure_not_submitted(db, assignment.id, principal.id)

    stored = storage.save(file)
    try:
        return lifecycle.create_submission(
            db,
            student_id=principal.id,
            assignment=assignment,
            stored_file=stored,
        )
    except CourseHubError:
        storage.delete(stored.url)
        raise


@router.get(
    "/assignments/{assignment_id}/submissions",
    response_model=list[SubmissionRead],
)
def list_submissions_for_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    assignment = get_assignment(db, assignment_id)
    authorize(principal, Action.SUBMISSION_LIST, assignment, course=assignment.course)

    return (
        db.query(Submission)
        .filter(Submission.assignment_id == assignment_id)
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
        .all()
    )


@router.get("/submissions/me", response_model=list[SubmissionRead])
def my_submissions(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    authorize(principal, Action.SUBMISSION_LIST_OWN)
    return (
        db.query(Submission)
        .filter(Submission.student_id == principal.id)
        .order_by(Submission.submitted_at.desc(), Submission.id.desc())
        .all()
    )


@router.get("/submissions/{submission_id}", response_model=SubmissionRead)
def read_submission(
    submission_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    sub = get_submission(db, submission_id)
    authorize(principal, Action.SUBMISSION_READ, sub, course=sub.assignment.course)
    return sub


@router.patch(
    "/submissions/{submission_id}/grade",
    response_model=SubmissionRead,
)
def grade_submission(
    submission_id: int,
    payload: SubmissionGradeUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    sub = get_submission(db, submission_id)
    assignment = sub.assignment
    authorize(principal, Action.SUBMISSION_GRADE, sub, course=assignment.course)

    return lifecycle.grade_submission(
        db,
        sub,
        assignment=assignment,
        grader_id=principal.id,
        grade=payload.grade,
        feedback=payload.feedback,
    )


@router.delete("/submissions/{submission_id}")
def delete_submission(
    submission_id: int,
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
    principal: Principal = Depends(get_principal),
):
    sub = get_submission(db, submission_id)
    authorize(principal, Action.SUBMISSION_DELETE, sub)
    lifecycle.delete_submission(db, storage, sub)
    return {"message": "Submission deleted successfully"}
