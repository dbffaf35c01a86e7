from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from coursehub.core.clock import as_utc
from coursehub.core.deps import get_db, get_storage
from coursehub.core.errors import InvalidInput
from coursehub.core.lookups import get_assignment, get_course
from coursehub.core.permissions import get_principal
from coursehub.models.assignment import Assignment
from coursehub.models.submission import Submission
from coursehub.schemas.assignment import (
    AssignmentCreate,
    AssignmentRead,
    AssignmentUpdate,
    AssignmentWithStatus,
)
from coursehub.schemas.submission import SubmissionRead
from coursehub.services import cascade
from coursehub.services.policy import Action, Principal, Role, authorize
from coursehub.services.storage import FileStorage

router = APIRouter()


def _assignment_order_by():
    """
    Assignment ordering:
    - due_at ascending
    - assignment id ascending (stable tie-break)
    """
    return (
        Assignment.due_at.asc(),
        Assignment.id.asc(),
    )


@router.get(
    "/courses/{course_id}/assignments",
    response_model=list[AssignmentWithStatus],
    response_model_exclude_unset=True,
)
def list_assignments(
    course_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    course = get_course(db, course_id)
    authorize(principal, Action.ASSIGNMENT_READ, course=course)

    assignments = (
        db.query(Assignment)
        .filter(Assignment.course_id == course_id)
        .order_by(*_assignment_order_by())
        .all()
    )

    if principal.role is not Role.STUDENT:
        return [AssignmentRead.model_validate(a).model_dump() for a in assignments]

    # students also get their own submission status per assignment
    mine = {
        s.assignment_id: s
        for s in db.query(Submission)
        .join(Assignment, Submission.assignment_id == Assignment.id)
        .filter(Assignment.course_id == course_id, Submission.student_id == principal.id)
    }

    result = []
    for a in assignments:
        submission = mine.get(a.id)
        result.append(
            AssignmentWithStatus(
                **AssignmentRead.model_validate(a).model_dump(),
                has_submitted=submission is not None,
                submission=SubmissionRead.model_validate(submission) if submission else None,
            )
        )
    return result


@router.post(
    "/courses/{course_id}/assignments",
    response_model=AssignmentRead,
    status_code=status.HTTP_201_CREATED,
)
def create_assignment(
    course_id: int,
    payload: AssignmentCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    course = get_course(db, course_id)
    authorize(principal, Action.ASSIGNMENT_CREATE, course)

    a = Assignment(
        course_id=course.id,
        created_by_id=principal.id,
        title=payload.title.strip(),
        description=payload.description,
        due_at=as_utc(payload.due_at),
        max_points=payload.max_points,
    )
    db.add(a)
    db.commit()
    db.refresh(a)
    return a


@router.get("/assignments/{assignment_id}", response_model=AssignmentRead)
def read_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    a = get_assignment(db, assignment_id)
    authorize(principal, Action.ASSIGNMENT_READ, a, course=a.course)
    return a


@router.put("/assignments/{assignment_id}", response_model=AssignmentRead)
def update_assignment(
    assignment_id: int,
    payload: AssignmentUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    a = get_assignment(db, assignment_id)
    authorize(principal, Action.ASSIGNMENT_UPDATE, a, course=a.course)

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)

    if "max_points" in changes:
        # existing grades must stay within the new maximum
        over = (
            db.query(Submission)
            .filter(
                Submission.assignment_id == a.id,
                Submission.grade > changes["max_points"],
            )
            .count()
        )
        if over:
            raise InvalidInput(
                f"{over} graded submission(s) exceed the new maximum of {changes['max_points']:g} points"
            )

    if "due_at" in changes:
        changes["due_at"] = as_utc(changes["due_at"])
    if "title" in changes:
        changes["title"] = changes["title"].strip()

    for field, value in changes.items():
        setattr(a, field, value)

    db.commit()
    db.refresh(a)
    return a


@router.delete("/assignments/{assignment_id}")
def delete_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_storage),
    principal: Principal = Depends(get_principal),
):
    a = get_assignment(db, assignment_id)
    authorize(principal, Action.ASSIGNMENT_DELETE, a, course=a.course)
    cascade.delete_assignment(db, storage, a)
    return {"message": "Assignment deleted successfully"}
