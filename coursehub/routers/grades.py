from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coursehub.core.deps import get_db
from coursehub.core.lookups import get_course
from coursehub.core.permissions import get_principal
from coursehub.models.assignment import Assignment
from coursehub.models.course import Course
from coursehub.models.enrollment import Enrollment
from coursehub.models.submission import Submission
from coursehub.schemas.gradebook import (
    AssignmentRef,
    CourseGradebook,
    CourseGradeOverview,
    CourseRef,
    GradebookCell,
    GradebookStudentRow,
    GradeSummaryRead,
    MyCourseGrades,
    MyGradeRow,
)
from coursehub.services import grading
from coursehub.services.policy import Action, Principal, authorize
from coursehub.services.submissions import status_of

router = APIRouter()


def _course_assignments(db: Session, course_id: int) -> list[Assignment]:
    return (
        db.query(Assignment)
        .filter(Assignment.course_id == course_id)
        .order_by(Assignment.due_at.asc(), Assignment.id.asc())
        .all()
    )


def _course_submissions(db: Session, course_id: int, student_id: int | None = None) -> list[Submission]:
    q = (
        db.query(Submission)
        .join(Assignment, Submission.assignment_id == Assignment.id)
        .filter(Assignment.course_id == course_id)
    )
    if student_id is not None:
        q = q.filter(Submission.student_id == student_id)
    return q.all()


def _course_ref(course: Course) -> CourseRef:
    return CourseRef(id=course.id, name=course.name, code=course.code)


def _assignment_ref(a: Assignment) -> AssignmentRef:
    return AssignmentRef(id=a.id, title=a.title, max_points=a.max_points, due_at=a.due_at)


@router.get("/courses/{course_id}/gradebook", response_model=CourseGradebook)
def course_gradebook(
    course_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    course = get_course(db, course_id)
    authorize(principal, Action.GRADEBOOK_READ, course)

    assignments = _course_assignments(db, course.id)
    book = grading.course_grade_book(
        assignments,
        course.students,
        _course_submissions(db, course.id),
    )

    rows = []
    for student, pairs, summary in book:
        cells = [
            GradebookCell(
                assignment_id=a.id,
                assignment_title=a.title,
                max_points=a.max_points,
                status=status_of(s).value,
                grade=s.grade if s is not None else None,
                submitted=s is not None,
                is_late=bool(s.is_late) if s is not None else False,
            )
            for a, s in pairs
        ]
        rows.append(
            GradebookStudentRow(
                student_id=student.id,
                student_email=student.email,
                student_name=student.full_name,
                grades=cells,
                summary=GradeSummaryRead.model_validate(summary),
            )
        )

    return CourseGradebook(
        course=_course_ref(course),
        assignments=[_assignment_ref(a) for a in assignments],
        gradebook=rows,
    )


@router.get("/courses/{course_id}/gradebook/me", response_model=MyCourseGrades)
def my_course_grades(
    course_id: int,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    course = get_course(db, course_id)
    authorize(principal, Action.GRADES_READ, course)

    assignments = _course_assignments(db, course.id)
    pairs, summary = grading.student_report(
        assignments,
        _course_submissions(db, course.id, student_id=principal.id),
    )

    rows = [
        MyGradeRow(
            assignment=_assignment_ref(a),
            status=status_of(s).value,
            submission_id=s.id if s is not None else None,
            grade=s.grade if s is not None else None,
            feedback=s.feedback if s is not None else None,
            submitted_at=s.submitted_at if s is not None else None,
            is_late=bool(s.is_late) if s is not None else False,
            graded_at=s.graded_at if s is not None else None,
        )
        for a, s in pairs
    ]

    return MyCourseGrades(
        course=_course_ref(course),
        summary=GradeSummaryRead.model_validate(summary),
        grades=rows,
    )


@router.get("/grades/me", response_model=list[CourseGradeOverview])
def all_my_grades(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
):
    authorize(principal, Action.GRADES_OVERVIEW)

    courses = (
        db.query(Course)
        .join(Enrollment, Enrollment.course_id == Course.id)
        .filter(Enrollment.student_id == principal.id)
        .order_by(Course.code.asc())
        .all()
    )

    result: list[CourseGradeOverview] = []
    for c in courses:
        summary = grading.summarize(
            _course_assignments(db, c.id),
            _course_submissions(db, c.id, student_id=principal.id),
        )
        result.append(
            CourseGradeOverview(
                course=_course_ref(c),
                summary=GradeSummaryRead.model_validate(summary),
            )
        )
    return result
