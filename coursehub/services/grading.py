"""
Grade aggregation.

Everything here works on already-loaded objects and never touches the
session. An assignment only needs ``id`` and ``max_points``; a submission
needs ``assignment_id``, ``student_id`` and ``grading``. The same fold,
``summarize``, backs the student report, the grade book and the overview;
callers only choose which slice of assignments and submissions to feed in.
"""
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Union

# (threshold, letter), checked top-down against the unrounded percentage
LETTER_THRESHOLDS = (
    (90.0, "A"),
    (80.0, "B"),
    (70.0, "C"),
    (60.0, "D"),
)
FAILING_LETTER = "F"
NO_GRADE_LETTER = "N/A"


@dataclass(frozen=True)
class Ungraded:
    pass


@dataclass(frozen=True)
class Graded:
    grade: float
    feedback: str = ""
    graded_at: datetime | None = None
    graded_by_id: int | None = None


Grading = Union[Ungraded, Graded]


@dataclass(frozen=True)
class GradeSummary:
    total_points: float
    earned_points: float
    percentage: float
    letter_grade: str
    total_assignments: int
    submitted_assignments: int
    graded_assignments: int


def letter_grade(percentage: float, graded_count: int) -> str:
    if graded_count <= 0:
        return NO_GRADE_LETTER
    for threshold, letter in LETTER_THRESHOLDS:
        if percentage >= threshold:
            return letter
    return FAILING_LETTER


def submissions_by_assignment(submissions: Iterable) -> dict:
    return {s.assignment_id: s for s in submissions}


def group_by_student(submissions: Iterable) -> dict:
    grouped = defaultdict(list)
    for s in submissions:
        grouped[s.student_id].append(s)
    return grouped


def summarize(assignments: Iterable, submissions: Iterable) -> GradeSummary:
    """
    Fold one student's submissions over a list of assignments.

    Every assignment contributes its full ``max_points`` to the total, graded
    or not. Only ``Graded`` submissions contribute earned points. Submissions
    for assignments outside ``assignments`` are ignored.
    """
    by_assignment = submissions_by_assignment(submissions)

    total_points = 0.0
    earned_points = 0.0
    total_assignments = 0
    submitted = 0
    graded = 0

    for assignment in assignments:
        total_assignments += 1
        total_points += assignment.max_points

        submission = by_assignment.get(assignment.id)
        if submission is None:
            continue
        submitted += 1

        grading = submission.grading
        if isinstance(grading, Graded):
            earned_points += grading.grade
            graded += 1
        elif not isinstance(grading, Ungraded):
            raise TypeError(f"unexpected grading state: {grading!r}")

    percentage = 100 * earned_points / total_points if total_points > 0 else 0.0

    return GradeSummary(
        total_points=total_points,
        earned_points=earned_points,
        percentage=round(percentage, 2),
        letter_grade=letter_grade(percentage, graded),
        total_assignments=total_assignments,
        submitted_assignments=submitted,
        graded_assignments=graded,
    )


def student_report(assignments: list, submissions: Iterable) -> tuple[list[tuple], GradeSummary]:
    """Per-assignment ``(assignment, submission-or-None)`` pairs plus the summary."""
    submissions = list(submissions)
    by_assignment = submissions_by_assignment(submissions)
    rows = [(a, by_assignment.get(a.id)) for a in assignments]
    return rows, summarize(assignments, submissions)


def course_grade_book(assignments: list, students: Iterable, submissions: Iterable) -> list[tuple]:
    """
    One ``(student, rows, summary)`` entry per enrolled student, in the order
    given. ``rows`` pairs each assignment with that student's submission.
    """
    per_student = group_by_student(submissions)
    book = []
    for student in students:
        rows, summary = student_report(assignments, per_student.get(student.id, []))
        book.append((student, rows, summary))
    return book
