from typing import Optional

from pydantic import BaseModel

from coursehub.schemas.fields import UtcDatetime


class CourseRef(BaseModel):
    id: int
    name: str
    code: str


class AssignmentRef(BaseModel):
    id: int
    title: str
    max_points: float
    due_at: UtcDatetime


class GradeSummaryRead(BaseModel):
    total_points: float
    earned_points: float
    percentage: float
    letter_grade: str  # "A" | "B" | "C" | "D" | "F" | "N/A"
    total_assignments: int
    submitted_assignments: int
    graded_assignments: int

    class Config:
        from_attributes = True


class MyGradeRow(BaseModel):
    assignment: AssignmentRef
    status: str  # "missing" | "submitted" | "graded"
    submission_id: Optional[int] = None
    grade: Optional[float] = None
    feedback: Optional[str] = None
    submitted_at: Optional[UtcDatetime] = None
    is_late: bool = False
    graded_at: Optional[UtcDatetime] = None


class MyCourseGrades(BaseModel):
    course: CourseRef
    summary: GradeSummaryRead
    grades: list[MyGradeRow]


class GradebookCell(BaseModel):
    assignment_id: int
    assignment_title: str
    max_points: float
    status: str
    grade: Optional[float] = None
    submitted: bool = False
    is_late: bool = False


class GradebookStudentRow(BaseModel):
    student_id: int
    student_email: str
    student_name: Optional[str] = None
    grades: list[GradebookCell]
    summary: GradeSummaryRead


class CourseGradebook(BaseModel):
    course: CourseRef
    assignments: list[AssignmentRef]
    gradebook: list[GradebookStudentRow]


class CourseGradeOverview(BaseModel):
    course: CourseRef
    summary: GradeSummaryRead
