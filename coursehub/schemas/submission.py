from typing import Optional

from pydantic import BaseModel, Field

from coursehub.schemas.fields import UtcDatetime


class SubmissionRead(BaseModel):
    id: int
    assignment_id: int
    student_id: int
    file_url: str
    file_name: str
    submitted_at: UtcDatetime
    is_late: bool = False
    grade: Optional[float] = None
    feedback: Optional[str] = None
    graded_at: Optional[UtcDatetime] = None
    graded_by_id: Optional[int] = None

    class Config:
        from_attributes = True


class SubmissionGradeUpdate(BaseModel):
    grade: float = Field(allow_inf_nan=False)
    feedback: Optional[str] = Field(default=None, max_length=10_000)
