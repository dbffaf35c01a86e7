from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional

from coursehub.schemas.fields import UtcDatetime
from coursehub.schemas.submission import SubmissionRead

class AssignmentCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    due_at: datetime
    max_points: float = Field(ge=0, allow_inf_nan=False)


class AssignmentUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    due_at: Optional[datetime] = None
    max_points: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)


class AssignmentRead(BaseModel):
    id: int
    course_id: int
    created_by_id: int
    title: str
    description: str
    due_at: UtcDatetime
    max_points: float
    created_at: UtcDatetime

    class Config:
        from_attributes = True


class AssignmentWithStatus(AssignmentRead):
    # student view only
    has_submitted: bool = False
    submission: Optional[SubmissionRead] = None
