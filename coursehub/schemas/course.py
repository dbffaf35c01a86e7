from typing import Optional

from pydantic import BaseModel, Field

from coursehub.schemas.fields import UtcDatetime
from coursehub.schemas.user import UserBrief


class CourseCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    code: str = Field(min_length=1, max_length=50)


class CourseUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    code: str | None = Field(default=None, min_length=1, max_length=50)


class CourseRead(BaseModel):
    """Course without its roster (what students see in listings)."""

    id: int
    name: str
    description: str | None = None
    code: str
    instructor_id: int
    instructor: UserBrief | None = None
    created_at: Optional[UtcDatetime] = None

    class Config:
        from_attributes = True


class CourseDetail(CourseRead):
    students: list[UserBrief] = []


class EnrollRequest(BaseModel):
    code: str = Field(min_length=1)


class EnrollResponse(BaseModel):
    message: str
    course: CourseRead
