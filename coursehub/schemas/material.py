from pydantic import BaseModel, Field

from coursehub.schemas.fields import UtcDatetime


class MaterialUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    tags: list[str] | None = None


class MaterialRead(BaseModel):
    id: int
    course_id: int
    uploaded_by_id: int
    title: str
    description: str
    file_url: str
    file_type: str
    file_name: str
    tags: list[str] = []
    uploaded_at: UtcDatetime

    class Config:
        from_attributes = True
