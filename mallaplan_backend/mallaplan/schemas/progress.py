from pydantic import BaseModel, Field

from mallaplan.engine.terms import Period
from mallaplan.models.progress import CourseStatus


class ProgressCreate(BaseModel):
    course_code: str = Field(..., min_length=1)
    status: CourseStatus
    grade: int | None = Field(None, ge=10, le=70)
    year: int = Field(..., ge=2000, le=2100)
    period: Period


class ProgressUpdate(BaseModel):
    """All fields optional — only provided fields are written."""

    course_code: str | None = Field(None, min_length=1)
    status: CourseStatus | None = None
    grade: int | None = Field(None, ge=10, le=70)
    year: int | None = Field(None, ge=2000, le=2100)
    period: Period | None = None


class ProgressResponse(BaseModel):
    id: int
    student_id: str
    course_code: str
    status: CourseStatus
    grade: int | None = None
    year: int | None = None
    period: Period | None = None

    model_config = {"from_attributes": True}


class AcademicHistoryRequest(BaseModel):
    approved: list[str] = []
    failed: list[str] = []


class AcademicHistoryResponse(BaseModel):
    student_id: str
    approved: list[str] = []
    failed: list[str] = []


class PendingCoursesResponse(BaseModel):
    student_id: str
    career_code: str
    pending: list[str] = []
