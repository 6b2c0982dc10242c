from pydantic import BaseModel, Field, field_validator


class CourseCreate(BaseModel):
    code: str = Field(..., min_length=1)
    name: str
    credits: int = Field(..., gt=0)
    prerequisites: list[str] = []


class CurriculumCreateRequest(BaseModel):
    courses: list[CourseCreate] = Field(..., min_length=1)

    @field_validator("courses")
    @classmethod
    def _unique_codes(cls, courses: list[CourseCreate]) -> list[CourseCreate]:
        seen: set[str] = set()
        for course in courses:
            if course.code in seen:
                raise ValueError(f"Duplicate course code {course.code}")
            seen.add(course.code)
        return courses


class CourseResponse(BaseModel):
    code: str
    name: str
    credits: int
    prerequisites: list[str] = []


class CurriculumResponse(BaseModel):
    career_code: str
    total_courses: int
    courses: list[CourseResponse] = []
