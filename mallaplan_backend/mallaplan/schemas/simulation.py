from pydantic import BaseModel, Field

from mallaplan.core.config import settings
from mallaplan.engine.terms import Period


class SemesterPlanIn(BaseModel):
    period: Period
    year: int = Field(..., ge=2000, le=2100)
    courses: list[str] = []


class ManualSimulationRequest(BaseModel):
    student_id: str = Field(..., min_length=1)
    career_code: str = Field(..., min_length=1)
    manual_plan: list[SemesterPlanIn] = []
    # Falls back to the configured cap when the request omits it
    max_credits_per_semester: int = Field(default_factory=lambda: settings.default_max_credits, gt=0)
    max_courses_per_semester: int | None = Field(None, gt=0)


class AutomaticSimulationRequest(BaseModel):
    student_id: str = Field(..., min_length=1)
    career_code: str = Field(..., min_length=1)
    max_credits_per_semester: int = Field(..., ge=20, le=80)
    max_courses_per_semester: int = Field(..., ge=1, le=10)
    use_summer_winter: bool = False
    # Courses the student wants to assume as failed for this run
    simulated_fails: list[str] | None = None


class SemesterOut(BaseModel):
    period: Period
    year: int
    term: str
    courses: list[str]


class SemesterCreditsOut(BaseModel):
    semester: str
    credits: int


class SimulationResponse(BaseModel):
    student_id: str
    career_code: str
    status: str  # complete / incomplete
    message: str
    estimated_graduation: str
    total_credits_per_semester: list[SemesterCreditsOut] = []
    full_plan: list[SemesterOut] = []
    approved_courses: list[str] = []
    pending_courses: list[str] = []
