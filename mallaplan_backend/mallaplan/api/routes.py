from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from mallaplan.core.database import get_db
from mallaplan.engine.catalog import Catalog, Course
from mallaplan.models.student import Student
from mallaplan.schemas.auth import LoginRequest, RegisterRequest, StudentOut, TokenResponse
from mallaplan.schemas.course import CourseResponse, CurriculumCreateRequest, CurriculumResponse
from mallaplan.schemas.progress import (
    AcademicHistoryRequest,
    AcademicHistoryResponse,
    PendingCoursesResponse,
    ProgressCreate,
    ProgressResponse,
    ProgressUpdate,
)
from mallaplan.schemas.simulation import (
    AutomaticSimulationRequest,
    ManualSimulationRequest,
    SimulationResponse,
)
from mallaplan.services.auth import get_current_student, login_student, register_student
from mallaplan.services.cache import CatalogCache
from mallaplan.services.curriculum import get_catalog, get_course_details, replace_curriculum
from mallaplan.services.progress import (
    create_progress,
    get_academic_history,
    get_pending_courses,
    list_progress,
    set_academic_history,
    update_progress,
)
from mallaplan.services.simulation import run_automatic_simulation, run_manual_simulation

router = APIRouter(prefix="/api")


def get_catalog_cache(request: Request) -> CatalogCache:
    return request.app.state.catalog_cache


def _course_out(course: Course) -> CourseResponse:
    return CourseResponse(
        code=course.code,
        name=course.name,
        credits=course.credits,
        prerequisites=sorted(course.prerequisites),
    )


def _curriculum_out(catalog: Catalog) -> CurriculumResponse:
    return CurriculumResponse(
        career_code=catalog.career_code,
        total_courses=catalog.total_courses,
        courses=[_course_out(course) for course in catalog.courses.values()],
    )


# ── Auth ──────────────────────────────────────────────────────────────────────

@router.post("/auth/register", response_model=TokenResponse, status_code=201)
def register_endpoint(payload: RegisterRequest, db: Session = Depends(get_db)):
    return register_student(db, payload)


@router.post("/auth/login", response_model=TokenResponse)
def login_endpoint(payload: LoginRequest, db: Session = Depends(get_db)):
    return login_student(db, payload)


@router.get("/me", response_model=StudentOut)
def me_endpoint(current_student: Student = Depends(get_current_student)):
    return current_student


# ── Curricula ─────────────────────────────────────────────────────────────────

@router.put("/curricula/{career_code}", response_model=CurriculumResponse)
def replace_curriculum_endpoint(
    career_code: str,
    payload: CurriculumCreateRequest,
    db: Session = Depends(get_db),
    cache: CatalogCache = Depends(get_catalog_cache),
):
    return _curriculum_out(replace_curriculum(db, career_code, payload.courses, cache))


@router.get("/curricula/{career_code}", response_model=CurriculumResponse)
def get_curriculum_endpoint(
    career_code: str,
    db: Session = Depends(get_db),
    cache: CatalogCache = Depends(get_catalog_cache),
):
    return _curriculum_out(get_catalog(db, career_code, cache))


@router.get("/curricula/{career_code}/courses/{course_code}", response_model=CourseResponse)
def get_course_endpoint(
    career_code: str,
    course_code: str,
    db: Session = Depends(get_db),
    cache: CatalogCache = Depends(get_catalog_cache),
):
    course = get_course_details(db, career_code, course_code, cache)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found.")
    return _course_out(course)


# ── Students ──────────────────────────────────────────────────────────────────

@router.get("/students/{student_id}/history", response_model=AcademicHistoryResponse)
def get_history_endpoint(student_id: str, db: Session = Depends(get_db)):
    history = get_academic_history(db, student_id)
    return AcademicHistoryResponse(
        student_id=student_id,
        approved=sorted(history.approved),
        failed=sorted(history.failed),
    )


@router.put("/students/{student_id}/history", response_model=AcademicHistoryResponse)
def set_history_endpoint(
    student_id: str,
    payload: AcademicHistoryRequest,
    db: Session = Depends(get_db),
):
    history = set_academic_history(db, student_id, payload.approved, payload.failed)
    return AcademicHistoryResponse(
        student_id=student_id,
        approved=sorted(history.approved),
        failed=sorted(history.failed),
    )


@router.get("/students/{student_id}/pending", response_model=PendingCoursesResponse)
def get_pending_endpoint(
    student_id: str,
    career_code: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
    cache: CatalogCache = Depends(get_catalog_cache),
):
    return PendingCoursesResponse(
        student_id=student_id,
        career_code=career_code,
        pending=get_pending_courses(db, student_id, career_code, cache),
    )


@router.get("/students/{student_id}/progress", response_model=list[ProgressResponse])
def list_progress_endpoint(student_id: str, db: Session = Depends(get_db)):
    return list_progress(db, student_id)


@router.post("/students/{student_id}/progress", response_model=ProgressResponse, status_code=201)
def create_progress_endpoint(
    student_id: str,
    payload: ProgressCreate,
    db: Session = Depends(get_db),
):
    return create_progress(db, student_id, payload)


@router.put("/progress/{progress_id}", response_model=ProgressResponse)
def update_progress_endpoint(
    progress_id: int,
    payload: ProgressUpdate,
    db: Session = Depends(get_db),
):
    return update_progress(db, progress_id, payload)


# ── Simulations ───────────────────────────────────────────────────────────────

@router.post("/simulations/manual", response_model=SimulationResponse)
def manual_simulation_endpoint(
    payload: ManualSimulationRequest,
    db: Session = Depends(get_db),
    cache: CatalogCache = Depends(get_catalog_cache),
):
    return run_manual_simulation(db, payload, cache)


@router.post("/simulations/automatic", response_model=SimulationResponse)
def automatic_simulation_endpoint(
    payload: AutomaticSimulationRequest,
    db: Session = Depends(get_db),
    cache: CatalogCache = Depends(get_catalog_cache),
):
    return run_automatic_simulation(db, payload, cache)
