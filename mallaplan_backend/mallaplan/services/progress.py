import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from mallaplan.engine.catalog import AcademicHistory
from mallaplan.engine.terms import Term
from mallaplan.models.progress import CourseStatus, Progress
from mallaplan.models.student import Student
from mallaplan.schemas.progress import ProgressCreate, ProgressUpdate
from mallaplan.services.cache import CatalogCache
from mallaplan.services.curriculum import get_catalog

logger = logging.getLogger(__name__)


def get_academic_history(db: Session, student_id: str) -> AcademicHistory:
    history = AcademicHistory()
    for row in db.query(Progress).filter(Progress.student_id == student_id).all():
        if row.status == CourseStatus.APPROVED:
            history.approved.add(row.course_code)
        else:
            history.failed.add(row.course_code)
    logger.debug(
        "History for %s: %d approved, %d failed",
        student_id, len(history.approved), len(history.failed),
    )
    return history


def set_academic_history(
    db: Session, student_id: str, approved: list[str], failed: list[str]
) -> AcademicHistory:
    """Replace every progress record of a student with bare approved/failed rows."""
    logger.info("Replacing academic history for %s", student_id)
    db.query(Progress).filter(Progress.student_id == student_id).delete()
    approved_codes = dict.fromkeys(approved)
    for code in approved_codes:
        db.add(Progress(student_id=student_id, course_code=code, status=CourseStatus.APPROVED))
    for code in dict.fromkeys(failed):
        if code in approved_codes:
            continue
        db.add(Progress(student_id=student_id, course_code=code, status=CourseStatus.FAILED))
    db.commit()
    return get_academic_history(db, student_id)


def get_pending_courses(
    db: Session, student_id: str, career_code: str, cache: CatalogCache
) -> list[str]:
    history = get_academic_history(db, student_id)
    catalog = get_catalog(db, career_code, cache)
    pending = [code for code in catalog.courses if code not in history.approved]
    logger.debug("Pending for %s: %s", student_id, ", ".join(pending) or "none")
    return pending


def list_progress(db: Session, student_id: str) -> list[Progress]:
    _require_student(db, student_id)
    return (
        db.query(Progress)
        .filter(Progress.student_id == student_id)
        .order_by(Progress.year, Progress.id)
        .all()
    )


def create_progress(db: Session, student_id: str, payload: ProgressCreate) -> Progress:
    _require_student(db, student_id)
    progress = Progress(student_id=student_id, **payload.model_dump())
    db.add(progress)
    db.commit()
    db.refresh(progress)
    logger.info("Recorded %s as %s for %s", progress.course_code, progress.status.value, student_id)
    return progress


def update_progress(db: Session, progress_id: int, payload: ProgressUpdate) -> Progress:
    progress = db.get(Progress, progress_id)
    if progress is None:
        logger.warning("Progress record not found: %s", progress_id)
        raise HTTPException(status_code=404, detail="Progress record not found.")
    for field, value in payload.model_dump(exclude_none=True).items():
        setattr(progress, field, value)
    db.commit()
    db.refresh(progress)
    return progress


def infer_start_term(db: Session, student_id: str, include_special: bool = False) -> Term | None:
    """First term after the latest one recorded in the student's history.

    I and V terms are only candidates when ``include_special`` is set.
    """
    rows = (
        db.query(Progress.year, Progress.period)
        .filter(Progress.student_id == student_id)
        .filter(Progress.year.isnot(None), Progress.period.isnot(None))
        .all()
    )
    if not rows:
        return None
    latest = max((Term(period, year) for year, period in rows), key=Term.sort_key)
    return latest.following(include_special=include_special)


def _require_student(db: Session, student_id: str) -> Student:
    student = db.get(Student, student_id)
    if student is None:
        logger.warning("Student not found: %s", student_id)
        raise HTTPException(status_code=404, detail="Student not found.")
    return student
