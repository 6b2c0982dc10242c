import logging
from functools import partial

from sqlalchemy.orm import Session

from mallaplan.engine.catalog import SemesterPlan
from mallaplan.engine.orchestrator import FullProjection, generate_projection
from mallaplan.schemas.simulation import (
    AutomaticSimulationRequest,
    ManualSimulationRequest,
    SemesterCreditsOut,
    SemesterOut,
    SimulationResponse,
)
from mallaplan.services.cache import CatalogCache
from mallaplan.services.curriculum import get_catalog
from mallaplan.services.progress import get_academic_history, infer_start_term

logger = logging.getLogger(__name__)


def run_manual_simulation(
    db: Session, payload: ManualSimulationRequest, cache: CatalogCache
) -> SimulationResponse:
    manual_plan = [
        SemesterPlan(period=term.period, year=term.year, courses=list(term.courses))
        for term in payload.manual_plan
    ]
    projection = generate_projection(
        partial(get_academic_history, db),
        partial(get_catalog, db, cache=cache),
        payload.student_id,
        payload.career_code,
        manual_plan,
        payload.max_credits_per_semester,
        payload.max_courses_per_semester,
        start=None if manual_plan else infer_start_term(db, payload.student_id),
    )
    return _to_response(payload.student_id, payload.career_code, projection)


def run_automatic_simulation(
    db: Session, payload: AutomaticSimulationRequest, cache: CatalogCache
) -> SimulationResponse:
    projection = generate_projection(
        partial(get_academic_history, db),
        partial(get_catalog, db, cache=cache),
        payload.student_id,
        payload.career_code,
        [],
        payload.max_credits_per_semester,
        payload.max_courses_per_semester,
        start=infer_start_term(db, payload.student_id, include_special=payload.use_summer_winter),
        simulated_fails=payload.simulated_fails or (),
        retake_terms=payload.use_summer_winter,
    )
    return _to_response(payload.student_id, payload.career_code, projection)


def _to_response(student_id: str, career_code: str, projection: FullProjection) -> SimulationResponse:
    pending = projection.pending_courses
    if pending:
        status = "incomplete"
        message = f"Plan incomplete, {len(pending)} course(s) pending."
    else:
        status = "complete"
        message = "Plan generated successfully."

    return SimulationResponse(
        student_id=student_id,
        career_code=career_code,
        status=status,
        message=message,
        estimated_graduation=projection.estimated_graduation,
        total_credits_per_semester=[
            SemesterCreditsOut(semester=item.semester, credits=item.credits)
            for item in projection.total_credits_per_semester
        ],
        full_plan=[
            SemesterOut(period=term.period, year=term.year, term=term.label, courses=term.courses)
            for term in projection.full_plan
        ],
        approved_courses=sorted(projection.approved_courses),
        pending_courses=pending,
    )
