import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from mallaplan.core.errors import InvalidTermError
from mallaplan.engine.catalog import AcademicHistory, Catalog, SemesterPlan
from mallaplan.engine.projection import project_remaining
from mallaplan.engine.terms import Period, Term
from mallaplan.engine.validator import validate_semester

logger = logging.getLogger(__name__)

ALREADY_GRADUATED = "Already graduated"


@dataclass
class SemesterCredits:
    semester: str
    credits: int


@dataclass
class FullProjection:
    estimated_graduation: str
    total_credits_per_semester: list[SemesterCredits] = field(default_factory=list)
    full_plan: list[SemesterPlan] = field(default_factory=list)
    approved_courses: set[str] = field(default_factory=set)
    pending_courses: list[str] = field(default_factory=list)


def generate_projection(
    get_history: Callable[[str], AcademicHistory],
    get_catalog: Callable[[str], Catalog],
    student_id: str,
    career_code: str,
    manual_plan: Sequence[SemesterPlan],
    max_credits_per_semester: int,
    max_courses_per_semester: int | None = None,
    *,
    start: Term | None = None,
    simulated_fails: Iterable[str] = (),
    retake_terms: bool = False,
) -> FullProjection:
    """Validate a manual plan term by term, then project the rest of the degree.

    ``get_history`` and ``get_catalog`` are the history and curriculum
    collaborators. Any rejected manual term raises ``InvalidTermError`` and
    nothing is returned for the run.

    ``simulated_fails`` are treated as failed for this run only: they are
    removed from the approved snapshot and may be retaken in I/V terms.
    """
    logger.info("Generating projection for student %s, career %s", student_id, career_code)
    history = get_history(student_id).copy()
    catalog = get_catalog(career_code)

    for code in simulated_fails:
        history.approved.discard(code)
        history.failed.add(code)

    simulated_approved = set(history.approved)
    total_credits_per_semester: list[SemesterCredits] = []

    logger.debug("Manual plan received: %d term(s)", len(manual_plan))
    for semester in manual_plan:
        result = validate_semester(
            semester,
            catalog,
            simulated_approved,
            history.failed,
            max_credits_per_semester,
            max_courses_per_semester,
        )
        if not result.is_valid:
            logger.error("Rejected %s for student %s: %s", semester.label, student_id, result.error)
            raise InvalidTermError(semester.period, semester.year, result.error)

        simulated_approved.update(semester.courses)
        total_credits_per_semester.append(SemesterCredits(semester.label, result.semester_credits))
        logger.debug("Accepted %s (%d credits)", semester.label, result.semester_credits)

    if manual_plan:
        start = manual_plan[-1].term.following(include_special=retake_terms)
    elif start is None:
        start = Term(Period.S1, datetime.now().year)

    projection = project_remaining(
        catalog,
        simulated_approved,
        max_credits_per_semester,
        max_courses_per_semester,
        start=start,
        failed=history.failed,
        retake_terms=retake_terms,
    )
    for semester in projection.plan:
        simulated_approved.update(semester.courses)
        credits = sum(catalog.courses[code].credits for code in semester.courses)
        total_credits_per_semester.append(SemesterCredits(semester.label, credits))

    full_plan = [*manual_plan, *projection.plan]
    estimated_graduation = full_plan[-1].label if full_plan else ALREADY_GRADUATED
    if projection.pending:
        logger.warning(
            "Projection for %s incomplete: %d course(s) pending", student_id, len(projection.pending)
        )
    logger.info("Projection generated. Estimated graduation: %s", estimated_graduation)

    return FullProjection(
        estimated_graduation=estimated_graduation,
        total_credits_per_semester=total_credits_per_semester,
        full_plan=full_plan,
        approved_courses=simulated_approved,
        pending_courses=projection.pending,
    )
