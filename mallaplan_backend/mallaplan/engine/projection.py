import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from mallaplan.engine.catalog import Catalog, SemesterPlan
from mallaplan.engine.terms import Term

logger = logging.getLogger(__name__)


@dataclass
class ProjectionResult:
    plan: list[SemesterPlan] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)


def project_remaining(
    catalog: Catalog,
    approved: Iterable[str],
    max_credits_per_semester: int,
    max_courses_per_semester: int | None = None,
    *,
    start: Term,
    failed: Iterable[str] = (),
    retake_terms: bool = False,
) -> ProjectionResult:
    """Greedily fill future terms with every course not yet approved.

    Courses are scanned in catalog order and taken while their prerequisites
    were approved before the term and the term stays within both caps. A
    regular term that admits nothing means the rest can never be scheduled
    (prerequisite cycle, unknown prerequisite, or a course larger than the
    cap), so the unscheduled courses are returned as ``pending``.

    With ``retake_terms`` the calendar also visits I and V terms, which only
    admit courses in ``failed``. An empty special term is skipped.
    """
    completed = set(approved)
    failed = set(failed)
    queue = [code for code in catalog.courses if code not in completed]
    plan: list[SemesterPlan] = []

    term = start
    while queue:
        current: list[str] = []
        credits = 0
        remaining = []
        for code in queue:
            course = catalog.courses[code]
            if term.is_special and code not in failed:
                remaining.append(code)
                continue
            if not course.prerequisites.issubset(completed):
                remaining.append(code)
                continue
            if credits + course.credits > max_credits_per_semester:
                remaining.append(code)
                continue
            if max_courses_per_semester is not None and len(current) >= max_courses_per_semester:
                remaining.append(code)
                continue
            current.append(code)
            credits += course.credits

        if current:
            # Only commit after the scan so courses in the same term never
            # satisfy each other's prerequisites.
            completed.update(current)
            plan.append(SemesterPlan(period=term.period, year=term.year, courses=current))
            logger.debug("Projected %s: %s (%d credits)", term.label, ", ".join(current), credits)
        elif not term.is_special:
            logger.warning(
                "Projection stalled at %s with %d course(s) pending", term.label, len(remaining)
            )
            break

        queue = remaining
        term = term.following(include_special=retake_terms)

    return ProjectionResult(plan=plan, pending=queue)
