import logging
from collections.abc import Set
from dataclasses import dataclass

from mallaplan.engine.catalog import Catalog, SemesterPlan
from mallaplan.engine.terms import SPECIAL_PERIODS

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    is_valid: bool
    semester_credits: int
    error: str | None = None


def validate_semester(
    semester: SemesterPlan,
    catalog: Catalog,
    approved_so_far: Set[str],
    failed_so_far: Set[str],
    max_credits: int,
    max_courses: int | None = None,
) -> ValidationResult:
    """Check one manually entered term against the academic rules.

    Rules are applied course by course and the first failure wins: the
    course must exist, its prerequisites must already be approved, and
    special terms (I/V) only take courses the student has failed. Load caps
    are checked once the whole term has been summed; the credit total is
    reported even when the cap rejects the term.

    Neither set is modified; the caller commits the term's courses.
    """
    semester_credits = 0
    for code in semester.courses:
        course = catalog.get(code)
        if course is None:
            logger.warning("Course not found in %s: %s", catalog.career_code, code)
            return ValidationResult(False, 0, f"course {code} does not exist")

        for pre_code in sorted(course.prerequisites):
            if pre_code not in approved_so_far:
                logger.warning("Missing prerequisite %s for %s", pre_code, code)
                return ValidationResult(False, 0, f"missing prerequisite {pre_code} for {code}")

        if semester.period in SPECIAL_PERIODS and code not in failed_so_far:
            return ValidationResult(
                False, 0, f"only retakes allowed in I/V ({code} was not failed)"
            )

        semester_credits += course.credits

    if semester_credits > max_credits:
        return ValidationResult(
            False,
            semester_credits,
            f"exceeds credit cap ({semester_credits} > {max_credits})",
        )
    if max_courses is not None and len(semester.courses) > max_courses:
        return ValidationResult(
            False,
            semester_credits,
            f"exceeds course cap ({len(semester.courses)} > {max_courses})",
        )

    return ValidationResult(True, semester_credits)
