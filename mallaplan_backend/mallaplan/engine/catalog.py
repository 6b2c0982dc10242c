from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from mallaplan.engine.terms import Period, Term, term_label


@dataclass(frozen=True)
class Course:
    code: str
    name: str
    credits: int
    prerequisites: frozenset[str] = frozenset()


@dataclass(frozen=True)
class Catalog:
    """Read-only view of one career's curriculum, keyed by course code.

    Iteration follows the order in which courses were loaded, which is also
    the order the projection planner scans them in.
    """

    career_code: str
    courses: Mapping[str, Course]

    @classmethod
    def from_courses(cls, career_code: str, courses: Iterable[Course]) -> "Catalog":
        course_map: dict[str, Course] = {}
        for course in courses:
            course_map[course.code] = course
        return cls(career_code=career_code, courses=MappingProxyType(course_map))

    @property
    def total_courses(self) -> int:
        return len(self.courses)

    def get(self, code: str) -> Course | None:
        return self.courses.get(code)

    def __contains__(self, code: str) -> bool:
        return code in self.courses


@dataclass
class AcademicHistory:
    approved: set[str] = field(default_factory=set)
    failed: set[str] = field(default_factory=set)

    def copy(self) -> "AcademicHistory":
        return AcademicHistory(approved=set(self.approved), failed=set(self.failed))


@dataclass
class SemesterPlan:
    period: Period
    year: int
    courses: list[str] = field(default_factory=list)

    def __post_init__(self):
        self.period = Period(self.period)

    @property
    def term(self) -> Term:
        return Term(self.period, self.year)

    @property
    def label(self) -> str:
        return term_label(self.period, self.year)
