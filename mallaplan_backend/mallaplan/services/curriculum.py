import logging
from collections import defaultdict

from sqlalchemy.orm import Session

from mallaplan.core.errors import UnknownCareerError
from mallaplan.engine.catalog import Catalog, Course
from mallaplan.models.course import Course as CourseRow
from mallaplan.models.prerequisite import Prerequisite
from mallaplan.schemas.course import CourseCreate
from mallaplan.services.cache import CatalogCache

logger = logging.getLogger(__name__)


def replace_curriculum(
    db: Session, career_code: str, courses: list[CourseCreate], cache: CatalogCache
) -> Catalog:
    db.query(Prerequisite).filter(Prerequisite.career_code == career_code).delete()
    db.query(CourseRow).filter(CourseRow.career_code == career_code).delete()

    for position, course in enumerate(courses):
        db.add(CourseRow(
            career_code=career_code,
            code=course.code,
            name=course.name,
            credits=course.credits,
            position=position,
        ))
        for prereq_code in dict.fromkeys(course.prerequisites):
            db.add(Prerequisite(
                career_code=career_code,
                course_code=course.code,
                prereq_code=prereq_code,
            ))
    db.commit()
    cache.invalidate(career_code)
    logger.info("Stored curriculum %s with %d courses", career_code, len(courses))
    return get_catalog(db, career_code, cache)


def get_catalog(db: Session, career_code: str, cache: CatalogCache) -> Catalog:
    cached = cache.get(career_code)
    if cached is not None:
        logger.debug("Curriculum found in cache: %s", career_code)
        return cached

    rows = (
        db.query(CourseRow)
        .filter(CourseRow.career_code == career_code)
        .order_by(CourseRow.position, CourseRow.id)
        .all()
    )
    if not rows:
        logger.warning("Curriculum not found: %s", career_code)
        raise UnknownCareerError(career_code)

    prereq_map: dict[str, set[str]] = defaultdict(set)
    for row in db.query(Prerequisite).filter(Prerequisite.career_code == career_code).all():
        prereq_map[row.course_code].add(row.prereq_code)

    catalog = Catalog.from_courses(
        career_code,
        (
            Course(
                code=row.code,
                name=row.name,
                credits=row.credits,
                prerequisites=frozenset(prereq_map.get(row.code, ())),
            )
            for row in rows
        ),
    )
    cache.put(catalog)
    logger.debug("Curriculum %s loaded with %d courses", career_code, catalog.total_courses)
    return catalog


def get_course_details(
    db: Session, career_code: str, course_code: str, cache: CatalogCache
) -> Course | None:
    course = get_catalog(db, career_code, cache).get(course_code)
    if course is None:
        logger.warning("Course %s not found in %s", course_code, career_code)
    return course


def get_course_credits(db: Session, career_code: str, course_code: str, cache: CatalogCache) -> int:
    details = get_course_details(db, career_code, course_code, cache)
    return details.credits if details else 0
