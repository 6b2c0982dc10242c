from mallaplan.models.course import Course  # noqa: F401
from mallaplan.models.prerequisite import Prerequisite  # noqa: F401
from mallaplan.models.progress import CourseStatus, Progress  # noqa: F401
from mallaplan.models.student import Student  # noqa: F401
