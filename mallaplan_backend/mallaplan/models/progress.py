import enum

from sqlalchemy import Column, Enum, Integer, String

from mallaplan.engine.terms import Period
from mallaplan.models.base import Base


class CourseStatus(str, enum.Enum):
    APPROVED = "approved"
    FAILED = "failed"


class Progress(Base):
    __tablename__ = "progress"

    id = Column(Integer, primary_key=True, index=True)
    # Histories may be imported for students without a local account.
    student_id = Column(String(36), nullable=False, index=True)
    course_code = Column(String, nullable=False)
    status = Column(Enum(CourseStatus), nullable=False)
    grade = Column(Integer, nullable=True)  # 10-70 scale
    year = Column(Integer, nullable=True)
    period = Column(Enum(Period), nullable=True)
