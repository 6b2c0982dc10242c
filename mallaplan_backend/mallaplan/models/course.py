from sqlalchemy import Column, Integer, String, UniqueConstraint

from mallaplan.models.base import Base


class Course(Base):
    __tablename__ = "courses"
    __table_args__ = (UniqueConstraint("career_code", "code", name="uq_course_career_code"),)

    id = Column(Integer, primary_key=True, index=True)
    career_code = Column(String, nullable=False, index=True)
    code = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    credits = Column(Integer, nullable=False)
    position = Column(Integer, nullable=False, default=0)  # order within the curriculum
