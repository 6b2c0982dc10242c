import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from mallaplan.core.database import get_db
from mallaplan.core.security import create_student_token, decode_student_token, hash_password, verify_password
from mallaplan.models.student import Student
from mallaplan.schemas.auth import LoginRequest, RegisterRequest, TokenResponse

logger = logging.getLogger(__name__)

_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def _token_for(student: Student) -> TokenResponse:
    return TokenResponse(
        access_token=create_student_token(student.id, student.career_code),
        student_id=student.id,
        career_code=student.career_code,
    )


def register_student(db: Session, payload: RegisterRequest) -> TokenResponse:
    if db.query(Student).filter(Student.email == payload.email).first():
        raise HTTPException(status_code=400, detail="Email already registered.")
    student = Student(
        email=payload.email,
        password_hash=hash_password(payload.password),
        name=payload.name,
        career_code=payload.career_code,
    )
    db.add(student)
    db.commit()
    db.refresh(student)
    logger.info("Registered student %s (%s)", student.id, student.career_code)
    return _token_for(student)


def login_student(db: Session, payload: LoginRequest) -> TokenResponse:
    student = db.query(Student).filter(Student.email == payload.email).first()
    if not student or not verify_password(payload.password, student.password_hash):
        logger.warning("Failed login for %s", payload.email)
        raise HTTPException(status_code=401, detail="Invalid email or password.")
    return _token_for(student)


def get_current_student(
    token: str | None = Depends(_oauth2_scheme),
    db: Session = Depends(get_db),
) -> Student:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated.")
    claims = decode_student_token(token)
    if claims is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token.")
    student = db.get(Student, claims.student_id)
    if student is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Student not found.")
    # A token issued for another career no longer describes this student's plan.
    if student.career_code != claims.career_code:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token career mismatch.")
    return student
