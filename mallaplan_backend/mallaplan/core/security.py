from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from mallaplan.core.config import settings

_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
_ALGORITHM = "HS256"
_TOKEN_EXPIRE_MINUTES = 60 * 24 * 7  # 7 days


@dataclass(frozen=True)
class StudentClaims:
    student_id: str
    career_code: str


def hash_password(plain: str) -> str:
    return _pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    return _pwd_context.verify(plain, hashed)


def create_student_token(student_id: str, career_code: str) -> str:
    """Signed bearer token naming the student and the career they plan for."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=_TOKEN_EXPIRE_MINUTES)
    return jwt.encode(
        {"sub": student_id, "career": career_code, "exp": expire},
        settings.jwt_secret,
        algorithm=_ALGORITHM,
    )


def decode_student_token(token: str) -> StudentClaims | None:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[_ALGORITHM])
        return StudentClaims(student_id=str(payload["sub"]), career_code=str(payload["career"]))
    except (JWTError, KeyError):
        return None
