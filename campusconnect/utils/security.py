# campusconnect/utils/security.py
from datetime import timedelta
from functools import lru_cache
from typing import Optional

import jwt  # PyJWT 사용
from passlib.context import CryptContext

from campusconnect.core.config import Settings
from campusconnect.core.exceptions import ExpiredTokenError, InvalidTokenError
from campusconnect.utils.timeutils import utcnow

DEFAULT_ROUNDS = 12


@lru_cache(maxsize=None)
def _pwd_context(rounds: int) -> CryptContext:
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def get_password_hash(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    return _pwd_context(rounds).hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    try:
        return _pwd_context(DEFAULT_ROUNDS).verify(plain_password, hashed_password)
    except ValueError:
        # 형식이 깨진 해시
        return False


def create_access_token(user: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a token carrying the user's id, email and role.

    Expiry defaults to ``settings.JWT_EXPIRES_DAYS`` days from now.
    """
    issued_at = utcnow()
    expiry_time = issued_at + (expires_delta if expires_delta is not None else timedelta(days=settings.JWT_EXPIRES_DAYS))
    payload = {
        "id": user["id"],
        "email": user["email"],
        "role": user["role"],
        "iat": issued_at,
        "exp": expiry_time,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> dict:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise ExpiredTokenError()
    except jwt.PyJWTError:
        raise InvalidTokenError()

    if not payload.get("id"):
        raise InvalidTokenError()
    return payload
