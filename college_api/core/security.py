from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
import hashlib
import hmac
import secrets
from ..config import settings


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its stored hash"""
    try:
        algorithm, iterations, salt, expected = hashed_password.split("$", 3)
        iterations = int(iterations)
    except (AttributeError, ValueError):
        return False
    if algorithm != "pbkdf2_sha256":
        return False
    digest = _pbkdf2(plain_password, salt, iterations)
    return hmac.compare_digest(digest, expected)


def get_password_hash(password: str) -> str:
    """Hash a password using PBKDF2-SHA256 with a random per-user salt"""
    salt = secrets.token_hex(16)
    iterations = settings.password_hash_iterations
    digest = _pbkdf2(password, salt, iterations)
    return f"pbkdf2_sha256${iterations}${salt}${digest}"


def _pbkdf2(password: str, salt: str, iterations: int) -> str:
    return hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations
    ).hex()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    """Create JWT access token"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
    return encoded_jwt


def create_session_token(user_id: int) -> str:
    """Session token carrying the user id as its subject"""
    return create_access_token({"sub": str(user_id)})


def verify_token(token: str) -> Optional[int]:
    """Verify JWT token and return the user id it was issued for"""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        subject = payload.get("sub")
        if subject is None:
            return None
        return int(subject)
    except (JWTError, ValueError):
        return None
