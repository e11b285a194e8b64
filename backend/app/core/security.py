from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import ExpiredSignatureError, JWTError, jwt
import bcrypt
import secrets

from app.core.config import settings
from app.core.exceptions import InvalidTokenError, TokenExpiredError


BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """False for a missing or non-bcrypt stored hash"""
    if not hashed_password:
        return False
    password_bytes = _password_bytes(plain_password)
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    """Hash password with configurable rounds (BCRYPT_ROUNDS in .env)"""
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def _encode(claims: Dict[str, Any], token_type: str, lifetime: timedelta) -> str:
    payload = {**claims, "exp": datetime.utcnow() + lifetime, "type": token_type}
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Short-lived bearer token; lifetime defaults to ACCESS_TOKEN_EXPIRE_MINUTES"""
    return _encode(data, "access", expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))


def create_refresh_token(data: Dict[str, Any]) -> str:
    return _encode(data, "refresh", timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))


def create_token_pair(user_id: int, email: str, role_name: Optional[str] = None) -> Dict[str, str]:
    """Access + refresh tokens for a user"""
    claims = {"sub": str(user_id), "email": email, "role": role_name}
    return {
        "access_token": create_access_token(claims),
        "refresh_token": create_refresh_token(claims),
        "token_type": "bearer",
    }


def decode_token(token: str, expected_type: Optional[str] = None) -> Dict[str, Any]:
    """Decode JWT token, optionally checking its type claim"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise InvalidTokenError("Could not validate credentials")

    if expected_type and payload.get("type") != expected_type:
        raise InvalidTokenError("Invalid token type")
    return payload


def generate_otp(length: Optional[int] = None) -> str:
    """Numeric one-time password"""
    length = length or settings.OTP_LENGTH
    return "".join(str(secrets.randbelow(10)) for _ in range(length))
