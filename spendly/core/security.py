# spendly/core/security.py
import uuid
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
import jwt
from typing import Optional
from .config import settings
from .errors import TokenExpired, TokenInvalid

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)

def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed JWT for the given subject (user ID).
    Defaults to ACCESS_TOKEN_EXPIRE_MINUTES (7 days).
    """
    now = datetime.now(timezone.utc)
    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": subject, "exp": expire, "iat": now}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def decode_access_token(token: str) -> uuid.UUID:
    """
    Validate signature and expiry and return the user ID from the subject claim.

    Raises TokenExpired when the signature is valid but the token is past its
    expiry, TokenInvalid for anything else.
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpired("Token has expired")
    except jwt.InvalidTokenError:
        raise TokenInvalid("Invalid token")

    try:
        return uuid.UUID(str(payload["sub"]))
    except ValueError:
        raise TokenInvalid("Invalid user ID format in token")
