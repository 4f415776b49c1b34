# auth service — jwt token management and password hashing
# handles token issuance, validation, and bcrypt password hashing

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from app.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

# checked against on unknown emails so a failed login always costs one bcrypt verify
DUMMY_PASSWORD_HASH = pwd_context.hash(secrets.token_urlsafe(32))


def hash_password(password: str) -> str:
    """hash a plaintext password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """verify a plaintext password against a bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # unrecognized or corrupt stored hash
        logger.warning("Stored password hash could not be parsed")
        return False


def issue_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """create a signed jwt bound to a single user id"""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.TOKEN_EXPIRE_DAYS))
    claims = {"sub": str(user_id), "iat": now, "exp": expire}
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """decode and validate a jwt token, returns payload or none"""
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"Token decode failed: {e}")
        return None


def verify_token(token: str) -> Optional[int]:
    """resolve a token to its user id. malformed, expired and mis-signed
    tokens all return none so callers cannot tell them apart."""
    payload = decode_token(token)
    if payload is None:
        return None

    subject = payload.get("sub")
    try:
        return int(subject)
    except (TypeError, ValueError):
        logger.warning("Token subject is not a user id")
        return None
