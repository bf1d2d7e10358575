"""Password hashing and bearer token handling.

Passwords are hashed with bcrypt (salted per call). Tokens are HS256 JWTs
whose ``sub`` claim is the user's email.
"""
from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from . import config
from .errors import Unauthenticated


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError):
        return False


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": subject, "iat": now, "exp": now + expires_delta}
    return jwt.encode(payload, config.SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_token(token: str) -> str:
    """Return the token's subject (an email), or raise ``Unauthenticated``."""
    try:
        payload = jwt.decode(token, config.SECRET_KEY, algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise Unauthenticated("Invalid token: expired")
    except jwt.PyJWTError as e:
        raise Unauthenticated(f"Invalid token: {e}")
    subject = payload.get("sub")
    if not subject or not isinstance(subject, str):
        raise Unauthenticated("Invalid token: missing subject")
    return subject
