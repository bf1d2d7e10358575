from __future__ import annotations
import logging

from sqlalchemy.orm import Session

from . import storage
from .errors import Conflict, Unauthenticated
from .security import create_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)


def register(db: Session, email: str, password: str) -> str:
    """Create a user and return a token for it. Registration never updates an existing account."""
    if storage.get_user_by_email(db, email) is not None:
        logger.warning("Registration rejected: %s already exists", email)
        raise Conflict("Email already registered")
    user = storage.add_user(db, email, get_password_hash(password))
    if user is None:
        # lost a race with a concurrent registration of the same email
        logger.warning("Registration rejected: %s already exists", email)
        raise Conflict("Email already registered")
    logger.info("Registered user %s (id=%s)", user.email, user.id)
    return create_access_token(user.email)


def login(db: Session, email: str, password: str) -> str:
    user = storage.get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        logger.warning("Failed login for %s", email)
        raise Unauthenticated("Invalid email or password")
    logger.info("Login: %s (id=%s)", user.email, user.id)
    return create_access_token(user.email)
