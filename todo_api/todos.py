"""Todo operations scoped to a single owner.

The caller's identity is always passed in explicitly; every read and write
is restricted to todos whose ``user_id`` matches it.
"""
from __future__ import annotations
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from . import storage
from .errors import Forbidden, NotFound
from .models import DEFAULT_STATUS, Todo, User, utcnow
from .schemas import TodoCreate

logger = logging.getLogger(__name__)

# list filter value meaning "no filter"
ALL_STATUSES = "All"


def resolve_user(db: Session, email: str) -> User:
    """Map a token's subject to its user record."""
    user = storage.get_user_by_email(db, email)
    if user is None:
        raise NotFound("User not found")
    return user


def list_todos(db: Session, user: User, status: Optional[str] = None) -> List[Todo]:
    if not status or status == ALL_STATUSES:
        status = None
    return storage.list_todos(db, user.id, status)


def create_todo(db: Session, user: User, draft: TodoCreate) -> Todo:
    todo = Todo(
        user_id=user.id,
        title=draft.title,
        description=draft.description,
        status=draft.status if draft.status is not None else DEFAULT_STATUS,
        created_at=draft.created_at if draft.created_at is not None else utcnow(),
    )
    storage.add_todo(db, todo)
    logger.info("User %s created todo %s", user.id, todo.id)
    return todo


def _owned_todo(db: Session, user: User, todo_id: int) -> Todo:
    todo = storage.get_todo(db, todo_id)
    if todo is None:
        raise NotFound("Todo not found")
    if todo.user_id != user.id:
        logger.warning("User %s denied access to todo %s owned by %s", user.id, todo_id, todo.user_id)
        raise Forbidden("Not authorized")
    return todo


def update_todo(
    db: Session,
    user: User,
    todo_id: int,
    title: str,
    description: Optional[str],
    status: str,
) -> Todo:
    todo = _owned_todo(db, user, todo_id)
    todo.title = title
    todo.description = description
    todo.status = status
    storage.save_todo(db, todo)
    logger.info("User %s updated todo %s (status=%s)", user.id, todo.id, todo.status)
    return todo


def delete_todo(db: Session, user: User, todo_id: int) -> None:
    todo = _owned_todo(db, user, todo_id)
    storage.delete_todo(db, todo)
    logger.info("User %s deleted todo %s", user.id, todo_id)
