"""User and todo persistence on top of a SQLAlchemy session.

Every write commits immediately; callers hold no transaction across calls.
"""
from __future__ import annotations
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .db import init_db
from .models import MAX_ID, Todo, User


def init_storage() -> None:
    init_db()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalar(select(User).where(User.email == email))


def add_user(db: Session, email: str, password_hash: str) -> Optional[User]:
    """Insert a user; returns None when the email is already taken."""
    user = User(email=email, password_hash=password_hash)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return None
    return user


def list_todos(db: Session, user_id: int, status: Optional[str] = None) -> List[Todo]:
    stmt = select(Todo).where(Todo.user_id == user_id)
    if status is not None:
        stmt = stmt.where(Todo.status == status)
    stmt = stmt.order_by(Todo.created_at, Todo.id)
    return list(db.scalars(stmt))


def get_todo(db: Session, todo_id: int) -> Optional[Todo]:
    if not 1 <= todo_id <= MAX_ID:
        return None
    return db.get(Todo, todo_id)


def add_todo(db: Session, todo: Todo) -> Todo:
    db.add(todo)
    db.commit()
    db.refresh(todo)
    return todo


def save_todo(db: Session, todo: Todo) -> Todo:
    db.commit()
    return todo


def delete_todo(db: Session, todo: Todo) -> None:
    db.delete(todo)
    db.commit()
