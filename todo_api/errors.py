"""Failure kinds raised by the auth and todo flows.

Each carries the HTTP status it maps to; ``main`` turns them into
``{"detail": ...}`` responses.
"""
from __future__ import annotations
from typing import Dict, Optional


class TodoServiceError(Exception):
    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None


class Conflict(TodoServiceError):
    status_code = 409


class Unauthenticated(TodoServiceError):
    status_code = 401

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class NotFound(TodoServiceError):
    status_code = 404


class Forbidden(TodoServiceError):
    status_code = 403
