from __future__ import annotations
import os
from typing import List


DATABASE_URL = os.getenv(
    "DATABASE_URL",
    # default for docker-compose postgres service (Psycopg 3)
    "postgresql+psycopg://postgres:postgres@db:5432/todo",
)

DEFAULT_SECRET_KEY = "change-me-to-a-random-secret-of-32-bytes-or-more"
SECRET_KEY = os.getenv("SECRET_KEY", DEFAULT_SECRET_KEY)
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def cors_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    return [o.strip() for o in raw.split(",") if o.strip()]
