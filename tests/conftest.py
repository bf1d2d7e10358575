# Test configuration: in-memory database sessions for the flows, plus a real
# uvicorn server for the HTTP tests and a small client fixture around it.

import os
import sys
import socket
import subprocess
import time
from contextlib import closing
from pathlib import Path
from typing import Iterator, Optional

from tests.helpers import TEST_SECRET_KEY, random_email

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", TEST_SECRET_KEY)

import pytest
import logging
import requests
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from todo_api import config
from todo_api.db import init_db

ROOT = Path(__file__).resolve().parents[1]
logger = logging.getLogger(__name__)


@pytest.fixture()
def db() -> Iterator[Session]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def _get_free_port() -> int:
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture(scope="session")
def base_url(tmp_path_factory: pytest.TempPathFactory) -> Iterator[str]:
    data_dir = tmp_path_factory.mktemp("data")
    env = os.environ.copy()
    env["DATABASE_URL"] = f"sqlite:///{data_dir / 'todo.db'}"
    env["SECRET_KEY"] = config.SECRET_KEY
    env["LOG_LEVEL"] = "WARNING"

    port = _get_free_port()

    # Start uvicorn pointing to our app module
    cmd = [
        sys.executable,
        "-m",
        "uvicorn",
        "todo_api.main:app",
        "--host",
        "127.0.0.1",
        "--port",
        str(port),
        "--log-level",
        "warning",
    ]
    proc = subprocess.Popen(
        cmd,
        cwd=str(ROOT),
        env=env,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    logger.info("[tests] Started uvicorn (pid=%s) with DATABASE_URL=%s", proc.pid, env["DATABASE_URL"])

    # Wait for health endpoint
    url = f"http://127.0.0.1:{port}"
    for _ in range(120):
        try:
            r = requests.get(url + "/health", timeout=1.0)
            if r.status_code == 200:
                break
        except requests.RequestException:
            pass
        # If process died early, surface logs
        if proc.poll() is not None:
            out, err = proc.communicate(timeout=2)
            raise RuntimeError(f"Server exited early (code={proc.returncode}). STDOUT:\n{out}\nSTDERR:\n{err}")
        time.sleep(0.25)
    else:
        proc.terminate()
        try:
            out, err = proc.communicate(timeout=5)
        except subprocess.TimeoutExpired:
            proc.kill()
            out, err = proc.communicate()
        raise RuntimeError(f"Server did not start in time. STDOUT:\n{out}\nSTDERR:\n{err}")

    try:
        yield url
    finally:
        proc.terminate()
        try:
            proc.wait(timeout=5)
        except subprocess.TimeoutExpired:
            proc.kill()


@pytest.fixture()
def http(base_url: str):
    class Client:
        def __init__(self, base: str):
            self.base = base

        def register(self, email: str, password: str) -> requests.Response:
            return requests.post(
                self.base + "/api/auth/register",
                json={"email": email, "password": password},
                timeout=5,
            )

        def login(self, email: str, password: str) -> requests.Response:
            return requests.post(
                self.base + "/api/auth/login",
                json={"email": email, "password": password},
                timeout=5,
            )

        def signup(self, prefix: str = "user", password: str = "password123") -> str:
            r = self.register(random_email(prefix), password)
            r.raise_for_status()
            return r.json()["token"]

        def auth_headers(self, token: str):
            return {"Authorization": f"Bearer {token}"}

        def create_todo(self, token: str, title: str, **fields):
            r = requests.post(
                self.base + "/api/todos",
                headers=self.auth_headers(token),
                json={"title": title, **fields},
                timeout=5,
            )
            r.raise_for_status()
            return r.json()

        def list_todos(self, token: str, status: Optional[str] = None) -> requests.Response:
            params = {"status": status} if status is not None else None
            return requests.get(
                self.base + "/api/todos",
                headers=self.auth_headers(token),
                params=params,
                timeout=5,
            )

        def update_todo(self, token: str, todo_id: int, title: str, status: str, description: Optional[str] = None) -> requests.Response:
            return requests.put(
                self.base + f"/api/todos/{todo_id}",
                headers=self.auth_headers(token),
                json={"title": title, "description": description, "status": status},
                timeout=5,
            )

        def delete_todo(self, token: str, todo_id: int) -> requests.Response:
            return requests.delete(
                self.base + f"/api/todos/{todo_id}",
                headers=self.auth_headers(token),
                timeout=5,
            )

    return Client(base_url)
