import logging
from typing import List, Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, Query, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from . import auth, config, storage, todos
from .db import get_db
from .errors import TodoServiceError, Unauthenticated
from .models import User
from .schemas import RegisterRequest, LoginRequest, TokenResponse, TodoCreate, TodoUpdate, Todo
from .security import decode_token

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s  %(levelname)-8s  %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize database (create tables) before serving requests
    storage.init_storage()
    if config.SECRET_KEY == config.DEFAULT_SECRET_KEY:
        logger.warning("SECRET_KEY is not set; tokens are signed with the built-in default key")
    logger.info("Storage ready")
    yield


app = FastAPI(title="Todo API", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
auth_scheme = HTTPBearer(auto_error=False)


@app.exception_handler(TodoServiceError)
async def handle_service_error(request: Request, exc: TodoServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=exc.headers)


def get_current_email(credentials: Optional[HTTPAuthorizationCredentials] = Depends(auth_scheme)) -> str:
    if credentials is None:
        raise Unauthenticated("Not authenticated")
    return decode_token(credentials.credentials)


def get_current_user(email: str = Depends(get_current_email), db: Session = Depends(get_db)) -> User:
    return todos.resolve_user(db, email)


@app.get("/health")
def health():
    return {"status": "ok"}

@app.get("/api/auth/health", response_class=PlainTextResponse)
def auth_health():
    return "Auth service is running"

@app.post("/api/auth/register", response_model=TokenResponse)
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    return TokenResponse(token=auth.register(db, body.email, body.password))

@app.post("/api/auth/login", response_model=TokenResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    return TokenResponse(token=auth.login(db, body.email, body.password))

@app.get("/api/todos", response_model=List[Todo])
def list_my_todos(status_filter: Optional[str] = Query(default=None, alias="status"), user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return todos.list_todos(db, user, status_filter)

@app.post("/api/todos", response_model=Todo)
def create_todo(body: TodoCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return todos.create_todo(db, user, body)

@app.put("/api/todos/{todo_id}", response_model=Todo)
def update_todo(todo_id: int, body: TodoUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return todos.update_todo(db, user, todo_id, body.title, body.description, body.status)

@app.delete("/api/todos/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_todo(todo_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    todos.delete_todo(db, user, todo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
