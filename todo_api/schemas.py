from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1)

    @field_validator("password")
    @classmethod
    def fits_bcrypt(cls, v: str) -> str:
        # bcrypt refuses inputs longer than 72 bytes
        if len(v.encode()) > 72:
            raise ValueError("password must be at most 72 bytes")
        return v

class LoginRequest(BaseModel):
    email: str
    password: str

class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TodoCreate(_CamelModel):
    title: str = Field(min_length=1, max_length=500)
    description: Optional[str] = None
    status: Optional[str] = Field(default=None, max_length=50)
    created_at: Optional[datetime] = None

class TodoUpdate(_CamelModel):
    title: str = Field(min_length=1, max_length=500)
    description: Optional[str] = None
    status: str = Field(min_length=1, max_length=50)

class Todo(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    status: str
    created_at: datetime
    user_id: int
