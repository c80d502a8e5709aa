from typing import Literal, Optional

from pydantic import BaseModel, Field

Role = Literal["admin", "staff"]


class UserCreate(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    role: Role = "staff"


class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=1)
    password: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, min_length=3)
    role: Optional[Role] = None


class User(BaseModel):
    """A user as returned by the API. The password hash never leaves the repository."""
    id: str
    username: str
    email: str
    role: Role
    createdAt: str


class LoginRequest(BaseModel):
    username: str
    password: str
