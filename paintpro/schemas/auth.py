import enum
from typing import Optional

from pydantic import BaseModel, Field

from .common import WireModel, ReadModel


class Role(str, enum.Enum):
    user = "user"
    admin = "admin"
    superadmin = "superadmin"


class RegisterRequest(WireModel):
    username: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)
    # Only honored when the caller is already an admin
    role: Optional[Role] = None


class LoginRequest(BaseModel):
    username: str
    password: str


class UserResponse(ReadModel):
    id: int
    username: str
    name: str
    role: str


class TokenResponse(WireModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
