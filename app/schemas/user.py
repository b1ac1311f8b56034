# app/schemas/user.py
from typing import Optional
from datetime import datetime
from pydantic import EmailStr, Field

from app.schemas.base import CamelModel

class UserCreate(CamelModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)

class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

# Public fields, never the password hash
class UserRead(CamelModel):
    id: int
    username: str
    email: EmailStr
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

class AuthResponse(CamelModel):
    user: UserRead
    token: str

class CurrentUserResponse(CamelModel):
    user: UserRead
