"""Pydantic schemas for users and authentication.

Learn: Request fields default to "" rather than being required, so a
missing or blank field reaches the service layer and comes back as a
400 missing_field instead of a generic 422 validation error.
"""

from datetime import datetime

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    username: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class UserRead(BaseModel):
    """Public projection of a user — never includes the password hash."""
    id: int
    username: str
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    token: str
    user: UserRead
