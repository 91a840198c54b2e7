import re
from datetime import datetime

from pydantic import BaseModel, Field

from status_tracker.models.user import Role
from status_tracker.schemas.common import CAMEL_CONFIG

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
USERNAME_PATTERN = r"^[A-Za-z0-9_-]+$"
PASSWORD_MIN_LENGTH = 6

_username_re = re.compile(USERNAME_PATTERN)


def credential_problem(username: str, password: str) -> str | None:
    """Return a validation message for a new account's credentials, or None if acceptable."""
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        return f"username: must be between {USERNAME_MIN_LENGTH} and {USERNAME_MAX_LENGTH} characters"
    if not _username_re.fullmatch(username):
        return "username: can only contain alphanumeric characters, hyphens, and underscores"
    if len(password) < PASSWORD_MIN_LENGTH:
        return f"password: must be at least {PASSWORD_MIN_LENGTH} characters"
    return None


class UserRead(BaseModel):
    id: int
    username: str
    role: Role
    created_at: datetime
    last_login: datetime | None = None

    model_config = CAMEL_CONFIG


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=USERNAME_MAX_LENGTH)
    password: str = Field(min_length=1)


class RegisterRequest(BaseModel):
    # Anything else in the body (including "role") is ignored
    username: str = Field(min_length=USERNAME_MIN_LENGTH, max_length=USERNAME_MAX_LENGTH, pattern=USERNAME_PATTERN)
    password: str = Field(min_length=PASSWORD_MIN_LENGTH)


class AdminUserCreate(RegisterRequest):
    role: Role = Role.VIEWER


class AuthResponse(BaseModel):
    token: str
    user: UserRead


class TokenClaims(BaseModel):
    user_id: int
    username: str
    role: Role
    iat: datetime | None = None
    exp: datetime | None = None

    model_config = CAMEL_CONFIG
