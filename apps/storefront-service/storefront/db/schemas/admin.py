from datetime import datetime

from .base import APIModel


class LoginRequest(APIModel):
    username: str | None = None
    password: str | None = None


class AdminUser(APIModel):
    id: str
    username: str
    last_login_at: datetime | None = None
    created_at: datetime | None = None
