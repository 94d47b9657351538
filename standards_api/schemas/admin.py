from __future__ import annotations

from pydantic import BaseModel


class LoginIn(BaseModel):
    password: str | None = None


class LoginOut(BaseModel):
    success: bool = True
    token: str


class StatusOut(BaseModel):
    isAdmin: bool
