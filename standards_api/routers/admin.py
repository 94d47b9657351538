from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from standards_api.deps import get_admin_gate
from standards_api.schemas.admin import LoginIn, LoginOut, StatusOut
from standards_api.schemas.catalog import OkOut
from standards_api.security import get_admin_token
from standards_api.services.sessions import AdminGate

router = APIRouter(prefix="/api/admin", tags=["admin"])

Gate = Annotated[AdminGate, Depends(get_admin_gate)]
Token = Annotated[str | None, Depends(get_admin_token)]


@router.post("/login", response_model=LoginOut)
def login(body: LoginIn, gate: Gate) -> LoginOut:
    return LoginOut(token=gate.login(body.password))


@router.post("/logout", response_model=OkOut)
def logout(gate: Gate, token: Token) -> OkOut:
    gate.logout(token)
    return OkOut(message="Logged out")


@router.get("/status", response_model=StatusOut)
def status(gate: Gate, token: Token) -> StatusOut:
    return StatusOut(isAdmin=gate.is_admin(token))
