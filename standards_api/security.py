from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Header

from standards_api.deps import get_admin_gate
from standards_api.services.sessions import AdminGate

ADMIN_TOKEN_HEADER = "x-admin-token"

AdminTokenHeader = Annotated[str | None, Header(alias=ADMIN_TOKEN_HEADER)]


def get_admin_token(x_admin_token: AdminTokenHeader = None) -> str | None:
    return (x_admin_token or "").strip() or None


def require_admin(
    token: Annotated[str | None, Depends(get_admin_token)],
    gate: Annotated[AdminGate, Depends(get_admin_gate)],
) -> str:
    """Route guard for upload/delete; 401 unless the header carries a live admin token."""
    gate.require_admin(token)
    return token  # type: ignore[return-value]
