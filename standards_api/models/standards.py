from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy import func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from standards_api.db.base import Base

if TYPE_CHECKING:
    from standards_api.models.files import File


class Standard(Base):
    __tablename__ = "standards"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)

    # short human key, e.g. "ACI"
    code: Mapped[str] = mapped_column(sa.Text, unique=True, nullable=False)

    name: Mapped[str] = mapped_column(sa.Text, nullable=False)
    type: Mapped[str] = mapped_column(sa.Text, nullable=False)
    icon: Mapped[str | None] = mapped_column(sa.Text, nullable=True)
    description: Mapped[str | None] = mapped_column(sa.Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    files: Mapped[list[File]] = relationship("File", back_populates="standard")

    def __repr__(self) -> str:
        return f"<Standard(id={self.id}, code='{self.code}')>"
