from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlalchemy import ForeignKey, Index, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from standards_api.db.base import Base
from standards_api.models.standards import Standard


class File(Base):
    __tablename__ = "files"
    __table_args__ = (
        Index("ix_files_standard_uploaded", "standard_id", "uploaded_at"),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)

    standard_id: Mapped[int] = mapped_column(
        sa.Integer,
        ForeignKey("standards.id", ondelete="RESTRICT"),
        index=True,
        nullable=False,
    )

    title: Mapped[str] = mapped_column(sa.Text, nullable=False)
    description: Mapped[str | None] = mapped_column(sa.Text, nullable=True)

    # original client name, used as the download name
    filename: Mapped[str] = mapped_column(sa.Text, nullable=False)
    # "<epoch-ms>-<name>" relative to UPLOAD_DIR
    filepath: Mapped[str] = mapped_column(sa.Text, nullable=False)
    filesize: Mapped[int | None] = mapped_column(sa.BigInteger, nullable=True)

    downloads: Mapped[int] = mapped_column(sa.Integer, nullable=False, default=0, server_default="0")

    uploaded_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    standard: Mapped[Standard] = relationship("Standard", back_populates="files")

    def __repr__(self) -> str:
        return f"<File(id={self.id}, standard_id={self.standard_id}, filename='{self.filename}')>"
