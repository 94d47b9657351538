from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class StandardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    type: str
    icon: str | None = None
    description: str | None = None
    created_at: datetime | None = None


class FileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    standard_id: int
    title: str
    description: str | None = None
    filename: str
    filesize: int | None = None
    downloads: int
    uploaded_at: datetime | None = None


class FileDetailOut(FileOut):
    standard_name: str
    standard_code: str


class StatisticsItem(BaseModel):
    id: int
    code: str
    name: str
    file_count: int
    total_downloads: int


class UploadOut(BaseModel):
    success: bool = True
    message: str = "File uploaded successfully"
    fileId: int


class OkOut(BaseModel):
    success: bool = True
    message: str | None = None
