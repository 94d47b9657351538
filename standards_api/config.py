from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

log = logging.getLogger("standards.settings")

env_path = Path(__file__).parent.parent / ".env"
if env_path.is_file():
    log.info("Loading environment variables from: %s", env_path)
    load_dotenv(dotenv_path=env_path)

DEFAULT_ADMIN_PASSWORD = "admin123"
DEFAULT_EXTENSIONS = ["pdf", "doc", "docx", "txt"]


# ------------------------------- helpers -------------------------------

def _parse_list(val: str | List[str] | None, default: List[str]) -> List[str]:
    """
    Accepts a JSON array or a CSV string and returns a de-duplicated list without blanks.
    '*' is passed through as ['*'].
    """
    if val is None:
        return list(default)
    if isinstance(val, list):
        out = [s.strip() for s in val if s and s.strip()]
    else:
        s = val.strip()
        if not s:
            return []
        if s == "*":
            return ["*"]
        try:
            arr = json.loads(s)
            if isinstance(arr, list):
                out = [str(x).strip() for x in arr if str(x).strip()]
            else:
                out = [s]
        except json.JSONDecodeError:
            out = [item.strip() for item in s.split(",") if item.strip()]

    seen: set[str] = set()
    uniq: list[str] = []
    for o in out:
        if o not in seen:
            seen.add(o)
            uniq.append(o)
    return uniq


def _mask(s: str | None, keep: int = 4) -> str | None:
    if not s:
        return None
    return (s[:keep] + "…") if len(s) > keep else "…"


# --------------------------------------- settings ---------------------------------------

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Storage ---
    database_url: str = Field(default="sqlite:///./standards.db", alias="DATABASE_URL")
    db_pool_size: PositiveInt = Field(default=10, alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=10, alias="DB_MAX_OVERFLOW")
    upload_dir: Path = Field(default=Path("uploads"), alias="UPLOAD_DIR")
    max_upload_bytes: PositiveInt = Field(default=50 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")
    allowed_extensions_raw: str | List[str] | None = Field(default=None, alias="ALLOWED_EXTENSIONS")

    # --- Admin sessions ---
    admin_password: str = Field(default=DEFAULT_ADMIN_PASSWORD, alias="ADMIN_PASSWORD")
    admin_session_ttl_seconds: Optional[PositiveInt] = Field(default=None, alias="ADMIN_SESSION_TTL_SECONDS")
    session_backend: Literal["memory", "redis"] = Field(default="memory", alias="SESSION_BACKEND")
    redis_url: str = Field(default="redis://localhost:6379/0", alias="REDIS_URL")

    # --- HTTP ---
    cors_origins_raw: str | List[str] | None = Field(default=None, alias="CORS_ORIGINS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # ---------------------------- derived values ----------------------------
    @property
    def cors_origins(self) -> list[str]:
        """Origins for CORS. Unset means any origin (['*'])."""
        return _parse_list(self.cors_origins_raw, ["*"])

    @property
    def allowed_extensions(self) -> set[str]:
        """Lower-case extensions without the leading dot, e.g. {'pdf', 'txt'}."""
        items = _parse_list(self.allowed_extensions_raw, DEFAULT_EXTENSIONS)
        return {i.lower().lstrip(".") for i in items if i.strip(".")}

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def debug_dump(self) -> dict[str, Any]:
        return {
            "database_url": _mask(self.database_url, 16),
            "upload_dir": str(self.upload_dir),
            "max_upload_bytes": self.max_upload_bytes,
            "allowed_extensions": sorted(self.allowed_extensions),
            "session_backend": self.session_backend,
            "redis_url": _mask(self.redis_url, 16) if self.session_backend == "redis" else None,
            "admin_session_ttl_seconds": self.admin_session_ttl_seconds,
            "admin_password_is_default": self.admin_password == DEFAULT_ADMIN_PASSWORD,
            "cors_origins": self.cors_origins,
        }


# single instance
settings = Settings()
log.info("Loaded settings: %s", settings.debug_dump())
if settings.admin_password == DEFAULT_ADMIN_PASSWORD:
    log.warning("ADMIN_PASSWORD is not set; using the built-in default password")
