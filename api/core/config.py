"""
Settings loaded from environment variables and an optional `.env` file.

Process environment wins over `.env`; blank or unparsable values fall back
to the field default.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE = "/lab4/api/v1"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = ""
    db_insert_user: str = ""
    db_insert_password: str = ""
    db_read_user: str = ""
    db_read_password: str = ""
    host: str = "localhost"
    port: int = 3000
    api_base: str = DEFAULT_API_BASE
    log_level: str = "INFO"

    @field_validator("db_host", "db_name", "db_insert_user", "db_read_user", "host", "api_base", "log_level", mode="before")
    @classmethod
    def blank_is_default(cls, v: Any, info: ValidationInfo) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return cls.model_fields[info.field_name].default
        return v

    @field_validator("db_port", "port", mode="before")
    @classmethod
    def int_or_default(cls, v: Any, info: ValidationInfo) -> Any:
        if not isinstance(v, str):
            return v
        try:
            return int(v.strip())
        except ValueError:
            return cls.model_fields[info.field_name].default

    @field_validator("api_base")
    @classmethod
    def normalize_api_base(cls, v: str) -> str:
        v = v.rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v

    @classmethod
    def from_env(cls, env_file: str | None = ".env") -> "Settings":
        return cls(_env_file=env_file)

    def insert_dsn_params(self) -> dict[str, Any]:
        return {
            "host": self.db_host,
            "port": self.db_port,
            "user": self.db_insert_user,
            "password": self.db_insert_password,
            "database": self.db_name,
        }

    def read_dsn_params(self) -> dict[str, Any]:
        return {
            "host": self.db_host,
            "port": self.db_port,
            "user": self.db_read_user,
            "password": self.db_read_password,
            "database": self.db_name,
        }
