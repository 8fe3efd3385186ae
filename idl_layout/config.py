from __future__ import annotations

"""
Configuration for idl_layout.

- Reads environment variables (optionally from `.env`) via pydantic-settings.
- Exposes a cached `get_settings()` accessor; tests call `get_settings.cache_clear()`.

Environment variables:
    IDL_LAYOUT_MAX_DEPTH              (int, default 64)       : max nesting of defined types
    IDL_LAYOUT_FIELD_CASE             (str, default preserve) : decoded key style: preserve|camel|snake
    IDL_LAYOUT_ACCOUNT_BUFFER_SIZE    (int, default 1000)     : default schema-account buffer size
    IDL_LAYOUT_LOG_LEVEL              (str, default INFO)
    IDL_LAYOUT_LOG_FORMAT             (str, default json)     : json|console
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .casing import Naming, naming_strategy

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# authority (32) + u32 length prefix
_MIN_ACCOUNT_BUFFER = 36


class IdlSettings(BaseSettings):
    max_depth: int = Field(64, ge=1, description="Max nesting depth of defined types")
    field_case: Literal["preserve", "camel", "snake"] = Field(
        "preserve", description="Key style for struct fields in decoded values"
    )
    account_buffer_size: int = Field(
        1000,
        ge=_MIN_ACCOUNT_BUFFER,
        description="Default destination buffer size for schema-account encoding",
    )
    log_level: str = Field("INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_format: Literal["json", "console"] = "json"

    model_config = SettingsConfigDict(
        env_prefix="IDL_LAYOUT_", env_file=".env", case_sensitive=False, extra="ignore"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, v):
        s = str(v).strip().upper()
        if s not in _LEVELS:
            raise ValueError(f"log_level must be one of {_LEVELS}")
        return s

    @property
    def naming(self) -> Naming:
        return naming_strategy(self.field_case)


@lru_cache(maxsize=1)
def get_settings() -> IdlSettings:
    """Return cached settings instance."""
    return IdlSettings()


__all__ = ["IdlSettings", "get_settings"]
