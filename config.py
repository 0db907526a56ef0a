from __future__ import annotations

import hashlib
import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Centralized, type-safe configuration loaded from environment variables.

    Uses pydantic-settings to support .env files and runtime validation.
    Only the CLI reads these values; library functions always take explicit
    arguments so their results never depend on the environment.
    """

    # Digest defaults for `loaderkit hash`
    HASH_ALGORITHM: str = Field(
        default="md5",
        description="Digest algorithm used when --algorithm is not given.",
    )

    DIGEST_ENCODING: str = Field(
        default="hex",
        description="Digest encoding (hex, base64, base26..base62, base64safe, or a custom alphabet).",
    )

    # Naming defaults for `loaderkit interpolate`
    NAME_PATTERN: str = Field(
        default="[hash].[ext]",
        description="Pattern used when the interpolate command receives an empty pattern.",
    )

    CONTEXT_DIR: str | None = Field(
        default=None,
        description="Directory that [path] and stringified requests are made relative to.",
    )

    LOG_LEVEL: str = Field(
        default="WARNING",
        description="Root logging level for the CLI (DEBUG, INFO, WARNING, ERROR, CRITICAL).",
    )

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("HASH_ALGORITHM")
    @classmethod
    def validate_hash_algorithm(cls, v: str) -> str:
        value = v.strip().lower()
        available = {name.lower() for name in hashlib.algorithms_available}
        if value not in available or value.startswith("shake_"):
            raise ValueError(f"HASH_ALGORITHM '{v}' is not a fixed-length hashlib algorithm")
        return value

    @field_validator("DIGEST_ENCODING", "NAME_PATTERN")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("value must not be blank")
        return v

    @field_validator("CONTEXT_DIR", mode="before")
    @classmethod
    def normalize_context_dir(cls, v):  # type: ignore[no-redef]
        """
        Treat an empty CONTEXT_DIR as unset.

        The value is kept verbatim otherwise: it may be a Windows path that
        must not be resolved against the local filesystem.
        """
        if v is None:
            return None
        value = str(v).strip()
        return value or None

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        value = v.strip().upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"LOG_LEVEL '{v}' is not a logging level name")
        return value

    # Convenience helpers
    @property
    def log_level(self) -> int:
        return logging.getLevelName(self.LOG_LEVEL)

    @property
    def has_context_dir(self) -> bool:
        return self.CONTEXT_DIR is not None


# Eagerly load configuration at import time for convenience across modules
config = Config()
