import os
import string
from functools import lru_cache
from typing import List, Literal

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "HYBRIDCRYPT_"


class Settings(BaseModel):
    # Text handling: "strict" rejects non-letters, "passthrough" keeps them in place
    text_policy: Literal["strict", "passthrough"] = "strict"
    fill_symbol: str = "X"
    # How the key matrix is serialized before RSA wrapping
    wrap_encoding: Literal["per_entry", "packed"] = "per_entry"
    timestamp_format: str = "%Y-%m-%d %H:%M:%S"
    keygen_max_attempts: int = Field(1000, ge=1)
    max_key_size: int = Field(10, ge=2)
    cors_origins: List[str] = ["*"]
    # Address the HTTP server binds to when started with `python -m hybridcrypt`
    host: str = "0.0.0.0"
    port: int = Field(5001, ge=1, le=65535)

    @field_validator("fill_symbol")
    @classmethod
    def _check_fill_symbol(cls, value: str) -> str:
        if len(value) != 1 or value not in string.ascii_letters:
            raise ValueError("fill_symbol must be a single letter A-Z")
        return value.upper()

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        """Build settings from HYBRIDCRYPT_* environment variables."""
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = raw
        return cls(**values)


@lru_cache()
def get_settings() -> Settings:
    return Settings.from_env()
