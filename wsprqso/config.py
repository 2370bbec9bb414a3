"""
wsprqso/config.py

Application configuration via Pydantic Settings.
All values can be overridden with environment variables or a .env file.

Quick start — create a .env file in your working directory:
    SELF_CALL=DK1ABC
    EXCLUDED_CALLS=DL6WAB,DB0XYZ
    LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Station; the command-line argument wins over this
    SELF_CALL: str = ""

    # Stations that do not want WSPR QSOs logged with them
    EXCLUDED_CALLS: Annotated[list[str], NoDecode] = ["DL6WAB"]

    # Correlation window
    CYCLE_SECONDS: int = 120      # one WSPR transmit/receive period
    RETENTION_CYCLES: int = 2

    # Input
    INPUT_ENCODING: str = "utf-8"

    # Logging
    LOG_LEVEL: str = "INFO"

    @field_validator("EXCLUDED_CALLS", mode="before")
    @classmethod
    def parse_excluded_calls(cls, v):
        if isinstance(v, str):
            import json as _json
            v = v.strip()
            if v.startswith("["):
                try:
                    return _json.loads(v)
                except ValueError:
                    pass
            return [call.strip() for call in v.split(",") if call.strip()]
        return v

    @field_validator("CYCLE_SECONDS", "RETENTION_CYCLES")
    @classmethod
    def positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be at least 1")
        return v


settings = Settings()
