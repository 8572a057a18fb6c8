from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Logging
    log_level: str = "INFO"
    log_json: bool = True
    log_file: str | None = None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        if isinstance(v, str):
            level = v.strip().upper()
            if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
                raise ValueError(f"unknown log level: {v}")
            return level
        return v

    # Resolution
    resolve_policy: Literal["longest_prefix", "first_word"] = "longest_prefix"

    # Registration
    allow_duplicate_arity: bool = False  # run every same-arity entry point instead of rejecting
    register_help: bool = True

    # Background execution
    worker_threads: int | None = None  # None lets ThreadPoolExecutor pick its size
    background_timeout: float = 30.0

    model_config = {"env_file": ".env", "env_prefix": "CMDROUTER_", "extra": "ignore"}
