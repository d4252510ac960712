"""Pydantic frozen configuration model for mnist_converter."""

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR"]


class ConverterConfig(BaseModel, frozen=True):
    """Configuration for a conversion run.

    All fields are validated at construction time. Frozen — no mutation after creation.
    """

    max_path_length: int = Field(default=255, gt=0)
    dir_mode: int = Field(default=0o755, ge=0, le=0o777)
    show_progress: bool = False
    log_level: LogLevel = "INFO"
