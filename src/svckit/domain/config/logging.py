"""Logging configuration model."""

from typing import Literal

from pydantic import BaseModel


class LoggingConfig(BaseModel):
    """Configuration for log output.

    Attributes:
        level: Root log level
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
