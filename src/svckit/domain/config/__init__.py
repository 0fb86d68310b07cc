"""Configuration models with Pydantic validation."""

from svckit.domain.config.app import AppConfig
from svckit.domain.config.http import HttpConfig
from svckit.domain.config.logging import LoggingConfig
from svckit.domain.config.retry import RetryConfig

__all__ = [
    "AppConfig",
    "HttpConfig",
    "LoggingConfig",
    "RetryConfig",
]
