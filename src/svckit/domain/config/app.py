"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from svckit.domain.config.http import HttpConfig
from svckit.domain.config.logging import LoggingConfig
from svckit.domain.config.retry import RetryConfig


class AppConfig(BaseModel):
    """Main application configuration.

    This is the root configuration model that aggregates all configuration sections.
    Validation is performed at load time to fail fast on configuration errors.

    Attributes:
        retry: Retry policy defaults
        logging: Log output configuration
        http: HTTP readiness check configuration
    """

    retry: RetryConfig = Field(default_factory=RetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)

    model_config = ConfigDict(
        validate_assignment=True,  # Validate on attribute assignment
        extra="forbid",  # Reject unknown fields
        json_schema_extra={
            "example": {
                "retry": {
                    "max_attempts": 3,
                    "delay_ms": 1000,
                },
                "logging": {
                    "level": "INFO",
                },
                "http": {
                    "timeout": 5.0,
                },
            }
        },
    )
