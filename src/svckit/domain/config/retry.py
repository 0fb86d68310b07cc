"""Retry configuration model."""

from pydantic import BaseModel, Field


class RetryConfig(BaseModel):
    """Configuration for retry logic.

    Attributes:
        max_attempts: Total number of attempts, the first call included
        delay_ms: Fixed delay between attempts in milliseconds
    """

    max_attempts: int = Field(3, gt=0, le=100)
    delay_ms: int = Field(1000, ge=0)  # Allow 0 for tests
