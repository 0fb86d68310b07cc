"""HTTP readiness check configuration model."""

from pydantic import BaseModel, Field


class HttpConfig(BaseModel):
    """Configuration for HTTP readiness checks.

    Attributes:
        timeout: Per-request timeout in seconds
    """

    timeout: float = Field(5.0, gt=0.0, le=300.0)
