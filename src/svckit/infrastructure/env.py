"""Environment variable helpers"""

import logging
import os
from typing import Any, Optional

logger = logging.getLogger(__name__)


def read_env(name: str) -> Optional[str]:
    """Return the value of environment variable name, or None if unset"""
    return os.environ.get(name)


def env_or_default(name: str, default: Any) -> str:
    """Return environment variable name, falling back to str(default).

    An empty value counts as set. The fallback is logged at WARNING.

    Args:
        name: Environment variable name
        default: Value used when the variable is unset

    Returns:
        Variable value or the stringified default
    """
    value = read_env(name)
    if value is not None:
        return value
    logger.warning(
        f"Environment variable {name} not set. Using default: {default!r}",
        extra={"env_var": name, "default": repr(default)},
    )
    return str(default)
