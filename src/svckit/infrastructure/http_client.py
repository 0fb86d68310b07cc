"""HTTP readiness check (requests + bounded retry).

Used to wait for a dependency to come up before a service starts.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

import requests

from svckit.domain.models.result import Err, Ok, Result
from svckit.infrastructure.retry import RetryPolicy, run_with_retry

logger = logging.getLogger(__name__)


def check_url(url: str, *, timeout: float) -> Result[requests.Response, str]:
    """GET url once.

    Args:
        url: URL to check
        timeout: Request timeout in seconds

    Returns:
        Ok with the response for status < 400, Err with a message otherwise
    """
    logger.debug(f"HTTP GET {url}")
    try:
        resp = requests.get(url, timeout=timeout)
    except requests.exceptions.RequestException as e:
        return Err(f"{url} unreachable: {e}")
    if resp.status_code >= 400:
        return Err(f"{url} returned HTTP {resp.status_code}")
    return Ok(resp)


def wait_for_url(
    url: str,
    policy: RetryPolicy,
    *,
    timeout: float,
    sleep: Callable[[float], None] = time.sleep,
) -> Result[requests.Response, str]:
    """Check url until it answers or the policy is exhausted.

    Args:
        url: URL to check
        policy: Attempt limit and delay between checks
        timeout: Per-request timeout in seconds
        sleep: Blocking sleep used between checks

    Returns:
        Ok with the first good response, or Err from the final check
    """
    attempts = {"n": 0}

    def _attempt() -> Result[requests.Response, str]:
        attempts["n"] += 1
        result = check_url(url, timeout=timeout)
        if result.is_err:
            logger.warning(
                f"Readiness check failed (attempt {attempts['n']}/{policy.max_attempts}): {result.error}"
            )
        return result

    return run_with_retry(_attempt, policy, sleep=sleep)
