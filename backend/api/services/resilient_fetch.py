# backend/api/services/resilient_fetch.py
from __future__ import annotations

import logging
import os
import time
from typing import Any, Callable, Dict, Optional

import requests

from services.errors import TransportFailure

log = logging.getLogger(__name__)

# ---------- Tunables via env (all optional) ----------
FETCH_TIMEOUT_S   = float(os.getenv("FETCH_TIMEOUT_S", "10"))    # per attempt
FETCH_MAX_RETRIES = int(os.getenv("FETCH_MAX_RETRIES", "3"))     # total attempts
BACKOFF_BASE_S    = 1.0
BACKOFF_MAX_S     = 5.0
# -----------------------------------------------------


def backoff_delay(attempt: int) -> float:
    # capped exponential backoff, attempt is 0-based
    return min(BACKOFF_BASE_S * (2 ** attempt), BACKOFF_MAX_S)


def fetch_with_retry(
    url: str,
    *,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    session: Optional[requests.Session] = None,
    max_retries: int = FETCH_MAX_RETRIES,
    timeout: float = FETCH_TIMEOUT_S,
    sleep: Callable[[float], None] = time.sleep,
) -> requests.Response:
    """
    GET `url` with a per-attempt timeout and retries on transport failures.

    Any HTTP response (2xx or not) is returned as-is so callers can tell
    "provider said no" apart from "network is flaky". Only exceptions from
    the transport (connection errors, timeouts) are retried.
    Raises TransportFailure, chained to the last transport error.
    """
    getter = session.get if session is not None else requests.get
    last_error: Optional[requests.exceptions.RequestException] = None

    for attempt in range(max_retries):
        if attempt > 0:
            delay = backoff_delay(attempt - 1)
            log.warning(
                "Retry attempt %d/%d for %s after %.1fs (%s)",
                attempt, max_retries - 1, url, delay, last_error,
            )
            sleep(delay)
        try:
            # requests applies the timeout to connect and to each read, not the whole transfer
            return getter(url, params=params, headers=headers, timeout=timeout)
        except requests.exceptions.RequestException as e:
            last_error = e

    if last_error is None:
        raise ValueError("max_retries must be at least 1")

    timed_out = isinstance(last_error, requests.exceptions.Timeout)
    raise TransportFailure(
        f"Request to {url} failed after {max_retries} attempts: {last_error}",
        timed_out=timed_out,
    ) from last_error
