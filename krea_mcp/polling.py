"""Job completion poller.

Two states: pending and terminal. A job that is already terminal when created
returns without any request; otherwise the job is fetched at a constant
interval until it turns terminal or the deadline passes. Clock and sleep are
injectable so tests can drive a virtual clock.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger

from .exceptions import JobTimeoutError
from .schema import JobOutcome
from .utils.job_status import is_terminal_status, normalize_status
from .utils.json_utils import as_object, pick_job, read_string

FetchJob = Callable[[str], Awaitable[Any]]
Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[Any]]


async def wait_for_job_completion(
    fetch_job: FetchJob,
    job_id: str,
    *,
    initial_job: Any,
    poll_interval_ms: int,
    timeout_ms: int,
    clock: Clock = time.monotonic,
    sleep: Sleep = asyncio.sleep,
) -> JobOutcome:
    """Poll ``fetch_job(job_id)`` until the job is terminal.

    Raises:
        JobTimeoutError: If no terminal status is seen before ``timeout_ms``.
        KreaApiError: Propagated unchanged from ``fetch_job``.
    """
    initial = as_object(initial_job) or {}
    if is_terminal_status(normalize_status(read_string(initial, "status"))):
        return JobOutcome(job=initial, raw_response={"job": initial})

    deadline = clock() + timeout_ms / 1000
    while clock() < deadline:
        raw_response = await fetch_job(job_id)
        job = pick_job(raw_response)
        status = normalize_status(read_string(job, "status"))
        if is_terminal_status(status):
            logger.info(f"Job {job_id} reached terminal status: {status}")
            return JobOutcome(job=job, raw_response=raw_response)
        logger.debug(f"Job {job_id} still {status}; next check in {poll_interval_ms}ms")
        await sleep(poll_interval_ms / 1000)

    raise JobTimeoutError(job_id, timeout_ms)


__all__ = ["wait_for_job_completion"]
