"""Tool orchestration: build payload, submit, poll, extract, summarize.

Each function handles one tool invocation end to end. Nothing here catches
errors; they propagate to the tool boundary in ``main``.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

from loguru import logger

from .builders import GenerateRequestBuilder, UpscaleRequestBuilder
from .catalog import ModelCatalog
from .client import KreaClient
from .exceptions import MissingJobIdError
from .polling import Clock, Sleep, wait_for_job_completion
from .schema import (
    BuiltRequest,
    GenerateImageRequest,
    GenerateImageStructured,
    JobOutcome,
    ModelListResponse,
    PollingControls,
    UpscaleImageRequest,
    UpscaleImageStructured,
)
from .utils.job_status import normalize_status
from .utils.json_utils import extract_http_urls, pick_job, read_string, read_unknown, stringify_unknown


def list_models() -> ModelListResponse:
    return ModelListResponse(models=ModelCatalog.list_models())


def extract_job_id(job: dict[str, Any]) -> str | None:
    """``id`` when present (even empty), else ``job_id``."""
    job_id = read_string(job, "id")
    if job_id is None:
        job_id = read_string(job, "job_id")
    return job_id


def extract_result_urls(job: dict[str, Any]) -> list[str]:
    """URLs under ``result``, or under ``data.output`` when there is no result."""
    result = read_unknown(job, "result")
    if result is None:
        result = read_unknown(job, "data", "output")
    return extract_http_urls(result)


async def _submit_and_wait(
    client: KreaClient,
    built: BuiltRequest,
    controls: PollingControls,
    *,
    clock: Clock,
    sleep: Sleep,
) -> dict[str, Any]:
    """Submit ``built`` and, if requested, wait for the job.

    Returns the keyword arguments shared by both structured outputs.
    """
    logger.info(f"Submitting job to {built.endpoint} (model={built.model})")
    create_response = await client.generate_image(built.endpoint, built.payload)
    create_job = pick_job(create_response)
    job_id = extract_job_id(create_job)
    if not job_id:
        raise MissingJobIdError(stringify_unknown(create_response))

    common: dict[str, Any] = {"endpoint": built.endpoint, "payload_sent": built.payload, "job_id": job_id}

    if not controls.wait_for_completion:
        status = normalize_status(read_string(create_job, "status"))
        logger.info(f"Job {job_id} created with status {status}; not waiting")
        return {**common, "status": status, "wait_for_completion": False, "create_response": create_response}

    outcome: JobOutcome = await wait_for_job_completion(
        client.get_job,
        job_id,
        initial_job=create_job,
        poll_interval_ms=controls.poll_interval_ms,
        timeout_ms=controls.timeout_ms,
        clock=clock,
        sleep=sleep,
    )
    return {
        **common,
        "status": normalize_status(read_string(outcome.job, "status")),
        "image_urls": extract_result_urls(outcome.job),
        "error": read_unknown(outcome.job, "error"),
        "final_job": outcome.job,
        "final_job_response": outcome.raw_response,
    }


async def generate_image(
    req: GenerateImageRequest,
    client: KreaClient,
    *,
    clock: Clock = time.monotonic,
    sleep: Sleep = asyncio.sleep,
) -> GenerateImageStructured:
    definition = ModelCatalog.get(req.model)
    built = GenerateRequestBuilder().build(req)
    fields = await _submit_and_wait(client, built, req, clock=clock, sleep=sleep)
    return GenerateImageStructured(model=req.model, title=definition.title, **fields)


async def upscale_image(
    req: UpscaleImageRequest,
    client: KreaClient,
    *,
    clock: Clock = time.monotonic,
    sleep: Sleep = asyncio.sleep,
) -> UpscaleImageStructured:
    built = UpscaleRequestBuilder().build(req)
    fields = await _submit_and_wait(client, built, req, clock=clock, sleep=sleep)
    return UpscaleImageStructured(mode=built.mode, model=built.model, **fields)


__all__ = ["list_models", "extract_job_id", "extract_result_urls", "generate_image", "upscale_image"]
