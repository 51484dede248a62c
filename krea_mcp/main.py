from __future__ import annotations

import argparse
import json
import sys
from typing import Annotated, NoReturn

import httpx
from fastmcp import Context, FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import ToolResult
from loguru import logger
from mcp.types import TextContent
from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from . import service
from .client import KreaClient
from .exceptions import KreaMCPError
from .schema import GenerateImageRequest, UpscaleImageRequest
from .settings import get_settings
from .shard import constants as C
from .shard.enums import ModelKey, SubjectDetection, UpscaleMode, UpscaleOutputFormat
from .shard.instructions import SERVER_INSTRUCTIONS, TOOL_DESCRIPTIONS
from .utils.error_helpers import augment_with_credentials_tip
from .utils.logging import configure_logging

app = FastMCP("krea-mcp", instructions=SERVER_INSTRUCTIONS)


def _handle_tool_error(e: Exception) -> NoReturn:
    """Convert an exception to a ToolError for proper MCP error handling.

    FastMCP turns ToolError into an MCP error response with isError=True, so
    the host sees the message and treats the invocation as failed.
    """
    if isinstance(e, KreaMCPError):
        logger.warning(f"{type(e).__name__} [{e.code}]: {e.user_message}")
        raise ToolError(f"[{e.code}] {augment_with_credentials_tip(e.user_message)}") from e

    if isinstance(e, PydanticValidationError):
        raise ToolError(f"Invalid tool arguments: {e}") from e

    if isinstance(e, httpx.HTTPError):
        logger.error(f"HTTP request to Krea API failed: {type(e).__name__}: {e}")
        raise ToolError(f"HTTP request to the Krea API failed: {type(e).__name__}: {e}") from e

    logger.exception(f"Unexpected error: {type(e).__name__}: {e}")
    raise ToolError(f"An unexpected error occurred: {type(e).__name__}: {e}") from e


def _create_client() -> KreaClient:
    return KreaClient.from_settings(get_settings())


def _text(summary: str) -> list[TextContent]:
    return [TextContent(type="text", text=summary)]


@app.tool(
    name="krea_list_models",
    description=TOOL_DESCRIPTIONS["krea_list_models"],
    annotations={
        "title": "List Krea image models",
        "readOnlyHint": True,
        "idempotentHint": True,
        "openWorldHint": False,
    },
)
async def mcp_list_models() -> ToolResult:
    """Return the model catalog with required fields per model."""
    try:
        listing = service.list_models()
        structured = listing.model_dump(mode="json")
        return ToolResult(content=_text(json.dumps(structured["models"], indent=2)), structured_content=structured)
    except Exception as e:
        _handle_tool_error(e)


@app.tool(
    name="krea_generate_image",
    description=TOOL_DESCRIPTIONS["krea_generate_image"],
    annotations={
        "title": "Generate image with Krea",
        "readOnlyHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def mcp_generate_image(
    model: Annotated[ModelKey, Field(description="Model key from krea_list_models.")],
    prompt: Annotated[str, Field(min_length=1, description="Text description of the desired image.")],
    width: Annotated[
        int | None,
        Field(strict=True, ge=C.MIN_GENERATE_DIMENSION, le=C.MAX_GENERATE_DIMENSION, description="Output width in pixels."),
    ] = None,
    height: Annotated[
        int | None,
        Field(strict=True, ge=C.MIN_GENERATE_DIMENSION, le=C.MAX_GENERATE_DIMENSION, description="Output height in pixels."),
    ] = None,
    seed: Annotated[int | None, Field(strict=True, ge=0, description="Seed for reproducible results.")] = None,
    batch_size: Annotated[int | None, Field(strict=True, ge=1, le=C.MAX_GENERATE_BATCH_SIZE, description="Number of images per job.")] = None,
    guidance_scale: Annotated[float | None, Field(strict=True, gt=0, description="Prompt guidance strength.")] = None,
    num_inference_steps: Annotated[int | None, Field(strict=True, gt=0, description="Sampling steps.")] = None,
    negative_prompt: Annotated[str | None, Field(description="Negative prompt (qwen_image only).")] = None,
    size: Annotated[
        str | None,
        Field(pattern=C.SIZE_PATTERN, description="Size as 'WIDTHxHEIGHT'; explicit width/height take precedence."),
    ] = None,
    style: Annotated[str | None, Field(description="Style id or name.")] = None,
    reference_image: Annotated[str | None, Field(description="Single style reference image URL.")] = None,
    reference_images: Annotated[
        list[str] | None,
        Field(min_length=1, description="Reference image URLs (required by runway_gen_4_image)."),
    ] = None,
    image_url: Annotated[str | None, Field(description="Input image URL (required by seededit_3).")] = None,
    sync_mode: Annotated[bool | None, Field(description="Accepted for compatibility; not forwarded to Krea.")] = None,
    wait_for_completion: Annotated[bool, Field(description="Poll until the job is terminal.")] = C.DEFAULT_WAIT_FOR_COMPLETION,
    poll_interval_ms: Annotated[
        int,
        Field(strict=True, ge=C.MIN_POLL_INTERVAL_MS, le=C.MAX_POLL_INTERVAL_MS, description="Delay between job status checks."),
    ] = C.DEFAULT_POLL_INTERVAL_MS,
    timeout_ms: Annotated[
        int,
        Field(strict=True, ge=C.MIN_TIMEOUT_MS, le=C.MAX_TIMEOUT_MS, description="Maximum time to wait for completion."),
    ] = C.DEFAULT_TIMEOUT_MS,
    ctx: Context | None = None,
) -> ToolResult:
    """Generate an image with a Krea model, optionally waiting for the result."""
    try:
        req = GenerateImageRequest(
            model=model,
            prompt=prompt,
            width=width,
            height=height,
            seed=seed,
            batch_size=batch_size,
            guidance_scale=guidance_scale,
            num_inference_steps=num_inference_steps,
            negative_prompt=negative_prompt,
            size=size,
            style=style,
            reference_image=reference_image,
            reference_images=reference_images,
            image_url=image_url,
            sync_mode=sync_mode,
            wait_for_completion=wait_for_completion,
            poll_interval_ms=poll_interval_ms,
            timeout_ms=timeout_ms,
        )
        resp = await service.generate_image(req, _create_client())
        return ToolResult(content=_text(resp.summary()), structured_content=resp.model_dump(mode="json"))
    except Exception as e:
        _handle_tool_error(e)


@app.tool(
    name="krea_upscale_image",
    description=TOOL_DESCRIPTIONS["krea_upscale_image"],
    annotations={
        "title": "Upscale and enhance image with Krea",
        "readOnlyHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
async def mcp_upscale_image(
    image_url: Annotated[str, Field(description="URL of the image to enhance.")],
    width: Annotated[int, Field(strict=True, ge=1, le=C.MAX_UPSCALE_DIMENSION, description="Target width (bloom: max 10000).")],
    height: Annotated[int, Field(strict=True, ge=1, le=C.MAX_UPSCALE_DIMENSION, description="Target height (bloom: max 10000).")],
    mode: Annotated[UpscaleMode, Field(description="Enhance mode: 'standard' | 'generative' | 'bloom'.")] = UpscaleMode.STANDARD,
    model: Annotated[
        str | None,
        Field(description="Enhance model. standard: Standard V2 (default), Low Resolution V2, CGI, High Fidelity V2, Text Refine; generative: Redefine (default), Recovery, Recovery V2, Reimagine; bloom: Reimagine."),
    ] = None,
    batch_size: Annotated[int | None, Field(strict=True, ge=1, le=C.MAX_UPSCALE_BATCH_SIZE)] = None,
    seed: Annotated[int | None, Field(strict=True, ge=0)] = None,
    prompt: Annotated[str | None, Field(description="Optional guidance prompt.")] = None,
    output_format: Annotated[UpscaleOutputFormat | None, Field(description="'png' | 'jpg' | 'webp'.")] = None,
    subject_detection: Annotated[SubjectDetection | None, Field(description="standard/generative only.")] = None,
    face_enhancement: Annotated[bool | None, Field(description="standard/generative only.")] = None,
    face_enhancement_creativity: Annotated[float | None, Field(strict=True, ge=0, le=1, description="standard/generative only.")] = None,
    face_enhancement_strength: Annotated[float | None, Field(strict=True, ge=0, le=1, description="standard/generative only.")] = None,
    crop_to_fill: Annotated[bool | None, Field()] = None,
    upscaling_activated: Annotated[bool | None, Field()] = None,
    image_scaling_factor: Annotated[float | None, Field(strict=True, ge=1, le=32)] = None,
    sharpen: Annotated[float | None, Field(strict=True, ge=0, le=1, description="standard/generative only.")] = None,
    denoise: Annotated[float | None, Field(strict=True, ge=0, le=1, description="standard/generative only.")] = None,
    fix_compression: Annotated[float | None, Field(strict=True, ge=0, le=1, description="standard only.")] = None,
    strength: Annotated[float | None, Field(strict=True, ge=0.01, le=1, description="standard only.")] = None,
    creativity: Annotated[int | None, Field(strict=True, ge=1, le=9, description="generative (1-6) or bloom.")] = None,
    texture: Annotated[int | None, Field(strict=True, ge=1, le=5, description="generative only.")] = None,
    detail: Annotated[float | None, Field(strict=True, ge=0, le=1, description="generative only.")] = None,
    face_preservation: Annotated[bool | None, Field(description="bloom only.")] = None,
    color_preservation: Annotated[bool | None, Field(description="bloom only.")] = None,
    wait_for_completion: Annotated[bool, Field(description="Poll until the job is terminal.")] = C.DEFAULT_WAIT_FOR_COMPLETION,
    poll_interval_ms: Annotated[
        int,
        Field(strict=True, ge=C.MIN_POLL_INTERVAL_MS, le=C.MAX_POLL_INTERVAL_MS, description="Delay between job status checks."),
    ] = C.DEFAULT_POLL_INTERVAL_MS,
    timeout_ms: Annotated[
        int,
        Field(strict=True, ge=C.MIN_TIMEOUT_MS, le=C.MAX_TIMEOUT_MS, description="Maximum time to wait for completion."),
    ] = C.DEFAULT_TIMEOUT_MS,
    ctx: Context | None = None,
) -> ToolResult:
    """Upscale/enhance an image with a Topaz enhance mode."""
    try:
        req = UpscaleImageRequest(
            mode=mode,
            image_url=image_url,
            width=width,
            height=height,
            model=model,
            batch_size=batch_size,
            seed=seed,
            prompt=prompt,
            output_format=output_format,
            subject_detection=subject_detection,
            face_enhancement=face_enhancement,
            face_enhancement_creativity=face_enhancement_creativity,
            face_enhancement_strength=face_enhancement_strength,
            crop_to_fill=crop_to_fill,
            upscaling_activated=upscaling_activated,
            image_scaling_factor=image_scaling_factor,
            sharpen=sharpen,
            denoise=denoise,
            fix_compression=fix_compression,
            strength=strength,
            creativity=creativity,
            texture=texture,
            detail=detail,
            face_preservation=face_preservation,
            color_preservation=color_preservation,
            wait_for_completion=wait_for_completion,
            poll_interval_ms=poll_interval_ms,
            timeout_ms=timeout_ms,
        )
        resp = await service.upscale_image(req, _create_client())
        return ToolResult(content=_text(resp.summary()), structured_content=resp.model_dump(mode="json"))
    except Exception as e:
        _handle_tool_error(e)


def main() -> None:
    parser = argparse.ArgumentParser(description="Krea Image MCP Server")
    # Only accept transports supported by FastMCP for server runs.
    parser.add_argument(
        "--transport",
        choices=["stdio", "http", "sse", "streamable-http"],
        help="Transport to use (stdio, sse, http, streamable-http). Default: stdio",
    )
    parser.add_argument("--host", help="Host to bind to")
    parser.add_argument("--port", type=int, help="Port to listen on")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings.log_level)

    if not settings.has_api_key:
        logger.error("KREA_API_KEY is not set.")
        sys.exit(1)

    transport = args.transport
    host = args.host
    port = args.port

    # FastMCP's stdio transport does not accept `host`/`port` kwargs.
    http_transports = {"http", "sse", "streamable-http"}
    if transport in http_transports:
        logger.info(f"Starting Krea MCP server on {host}:{port} with {transport} transport")
        app.run(transport=transport, host=host, port=port)
    else:
        logger.info("Starting Krea MCP server with stdio transport")
        app.run()


if __name__ == "__main__":
    main()
