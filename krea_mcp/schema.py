from __future__ import annotations

from typing import Annotated, Any
from urllib.parse import urlsplit

from pydantic import AfterValidator, BaseModel, Field

from .shard import constants as C
from .shard.enums import (
    ModelKey,
    RequiredField,
    SubjectDetection,
    UpscaleMode,
    UpscaleOutputFormat,
)
from .utils.json_utils import stringify_unknown


def _ensure_absolute_url(value: str) -> str:
    parts = urlsplit(value)
    if not parts.scheme or not parts.netloc:
        raise ValueError(f"'{value}' is not an absolute URL")
    return value


# Kept as plain strings so payload values go out exactly as supplied.
UrlStr = Annotated[str, AfterValidator(_ensure_absolute_url)]


# ------------------------------ Model listing ------------------------------- #


class ModelInfo(BaseModel):
    """Public description of one catalog model."""

    key: ModelKey = Field(description="Model key accepted by krea_generate_image.")
    title: str = Field(description="Display name.")
    endpoint: str = Field(description="Krea API endpoint path.")
    required_fields: list[RequiredField] = Field(default_factory=list, description="Fields the model requires.")
    notes: str | None = Field(default=None, description="Free-form usage notes.")


class ModelListResponse(BaseModel):
    """Response for the krea_list_models tool."""

    models: list[ModelInfo] = Field(default_factory=list)


# ------------------------------ Polling controls ---------------------------- #


class PollingControls(BaseModel):
    """Shared knobs for waiting on a Krea job."""

    wait_for_completion: bool = Field(default=C.DEFAULT_WAIT_FOR_COMPLETION)
    poll_interval_ms: int = Field(default=C.DEFAULT_POLL_INTERVAL_MS, strict=True, ge=C.MIN_POLL_INTERVAL_MS, le=C.MAX_POLL_INTERVAL_MS)
    timeout_ms: int = Field(default=C.DEFAULT_TIMEOUT_MS, strict=True, ge=C.MIN_TIMEOUT_MS, le=C.MAX_TIMEOUT_MS)


# ------------------------------- Generate API -------------------------------- #


class GenerateImageRequest(PollingControls):
    """Generate an image with one of the catalog models.

    Which optional fields are required depends on the model; the generate
    builder checks them against the catalog before anything is sent.
    """

    model: ModelKey
    prompt: str = Field(min_length=1)
    width: int | None = Field(default=None, strict=True, ge=C.MIN_GENERATE_DIMENSION, le=C.MAX_GENERATE_DIMENSION)
    height: int | None = Field(default=None, strict=True, ge=C.MIN_GENERATE_DIMENSION, le=C.MAX_GENERATE_DIMENSION)
    seed: int | None = Field(default=None, strict=True, ge=0)
    batch_size: int | None = Field(default=None, strict=True, ge=1, le=C.MAX_GENERATE_BATCH_SIZE)
    guidance_scale: float | None = Field(default=None, strict=True, gt=0)
    num_inference_steps: int | None = Field(default=None, strict=True, gt=0)
    negative_prompt: str | None = None
    size: str | None = Field(default=None, pattern=C.SIZE_PATTERN)
    style: str | None = None
    reference_image: UrlStr | None = None
    reference_images: list[UrlStr] | None = Field(default=None, min_length=1)
    image_url: UrlStr | None = None
    sync_mode: bool | None = None


# --------------------------------- Upscale API ------------------------------- #


class UpscaleImageRequest(PollingControls):
    """Upscale/enhance an image through one of the Topaz enhance modes.

    Width/height are bounded here by the widest mode; the upscale builder
    enforces the per-mode ceiling and the mode gating of tuning parameters.
    """

    mode: UpscaleMode = UpscaleMode.STANDARD
    image_url: UrlStr
    width: int = Field(strict=True, ge=1, le=C.MAX_UPSCALE_DIMENSION)
    height: int = Field(strict=True, ge=1, le=C.MAX_UPSCALE_DIMENSION)
    model: str | None = None
    batch_size: int | None = Field(default=None, strict=True, ge=1, le=C.MAX_UPSCALE_BATCH_SIZE)
    seed: int | None = Field(default=None, strict=True, ge=0)
    prompt: str | None = None
    output_format: UpscaleOutputFormat | None = None
    subject_detection: SubjectDetection | None = None
    face_enhancement: bool | None = None
    face_enhancement_creativity: float | None = Field(default=None, strict=True, ge=0, le=1)
    face_enhancement_strength: float | None = Field(default=None, strict=True, ge=0, le=1)
    crop_to_fill: bool | None = None
    upscaling_activated: bool | None = None
    image_scaling_factor: float | None = Field(default=None, strict=True, ge=1, le=32)
    sharpen: float | None = Field(default=None, strict=True, ge=0, le=1)
    denoise: float | None = Field(default=None, strict=True, ge=0, le=1)
    fix_compression: float | None = Field(default=None, strict=True, ge=0, le=1)
    strength: float | None = Field(default=None, strict=True, ge=0.01, le=1)
    creativity: int | None = Field(default=None, strict=True, ge=1, le=9)
    texture: int | None = Field(default=None, strict=True, ge=1, le=5)
    detail: float | None = Field(default=None, strict=True, ge=0, le=1)
    face_preservation: bool | None = None
    color_preservation: bool | None = None


# ------------------------------ Internal carriers ---------------------------- #


class BuiltRequest(BaseModel):
    """Output of a request builder: where to send what."""

    endpoint: str
    payload: dict[str, Any]
    model: str
    mode: UpscaleMode | None = None


class JobOutcome(BaseModel):
    """Final job record plus the raw response it was read from."""

    job: dict[str, Any]
    raw_response: Any = None


# -------------------------- Public structured output ------------------------- #


class JobToolStructured(BaseModel):
    """Structured output shared by the job-submitting tools."""

    endpoint: str = Field(description="Krea API endpoint the job was submitted to.")
    payload_sent: dict[str, Any] = Field(description="Exact JSON body sent to the endpoint.")
    job_id: str = Field(description="Krea job id.")
    status: str = Field(description="Normalized job status.")
    wait_for_completion: bool = Field(default=True, description="False when the tool returned right after job creation.")
    image_urls: list[str] = Field(default_factory=list, description="Result URLs found in the final job.")
    error: Any = Field(default=None, description="Error payload reported by the job, if any.")
    final_job: dict[str, Any] | None = Field(default=None, description="Final job record (when waited).")
    final_job_response: Any = Field(default=None, description="Raw response the final job came from (when waited).")
    create_response: Any = Field(default=None, description="Raw create response (when not waited).")

    def _created_prefix(self) -> str:
        return "Job"

    def _header_lines(self) -> list[str]:
        return [f"Endpoint: {self.endpoint}"]

    def summary(self) -> str:
        """Human-readable multi-line summary for the text content block."""
        if not self.wait_for_completion:
            return f"{self._created_prefix()} {self.job_id} created with status: {self.status}."

        lines = self._header_lines()
        lines.append(f"Job ID: {self.job_id}")
        lines.append(f"Status: {self.status}")
        if self.image_urls:
            lines.append(f"Images: {', '.join(self.image_urls)}")
        if self.error:
            lines.append(f"Error: {stringify_unknown(self.error)}")
        return "\n".join(lines)


class GenerateImageStructured(JobToolStructured):
    model: ModelKey = Field(description="Catalog model key.")
    title: str = Field(description="Display name of the model.")

    def _header_lines(self) -> list[str]:
        return [f"Model: {self.model.value} ({self.title})", f"Endpoint: {self.endpoint}"]


class UpscaleImageStructured(JobToolStructured):
    mode: UpscaleMode = Field(description="Enhance mode used.")
    model: str = Field(description="Resolved enhance model name.")

    def _created_prefix(self) -> str:
        return "Upscale job"

    def _header_lines(self) -> list[str]:
        return [f"Mode: {self.mode.value}", f"Model: {self.model}", f"Endpoint: {self.endpoint}"]


__all__ = [
    "UrlStr",
    "ModelInfo",
    "ModelListResponse",
    "PollingControls",
    "GenerateImageRequest",
    "UpscaleImageRequest",
    "BuiltRequest",
    "JobOutcome",
    "JobToolStructured",
    "GenerateImageStructured",
    "UpscaleImageStructured",
]
