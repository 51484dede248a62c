"""Project constants for the Krea adapter.

Defaults for polling controls, vendor endpoints for the enhance family and
the per-mode model vocabularies. Generation model endpoints live in the
catalog next to their payload quirks.
"""

from __future__ import annotations

from typing import Final

from .enums import UpscaleMode

# ----------------------------- Vendor API ----------------------------------- #

DEFAULT_BASE_URL: Final[str] = "https://api.krea.ai/v1"
DEFAULT_HTTP_TIMEOUT_S: Final[float] = 60.0
JOBS_PATH: Final[str] = "/jobs"

# ----------------------------- Polling controls ----------------------------- #

DEFAULT_WAIT_FOR_COMPLETION: Final[bool] = True
DEFAULT_POLL_INTERVAL_MS: Final[int] = 2000
MIN_POLL_INTERVAL_MS: Final[int] = 500
MAX_POLL_INTERVAL_MS: Final[int] = 10000
DEFAULT_TIMEOUT_MS: Final[int] = 180000
MIN_TIMEOUT_MS: Final[int] = 5000
MAX_TIMEOUT_MS: Final[int] = 600000

# ----------------------------- Generate bounds ------------------------------ #

MIN_GENERATE_DIMENSION: Final[int] = 256
MAX_GENERATE_DIMENSION: Final[int] = 4096
MAX_GENERATE_BATCH_SIZE: Final[int] = 8
SIZE_PATTERN: Final[str] = r"^[1-9][0-9]*x[1-9][0-9]*$"

# ----------------------------- Upscale / enhance ---------------------------- #

UPSCALE_ENDPOINTS: Final[dict[UpscaleMode, str]] = {
    UpscaleMode.STANDARD: "/generate/enhance/topaz/standard-enhance",
    UpscaleMode.GENERATIVE: "/generate/enhance/topaz/generative-enhance",
    UpscaleMode.BLOOM: "/generate/enhance/topaz/bloom-enhance",
}

# Schema-level ceiling; the builder applies the tighter per-mode limit.
MAX_UPSCALE_DIMENSION: Final[int] = 32000
UPSCALE_MAX_DIMENSIONS: Final[dict[UpscaleMode, int]] = {
    UpscaleMode.STANDARD: 32000,
    UpscaleMode.GENERATIVE: 32000,
    UpscaleMode.BLOOM: 10000,
}

UPSCALE_MODELS: Final[dict[UpscaleMode, tuple[str, ...]]] = {
    UpscaleMode.STANDARD: ("Standard V2", "Low Resolution V2", "CGI", "High Fidelity V2", "Text Refine"),
    UpscaleMode.GENERATIVE: ("Redefine", "Recovery", "Recovery V2", "Reimagine"),
    UpscaleMode.BLOOM: ("Reimagine",),
}

UPSCALE_DEFAULT_MODELS: Final[dict[UpscaleMode, str]] = {
    UpscaleMode.STANDARD: "Standard V2",
    UpscaleMode.GENERATIVE: "Redefine",
    UpscaleMode.BLOOM: "Reimagine",
}

MAX_UPSCALE_BATCH_SIZE: Final[int] = 4
MAX_GENERATIVE_CREATIVITY: Final[int] = 6

# ----------------------------- Error codes ---------------------------------- #

ERROR_CODE_CONFIGURATION: Final[str] = "configuration_error"
ERROR_CODE_API: Final[str] = "api_error"
ERROR_CODE_VALIDATION: Final[str] = "validation_error"
ERROR_CODE_UNKNOWN_MODEL: Final[str] = "unknown_model"
ERROR_CODE_MISSING_JOB_ID: Final[str] = "missing_job_id"
ERROR_CODE_JOB_TIMEOUT: Final[str] = "job_timeout"
