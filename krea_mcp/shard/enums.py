from __future__ import annotations

from enum import StrEnum
from typing import Self


class ModelKey(StrEnum):
    """Catalog keys for the Krea image generation models exposed by this server.

    Values are the public tool vocabulary (what agents pass as ``model``).
    Endpoint paths and payload quirks live in ``krea_mcp.catalog``.
    """

    FLUX_1_DEV = "flux_1_dev"
    FLUX_KONTEXT_MAX = "flux_kontext_max"
    NANO_BANANA_PRO = "nano_banana_pro"
    NANO_BANANA = "nano_banana"
    FLUX_1_1_PRO = "flux_1_1_pro"
    FLUX_1_1_PRO_ULTRA = "flux_1_1_pro_ultra"
    IDEOGRAM_2A = "ideogram_2a"
    IDEOGRAM_3 = "ideogram_3"
    IMAGEN_3 = "imagen_3"
    IMAGEN_4 = "imagen_4"
    IMAGEN_4_FAST = "imagen_4_fast"
    IMAGEN_4_ULTRA = "imagen_4_ultra"
    RUNWAY_GEN_4_IMAGE = "runway_gen_4_image"
    CHATGPT_IMAGE_1 = "chatgpt_image_1"
    SEEDREAM_3 = "seedream_3"
    SEEDREAM_4 = "seedream_4"
    SEEDEDIT_3 = "seededit_3"
    QWEN_IMAGE = "qwen_image"
    ZIMAGE = "zimage"

    @classmethod
    def from_str(cls, value: str | None) -> Self | None:
        if not value:
            return None
        v = value.strip().lower()
        try:
            return cls(v)  # type: ignore[arg-type]
        except ValueError:
            return None


class RequiredField(StrEnum):
    """Input fields a model may require in addition to the prompt."""

    PROMPT = "prompt"
    WIDTH = "width"
    HEIGHT = "height"
    REFERENCE_IMAGES = "referenceImages"
    IMAGE_URL = "imageUrl"


class UpscaleMode(StrEnum):
    """Topaz enhance families. Each mode has its own endpoint, model set and knobs."""

    STANDARD = "standard"
    GENERATIVE = "generative"
    BLOOM = "bloom"


class UpscaleOutputFormat(StrEnum):
    PNG = "png"
    JPG = "jpg"
    WEBP = "webp"


class SubjectDetection(StrEnum):
    ALL = "All"
    FOREGROUND = "Foreground"
    BACKGROUND = "Background"


class JobStatus(StrEnum):
    """Normalized job statuses the server reasons about.

    The vendor may report other values (``queued``, ``processing`` ...); those
    are passed through lower-cased and treated as non-terminal.
    """

    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    UNKNOWN = "unknown"


__all__ = ["ModelKey", "RequiredField", "UpscaleMode", "UpscaleOutputFormat", "SubjectDetection", "JobStatus"]
