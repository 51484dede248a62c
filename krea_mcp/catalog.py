from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import UnknownModelError
from .schema import ModelInfo
from .shard.enums import ModelKey, RequiredField


class ModelDefinition(BaseModel):
    """Static description of one Krea generation endpoint."""

    model_config = ConfigDict(frozen=True)

    title: str
    endpoint: str
    required_fields: tuple[RequiredField, ...] = (RequiredField.PROMPT,)
    fixed_payload: dict[str, Any] = Field(default_factory=dict)
    default_width: int | None = None
    default_height: int | None = None
    notes: str | None = None
    # Vendor key names differ between model families.
    guidance_field: str = "guidance_scale_flux"
    steps_field: str = "steps"
    honors_negative_prompt: bool = False

    def requires(self, field: RequiredField) -> bool:
        return field in self.required_fields


_PROMPT_ONLY = (RequiredField.PROMPT,)
_PROMPT_AND_SIZE = (RequiredField.PROMPT, RequiredField.WIDTH, RequiredField.HEIGHT)

KREA_IMAGE_MODELS: Mapping[ModelKey, ModelDefinition] = MappingProxyType(
    {
        ModelKey.FLUX_1_DEV: ModelDefinition(
            title="BFL Flux 1 Dev",
            endpoint="/generate/image/bfl/flux-1-dev",
            required_fields=_PROMPT_ONLY,
            notes="General-purpose text-to-image model.",
        ),
        ModelKey.FLUX_KONTEXT_MAX: ModelDefinition(
            title="BFL Flux Kontext Max",
            endpoint="/generate/image/bfl/flux-kontext-max",
            required_fields=_PROMPT_ONLY,
            notes="Supports text prompt and optional size.",
        ),
        ModelKey.NANO_BANANA_PRO: ModelDefinition(
            title="Google Nano Banana Pro",
            endpoint="/generate/image/google/nano-banana-pro",
            required_fields=_PROMPT_ONLY,
        ),
        ModelKey.NANO_BANANA: ModelDefinition(
            title="Google Nano Banana",
            endpoint="/generate/image/google/nano-banana",
            required_fields=_PROMPT_ONLY,
        ),
        ModelKey.FLUX_1_1_PRO: ModelDefinition(
            title="BFL Flux 1.1 Pro",
            endpoint="/generate/image/bfl/flux-1.1-pro",
            required_fields=_PROMPT_AND_SIZE,
            default_width=1024,
            default_height=1024,
        ),
        ModelKey.FLUX_1_1_PRO_ULTRA: ModelDefinition(
            title="BFL Flux 1.1 Pro Ultra",
            endpoint="/generate/image/bfl/flux-1.1-pro-ultra",
            required_fields=_PROMPT_ONLY,
        ),
        ModelKey.IDEOGRAM_2A: ModelDefinition(
            title="Ideogram 2a",
            endpoint="/generate/image/ideogram/2a",
            required_fields=_PROMPT_ONLY,
        ),
        ModelKey.IDEOGRAM_3: ModelDefinition(
            title="Ideogram 3",
            endpoint="/generate/image/ideogram/3.0",
            required_fields=_PROMPT_ONLY,
            notes="Supports optional style and referenceImage.",
        ),
        ModelKey.IMAGEN_3: ModelDefinition(
            title="Google Imagen 3",
            endpoint="/generate/image/google/imagen-3",
            required_fields=_PROMPT_ONLY,
        ),
        ModelKey.IMAGEN_4: ModelDefinition(
            title="Google Imagen 4",
            endpoint="/generate/image/google/imagen-4",
            required_fields=_PROMPT_ONLY,
        ),
        ModelKey.IMAGEN_4_FAST: ModelDefinition(
            title="Google Imagen 4 Fast",
            endpoint="/generate/image/google/imagen-4-fast",
            required_fields=_PROMPT_ONLY,
        ),
        ModelKey.IMAGEN_4_ULTRA: ModelDefinition(
            title="Google Imagen 4 Ultra",
            endpoint="/generate/image/google/imagen-4-ultra",
            required_fields=_PROMPT_ONLY,
        ),
        ModelKey.RUNWAY_GEN_4_IMAGE: ModelDefinition(
            title="Runway Gen-4 Image",
            endpoint="/generate/image/runway/gen-4-image",
            required_fields=(RequiredField.PROMPT, RequiredField.REFERENCE_IMAGES),
            notes="Requires one or more reference image URLs.",
        ),
        ModelKey.CHATGPT_IMAGE_1: ModelDefinition(
            title="OpenAI ChatGPT Image 1",
            endpoint="/generate/image/openai/chatgpt-image-1",
            required_fields=_PROMPT_ONLY,
        ),
        ModelKey.SEEDREAM_3: ModelDefinition(
            title="Bytedance Seedream 3",
            endpoint="/generate/image/bytedance/seedream-3",
            required_fields=_PROMPT_ONLY,
            fixed_payload={"model": "seedream-3"},
        ),
        ModelKey.SEEDREAM_4: ModelDefinition(
            title="Bytedance Seedream 4",
            endpoint="/generate/image/bytedance/seedream-4",
            required_fields=_PROMPT_AND_SIZE,
            default_width=1024,
            default_height=1024,
        ),
        ModelKey.SEEDEDIT_3: ModelDefinition(
            title="Bytedance Seededit 3",
            endpoint="/generate/image/bytedance/seededit-3",
            required_fields=(RequiredField.PROMPT, RequiredField.IMAGE_URL),
            fixed_payload={"model": "seededit-3"},
            notes="Image-to-image endpoint that requires image_url.",
        ),
        ModelKey.QWEN_IMAGE: ModelDefinition(
            title="Qwen Image",
            endpoint="/generate/image/qwen/image",
            required_fields=_PROMPT_ONLY,
            guidance_field="cfg_scale",
            steps_field="num_inference_steps",
            honors_negative_prompt=True,
        ),
        ModelKey.ZIMAGE: ModelDefinition(
            title="ZAI ZImage",
            endpoint="/generate/image/zai/zimage",
            required_fields=_PROMPT_AND_SIZE,
            default_width=1024,
            default_height=1024,
        ),
    }
)

_missing_keys = [key.value for key in ModelKey if key not in KREA_IMAGE_MODELS]
if _missing_keys:
    raise RuntimeError(f"Model catalog is missing definitions for: {', '.join(_missing_keys)}")


def describe_required_fields(required_fields: Iterable[RequiredField]) -> str:
    names = [str(f) for f in required_fields]
    if not names:
        return "none"
    return ", ".join(names)


class ModelCatalog:
    """Read-only lookup over the supported Krea generation models."""

    @classmethod
    def get(cls, key: ModelKey | str) -> ModelDefinition:
        """Return the definition for ``key``.

        Raises:
            UnknownModelError: If the key is not part of the catalog.
        """
        model_key = key if isinstance(key, ModelKey) else ModelKey.from_str(key)
        if model_key is None or model_key not in KREA_IMAGE_MODELS:
            raise UnknownModelError(str(key), known=[k.value for k in KREA_IMAGE_MODELS])
        return KREA_IMAGE_MODELS[model_key]

    @classmethod
    def keys(cls) -> list[ModelKey]:
        return list(KREA_IMAGE_MODELS.keys())

    @classmethod
    def list_models(cls) -> list[ModelInfo]:
        """Listing used by the krea_list_models tool, in catalog order."""
        return [
            ModelInfo(
                key=key,
                title=definition.title,
                endpoint=definition.endpoint,
                required_fields=list(definition.required_fields),
                notes=definition.notes,
            )
            for key, definition in KREA_IMAGE_MODELS.items()
        ]


__all__ = ["ModelDefinition", "KREA_IMAGE_MODELS", "ModelCatalog", "describe_required_fields"]
