from __future__ import annotations

import re
from typing import Any

from loguru import logger

from ..catalog import ModelCatalog, ModelDefinition, describe_required_fields
from ..exceptions import ValidationError
from ..schema import BuiltRequest, GenerateImageRequest
from ..shard.enums import RequiredField
from .base_builder import RequestBuilder

# Same shape as the request schema's size pattern, with capture groups.
_SIZE_RE = re.compile(r"([1-9][0-9]*)x([1-9][0-9]*)")


def parse_size(size: str | None) -> tuple[int, int] | None:
    """Parse a ``WIDTHxHEIGHT`` string; anything else yields ``None``."""
    if not size:
        return None
    match = _SIZE_RE.fullmatch(size)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


class GenerateRequestBuilder(RequestBuilder[GenerateImageRequest]):
    """Builds payloads for the catalog generation models.

    Validation accumulates every missing field before failing, so the caller
    sees the whole list at once.
    """

    def build(self, req: GenerateImageRequest) -> BuiltRequest:
        definition = ModelCatalog.get(req.model)
        self.validate(req, definition)
        payload = self._build_payload(req, definition)
        logger.debug(f"Built generate payload for {req.model.value} with keys: {sorted(payload)}")
        return BuiltRequest(endpoint=definition.endpoint, payload=payload, model=req.model.value)

    # Validation
    def _missing_fields(self, req: GenerateImageRequest, definition: ModelDefinition) -> list[str]:
        missing: list[str] = []
        for field in definition.required_fields:
            # prompt is enforced by the request schema
            if field == RequiredField.PROMPT:
                continue
            if field == RequiredField.WIDTH and req.width is None and definition.default_width is None:
                missing.append("width")
            elif field == RequiredField.HEIGHT and req.height is None and definition.default_height is None:
                missing.append("height")
            elif field == RequiredField.REFERENCE_IMAGES and not req.reference_images:
                missing.append("reference_images")
            elif field == RequiredField.IMAGE_URL and not req.image_url:
                missing.append("image_url")
        return missing

    def validate(self, req: GenerateImageRequest, definition: ModelDefinition) -> None:
        """Raise a single ValidationError listing every missing required field."""
        missing = self._missing_fields(req, definition)
        if missing:
            raise ValidationError(
                f"Missing required fields for model {req.model.value}: {', '.join(missing)}. "
                f"Model requires: {describe_required_fields(definition.required_fields)}",
                details={"model": req.model.value, "missing": missing},
            )

    # Payload construction
    def _resolve_dimension(self, explicit: int | None, parsed: int | None, default: int | None, required: bool) -> int | None:
        if explicit is not None:
            return explicit
        if parsed is not None:
            return parsed
        if required and default is not None:
            return default
        return None

    def _build_payload(self, req: GenerateImageRequest, definition: ModelDefinition) -> dict[str, Any]:
        payload: dict[str, Any] = {**definition.fixed_payload, "prompt": req.prompt}

        size = parse_size(req.size)
        width = self._resolve_dimension(
            req.width,
            size[0] if size else None,
            definition.default_width,
            definition.requires(RequiredField.WIDTH),
        )
        if width is not None:
            payload["width"] = width
        height = self._resolve_dimension(
            req.height,
            size[1] if size else None,
            definition.default_height,
            definition.requires(RequiredField.HEIGHT),
        )
        if height is not None:
            payload["height"] = height

        if req.seed is not None:
            payload["seed"] = req.seed
        if req.batch_size is not None:
            payload["batchSize"] = req.batch_size
        if req.guidance_scale is not None:
            payload[definition.guidance_field] = req.guidance_scale
        if req.num_inference_steps is not None:
            payload[definition.steps_field] = req.num_inference_steps
        if req.negative_prompt is not None and definition.honors_negative_prompt:
            payload["negative_prompt"] = req.negative_prompt
        if req.style is not None:
            payload["styles"] = [req.style]
        if req.reference_image is not None:
            payload["styleImages"] = [req.reference_image]
        if req.reference_images is not None:
            payload["referenceImages"] = list(req.reference_images)
        if req.image_url is not None:
            payload["imageUrl"] = req.image_url

        return payload


__all__ = ["GenerateRequestBuilder", "parse_size"]
