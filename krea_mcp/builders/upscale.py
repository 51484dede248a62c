from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from loguru import logger

from ..exceptions import ValidationError
from ..schema import BuiltRequest, UpscaleImageRequest
from ..shard import constants as C
from ..shard.enums import UpscaleMode
from .base_builder import RequestBuilder

ALL_MODES: frozenset[UpscaleMode] = frozenset(UpscaleMode)
NON_BLOOM_MODES: frozenset[UpscaleMode] = frozenset({UpscaleMode.STANDARD, UpscaleMode.GENERATIVE})


def _check_generative_creativity(mode: UpscaleMode, value: Any) -> str | None:
    if mode == UpscaleMode.GENERATIVE and not 1 <= value <= C.MAX_GENERATIVE_CREATIVITY:
        return f"generative mode supports creativity from 1 to {C.MAX_GENERATIVE_CREATIVITY}."
    return None


@dataclass(frozen=True)
class ParamRule:
    """One tuning parameter: which modes accept it and how it goes on the wire."""

    field: str
    modes: frozenset[UpscaleMode]
    wire_key: str | None = None
    check: Callable[[UpscaleMode, Any], str | None] | None = None

    @property
    def key(self) -> str:
        return self.wire_key or self.field

    def describe_modes(self) -> str:
        return ", ".join(m.value for m in UpscaleMode if m in self.modes)


# Evaluated in order; the first violation aborts the build.
UPSCALE_PARAM_RULES: tuple[ParamRule, ...] = (
    ParamRule("batch_size", ALL_MODES, wire_key="batchSize"),
    ParamRule("seed", ALL_MODES),
    ParamRule("prompt", ALL_MODES),
    ParamRule("output_format", ALL_MODES),
    ParamRule("crop_to_fill", ALL_MODES),
    ParamRule("upscaling_activated", ALL_MODES),
    ParamRule("image_scaling_factor", ALL_MODES),
    ParamRule("sharpen", NON_BLOOM_MODES),
    ParamRule("denoise", NON_BLOOM_MODES),
    ParamRule("subject_detection", NON_BLOOM_MODES),
    ParamRule("face_enhancement", NON_BLOOM_MODES),
    ParamRule("face_enhancement_creativity", NON_BLOOM_MODES),
    ParamRule("face_enhancement_strength", NON_BLOOM_MODES),
    ParamRule("strength", frozenset({UpscaleMode.STANDARD})),
    ParamRule("fix_compression", frozenset({UpscaleMode.STANDARD})),
    ParamRule("texture", frozenset({UpscaleMode.GENERATIVE})),
    ParamRule("detail", frozenset({UpscaleMode.GENERATIVE})),
    ParamRule("creativity", frozenset({UpscaleMode.GENERATIVE, UpscaleMode.BLOOM}), check=_check_generative_creativity),
    ParamRule("face_preservation", frozenset({UpscaleMode.BLOOM})),
    ParamRule("color_preservation", frozenset({UpscaleMode.BLOOM})),
)


class UpscaleRequestBuilder(RequestBuilder[UpscaleImageRequest]):
    """Builds payloads for the Topaz enhance endpoints.

    Unlike the generate builder this one fails fast: the first violated
    constraint raises.
    """

    def __init__(self, rules: tuple[ParamRule, ...] = UPSCALE_PARAM_RULES) -> None:
        self.rules = rules

    def build(self, req: UpscaleImageRequest) -> BuiltRequest:
        mode = req.mode
        endpoint = C.UPSCALE_ENDPOINTS[mode]
        self._check_dimensions(mode, req.width, req.height)
        model = self.resolve_model(mode, req.model)

        payload: dict[str, Any] = {
            "width": req.width,
            "height": req.height,
            "image_url": req.image_url,
            "model": model,
        }
        for rule in self.rules:
            value = getattr(req, rule.field)
            if value is None:
                continue
            self._check_rule(rule, mode, value)
            payload[rule.key] = self.wire_value(value)

        logger.debug(f"Built {mode.value} upscale payload with keys: {sorted(payload)}")
        return BuiltRequest(endpoint=endpoint, payload=payload, model=model, mode=mode)

    def _check_dimensions(self, mode: UpscaleMode, width: int, height: int) -> None:
        max_dimension = C.UPSCALE_MAX_DIMENSIONS[mode]
        if width > max_dimension or height > max_dimension:
            raise ValidationError(f"Mode {mode.value} supports up to {max_dimension}x{max_dimension}. Received {width}x{height}.")

    def _check_rule(self, rule: ParamRule, mode: UpscaleMode, value: Any) -> None:
        if mode not in rule.modes:
            raise ValidationError(
                f"{rule.field} is not supported in {mode.value} mode. Supported modes: {rule.describe_modes()}.",
                details={"parameter": rule.field, "mode": mode.value},
            )
        if rule.check is not None:
            problem = rule.check(mode, value)
            if problem:
                raise ValidationError(problem, details={"parameter": rule.field, "mode": mode.value})

    @staticmethod
    def resolve_model(mode: UpscaleMode, model: str | None) -> str:
        """Return the enhance model for ``mode``, defaulting when omitted."""
        selected = model if model is not None else C.UPSCALE_DEFAULT_MODELS[mode]
        allowed = C.UPSCALE_MODELS[mode]
        if selected not in allowed:
            if mode == UpscaleMode.BLOOM:
                raise ValidationError(f'Bloom mode supports only model "{allowed[0]}".')
            raise ValidationError(f'Invalid {mode.value} model "{selected}". Supported models: {", ".join(allowed)}.')
        return selected


__all__ = ["ParamRule", "UPSCALE_PARAM_RULES", "UpscaleRequestBuilder"]
