from __future__ import annotations

import json

import pytest

from krea_mcp.builders import GenerateRequestBuilder
from krea_mcp.builders.generate import parse_size
from krea_mcp.exceptions import ValidationError
from krea_mcp.schema import GenerateImageRequest
from krea_mcp.shard.enums import ModelKey


def _build(**kwargs):
    return GenerateRequestBuilder().build(GenerateImageRequest(**kwargs))


def test_prompt_only_model():
    built = _build(model=ModelKey.FLUX_1_DEV, prompt="a cat")
    assert built.endpoint == "/generate/image/bfl/flux-1-dev"
    assert built.payload == {"prompt": "a cat"}
    assert built.model == "flux_1_dev"


def test_required_dimensions_fall_back_to_model_defaults():
    built = _build(model=ModelKey.FLUX_1_1_PRO, prompt="x")
    assert built.payload["width"] == 1024
    assert built.payload["height"] == 1024


def test_dimension_precedence_is_per_axis():
    built = _build(model=ModelKey.FLUX_1_1_PRO, prompt="x", width=512)
    assert built.payload["width"] == 512
    assert built.payload["height"] == 1024


def test_size_string_used_when_no_explicit_dimension():
    built = _build(model=ModelKey.SEEDREAM_4, prompt="x", size="800x600", height=700)
    assert built.payload["width"] == 800
    assert built.payload["height"] == 700


def test_defaults_not_applied_to_models_without_required_size():
    built = _build(model=ModelKey.IMAGEN_4, prompt="x", height=640)
    assert "width" not in built.payload
    assert built.payload["height"] == 640


def test_field_renames():
    built = _build(
        model=ModelKey.IDEOGRAM_3,
        prompt="x",
        seed=7,
        batch_size=2,
        guidance_scale=3.5,
        num_inference_steps=30,
        negative_prompt="blurry",
        style="cinematic",
        reference_image="https://x.test/style.png",
    )
    assert built.payload == {
        "prompt": "x",
        "seed": 7,
        "batchSize": 2,
        "guidance_scale_flux": 3.5,
        "steps": 30,
        "styles": ["cinematic"],
        "styleImages": ["https://x.test/style.png"],
    }


def test_qwen_uses_its_own_parameter_names():
    built = _build(
        model=ModelKey.QWEN_IMAGE,
        prompt="x",
        guidance_scale=4.0,
        num_inference_steps=20,
        negative_prompt="low quality",
    )
    assert built.payload == {"prompt": "x", "cfg_scale": 4.0, "num_inference_steps": 20, "negative_prompt": "low quality"}


def test_fixed_payload_and_image_url():
    built = _build(model=ModelKey.SEEDEDIT_3, prompt="make it blue", image_url="https://x.test/in.png")
    assert built.payload == {"model": "seededit-3", "prompt": "make it blue", "imageUrl": "https://x.test/in.png"}


def test_reference_images_forwarded_as_is():
    refs = ["https://x.test/1.png", "https://x.test/2.png"]
    built = _build(model=ModelKey.RUNWAY_GEN_4_IMAGE, prompt="x", reference_images=refs)
    assert built.payload["referenceImages"] == refs


def test_sync_mode_not_forwarded():
    built = _build(model=ModelKey.FLUX_1_DEV, prompt="x", sync_mode=True)
    assert "sync_mode" not in built.payload
    assert "syncMode" not in built.payload


def test_missing_required_fields_reported_together(monkeypatch):
    from krea_mcp.catalog import KREA_IMAGE_MODELS, ModelDefinition
    from krea_mcp.shard.enums import RequiredField

    strict = ModelDefinition(
        title="Strict",
        endpoint="/generate/image/test/strict",
        required_fields=(RequiredField.PROMPT, RequiredField.WIDTH, RequiredField.IMAGE_URL),
    )
    models = dict(KREA_IMAGE_MODELS)
    models[ModelKey.FLUX_1_DEV] = strict
    monkeypatch.setattr("krea_mcp.catalog.KREA_IMAGE_MODELS", models)

    with pytest.raises(ValidationError) as exc:
        _build(model=ModelKey.FLUX_1_DEV, prompt="x", size="512x512")

    assert exc.value.user_message == (
        "Missing required fields for model flux_1_dev: width, image_url. Model requires: prompt, width, imageUrl"
    )
    assert exc.value.details == {"model": "flux_1_dev", "missing": ["width", "image_url"]}


def test_runway_without_references_fails():
    with pytest.raises(ValidationError, match="reference_images"):
        _build(model=ModelKey.RUNWAY_GEN_4_IMAGE, prompt="x")


def test_seededit_without_image_url_fails():
    with pytest.raises(ValidationError, match="image_url"):
        _build(model=ModelKey.SEEDEDIT_3, prompt="x")


def test_build_is_deterministic():
    kwargs = {"model": ModelKey.SEEDREAM_3, "prompt": "x", "seed": 1, "size": "640x480", "style": "s"}
    first = json.dumps(_build(**kwargs).payload)
    second = json.dumps(_build(**kwargs).payload)
    assert first == second


def test_parse_size():
    assert parse_size("1024x768") == (1024, 768)
    assert parse_size(None) is None
    assert parse_size("1024") is None
    assert parse_size("01x5") is None
