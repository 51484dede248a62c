from .base_builder import RequestBuilder
from .generate import GenerateRequestBuilder
from .upscale import UpscaleRequestBuilder

__all__ = ["RequestBuilder", "GenerateRequestBuilder", "UpscaleRequestBuilder"]
