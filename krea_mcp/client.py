from __future__ import annotations

import json
from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger

from .exceptions import ConfigurationError, KreaApiError
from .settings import Settings
from .shard import constants as C
from .utils.json_utils import stringify_unknown


class KreaClient:
    """Thin async client for the Krea REST API.

    One attempt per call, no retries. Bodies that are not JSON come back as
    the raw text; non-2xx responses raise ``KreaApiError``.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = C.DEFAULT_BASE_URL,
        *,
        timeout: float = C.DEFAULT_HTTP_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self.base_url = base_url[:-1] if base_url.endswith("/") else base_url
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> KreaClient:
        if not settings.krea_api_key:
            raise ConfigurationError("KREA_API_KEY is not set.")
        return cls(
            settings.krea_api_key,
            settings.krea_api_base_url,
            timeout=settings.krea_http_timeout,
            transport=transport,
        )

    # API operations
    async def generate_image(self, endpoint: str, payload: dict[str, Any]) -> Any:
        """Submit a generation/enhance job. Returns the parsed response body."""
        return await self._request("POST", endpoint, payload=payload)

    async def get_job(self, job_id: str) -> Any:
        """Fetch the current job record by id."""
        return await self._request("GET", f"{C.JOBS_PATH}/{quote(job_id, safe='')}")

    # HTTP plumbing
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _parse_body(text: str) -> Any:
        if not text.strip():
            return None
        try:
            return json.loads(text)
        except ValueError:
            return text

    async def _request(self, method: str, path: str, payload: dict[str, Any] | None = None) -> Any:
        content = json.dumps(payload) if payload is not None else None
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.request(method, f"{self.base_url}{path}", content=content, headers=self._headers())

        logger.debug(f"{method} {path} -> {response.status_code}")
        body = self._parse_body(response.text)
        if not response.is_success:
            raise KreaApiError(response.status_code, stringify_unknown(body) if body is not None else "")
        return body


__all__ = ["KreaClient"]
