"""HTTP sync client implementing ISyncClient against the system-of-record API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

import httpx

from intakeflow.core.config import SyncApiConfig
from intakeflow.core.exceptions import SyncSectionError
from intakeflow.sync.registry import SECTION_REGISTRY, SectionSpec, get_section

logger = logging.getLogger(__name__)


def _format_galaxy_error(error: Any) -> Optional[str]:
    """Flatten ``{"message": ..., "data": {field: msgs}}`` into one line."""
    if not isinstance(error, Mapping):
        return None
    details: list[str] = []
    message = error.get("message")
    if isinstance(message, list):
        details.append(", ".join(str(m) for m in message))
    elif isinstance(message, str) and message:
        details.append(message)
    data = error.get("data")
    if isinstance(data, Mapping):
        for field, value in data.items():
            if isinstance(value, list):
                details.extend(f"{field}: {msg}" for msg in value)
            elif isinstance(value, str):
                details.append(f"{field}: {value}")
    return " | ".join(details) if details else None


def extract_error_message(payload: Any) -> Optional[str]:
    """Pick the most specific message from an API error body."""
    if not isinstance(payload, Mapping):
        return None
    for key in ("detail", "message", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value:
            return value
    return _format_galaxy_error(payload.get("galaxy_error"))


class HttpSyncClient:
    """Production ISyncClient: one POST per section sync."""

    def __init__(
        self,
        base_url: str,
        *,
        path_prefix: str = "staff/applications",
        sync_segment: str = "galaxy-sync",
        timeout: float = 30.0,
        api_token: Optional[str] = None,
        registry: tuple[SectionSpec, ...] = SECTION_REGISTRY,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._path_prefix = path_prefix.strip("/")
        self._sync_segment = sync_segment.strip("/")
        self._registry = registry
        headers = {"Authorization": f"Bearer {api_token}"} if api_token else None
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/",
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: SyncApiConfig, **kwargs: Any) -> HttpSyncClient:
        return cls(
            config.base_url,
            path_prefix=config.path_prefix,
            sync_segment=config.sync_segment,
            timeout=config.timeout,
            api_token=config.api_token,
            **kwargs,
        )

    def section_path(self, application_id: str, section_key: str) -> str:
        spec = get_section(section_key, self._registry)
        return f"{self._path_prefix}/{application_id}/{self._sync_segment}/{spec.endpoint}"

    async def sync_section(self, application_id: str, section_key: str) -> Any:
        if not application_id:
            raise SyncSectionError(section_key, "Missing application reference.")
        path = self.section_path(application_id, section_key)
        try:
            response = await self._client.post(path, json={})
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            try:
                body = exc.response.json()
            except ValueError:
                body = None
            message = extract_error_message(body) or f"HTTP {exc.response.status_code}"
            raise SyncSectionError(section_key, message, detail=body) from exc
        except httpx.HTTPError as exc:
            raise SyncSectionError(section_key, str(exc) or exc.__class__.__name__) from exc

        logger.debug("Synced %s for application %s", section_key, application_id)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HttpSyncClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
