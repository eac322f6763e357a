"""Mock sync client for local development and testing.

Records every call. No network traffic.
"""

from __future__ import annotations

import asyncio
from typing import Any

from intakeflow.core.exceptions import SyncSectionError


class MockSyncClient:
    """ISyncClient implementation with canned per-section failures."""

    def __init__(self, delay: float = 0.0) -> None:
        self._delay = delay
        self._failures: dict[str, tuple[str, Any]] = {}
        self.calls: list[tuple[str, str]] = []

    def fail_section(self, section_key: str, message: str = "Sync failed", detail: Any = None) -> None:
        """Make every subsequent call for ``section_key`` raise."""
        self._failures[section_key] = (message, detail)

    def heal_section(self, section_key: str) -> None:
        self._failures.pop(section_key, None)

    async def sync_section(self, application_id: str, section_key: str) -> Any:
        self.calls.append((application_id, section_key))
        if self._delay:
            await asyncio.sleep(self._delay)
        failure = self._failures.get(section_key)
        if failure is not None:
            message, detail = failure
            raise SyncSectionError(section_key, message, detail=detail)
        return {"application_id": application_id, "section": section_key, "status": "synced"}

    @property
    def synced_sections(self) -> list[str]:
        return [section for _, section in self.calls]
