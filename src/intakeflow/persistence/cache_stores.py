"""Cache-backed stores: persisted wizard state and application snapshot invalidation."""

from __future__ import annotations

import json
import logging
from typing import Any

from intakeflow.core.protocols import ICacheBackend

logger = logging.getLogger(__name__)

NEW_DRAFT_KEY = "new"
APPLICATION_LIST_KEY = "application-list"


class CacheWizardStateStore:
    """IWizardStateStore keeping the persisted wizard fields in a cache backend."""

    DEFAULT_TTL = 30 * 24 * 3600  # 30 days

    def __init__(self, cache: ICacheBackend, *, ttl: int = DEFAULT_TTL, key_prefix: str = "wizard") -> None:
        self._cache = cache
        self._ttl = ttl
        self._prefix = key_prefix

    def key(self, application_id: str | None) -> str:
        return f"{self._prefix}:{application_id or NEW_DRAFT_KEY}"

    def load(self, application_id: str | None) -> dict[str, Any] | None:
        raw = self._cache.get(self.key(application_id))
        if raw is None:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unreadable wizard state at %s", self.key(application_id))
            return None
        return data if isinstance(data, dict) else None

    def save(self, application_id: str | None, state: dict[str, Any]) -> None:
        self._cache.setex(self.key(application_id), self._ttl, json.dumps(state))

    def delete(self, application_id: str | None) -> None:
        self._cache.delete(self.key(application_id))


class CacheSnapshotProvider:
    """ISnapshotProvider that evicts cached application records and list views."""

    def __init__(self, cache: ICacheBackend, *, key_prefix: str = "application") -> None:
        self._cache = cache
        self._prefix = key_prefix

    def record_key(self, application_id: str) -> str:
        return f"{self._prefix}:{application_id}"

    def invalidate(self, application_id: str) -> None:
        self._cache.delete(self.record_key(application_id))
        self._cache.delete(APPLICATION_LIST_KEY)
