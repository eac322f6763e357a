"""In-memory backends for unit tests: dict-backed fakes."""

from __future__ import annotations

import copy
from typing import Any

from intakeflow.models.sync import SyncMetadata


class MemoryCacheBackend:
    """Dict-backed ICacheBackend for unit tests."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def setex(self, key: str, ttl: int, value: str) -> None:
        self._store[key] = value
        self.ttls[key] = ttl

    def delete(self, key: str) -> None:
        self._store.pop(key, None)
        self.ttls.pop(key, None)


class MemoryStepPayloadStore:
    """Dict-backed IStepPayloadStore for unit tests."""

    def __init__(self, payloads: dict[str, dict[int, Any]] | None = None) -> None:
        self._payloads: dict[str, dict[int, Any]] = payloads or {}

    def load_step_payloads(self, application_id: str) -> dict[int, Any]:
        return copy.deepcopy(self._payloads.get(application_id, {}))

    def save_step_payload(self, application_id: str, step_id: int, payload: Any) -> None:
        self._payloads.setdefault(application_id, {})[step_id] = copy.deepcopy(payload)


class MemoryWizardStateStore:
    """Dict-backed IWizardStateStore for unit tests."""

    def __init__(self) -> None:
        self._states: dict[str | None, dict[str, Any]] = {}

    def load(self, application_id: str | None) -> dict[str, Any] | None:
        state = self._states.get(application_id)
        return copy.deepcopy(state) if state is not None else None

    def save(self, application_id: str | None, state: dict[str, Any]) -> None:
        self._states[application_id] = copy.deepcopy(state)

    def delete(self, application_id: str | None) -> None:
        self._states.pop(application_id, None)


class MemorySyncMetadataStore:
    """Dict-backed ISyncMetadataStore for unit tests."""

    def __init__(self) -> None:
        self._metadata: dict[str, dict[str, SyncMetadata]] = {}

    def get(self, application_id: str, section_key: str) -> SyncMetadata | None:
        return self._metadata.get(application_id, {}).get(section_key)

    def get_all(self, application_id: str) -> dict[str, SyncMetadata]:
        return dict(self._metadata.get(application_id, {}))

    def put(self, application_id: str, section_key: str, metadata: SyncMetadata) -> None:
        self._metadata.setdefault(application_id, {})[section_key] = metadata


class MemorySnapshotProvider:
    """ISnapshotProvider that records invalidations for assertions."""

    def __init__(self) -> None:
        self.invalidated: list[str] = []

    def invalidate(self, application_id: str) -> None:
        self.invalidated.append(application_id)
