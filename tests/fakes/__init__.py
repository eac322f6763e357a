"""Shared test doubles: re-export memory backends and the mock sync client."""

from __future__ import annotations

from intakeflow.clients.mock_client import MockSyncClient
from intakeflow.persistence.memory_backend import (
    MemoryCacheBackend,
    MemorySnapshotProvider,
    MemoryStepPayloadStore,
    MemorySyncMetadataStore,
    MemoryWizardStateStore,
)

__all__ = [
    "MemoryCacheBackend",
    "MemorySnapshotProvider",
    "MemoryStepPayloadStore",
    "MemorySyncMetadataStore",
    "MemoryWizardStateStore",
    "MockSyncClient",
]
