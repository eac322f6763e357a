"""Protocol interfaces for all IntakeFlow collaborators.

The wizard and sync engine only talk to persistence and the remote system
of record through these structural Protocols.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from intakeflow.models.sync import SyncMetadata


# ---------------------------------------------------------------------------
# Persistence: Cache Backend
# ---------------------------------------------------------------------------

@runtime_checkable
class ICacheBackend(Protocol):
    """Redis-compatible cache interface."""

    def get(self, key: str) -> str | None: ...

    def setex(self, key: str, ttl: int, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


# ---------------------------------------------------------------------------
# Persistence: Step payloads (load side of the persistence bridge)
# ---------------------------------------------------------------------------

@runtime_checkable
class IStepPayloadStore(Protocol):
    """Externally owned store of per-step form payloads."""

    def load_step_payloads(self, application_id: str) -> dict[int, Any]: ...


# ---------------------------------------------------------------------------
# Persistence: Wizard state
# ---------------------------------------------------------------------------

@runtime_checkable
class IWizardStateStore(Protocol):
    """Save/restore contract for the persisted part of a wizard session."""

    def load(self, application_id: str | None) -> dict[str, Any] | None: ...

    def save(self, application_id: str | None, state: dict[str, Any]) -> None: ...

    def delete(self, application_id: str | None) -> None: ...


# ---------------------------------------------------------------------------
# Persistence: Sync metadata mirror
# ---------------------------------------------------------------------------

@runtime_checkable
class ISyncMetadataStore(Protocol):
    """Local mirror of per-section sync metadata."""

    def get(self, application_id: str, section_key: str) -> SyncMetadata | None: ...

    def get_all(self, application_id: str) -> dict[str, SyncMetadata]: ...

    def put(self, application_id: str, section_key: str, metadata: SyncMetadata) -> None: ...


# ---------------------------------------------------------------------------
# Remote system of record
# ---------------------------------------------------------------------------

@runtime_checkable
class ISyncClient(Protocol):
    """Pushes one section of an application to the system of record.

    Must be idempotent; raises SyncSectionError on failure.
    """

    async def sync_section(self, application_id: str, section_key: str) -> Any: ...


@runtime_checkable
class ISnapshotProvider(Protocol):
    """Caller's cached view of application records and list views."""

    def invalidate(self, application_id: str) -> None: ...
