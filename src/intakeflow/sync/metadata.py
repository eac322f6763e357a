"""SyncMetadataStore helpers: folding orchestration outcomes into the local mirror.

The orchestrator only reports outcomes; whoever owns the metadata store
records them here.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from intakeflow.core.protocols import ISyncMetadataStore
from intakeflow.models.sync import SyncMetadata, SyncReport


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def record_success(
    store: ISyncMetadataStore, application_id: str, section_key: str, now: Optional[datetime] = None
) -> SyncMetadata:
    previous = store.get(application_id, section_key)
    metadata = SyncMetadata(
        last_synced_at=now or _utcnow(),
        last_error=None,
        attempt_count=(previous.attempt_count if previous else 0) + 1,
        uptodate=True,
    )
    store.put(application_id, section_key, metadata)
    return metadata


def record_failure(
    store: ISyncMetadataStore, application_id: str, section_key: str, error: Any
) -> SyncMetadata:
    previous = store.get(application_id, section_key)
    metadata = SyncMetadata(
        last_synced_at=previous.last_synced_at if previous else None,
        last_error=error,
        attempt_count=(previous.attempt_count if previous else 0) + 1,
        uptodate=False,
    )
    store.put(application_id, section_key, metadata)
    return metadata


def record_report(
    store: ISyncMetadataStore, application_id: str, report: SyncReport, now: Optional[datetime] = None
) -> dict[str, SyncMetadata]:
    """Overwrite the metadata of every section attempted in ``report``."""
    now = now or _utcnow()
    written: dict[str, SyncMetadata] = {}
    for section_key in report.succeeded:
        written[section_key] = record_success(store, application_id, section_key, now)
    for failure in report.failures:
        error = failure.error if failure.error is not None else failure.message
        written[failure.section_key] = record_failure(store, application_id, failure.section_key, error)
    return written
