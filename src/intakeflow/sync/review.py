"""ReviewSyncService: the review screen's view of sync state and its sync actions."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from intakeflow.core.protocols import ISyncMetadataStore
from intakeflow.models.sync import SyncIndicator, SyncReport
from intakeflow.sync.availability import derive_availability
from intakeflow.sync.metadata import record_report
from intakeflow.sync.orchestrator import SyncOrchestrator
from intakeflow.sync.registry import SECTION_KEYS
from intakeflow.sync.status import REVIEW_IGNORED_SECTIONS, is_sync_metadata_complete, resolve


class ReviewSyncService:
    """Combines the orchestrator with the local metadata mirror."""

    def __init__(
        self,
        *,
        orchestrator: SyncOrchestrator,
        metadata_store: ISyncMetadataStore,
        ignored_sections: Iterable[str] = REVIEW_IGNORED_SECTIONS,
    ) -> None:
        self._orchestrator = orchestrator
        self._metadata = metadata_store
        self._ignored = tuple(ignored_sections)

    @property
    def is_syncing(self) -> bool:
        return self._orchestrator.is_pending

    def section_indicators(self, application_id: str) -> dict[str, SyncIndicator]:
        metadata = self._metadata.get_all(application_id)
        return {key: resolve(metadata.get(key)) for key in SECTION_KEYS}

    def is_complete(self, application_id: str) -> bool:
        return is_sync_metadata_complete(
            self._metadata.get_all(application_id), ignored_keys=self._ignored,
        )

    def show_sync_all(self, application_id: str) -> bool:
        """The bulk action is offered until every tracked section is clean."""
        return not self.is_complete(application_id)

    async def sync_all(self, application_id: str, snapshot: Mapping[str, Any] | None) -> SyncReport:
        report = await self._orchestrator.sync_all(
            application_id,
            self._metadata.get_all(application_id),
            derive_availability(snapshot),
        )
        record_report(self._metadata, application_id, report)
        return report

    async def sync_section(self, application_id: str, section_key: str) -> SyncReport:
        report = await self._orchestrator.sync_section(application_id, section_key)
        record_report(self._metadata, application_id, report)
        return report
