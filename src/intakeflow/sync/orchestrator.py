"""SyncOrchestrator: best-effort bulk re-sync of application sections.

Runnable sections are pushed concurrently and independently: one
section's failure never prevents or rolls back another's. Every pass,
successful or not, ends by invalidating the caller's cached view of the
application.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from intakeflow.core.exceptions import IntakeFlowError, SyncSectionError
from intakeflow.core.protocols import ISnapshotProvider, ISyncClient
from intakeflow.models.sync import SectionFailure, SyncReport, SyncReportStatus
from intakeflow.sync.registry import SECTION_REGISTRY, SectionSpec, get_section
from intakeflow.sync.status import MetadataLike, coerce_metadata, format_sync_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncTask:
    """One section's sync call for a single orchestration pass."""

    label: str
    section_key: str
    enabled: bool
    up_to_date: bool
    run: Callable[[], Awaitable[Any]]

    @property
    def runnable(self) -> bool:
        return self.enabled and not self.up_to_date


def _failure(task: SyncTask, exc: Exception) -> SectionFailure:
    if isinstance(exc, SyncSectionError):
        error = exc.detail if exc.detail is not None else exc.message
        message = format_sync_error(exc.message) or format_sync_error(exc.detail)
    else:
        error = str(exc) or exc.__class__.__name__
        message = format_sync_error(error)
    return SectionFailure(
        section_key=task.section_key,
        label=task.label,
        message=message or "Sync failed",
        error=error,
    )


class SyncOrchestrator:
    """Selects stale, available sections and syncs them in one pass."""

    def __init__(
        self,
        *,
        client: ISyncClient,
        snapshots: ISnapshotProvider,
        registry: tuple[SectionSpec, ...] = SECTION_REGISTRY,
    ) -> None:
        self._client = client
        self._snapshots = snapshots
        self._registry = registry
        self._pending = 0

    @property
    def is_pending(self) -> bool:
        """True while any pass started by this orchestrator is outstanding."""
        return self._pending > 0

    def _runner(self, application_id: str, section_key: str) -> Callable[[], Awaitable[Any]]:
        def run() -> Awaitable[Any]:
            return self._client.sync_section(application_id, section_key)
        return run

    def build_tasks(
        self,
        application_id: str,
        sync_metadata: Optional[Mapping[str, MetadataLike]],
        availability: Optional[Mapping[str, bool]],
    ) -> list[SyncTask]:
        """One task per registered section, in registry order."""
        metadata = sync_metadata or {}
        available = availability or {}
        tasks: list[SyncTask] = []
        for spec in self._registry:
            flag = available.get(spec.key)
            if spec.default_enabled:
                enabled = flag is not False
            else:
                enabled = flag is True
            meta = coerce_metadata(metadata.get(spec.key))
            tasks.append(SyncTask(
                label=spec.label,
                section_key=spec.key,
                enabled=enabled,
                up_to_date=meta is not None and meta.uptodate is True,
                run=self._runner(application_id, spec.key),
            ))
        return tasks

    async def _execute(self, application_id: str, tasks: list[SyncTask]) -> SyncReport:
        results = await asyncio.gather(*(task.run() for task in tasks), return_exceptions=True)

        succeeded: list[str] = []
        failures: list[SectionFailure] = []
        for task, result in zip(tasks, results):
            if isinstance(result, Exception):
                failure = _failure(task, result)
                logger.warning(
                    "Sync of %s for application %s failed: %s",
                    task.section_key, application_id, failure.message,
                )
                failures.append(failure)
            elif isinstance(result, BaseException):
                raise result
            else:
                succeeded.append(task.section_key)

        status = SyncReportStatus.PARTIAL_FAILURE if failures else SyncReportStatus.SUCCESS
        return SyncReport(
            application_id=application_id,
            status=status,
            attempted=[task.section_key for task in tasks],
            succeeded=succeeded,
            failures=failures,
        )

    def _invalidate(self, application_id: str) -> None:
        try:
            self._snapshots.invalidate(application_id)
        except IntakeFlowError as exc:
            logger.warning("Could not invalidate cached application %s: %s", application_id, exc)

    async def _pass(self, application_id: str, tasks: list[SyncTask]) -> SyncReport:
        self._pending += 1
        try:
            if not tasks:
                logger.info("Nothing to sync for application %s", application_id)
                return SyncReport(application_id=application_id, status=SyncReportStatus.NOOP)
            logger.info(
                "Syncing %d section(s) for application %s: %s",
                len(tasks), application_id, ", ".join(t.section_key for t in tasks),
            )
            report = await self._execute(application_id, tasks)
            logger.info("Sync pass for application %s: %s", application_id, report.message)
            return report
        finally:
            self._pending -= 1
            self._invalidate(application_id)

    async def sync_all(
        self,
        application_id: str,
        sync_metadata: Optional[Mapping[str, MetadataLike]],
        availability: Optional[Mapping[str, bool]],
    ) -> SyncReport:
        """Sync every available, out-of-date section."""
        tasks = self.build_tasks(application_id, sync_metadata, availability)
        return await self._pass(application_id, [task for task in tasks if task.runnable])

    async def sync_section(self, application_id: str, section_key: str) -> SyncReport:
        """Sync one section on explicit request, regardless of availability or freshness.

        Raises:
            UnknownSectionError: ``section_key`` is not registered.
        """
        spec = get_section(section_key, self._registry)
        task = SyncTask(
            label=spec.label,
            section_key=spec.key,
            enabled=True,
            up_to_date=False,
            run=self._runner(application_id, spec.key),
        )
        return await self._pass(application_id, [task])
