"""Sync metadata, status and orchestration report models."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, Field


class SyncMetadata(BaseModel):
    """Mirror of one section's sync bookkeeping in the system of record."""

    last_synced_at: Optional[datetime] = None
    last_error: Any = None  # str, list or dict as reported upstream
    attempt_count: int = Field(default=0, ge=0)
    uptodate: bool = False

    @property
    def has_error(self) -> bool:
        return self.last_error is not None and self.last_error != ""

    @property
    def has_synced_at(self) -> bool:
        return self.last_synced_at is not None

    @property
    def ever_attempted(self) -> bool:
        return self.attempt_count > 0

    @property
    def ever_synced(self) -> bool:
        return self.has_synced_at or self.ever_attempted


class SyncStatus(StrEnum):
    CLEAN = "clean"
    STALE = "stale"
    NEVER_SYNCED = "never_synced"
    ERRORED = "errored"


class SyncIndicator(BaseModel):
    """What the review screen shows next to a section."""

    status: SyncStatus
    label: str = ""
    show_sync_button: bool = False
    show_alert_icon: bool = False
    alert_text: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def visible(self) -> bool:
        return self.show_sync_button or self.show_alert_icon

    @classmethod
    def hidden(cls, label: str = "") -> SyncIndicator:
        """Indicator for a section that should render nothing."""
        return cls(status=SyncStatus.NEVER_SYNCED, label=label)


class SyncReportStatus(StrEnum):
    NOOP = "NOOP"
    SUCCESS = "SUCCESS"
    PARTIAL_FAILURE = "PARTIAL_FAILURE"


class SectionFailure(BaseModel):
    """One failed section within an orchestration pass."""

    section_key: str
    label: str = ""
    message: str = ""
    error: Any = None  # Structured detail for last_error


class SyncReport(BaseModel):
    """Aggregate outcome of an orchestration pass."""

    application_id: str
    status: SyncReportStatus
    attempted: list[str] = Field(default_factory=list)
    succeeded: list[str] = Field(default_factory=list)
    failures: list[SectionFailure] = Field(default_factory=list)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def ok(self) -> bool:
        return self.status != SyncReportStatus.PARTIAL_FAILURE

    @property
    def message(self) -> str:
        if self.status == SyncReportStatus.NOOP:
            return "Everything is already synced."
        if self.failures:
            plural = "" if self.failure_count == 1 else "s"
            return f"Failed to sync {self.failure_count} section{plural}."
        return "All sections synced."
