"""IntakeFlow exception hierarchy."""

from __future__ import annotations

from typing import Any


class IntakeFlowError(Exception):
    """Base exception for all IntakeFlow errors."""


class InvalidStepGraphError(IntakeFlowError):
    """Step definitions violate the graph invariants."""


class UnknownSectionError(IntakeFlowError):
    """Section key is not present in the sync registry."""

    def __init__(self, section_key: str) -> None:
        self.section_key = section_key
        super().__init__(f"Unknown sync section: {section_key!r}")


class SyncError(IntakeFlowError):
    """Error talking to the external system of record."""


class SyncSectionError(SyncError):
    """A single section sync call failed."""

    def __init__(self, section_key: str, message: str, detail: Any = None) -> None:
        self.section_key = section_key
        self.message = message
        self.detail = detail
        super().__init__(f"Sync of {section_key} failed: {message}")


class CacheError(IntakeFlowError):
    """Redis cache operation failed."""


class StateStoreError(IntakeFlowError):
    """Persistence backend (DynamoDB) operation failed."""
