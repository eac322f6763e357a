"""Wizard session state."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

PERSISTED_FIELDS = ("current_step", "completed_steps")


class PersistedWizardState(BaseModel):
    """The part of a wizard session that survives a reload."""

    current_step: int = 0
    completed_steps: list[int] = Field(default_factory=list)


class WizardState(BaseModel):
    """Navigation state for one application-in-progress."""

    current_step: int = 0
    completed_steps: set[int] = Field(default_factory=set)
    dirty_steps: set[int] = Field(default_factory=set)  # Session-local
    unsaved_message: Optional[str] = None  # Session-local

    def to_persisted(self) -> dict[str, Any]:
        """Serialize only the fields that survive a reload."""
        return PersistedWizardState(
            current_step=self.current_step,
            completed_steps=sorted(self.completed_steps),
        ).model_dump()

    @classmethod
    def from_persisted(cls, data: dict[str, Any]) -> WizardState:
        """Rebuild a state from ``to_persisted`` output.

        Dirty steps and the unsaved message always start empty.
        """
        persisted = PersistedWizardState.model_validate(data)
        return cls(
            current_step=persisted.current_step,
            completed_steps=set(persisted.completed_steps),
        )
