"""NavigationController: caller-level navigation guard around StepStateMachine.

The state machine performs every transition it is asked to; this layer
decides whether a navigation intent is allowed, and turns a blocked
backward move off a dirty step into an advisory message instead of a
transition.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel

from intakeflow.wizard.state_machine import StepStateMachine

logger = logging.getLogger(__name__)

UNSAVED_CHANGES_MESSAGE = "You have unsaved changes on this step. Save them before going back."


class NavigationOutcome(StrEnum):
    MOVED = "MOVED"
    UNCHANGED = "UNCHANGED"  # Allowed, but already there / at a boundary
    BLOCKED_UNSAVED = "BLOCKED_UNSAVED"
    BLOCKED_LOCKED = "BLOCKED_LOCKED"


class NavigationResult(BaseModel):
    """Result of one navigation intent."""

    outcome: NavigationOutcome
    current_step: int
    message: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def allowed(self) -> bool:
        return self.outcome in (NavigationOutcome.MOVED, NavigationOutcome.UNCHANGED)


class NavigationController:
    """Applies the navigation guard before driving the state machine."""

    def __init__(
        self,
        machine: StepStateMachine,
        *,
        edit_mode: bool = False,
        unsaved_message: str = UNSAVED_CHANGES_MESSAGE,
    ) -> None:
        self._machine = machine
        self._edit_mode = edit_mode
        self._unsaved_text = unsaved_message
        self._blocked_step: Optional[int] = None  # Step the advisory was raised for

    @property
    def machine(self) -> StepStateMachine:
        return self._machine

    @property
    def edit_mode(self) -> bool:
        return self._edit_mode

    @edit_mode.setter
    def edit_mode(self, value: bool) -> None:
        self._edit_mode = value

    # ---- guard ----

    def can_navigate_to(self, target: int, current: Optional[int] = None) -> bool:
        """Whether ``target`` is reachable from ``current`` (defaults to the active step)."""
        if current is None:
            current = self._machine.current_step
        if self._edit_mode:
            return True
        if target == current or target == 0:
            return True
        completed = self._machine.state.completed_steps
        if target in completed:
            return True
        previous = self._machine.graph.previous_visible_or_none(target)
        return previous is None or previous in completed

    def navigable_steps(self) -> list[int]:
        """Visible steps the user may jump to right now."""
        return [s for s in self._machine.graph.visible_steps if self.can_navigate_to(s)]

    def _blocks_backward(self, target: int) -> bool:
        current = self._machine.current_step
        return target < current and self._machine.is_step_dirty(current)

    def _refuse_unsaved(self, target: int) -> NavigationResult:
        current = self._machine.current_step
        self._blocked_step = current
        self._machine.set_unsaved_message(self._unsaved_text)
        logger.debug("Refused navigation %d -> %d: step %d has unsaved changes", current, target, current)
        return NavigationResult(
            outcome=NavigationOutcome.BLOCKED_UNSAVED,
            current_step=current,
            message=self._unsaved_text,
        )

    def _moved(self, before: int) -> NavigationResult:
        after = self._machine.current_step
        outcome = NavigationOutcome.MOVED if after != before else NavigationOutcome.UNCHANGED
        return NavigationResult(outcome=outcome, current_step=after)

    # ---- navigation intents ----

    def request_step(self, target: int) -> NavigationResult:
        before = self._machine.current_step
        if self._blocks_backward(target):
            return self._refuse_unsaved(target)
        if not self.can_navigate_to(target, before):
            logger.debug("Refused navigation %d -> %d: step locked", before, target)
            return NavigationResult(outcome=NavigationOutcome.BLOCKED_LOCKED, current_step=before)
        self._machine.go_to_step(target)
        return self._moved(before)

    def request_next(self) -> NavigationResult:
        before = self._machine.current_step
        target = self._machine.graph.next_visible(before)
        if not self.can_navigate_to(target, before):
            logger.debug("Refused navigation %d -> %d: step locked", before, target)
            return NavigationResult(outcome=NavigationOutcome.BLOCKED_LOCKED, current_step=before)
        self._machine.go_to_next()
        return self._moved(before)

    def request_previous(self) -> NavigationResult:
        before = self._machine.current_step
        target = self._machine.graph.previous_visible(before)
        if self._blocks_backward(target):
            return self._refuse_unsaved(target)
        self._machine.go_to_previous()
        return self._moved(before)

    # ---- dirty tracking / persistence bridge ----

    def _maybe_clear_advisory(self, step_id: int) -> None:
        if self._blocked_step == step_id and not self._machine.is_step_dirty(step_id):
            self._machine.clear_unsaved_message()
            self._blocked_step = None

    def set_step_dirty(self, step_id: int, is_dirty: bool) -> None:
        self._machine.set_step_dirty(step_id, is_dirty)
        self._maybe_clear_advisory(step_id)

    def clear_step_dirty(self, step_id: int) -> None:
        self._machine.clear_step_dirty(step_id)
        self._maybe_clear_advisory(step_id)

    def on_step_data_saved(self, step_id: int) -> None:
        """A step's data was saved remotely: it is now completed and clean."""
        self._machine.mark_step_completed(step_id)
        self.clear_step_dirty(step_id)
