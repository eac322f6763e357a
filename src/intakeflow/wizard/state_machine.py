"""StepStateMachine: current step, completion and dirty tracking for one wizard."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from intakeflow.models.payloads import (
    coerce_step_keys,
    is_non_empty,
    normalize_step_payloads,
    root_step_started,
)
from intakeflow.models.steps import ENROLLMENT_STEP_ID
from intakeflow.models.wizard import WizardState
from intakeflow.wizard.graph import DEFAULT_STEP_GRAPH, StepGraph

logger = logging.getLogger(__name__)


def completed_steps_from_payloads(graph: StepGraph, step_payloads: Mapping[Any, Any]) -> set[int]:
    """Every step id (hidden ones included) whose stored payload carries data.

    Emptiness is judged on the payload as stored, so a wrapper object such
    as `{"contacts": []}` still counts as data.
    """
    payloads = coerce_step_keys(step_payloads)
    return {
        step_id for step_id in range(graph.total_steps)
        if is_non_empty(payloads.get(step_id))
    }


def initial_step(
    graph: StepGraph,
    application_id: Optional[str],
    step_payloads: Mapping[Any, Any],
    completed_steps: set[int],
) -> int:
    """Where a user lands when opening the wizard.

    New applications and drafts with an empty enrollment step start at 0.
    Returning users land on the first visible step without data, or on the
    review step once every visible step is filled.
    """
    if not application_id:
        return 0
    payloads = normalize_step_payloads(step_payloads)
    if not root_step_started(payloads.get(ENROLLMENT_STEP_ID)):
        return 0
    for step_id in graph.visible_steps:
        if step_id not in completed_steps:
            return step_id
    return graph.review_step_id


class StepStateMachine:
    """Owns a WizardState and applies navigation/bookkeeping transitions.

    No permission checks happen here; see NavigationController for the
    caller-level guard.
    """

    def __init__(self, graph: StepGraph = DEFAULT_STEP_GRAPH, state: Optional[WizardState] = None) -> None:
        self._graph = graph
        self._state = state if state is not None else WizardState()

    @property
    def graph(self) -> StepGraph:
        return self._graph

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def current_step(self) -> int:
        return self._state.current_step

    @property
    def completed_steps(self) -> frozenset[int]:
        return frozenset(self._state.completed_steps)

    @property
    def dirty_steps(self) -> frozenset[int]:
        return frozenset(self._state.dirty_steps)

    @property
    def unsaved_message(self) -> Optional[str]:
        return self._state.unsaved_message

    # ---- lifecycle ----

    def initialize(self, application_id: Optional[str], step_payloads: Mapping[Any, Any]) -> WizardState:
        """Compute the landing step and completion set from stored payloads."""
        if not application_id:
            self._state = WizardState()
            return self._state

        completed = completed_steps_from_payloads(self._graph, step_payloads)
        step = initial_step(self._graph, application_id, step_payloads, completed)
        self._state = WizardState(
            current_step=self._graph.clamp(step),
            completed_steps=completed,
        )
        logger.debug(
            "Initialized wizard for %s at step %d (%d completed)",
            application_id, self._state.current_step, len(completed),
        )
        return self._state

    def restore(self, persisted: Mapping[str, Any]) -> WizardState:
        """Apply a persisted snapshot; session-local fields start empty."""
        restored = WizardState.from_persisted(dict(persisted))
        self._state = WizardState(
            current_step=self._graph.clamp(restored.current_step),
            completed_steps={s for s in restored.completed_steps if s in self._graph},
        )
        return self._state

    def restore_completed_steps(self, step_payloads: Mapping[Any, Any]) -> None:
        """Recompute completion from payloads without moving the current step."""
        self._state.completed_steps = completed_steps_from_payloads(self._graph, step_payloads)

    def reset(self) -> None:
        self._state = WizardState()

    # ---- navigation ----

    def go_to_step(self, target: int) -> int:
        if self._graph.is_hidden(target):
            target = self._graph.next_visible(target)
        self._state.current_step = self._graph.clamp(target)
        return self._state.current_step

    def go_to_next(self) -> int:
        self._state.current_step = self._graph.clamp(self._graph.next_visible(self.current_step))
        return self._state.current_step

    def go_to_previous(self) -> int:
        self._state.current_step = self._graph.clamp(self._graph.previous_visible(self.current_step))
        return self._state.current_step

    # ---- completion / dirty bookkeeping ----

    def mark_step_completed(self, step_id: int) -> None:
        self._state.completed_steps.add(step_id)

    def is_step_completed(self, step_id: int) -> bool:
        return step_id in self._state.completed_steps

    def set_step_dirty(self, step_id: int, is_dirty: bool) -> None:
        if is_dirty:
            self._state.dirty_steps.add(step_id)
        else:
            self._state.dirty_steps.discard(step_id)

    def clear_step_dirty(self, step_id: int) -> None:
        self._state.dirty_steps.discard(step_id)

    def clear_dirty_steps(self) -> None:
        self._state.dirty_steps.clear()

    def is_step_dirty(self, step_id: int) -> bool:
        return step_id in self._state.dirty_steps

    def set_unsaved_message(self, message: Optional[str]) -> None:
        self._state.unsaved_message = message

    def clear_unsaved_message(self) -> None:
        self._state.unsaved_message = None
