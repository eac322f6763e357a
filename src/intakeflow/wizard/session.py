"""WizardSession: wires the state machine to payload loading and state persistence."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from intakeflow.core.protocols import IStepPayloadStore, IWizardStateStore
from intakeflow.models.wizard import WizardState
from intakeflow.wizard.graph import DEFAULT_STEP_GRAPH, StepGraph
from intakeflow.wizard.navigation import NavigationController, NavigationResult
from intakeflow.wizard.state_machine import StepStateMachine

logger = logging.getLogger(__name__)


class WizardSession:
    """One user's wizard for one application (or a brand-new draft).

    Every state-changing call persists ``current_step`` and
    ``completed_steps`` through the state store; dirty steps and the
    unsaved-changes message stay in memory.
    """

    def __init__(
        self,
        *,
        application_id: Optional[str],
        payload_store: IStepPayloadStore,
        state_store: IWizardStateStore,
        graph: StepGraph = DEFAULT_STEP_GRAPH,
        edit_mode: bool = False,
    ) -> None:
        self._application_id = application_id
        self._payloads = payload_store
        self._states = state_store
        self._machine = StepStateMachine(graph)
        self._nav = NavigationController(self._machine, edit_mode=edit_mode)

    @property
    def application_id(self) -> Optional[str]:
        return self._application_id

    @property
    def machine(self) -> StepStateMachine:
        return self._machine

    @property
    def navigation(self) -> NavigationController:
        return self._nav

    @property
    def state(self) -> WizardState:
        return self._machine.state

    def _save(self) -> None:
        self._states.save(self._application_id, self._machine.state.to_persisted())

    # ---- lifecycle ----

    def open(self) -> WizardState:
        """Open the wizard from stored step payloads (fresh page load)."""
        payloads = self._payloads.load_step_payloads(self._application_id) if self._application_id else {}
        state = self._machine.initialize(self._application_id, payloads)
        self._save()
        return state

    def resume(self) -> WizardState:
        """Rehydrate after a reload, falling back to ``open`` when nothing usable is stored.

        A brand-new draft never resumes: it always starts at the first step.
        """
        if not self._application_id:
            return self.open()
        persisted = self._states.load(self._application_id)
        if persisted is None:
            return self.open()
        try:
            return self._machine.restore(persisted)
        except ValidationError:
            logger.warning("Ignoring malformed wizard state for %s", self._application_id)
            return self.open()

    def abandon(self) -> None:
        """Discard the draft's navigation state."""
        self._machine.reset()
        self._states.delete(self._application_id)

    # ---- navigation intents ----

    def request_step(self, target: int) -> NavigationResult:
        result = self._nav.request_step(target)
        if result.allowed:
            self._save()
        return result

    def request_next(self) -> NavigationResult:
        result = self._nav.request_next()
        if result.allowed:
            self._save()
        return result

    def request_previous(self) -> NavigationResult:
        result = self._nav.request_previous()
        if result.allowed:
            self._save()
        return result

    # ---- persistence bridge ----

    def set_step_dirty(self, step_id: int, is_dirty: bool) -> None:
        self._nav.set_step_dirty(step_id, is_dirty)

    def on_step_data_saved(self, step_id: int) -> None:
        self._nav.on_step_data_saved(step_id)
        self._save()
