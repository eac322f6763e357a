"""Tests for StepStateMachine transitions and initialization."""

from __future__ import annotations

import pytest

from intakeflow.models.steps import Step
from intakeflow.wizard.graph import DEFAULT_STEP_GRAPH, StepGraph
from intakeflow.wizard.state_machine import StepStateMachine, completed_steps_from_payloads

ENROLLED = {"enrollments": [{"course_code": "BSB50120"}]}


def _all_visible_filled() -> dict[int, object]:
    payloads: dict[int, object] = {step_id: {"filled": True} for step_id in DEFAULT_STEP_GRAPH.visible_steps}
    payloads[0] = ENROLLED
    return payloads


@pytest.fixture
def machine():
    return StepStateMachine()


# ---------- initialize ----------

class TestInitialize:
    def test_no_application_id_starts_at_zero(self, machine):
        state = machine.initialize(None, _all_visible_filled())
        assert state.current_step == 0
        assert state.completed_steps == set()

    def test_empty_string_application_id_is_a_new_draft(self, machine):
        state = machine.initialize("", _all_visible_filled())
        assert state.current_step == 0
        assert state.completed_steps == set()

    @pytest.mark.parametrize("root", [None, {}, [], "", {"enrollments": []}])
    def test_empty_root_step_starts_at_zero(self, machine, root):
        payloads = _all_visible_filled()
        payloads[0] = root
        assert machine.initialize("APP-1", payloads).current_step == 0

    def test_missing_root_step_starts_at_zero(self, machine):
        payloads = _all_visible_filled()
        del payloads[0]
        assert machine.initialize("APP-1", payloads).current_step == 0

    def test_lands_on_first_unfilled_visible_step(self, machine):
        payloads = {0: ENROLLED, 1: {"given_name": "Alex"}, 2: [{"name": "Sam"}]}
        assert machine.initialize("APP-1", payloads).current_step == 4

    def test_hidden_unfilled_steps_are_skipped(self, machine):
        # Step 3 is hidden and empty; landing must not stop there
        payloads = {0: ENROLLED, 1: {"a": 1}, 2: {"b": 2}}
        state = machine.initialize("APP-1", payloads)
        assert state.current_step == 4
        assert 3 not in state.completed_steps

    def test_all_visible_filled_lands_on_review_step(self, machine):
        state = machine.initialize("APP-1", _all_visible_filled())
        assert state.current_step == DEFAULT_STEP_GRAPH.review_step_id == 12

    def test_legacy_enrollment_shape_counts_as_started(self, machine):
        payloads = {0: {"enrollment": {"course_code": "X"}}}
        assert machine.initialize("APP-1", payloads).current_step == 1

    def test_string_keys_are_accepted(self, machine):
        payloads = {"0": ENROLLED, "1": {"a": 1}}
        state = machine.initialize("APP-1", payloads)
        assert state.current_step == 2
        assert state.completed_steps == {0, 1}

    def test_initialize_resets_session_local_fields(self, machine):
        machine.set_step_dirty(3, True)
        machine.set_unsaved_message("unsaved")
        state = machine.initialize("APP-1", {0: ENROLLED})
        assert state.dirty_steps == set()
        assert state.unsaved_message is None


class TestCompletedStepsFromPayloads:
    def test_emptiness_rules(self):
        payloads = {
            0: ENROLLED, 1: {}, 2: [], 3: "", 4: None,
            5: False, 6: 0, 7: "x", 8: [1], 9: {"k": None},
        }
        assert completed_steps_from_payloads(DEFAULT_STEP_GRAPH, payloads) == {0, 5, 6, 7, 8, 9}

    def test_ignores_ids_outside_graph(self):
        assert completed_steps_from_payloads(DEFAULT_STEP_GRAPH, {99: {"a": 1}}) == set()

    def test_hidden_steps_can_be_completed(self):
        assert completed_steps_from_payloads(DEFAULT_STEP_GRAPH, {3: {"provider": "X"}}) == {3}

    def test_wrapped_empty_lists_still_count_as_completed(self):
        payloads = {2: {"contacts": []}, 8: {"employments": []}}
        assert completed_steps_from_payloads(DEFAULT_STEP_GRAPH, payloads) == {2, 8}

    def test_string_keys_are_coerced(self):
        payloads = {"2": {"contacts": []}, "notes": {"a": 1}}
        assert completed_steps_from_payloads(DEFAULT_STEP_GRAPH, payloads) == {2}


# ---------- navigation ----------

class TestGoToStep:
    def test_moves_to_visible_target(self, machine):
        assert machine.go_to_step(5) == 5

    def test_hidden_target_redirects_forward(self, machine):
        assert machine.go_to_step(3) == 4
        assert machine.go_to_step(10) == 12

    def test_clamps_out_of_range(self, machine):
        assert machine.go_to_step(99) == 13
        assert machine.go_to_step(-4) == 0

    def test_trailing_hidden_target_lands_on_last_visible(self):
        graph = StepGraph([Step(id=0), Step(id=1), Step(id=2, hidden=True)])
        machine = StepStateMachine(graph)
        assert machine.go_to_step(2) == 1


class TestGoToNextPrevious:
    def test_next_skips_hidden(self, machine):
        machine.go_to_step(2)
        assert machine.go_to_next() == 4

    def test_previous_skips_hidden(self, machine):
        machine.go_to_step(7)
        assert machine.go_to_previous() == 5

    def test_next_is_noop_at_last_visible(self, machine):
        machine.go_to_step(13)
        assert machine.go_to_next() == 13

    def test_previous_is_noop_at_first(self, machine):
        assert machine.go_to_previous() == 0


# ---------- bookkeeping ----------

class TestBookkeeping:
    def test_mark_step_completed_is_idempotent(self, machine):
        machine.mark_step_completed(4)
        once = set(machine.completed_steps)
        machine.mark_step_completed(4)
        assert machine.completed_steps == once == {4}

    def test_set_step_dirty_is_idempotent(self, machine):
        machine.set_step_dirty(2, True)
        machine.set_step_dirty(2, True)
        assert machine.dirty_steps == {2}
        machine.set_step_dirty(2, False)
        machine.set_step_dirty(2, False)
        assert machine.dirty_steps == set()

    def test_clear_step_dirty(self, machine):
        machine.set_step_dirty(1, True)
        machine.set_step_dirty(2, True)
        machine.clear_step_dirty(1)
        machine.clear_step_dirty(1)
        assert machine.dirty_steps == {2}
        machine.clear_dirty_steps()
        assert machine.dirty_steps == set()

    def test_unsaved_message_slot(self, machine):
        machine.set_unsaved_message("Save first")
        assert machine.unsaved_message == "Save first"
        machine.clear_unsaved_message()
        assert machine.unsaved_message is None

    def test_reset_clears_everything(self, machine):
        machine.go_to_step(5)
        machine.mark_step_completed(1)
        machine.set_step_dirty(5, True)
        machine.set_unsaved_message("x")
        machine.reset()
        state = machine.state
        assert (state.current_step, state.completed_steps, state.dirty_steps, state.unsaved_message) == (
            0, set(), set(), None,
        )

    def test_restore_completed_steps_keeps_position(self, machine):
        machine.go_to_step(7)
        machine.restore_completed_steps({0: ENROLLED, 1: {"a": 1}})
        assert machine.current_step == 7
        assert machine.completed_steps == {0, 1}


class TestRestore:
    def test_restores_persisted_fields_only(self, machine):
        machine.set_step_dirty(2, True)
        state = machine.restore({"current_step": 5, "completed_steps": [0, 1, 2]})
        assert state.current_step == 5
        assert state.completed_steps == {0, 1, 2}
        assert state.dirty_steps == set()

    def test_clamps_and_filters_out_of_range(self, machine):
        state = machine.restore({"current_step": 40, "completed_steps": [0, 77]})
        assert state.current_step == 13
        assert state.completed_steps == {0}
