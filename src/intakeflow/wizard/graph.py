"""StepGraph: immutable, ordered lookup table of wizard steps."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from intakeflow.core.exceptions import InvalidStepGraphError
from intakeflow.models.steps import APPLICATION_FORM_STEPS, Step


class StepGraph:
    """Ordered steps with hidden flags and a designated review step.

    All lookups are total: ids outside the graph are treated as visible
    and never raise.
    """

    def __init__(self, steps: Iterable[Step], review_step_id: Optional[int] = None) -> None:
        self._steps: tuple[Step, ...] = tuple(steps)
        if not self._steps:
            raise InvalidStepGraphError("A step graph needs at least one step")
        for index, step in enumerate(self._steps):
            if step.id != index:
                raise InvalidStepGraphError(
                    f"Step ids must be contiguous from 0; position {index} has id {step.id}"
                )
        self._hidden = frozenset(step.id for step in self._steps if step.hidden)
        visible = [step.id for step in self._steps if not step.hidden]
        if not visible:
            raise InvalidStepGraphError("At least one step must be visible")
        self._visible: tuple[int, ...] = tuple(visible)

        if review_step_id is None:
            # Conventionally the second-to-last visible step
            review_step_id = visible[-2] if len(visible) > 1 else visible[-1]
        elif review_step_id in self._hidden or not 0 <= review_step_id < len(self._steps):
            raise InvalidStepGraphError(f"Review step {review_step_id} must be a visible step")
        self._review_step_id = review_step_id

    @property
    def steps(self) -> tuple[Step, ...]:
        return self._steps

    @property
    def total_steps(self) -> int:
        return len(self._steps)

    @property
    def last_index(self) -> int:
        return len(self._steps) - 1

    @property
    def visible_steps(self) -> tuple[int, ...]:
        return self._visible

    @property
    def hidden_steps(self) -> frozenset[int]:
        return self._hidden

    @property
    def review_step_id(self) -> int:
        return self._review_step_id

    def __len__(self) -> int:
        return len(self._steps)

    def __contains__(self, step_id: object) -> bool:
        return isinstance(step_id, int) and 0 <= step_id < len(self._steps)

    def is_hidden(self, step_id: int) -> bool:
        return step_id in self._hidden

    def clamp(self, step_id: int) -> int:
        return min(max(step_id, 0), self.last_index)

    def next_visible(self, from_id: int) -> int:
        """First visible id after ``from_id``; ``from_id`` itself when none remains.

        When ``from_id`` is itself hidden or outside the graph and nothing
        visible follows it, the last visible step is returned instead.
        """
        for step_id in range(max(from_id + 1, 0), len(self._steps)):
            if step_id not in self._hidden:
                return step_id
        if from_id in self and from_id not in self._hidden:
            return from_id
        return self._visible[-1]

    def previous_visible_or_none(self, from_id: int) -> Optional[int]:
        """First visible id before ``from_id``, or None."""
        for step_id in range(min(from_id, len(self._steps)) - 1, -1, -1):
            if step_id not in self._hidden:
                return step_id
        return None

    def previous_visible(self, from_id: int) -> int:
        """First visible id before ``from_id``; the first step when none exists."""
        previous = self.previous_visible_or_none(from_id)
        return self._visible[0] if previous is None else previous


DEFAULT_STEP_GRAPH = StepGraph(APPLICATION_FORM_STEPS)
