"""Wizard step definitions."""

from __future__ import annotations

from pydantic import BaseModel


class Step(BaseModel):
    """A single screen of the intake wizard."""

    id: int
    title: str = ""
    hidden: bool = False  # Skipped during navigation, still data-bearing

    model_config = {"frozen": True}


APPLICATION_FORM_STEPS: tuple[Step, ...] = (
    Step(id=0, title="Enrollment"),
    Step(id=1, title="Personal Details"),
    Step(id=2, title="Emergency Contact"),
    Step(id=3, title="Health Cover", hidden=True),
    Step(id=4, title="Language & Culture"),
    Step(id=5, title="Disability"),
    Step(id=6, title="Schooling", hidden=True),
    Step(id=7, title="Qualifications"),
    Step(id=8, title="Employment", hidden=True),
    Step(id=9, title="USI"),
    Step(id=10, title="Additional Services", hidden=True),
    Step(id=11, title="Survey", hidden=True),
    Step(id=12, title="Documents"),
    Step(id=13, title="Review"),
)

ENROLLMENT_STEP_ID = 0
EMERGENCY_CONTACT_STEP_ID = 2
QUALIFICATIONS_STEP_ID = 7
EMPLOYMENT_STEP_ID = 8
ADDITIONAL_SERVICES_STEP_ID = 10
SURVEY_STEP_ID = 11
