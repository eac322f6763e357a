"""Declarative registry of syncable application sections.

Adding a section is a data change: append a SectionSpec and the
orchestrator, availability derivation and HTTP client pick it up.
"""

from __future__ import annotations

from pydantic import BaseModel

from intakeflow.core.exceptions import UnknownSectionError


class SectionSpec(BaseModel):
    """One independently persisted slice of an application record."""

    key: str  # Also the sync metadata key
    label: str
    endpoint: str  # Path segment under the sync endpoint
    default_enabled: bool = False  # Used when availability has no entry

    model_config = {"frozen": True}


SECTION_REGISTRY: tuple[SectionSpec, ...] = (
    SectionSpec(key="enrollment_data", label="Enrollment", endpoint="enrollment"),
    SectionSpec(key="personal_details", label="Personal details", endpoint="personal-details"),
    SectionSpec(key="emergency_contacts", label="Emergency contacts", endpoint="emergency-contact"),
    SectionSpec(key="health_cover_policy", label="Health cover", endpoint="oshc"),
    SectionSpec(key="language_cultural_data", label="Language & cultural", endpoint="language"),
    SectionSpec(key="disability_support", label="Disability support", endpoint="disability"),
    SectionSpec(key="schooling_history", label="Schooling history", endpoint="schooling"),
    SectionSpec(key="qualifications", label="Qualifications", endpoint="qualifications"),
    SectionSpec(key="employment_history", label="Employment", endpoint="employment"),
    SectionSpec(key="usi", label="USI", endpoint="usi"),
    SectionSpec(key="documents", label="Documents", endpoint="documents", default_enabled=True),
    SectionSpec(key="survey_responses", label="Survey/Declaration", endpoint="declaration"),
)

SECTION_KEYS: tuple[str, ...] = tuple(spec.key for spec in SECTION_REGISTRY)


def get_section(key: str, registry: tuple[SectionSpec, ...] = SECTION_REGISTRY) -> SectionSpec:
    for spec in registry:
        if spec.key == key:
            return spec
    raise UnknownSectionError(key)
