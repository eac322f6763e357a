"""Section availability: which sections currently hold data worth syncing."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from intakeflow.models.payloads import (
    is_non_empty,
    normalize_emergency_contacts,
    normalize_employment,
    normalize_qualifications,
    normalize_survey,
)


def _has_qualifications(value: Any) -> bool:
    normalized = normalize_qualifications(value)
    if not isinstance(normalized, Mapping):
        return is_non_empty(normalized)
    return is_non_empty(normalized.get("qualifications")) or bool(normalized.get("has_qualifications"))


def derive_availability(snapshot: Mapping[str, Any] | None) -> dict[str, bool]:
    """Map each section key to whether the application snapshot has data for it.

    Recomputed from the current snapshot on every call; documents are
    always considered available.
    """
    app = snapshot or {}
    return {
        "enrollment_data": is_non_empty(app.get("enrollment_data")),
        "personal_details": is_non_empty(app.get("personal_details")),
        "emergency_contacts": is_non_empty(normalize_emergency_contacts(app.get("emergency_contacts"))),
        "health_cover_policy": is_non_empty(app.get("health_cover_policy")),
        "language_cultural_data": is_non_empty(app.get("language_cultural_data")),
        "disability_support": is_non_empty(app.get("disability_support")),
        "schooling_history": is_non_empty(app.get("schooling_history")),
        "qualifications": _has_qualifications(app.get("qualifications")),
        "employment_history": is_non_empty(normalize_employment(app.get("employment_history"))),
        "usi": is_non_empty(app.get("usi")),
        "survey_responses": is_non_empty(normalize_survey(app.get("survey_responses"))),
        "documents": True,
    }
