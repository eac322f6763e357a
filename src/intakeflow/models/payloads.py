"""Per-step payload normalization.

Step payloads arrive loosely typed and, for older drafts, in legacy shapes.
Each step id has one normalizer that maps alternate field names to the
canonical shape at the boundary, so navigation and sync code never branch
on field presence.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from intakeflow.models.steps import (
    ADDITIONAL_SERVICES_STEP_ID,
    EMERGENCY_CONTACT_STEP_ID,
    EMPLOYMENT_STEP_ID,
    ENROLLMENT_STEP_ID,
    QUALIFICATIONS_STEP_ID,
    SURVEY_STEP_ID,
)

Normalizer = Callable[[Any], Any]


def is_non_empty(payload: Any) -> bool:
    """Return True when a step payload carries data.

    ``None`` and empty dicts, lists and strings are empty; everything else,
    including ``False`` and ``0``, counts as data.
    """
    if payload is None:
        return False
    if isinstance(payload, (Mapping, list, tuple, set, str)):
        return len(payload) > 0
    return True


def _unwrap_list(payload: Any, *keys: str) -> Any:
    """Return a bare list from ``payload`` or from the first wrapper key."""
    if isinstance(payload, (list, tuple)):
        return list(payload)
    if isinstance(payload, Mapping):
        for key in keys:
            value = payload.get(key)
            if isinstance(value, (list, tuple)):
                return list(value)
    return payload


def normalize_enrollment(payload: Any) -> Any:
    """Canonical shape: ``{"enrollments": [...], ...}``."""
    if payload is None:
        return None
    if isinstance(payload, (list, tuple)):
        return {"enrollments": list(payload)}
    if not isinstance(payload, Mapping):
        return payload
    out = dict(payload)
    enrollments = out.get("enrollments")
    if isinstance(enrollments, (list, tuple)):
        out["enrollments"] = list(enrollments)
        return out
    legacy = out.pop("enrollment", None)
    if isinstance(legacy, (list, tuple)):
        out["enrollments"] = list(legacy)
    elif isinstance(legacy, Mapping) and legacy:
        out["enrollments"] = [dict(legacy)]
    elif isinstance(out.get("courses"), (list, tuple)):
        out["enrollments"] = list(out.pop("courses"))
    return out


def normalize_emergency_contacts(payload: Any) -> Any:
    """Canonical shape: a list of contacts."""
    return _unwrap_list(payload, "emergency_contacts", "contacts")


def normalize_qualifications(payload: Any) -> Any:
    """Canonical shape: ``{"qualifications": [...], "has_qualifications": ...}``."""
    if isinstance(payload, (list, tuple)):
        return {"qualifications": list(payload), "has_qualifications": None}
    if isinstance(payload, Mapping) and payload:
        out = dict(payload)
        qualifications = out.get("qualifications")
        out["qualifications"] = list(qualifications) if isinstance(qualifications, (list, tuple)) else []
        out.setdefault("has_qualifications", None)
        return out
    return payload


def normalize_employment(payload: Any) -> Any:
    """Canonical shape: a list of employment entries."""
    return _unwrap_list(payload, "employment_history", "employments")


def normalize_additional_services(payload: Any) -> Any:
    """Canonical shape: a list of requested services."""
    return _unwrap_list(payload, "services", "additional_services")


def normalize_survey(payload: Any) -> Any:
    """Canonical shape: a list of survey responses."""
    return _unwrap_list(payload, "survey_responses", "responses")


STEP_NORMALIZERS: dict[int, Normalizer] = {
    ENROLLMENT_STEP_ID: normalize_enrollment,
    EMERGENCY_CONTACT_STEP_ID: normalize_emergency_contacts,
    QUALIFICATIONS_STEP_ID: normalize_qualifications,
    EMPLOYMENT_STEP_ID: normalize_employment,
    ADDITIONAL_SERVICES_STEP_ID: normalize_additional_services,
    SURVEY_STEP_ID: normalize_survey,
}


def normalize_step_payload(step_id: int, payload: Any) -> Any:
    normalizer = STEP_NORMALIZERS.get(step_id)
    return normalizer(payload) if normalizer is not None else payload


def coerce_step_keys(step_payloads: Mapping[Any, Any]) -> dict[int, Any]:
    """Coerce step keys to int, dropping non-numeric keys. Payloads are left as stored."""
    out: dict[int, Any] = {}
    for key, payload in step_payloads.items():
        try:
            step_id = int(key)
        except (TypeError, ValueError):
            continue
        out[step_id] = payload
    return out


def normalize_step_payloads(step_payloads: Mapping[Any, Any]) -> dict[int, Any]:
    """Normalize every payload, coercing keys to int and dropping non-numeric keys."""
    return {
        step_id: normalize_step_payload(step_id, payload)
        for step_id, payload in coerce_step_keys(step_payloads).items()
    }


def root_step_started(root_payload: Any) -> bool:
    """True when the enrollment (root) step holds real progress.

    An enrollment payload whose ``enrollments`` list is empty counts as no
    progress even though the wrapper object itself is non-empty.
    """
    normalized = normalize_enrollment(root_payload)
    if not is_non_empty(normalized):
        return False
    if isinstance(normalized, Mapping) and "enrollments" in normalized:
        return is_non_empty(normalized["enrollments"])
    return True
