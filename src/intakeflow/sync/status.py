"""SyncStatusResolver: derive what to show for a section from its sync metadata."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from intakeflow.models.sync import SyncIndicator, SyncMetadata, SyncStatus

UNKNOWN_SYNC_ERROR = "Unknown sync error"
STALE_MESSAGE = "Out of date in the system of record. Please sync."
ERROR_DELIMITER = " | "

LABEL_ERROR = "Error"
LABEL_UP_TO_DATE = "Up to date"
LABEL_NOT_SYNCED = "Not synced"

# Sections the review screen leaves out of its "everything synced" check
REVIEW_IGNORED_SECTIONS: tuple[str, ...] = (
    "additional_services",
    "survey_responses",
    "declaration",
    "employment_history",
    "enrollment_data",
    "usi",
)

MetadataLike = Union[SyncMetadata, Mapping[str, Any], None]


def coerce_metadata(metadata: MetadataLike) -> Optional[SyncMetadata]:
    """Accept model instances or raw dicts from an application snapshot."""
    if metadata is None or isinstance(metadata, SyncMetadata):
        return metadata
    return SyncMetadata.model_validate(dict(metadata))


def format_sync_error(error: Any) -> Optional[str]:
    """Render a structured sync error as one human-readable line.

    Never raises; returns None when there is nothing to show.
    """
    if error is None:
        return None
    if isinstance(error, str):
        return error.strip() or None
    if isinstance(error, (bool, int, float)):
        return str(error)
    if isinstance(error, (list, tuple, set)):
        parts = [format_sync_error(item) for item in error]
        joined = ERROR_DELIMITER.join(p for p in parts if p)
        return joined or None
    if isinstance(error, Mapping):
        message = format_sync_error(error.get("message"))
        if message:
            return message
        try:
            serialized = json.dumps(error, default=str)
        except (TypeError, ValueError):
            return UNKNOWN_SYNC_ERROR
        if serialized in ("{}", "null", '""'):
            return UNKNOWN_SYNC_ERROR
        return serialized
    if isinstance(error, BaseException):
        return str(error) or UNKNOWN_SYNC_ERROR
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(error) or UNKNOWN_SYNC_ERROR


def status_label(metadata: MetadataLike) -> str:
    """Badge text for the metadata note: "Error", "Up to date" or "Not synced"."""
    meta = coerce_metadata(metadata)
    if meta is None:
        return ""
    if meta.has_error:
        return LABEL_ERROR
    if meta.uptodate:
        return LABEL_UP_TO_DATE
    return LABEL_NOT_SYNCED


def resolve(metadata: MetadataLike) -> SyncIndicator:
    """Derive the indicator for one section.

    Sections that were never attempted and carry no error render nothing,
    the same as sections with no metadata at all.
    """
    meta = coerce_metadata(metadata)
    if meta is None:
        return SyncIndicator.hidden()

    has_error = meta.has_error
    ever_synced = meta.ever_synced
    label = status_label(meta)

    if meta.uptodate and meta.has_synced_at and not has_error:
        return SyncIndicator(status=SyncStatus.CLEAN, label=label)

    if not ever_synced and not has_error:
        return SyncIndicator.hidden(label=label)

    show_alert_icon = not meta.uptodate or has_error
    show_sync_button = not meta.uptodate and (ever_synced or has_error)
    if has_error:
        status = SyncStatus.ERRORED
        alert_text = format_sync_error(meta.last_error) or UNKNOWN_SYNC_ERROR
    else:
        status = SyncStatus.CLEAN if meta.uptodate else SyncStatus.STALE
        alert_text = STALE_MESSAGE if show_alert_icon else None
    return SyncIndicator(
        status=status,
        label=label,
        show_sync_button=show_sync_button,
        show_alert_icon=show_alert_icon,
        alert_text=alert_text,
    )


def is_sync_metadata_complete(
    metadata_by_section: Optional[Mapping[str, MetadataLike]],
    *,
    ignored_keys: Iterable[str] = (),
    require_no_errors: bool = False,
) -> bool:
    """True when every tracked section is up to date and has been synced.

    Empty or missing metadata is never complete.
    """
    if not metadata_by_section:
        return False
    ignored = set(ignored_keys)
    entries = [
        coerce_metadata(value)
        for key, value in metadata_by_section.items()
        if key not in ignored and value
    ]
    if not entries:
        return False
    for meta in entries:
        if require_no_errors and meta.has_error:
            return False
        if not (meta.uptodate and meta.has_synced_at):
            return False
    return True
