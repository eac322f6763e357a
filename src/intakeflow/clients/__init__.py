"""Clients for the external system of record."""

from __future__ import annotations

from intakeflow.clients.http_client import HttpSyncClient
from intakeflow.core.config import AppSettings


def create_sync_client(settings: AppSettings | None = None) -> HttpSyncClient:
    """Create the HTTP sync client from application settings."""
    if settings is None:
        settings = AppSettings()
    return HttpSyncClient.from_config(settings.sync_api)
