"""Pluggable persistence backends behind Protocol interfaces."""

from __future__ import annotations

from intakeflow.core.config import AppSettings
from intakeflow.persistence.cache_stores import CacheSnapshotProvider, CacheWizardStateStore
from intakeflow.persistence.dynamodb_backend import DynamoDBStepPayloadStore, DynamoDBSyncMetadataStore
from intakeflow.persistence.redis_backend import RedisCacheBackend


def create_persistence(settings: AppSettings | None = None):
    """Create wired-up persistence backends from application settings.

    Returns:
        Tuple of (payload_store, state_store, metadata_store, snapshots).
    """
    if settings is None:
        settings = AppSettings()

    cache = RedisCacheBackend.from_config(settings.redis)

    payload_store = DynamoDBStepPayloadStore(
        table_suffix=settings.dynamodb.table_suffix,
        region=settings.dynamodb.region,
        endpoint_url=settings.dynamodb.endpoint_url,
    )

    metadata_store = DynamoDBSyncMetadataStore(
        table_suffix=settings.dynamodb.table_suffix,
        region=settings.dynamodb.region,
        endpoint_url=settings.dynamodb.endpoint_url,
    )

    state_store = CacheWizardStateStore(
        cache,
        ttl=settings.wizard.state_ttl_seconds,
        key_prefix=settings.wizard.key_prefix,
    )

    snapshots = CacheSnapshotProvider(cache)

    return payload_store, state_store, metadata_store, snapshots
