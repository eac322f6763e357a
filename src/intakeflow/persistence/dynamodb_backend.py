"""DynamoDB backends for step payloads and the sync metadata mirror."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

import boto3
from botocore.exceptions import ClientError

from intakeflow.core.exceptions import StateStoreError
from intakeflow.models.sync import SyncMetadata

SYNC_METADATA_TABLE = "intakeflow-sync-metadata"
STEP_PAYLOADS_TABLE = "intakeflow-step-payloads"


def _decode(value: Any) -> Any:
    """Convert Decimal values in a DynamoDB attribute to int/float, recursively."""
    if isinstance(value, Decimal):
        return int(value) if value == int(value) else float(value)
    if isinstance(value, dict):
        return {k: _decode(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_decode(i) for i in value]
    return value


def _encode(value: Any) -> Any:
    """Convert floats to Decimal (DynamoDB rejects float)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {str(k): _encode(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_encode(i) for i in value]
    return value


def application_pk(application_id: str) -> str:
    return f"APPLICATION#{application_id}"


class _DynamoDBTable:
    """Shared boto3 resource wiring."""

    def __init__(self, table_base: str, table_suffix: str = "", region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        self._table_suffix = table_suffix
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._ddb = boto3.resource("dynamodb", **kwargs)
        self._table_name = f"{table_base}{table_suffix}"

    @property
    def table_name(self) -> str:
        return self._table_name

    def _table(self):
        return self._ddb.Table(self._table_name)

    def _query_pk(self, pk: str) -> list[dict[str, Any]]:
        """Query all items with a given partition key, following pagination."""
        tbl = self._table()
        items: list[dict[str, Any]] = []
        kwargs: dict[str, Any] = {
            "KeyConditionExpression": "PK = :pk",
            "ExpressionAttributeValues": {":pk": pk},
        }
        try:
            while True:
                resp = tbl.query(**kwargs)
                items.extend(_decode(item) for item in resp.get("Items", []))
                last_key = resp.get("LastEvaluatedKey")
                if not last_key:
                    return items
                kwargs["ExclusiveStartKey"] = last_key
        except ClientError as exc:
            raise StateStoreError(f"DynamoDB query failed on {self._table_name} for {pk!r}: {exc}") from exc

    def _get_item(self, pk: str, sk: str) -> dict[str, Any] | None:
        try:
            resp = self._table().get_item(Key={"PK": pk, "SK": sk})
        except ClientError as exc:
            raise StateStoreError(f"DynamoDB get failed on {self._table_name} for {pk}/{sk}: {exc}") from exc
        item = resp.get("Item")
        return _decode(item) if item else None

    def _put_item(self, item: dict[str, Any]) -> None:
        try:
            self._table().put_item(Item=_encode(item))
        except ClientError as exc:
            raise StateStoreError(
                f"DynamoDB put failed on {self._table_name} for {item.get('PK')}/{item.get('SK')}: {exc}"
            ) from exc


class DynamoDBStepPayloadStore(_DynamoDBTable):
    """Production IStepPayloadStore: one item per (application, step)."""

    def __init__(self, table_suffix: str = "", region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        super().__init__(STEP_PAYLOADS_TABLE, table_suffix, region, endpoint_url)

    @staticmethod
    def step_sk(step_id: int) -> str:
        return f"STEP#{step_id:02d}"

    def load_step_payloads(self, application_id: str) -> dict[int, Any]:
        payloads: dict[int, Any] = {}
        for item in self._query_pk(application_pk(application_id)):
            step_id = item.get("stepId")
            if step_id is None:
                continue
            payloads[int(step_id)] = item.get("payload")
        return payloads

    def save_step_payload(self, application_id: str, step_id: int, payload: Any) -> None:
        self._put_item({
            "PK": application_pk(application_id),
            "SK": self.step_sk(step_id),
            "stepId": step_id,
            "payload": payload,
        })


class DynamoDBSyncMetadataStore(_DynamoDBTable):
    """Production ISyncMetadataStore: one item per (application, section), overwritten per attempt."""

    def __init__(self, table_suffix: str = "", region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        super().__init__(SYNC_METADATA_TABLE, table_suffix, region, endpoint_url)

    @staticmethod
    def section_sk(section_key: str) -> str:
        return f"SECTION#{section_key}"

    @staticmethod
    def _to_metadata(item: dict[str, Any]) -> SyncMetadata:
        synced_at = item.get("lastSyncedAt")
        return SyncMetadata(
            last_synced_at=datetime.fromisoformat(synced_at) if synced_at else None,
            last_error=item.get("lastError"),
            attempt_count=item.get("attemptCount", 0),
            uptodate=bool(item.get("uptodate", False)),
        )

    def get(self, application_id: str, section_key: str) -> SyncMetadata | None:
        item = self._get_item(application_pk(application_id), self.section_sk(section_key))
        return self._to_metadata(item) if item else None

    def get_all(self, application_id: str) -> dict[str, SyncMetadata]:
        return {
            item["sectionKey"]: self._to_metadata(item)
            for item in self._query_pk(application_pk(application_id))
            if "sectionKey" in item
        }

    def put(self, application_id: str, section_key: str, metadata: SyncMetadata) -> None:
        self._put_item({
            "PK": application_pk(application_id),
            "SK": self.section_sk(section_key),
            "sectionKey": section_key,
            "lastSyncedAt": metadata.last_synced_at.isoformat() if metadata.last_synced_at else None,
            "lastError": metadata.last_error,
            "attemptCount": metadata.attempt_count,
            "uptodate": metadata.uptodate,
        })
