"""Create IntakeFlow DynamoDB tables and seed a sample application.

Usage:
    python scripts/seed_dynamodb.py --endpoint-url http://localhost:4566
"""

from __future__ import annotations

import argparse
import logging
from decimal import Decimal
from typing import Any

import boto3

from intakeflow.core.config import AppSettings
from intakeflow.core.logging import configure_logging

logger = logging.getLogger("seed_dynamodb")

TABLE_DEFINITIONS: list[dict[str, Any]] = [
    {"name": "intakeflow-step-payloads"},
    {"name": "intakeflow-sync-metadata"},
]

SAMPLE_APPLICATION_ID = "APP-SAMPLE-0001"

SAMPLE_STEP_PAYLOADS: dict[int, Any] = {
    0: {"enrollments": [{"course_code": "BSB50120", "intake": "2025-02-03"}]},
    1: {"given_name": "Alex", "family_name": "Rivera", "date_of_birth": "1999-04-12"},
    2: [{"name": "Sam Rivera", "relationship": "Sibling", "phone": "+61 400 000 000"}],
    4: {"main_language": "English", "speaks_other_language": False},
}

SAMPLE_SYNC_METADATA: dict[str, dict[str, Any]] = {
    "enrollment_data": {
        "lastSyncedAt": "2025-01-10T02:15:00+00:00", "lastError": None,
        "attemptCount": Decimal("1"), "uptodate": True,
    },
    "personal_details": {
        "lastSyncedAt": "2025-01-10T02:15:00+00:00", "lastError": None,
        "attemptCount": Decimal("2"), "uptodate": False,
    },
    "emergency_contacts": {
        "lastSyncedAt": None, "lastError": {"message": "Contact phone number is invalid"},
        "attemptCount": Decimal("1"), "uptodate": False,
    },
}


def create_tables(ddb: Any, suffix: str = "") -> None:
    """Create both IntakeFlow tables. Skips if a table already exists."""
    client = ddb.meta.client
    existing = client.list_tables().get("TableNames", [])

    for defn in TABLE_DEFINITIONS:
        table_name = f"{defn['name']}{suffix}"
        if table_name in existing:
            logger.info("Table %s already exists, skipping", table_name)
            continue
        client.create_table(
            TableName=table_name,
            KeySchema=[
                {"AttributeName": "PK", "KeyType": "HASH"},
                {"AttributeName": "SK", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "PK", "AttributeType": "S"},
                {"AttributeName": "SK", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        logger.info("Created table %s", table_name)


def seed_sample_application(ddb: Any, suffix: str = "", application_id: str = SAMPLE_APPLICATION_ID) -> None:
    """Seed step payloads and sync metadata for one partially completed application."""
    pk = f"APPLICATION#{application_id}"

    tbl = ddb.Table(f"intakeflow-step-payloads{suffix}")
    with tbl.batch_writer() as batch:
        for step_id, payload in SAMPLE_STEP_PAYLOADS.items():
            batch.put_item(Item={
                "PK": pk, "SK": f"STEP#{step_id:02d}",
                "stepId": step_id, "payload": payload,
            })
    logger.info("Seeded %d step payloads for %s", len(SAMPLE_STEP_PAYLOADS), application_id)

    tbl = ddb.Table(f"intakeflow-sync-metadata{suffix}")
    with tbl.batch_writer() as batch:
        for section_key, item in SAMPLE_SYNC_METADATA.items():
            batch.put_item(Item={
                "PK": pk, "SK": f"SECTION#{section_key}",
                "sectionKey": section_key, **item,
            })
    logger.info("Seeded sync metadata for %d sections", len(SAMPLE_SYNC_METADATA))


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed DynamoDB tables for IntakeFlow")
    parser.add_argument("--endpoint-url", default=None, help="DynamoDB endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--table-suffix", default="", help="Table name suffix (e.g. -dev)")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    parser.add_argument("--application-id", default=SAMPLE_APPLICATION_ID, help="Sample application id")
    args = parser.parse_args()

    configure_logging(AppSettings().log_level)

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url

    ddb = boto3.resource("dynamodb", **kwargs)

    logger.info("Creating tables...")
    create_tables(ddb, suffix=args.table_suffix)

    logger.info("Seeding sample application...")
    seed_sample_application(ddb, suffix=args.table_suffix, application_id=args.application_id)

    logger.info("Done!")


if __name__ == "__main__":
    main()
