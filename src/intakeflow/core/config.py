"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class WizardConfig(BaseSettings):
    """Wizard state persistence configuration."""

    model_config = {"env_prefix": "INTAKEFLOW_WIZARD_"}

    state_ttl_seconds: int = 30 * 24 * 3600
    key_prefix: str = "wizard"


class RedisConfig(BaseSettings):
    """Redis cache configuration."""

    model_config = {"env_prefix": "INTAKEFLOW_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    decode_responses: bool = True


class DynamoDBConfig(BaseSettings):
    """DynamoDB configuration."""

    model_config = {"env_prefix": "INTAKEFLOW_DYNAMO_"}

    table_suffix: str = ""  # "-dev", "-uat", or "" for prod
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class SyncApiConfig(BaseSettings):
    """System-of-record sync API configuration."""

    model_config = {"env_prefix": "INTAKEFLOW_SYNC_"}

    base_url: str = "http://localhost:8000/api/v1"
    path_prefix: str = "staff/applications"
    sync_segment: str = "galaxy-sync"
    timeout: float = 30.0
    api_token: str | None = None


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "INTAKEFLOW_"}

    log_level: str = "INFO"

    wizard: WizardConfig = WizardConfig()
    redis: RedisConfig = RedisConfig()
    dynamodb: DynamoDBConfig = DynamoDBConfig()
    sync_api: SyncApiConfig = SyncApiConfig()
