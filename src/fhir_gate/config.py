"""
Configuration settings for FHIR Gate.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "FHIR Gate"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # === Watched Location & Sinks ===
    INPUT_DIR: str = "data/input"
    VALID_DIR: str = "data/valid"
    INVALID_DIR: str = "data/invalid"
    INPUT_GLOB: str = "*.json"
    DIAGNOSTIC_SUFFIX: str = ".diagnostic.json"

    # === Dispatcher ===
    POLL_INTERVAL_SECONDS: float = 5.0
    WORKER_CONCURRENCY: int = 1  # 1 = sequential, discovery order

    # === Processed Set ===
    PROCESSED_BACKEND: Literal["memory", "redis"] = "memory"
    REDIS_URL: str = "redis://redis:6379/0"
    PROCESSED_KEY_PREFIX: str = "fhir_gate:processed:"
    CLAIM_TTL_SECONDS: int = 300  # in-flight claims expire after a worker crash

    # === Validator ===
    VALIDATOR_BACKEND: Literal["schema", "remote"] = "schema"
    SCHEMA_DIR: Optional[str] = None  # extra <ResourceType>.schema.json profiles
    REMOTE_VALIDATOR_URL: str = "http://fhir-validator:8080/fhir"
    VALIDATOR_TIMEOUT: float = 30.0  # seconds
    NARRATIVE_CHECK_ENABLED: bool = True

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True
    METRICS_PORT: int = 9090


# Global settings instance
settings = Settings()
