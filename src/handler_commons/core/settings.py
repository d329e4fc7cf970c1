"""Environment-driven settings for resource handlers.

``HandlerSettings`` holds the few knobs the shared handler utilities need:
log level and format, the service name stamped on log lines, extra fields to
redact when printing models, and a switch for drift reporting.

Features:
    - **Pydantic validation:** Type-checked at startup, not runtime
    - **env_prefix:** ``HANDLER_`` (``HANDLER_LOG_LEVEL=DEBUG`` etc.)
    - **.env file support:** Automatic loading via pydantic-settings
    - **Extra ignore:** Unknown env vars don't cause startup failures

Examples:
    >>> from handler_commons.core.settings import HandlerSettings
    >>> class DBInstanceSettings(HandlerSettings):
    ...     model_config = {"env_prefix": "DB_INSTANCE_HANDLER_"}
    ...     stabilization_delay_seconds: int = 30
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class HandlerSettings(BaseSettings):
    """Common settings shared by handlers.

    Fields
    ──────
    log_level               : Structlog log level
    log_json                : JSON lines instead of console output
    service_name            : ``service.name`` stamped on every log line
    redacted_fields         : Extra model keys masked by the printer
    drift_detection_enabled : Whether report_resource_drift compares at all
    """

    model_config = SettingsConfigDict(
        env_prefix="HANDLER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool = True
    service_name: str = "resource-handler"

    # ── Redaction ────────────────────────────────────────────────
    redacted_fields: list[str] = Field(
        default_factory=list,
        description="Model keys to mask in addition to the built-in sensitive patterns",
    )

    # ── Drift ────────────────────────────────────────────────────
    drift_detection_enabled: bool = True

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}, got {value!r}")
        return level
