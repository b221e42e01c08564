"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_trigger_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate trigger parameters."""
        errors = []

        if "bulk_resync_tags" in params:
            value = params["bulk_resync_tags"]
            if not isinstance(value, (list, tuple)) or not all(isinstance(tag, str) and tag for tag in value):
                errors.append(ValidationError(
                    field="bulk_resync_tags",
                    message="Must be a list of non-empty strings",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_snapshot_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate snapshot parameters."""
        errors = []

        if "strict_validation" in params:
            value = params["strict_validation"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="strict_validation",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_storage_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate storage parameters."""
        errors = []

        for name in ("tracking_db_path", "live_db_path"):
            if name in params:
                value = params[name]
                if not isinstance(value, str) or not value.strip():
                    errors.append(ValidationError(
                        field=name,
                        message="Must be a non-empty path string",
                        value=value
                    ))

        if "connect_timeout_seconds" in params:
            value = params["connect_timeout_seconds"]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                errors.append(ValidationError(
                    field="connect_timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_delivery_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate presenter retry parameters."""
        errors = []

        if "retry_attempts" in params:
            value = params["retry_attempts"]
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                errors.append(ValidationError(
                    field="retry_attempts",
                    message="Must be a non-negative integer",
                    value=value
                ))

        if "retry_delay_seconds" in params:
            value = params["retry_delay_seconds"]
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
                errors.append(ValidationError(
                    field="retry_delay_seconds",
                    message="Must be a non-negative number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {sorted(LOG_LEVELS)}",
                    value=value
                ))

        if "format_json" in params:
            value = params["format_json"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="format_json",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "trigger" in config:
            errors.extend(ConfigValidator.validate_trigger_params(config["trigger"]))

        if "snapshot" in config:
            errors.extend(ConfigValidator.validate_snapshot_params(config["snapshot"]))

        if "storage" in config:
            errors.extend(ConfigValidator.validate_storage_params(config["storage"]))

        if "delivery" in config:
            errors.extend(ConfigValidator.validate_delivery_params(config["delivery"]))

        if "logging" in config:
            errors.extend(ConfigValidator.validate_logging_params(config["logging"]))

        return errors
