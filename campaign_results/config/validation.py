"""Configuration validation utilities."""

import logging
from dataclasses import dataclass
from typing import Any

from .defaults import GeoParams, IdentifierParams, LoggingParams, StoreParams

KNOWN_SECTIONS = {"identifier", "geo", "store", "logging"}
FIXED_IDENTIFIER_PARAMS = {"length", "alphabet"}


@dataclass(frozen=True)
class ConfigIssue:
    """Represents a configuration validation problem."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_identifier_params(params: dict[str, Any]) -> list[ConfigIssue]:
        """Validate identifier generation parameters."""
        errors = []

        for name in sorted(FIXED_IDENTIFIER_PARAMS & set(params)):
            errors.append(ConfigIssue(
                field=f"identifier.{name}",
                message="Fixed identifier format, not configurable",
                value=params[name]
            ))

        if "max_attempts" in params:
            value = params["max_attempts"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                errors.append(ConfigIssue(
                    field="identifier.max_attempts",
                    message="Must be a positive integer",
                    value=value
                ))

        unknown = set(params) - set(IdentifierParams.__dataclass_fields__) - FIXED_IDENTIFIER_PARAMS
        for name in sorted(unknown):
            errors.append(ConfigIssue(
                field=f"identifier.{name}",
                message="Unknown parameter",
                value=params[name]
            ))

        return errors

    @staticmethod
    def validate_geo_params(params: dict[str, Any]) -> list[ConfigIssue]:
        """Validate geolocation parameters."""
        errors = []

        if "enabled" in params and not isinstance(params["enabled"], bool):
            errors.append(ConfigIssue(
                field="geo.enabled",
                message="Must be a boolean",
                value=params["enabled"]
            ))

        if "database_path" in params:
            value = params["database_path"]
            if not isinstance(value, str) or not value:
                errors.append(ConfigIssue(
                    field="geo.database_path",
                    message="Must be a non-empty path",
                    value=value
                ))

        unknown = set(params) - set(GeoParams.__dataclass_fields__)
        for name in sorted(unknown):
            errors.append(ConfigIssue(
                field=f"geo.{name}",
                message="Unknown parameter",
                value=params[name]
            ))

        return errors

    @staticmethod
    def validate_store_params(params: dict[str, Any]) -> list[ConfigIssue]:
        """Validate persistence parameters."""
        errors = []

        if "database_path" in params:
            value = params["database_path"]
            if not isinstance(value, str) or not value:
                errors.append(ConfigIssue(
                    field="store.database_path",
                    message="Must be a non-empty path",
                    value=value
                ))

        if "max_save_attempts" in params:
            value = params["max_save_attempts"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                errors.append(ConfigIssue(
                    field="store.max_save_attempts",
                    message="Must be a positive integer",
                    value=value
                ))

        if "timeout_seconds" in params:
            value = params["timeout_seconds"]
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
                errors.append(ConfigIssue(
                    field="store.timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        unknown = set(params) - set(StoreParams.__dataclass_fields__)
        for name in sorted(unknown):
            errors.append(ConfigIssue(
                field=f"store.{name}",
                message="Unknown parameter",
                value=params[name]
            ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ConfigIssue]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or not isinstance(
                logging.getLevelName(value.upper()), int
            ):
                errors.append(ConfigIssue(
                    field="logging.level",
                    message="Must be a standard logging level name",
                    value=value
                ))

        if "format_json" in params and not isinstance(params["format_json"], bool):
            errors.append(ConfigIssue(
                field="logging.format_json",
                message="Must be a boolean",
                value=params["format_json"]
            ))

        unknown = set(params) - set(LoggingParams.__dataclass_fields__)
        for name in sorted(unknown):
            errors.append(ConfigIssue(
                field=f"logging.{name}",
                message="Unknown parameter",
                value=params[name]
            ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ConfigIssue]:
        """Validate complete configuration."""
        errors = []

        for section in sorted(set(config) - KNOWN_SECTIONS):
            errors.append(ConfigIssue(
                field=section,
                message="Unknown configuration section",
                value=config[section]
            ))

        section_validators = {
            "identifier": ConfigValidator.validate_identifier_params,
            "geo": ConfigValidator.validate_geo_params,
            "store": ConfigValidator.validate_store_params,
            "logging": ConfigValidator.validate_logging_params,
        }

        for section, validator in section_validators.items():
            if section not in config:
                continue
            params = config[section]
            if not isinstance(params, dict):
                errors.append(ConfigIssue(
                    field=section,
                    message="Must be a mapping",
                    value=params
                ))
                continue
            errors.extend(validator(params))

        return errors
