"""Application configuration for abac-core.

Defines configuration models for the action set, the entitlement file
and logging. Integrators with their own policy store construct
AccessControl directly; this module covers the file-backed setup.

Example usage:
    config = AccessControlConfig.load_from_file(config_path)
    access = build_access_control(config)
"""

from __future__ import annotations

__all__ = [
    "AccessControlConfig",
    "LoggingConfig",
    "build_access_control",
]

import logging
from pathlib import Path
from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

from abac_core.pdp.access_control import AccessControl
from abac_core.pdp.source import EntitlementPolicySource
from abac_core.telemetry.diagnostics import LoggingDiagnostics
from abac_core.telemetry.system.system_logger import configure_system_logger_file, get_system_logger
from abac_core.utils.file_helpers import load_validated_json, write_json_atomic
from abac_core.utils.policy.entitlement_helpers import get_entitlements_path, load_entitlements


class LoggingConfig(BaseModel):
    """Logging configuration settings.

    Attributes:
        log_file: JSONL file for diagnostics. None logs to stderr only.
        log_level: Minimum level written to log_file. DEBUG also records
            entitlement loading.
    """

    log_file: str | None = Field(default=None, min_length=1)
    log_level: Literal["DEBUG", "INFO", "WARNING"] = "WARNING"

    model_config = ConfigDict(frozen=True)


class AccessControlConfig(BaseModel):
    """Complete configuration for a file-backed AccessControl.

    Attributes:
        actions: Action names, unique, in checker order.
        entitlements_path: entitlements.json location. None uses the
            OS-appropriate config directory.
        logging: Logging settings.
    """

    actions: list[str] = Field(min_length=1)
    entitlements_path: str | None = Field(default=None, min_length=1)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(frozen=True)

    @field_validator("actions", mode="after")
    @classmethod
    def validate_actions(cls, v: list[str]) -> list[str]:
        """Reject blank and duplicate action names."""
        for action in v:
            if not action.strip():
                raise ValueError("Action names cannot be empty or whitespace-only")
        if len(v) != len(set(v)):
            duplicates = sorted({a for a in v if v.count(a) > 1})
            raise ValueError(f"Duplicate actions: {duplicates}")
        return v

    @classmethod
    def load_from_file(cls, path: Path) -> Self:
        """Load and validate configuration from a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is invalid.
        """
        return load_validated_json(
            path,
            cls,
            file_type="configuration",
            recovery_hint="Edit the configuration file to fix the errors.",
        )

    def save_to_file(self, path: Path) -> None:
        """Write configuration to a JSON file atomically."""
        write_json_atomic(self.model_dump(mode="json"), path)

    def resolved_entitlements_path(self) -> Path:
        """Entitlements location with ~ expanded (default if unset)."""
        if self.entitlements_path is None:
            return get_entitlements_path()
        return Path(self.entitlements_path).expanduser()


def build_access_control(config: AccessControlConfig) -> AccessControl:
    """Wire config, entitlement file, logging and diagnostics together.

    Args:
        config: Validated configuration.

    Returns:
        AccessControl backed by an EntitlementPolicySource.

    Raises:
        FileNotFoundError: If the entitlements file does not exist.
        ValueError: If the entitlements file is invalid.
        ConfigurationError: If the action set is invalid.
    """
    if config.logging.log_file is not None:
        configure_system_logger_file(
            Path(config.logging.log_file).expanduser(),
            level=getattr(logging, config.logging.log_level),
        )

    source = EntitlementPolicySource(load_entitlements(config.resolved_entitlements_path()))
    return AccessControl(
        config.actions,
        source,
        diagnostics=LoggingDiagnostics(get_system_logger()),
    )
