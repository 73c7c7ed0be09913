"""
Custom exception hierarchy for BuildPlanner.

All exceptions inherit from BuildPlannerError to enable consistent error handling
by the invoking toolchain. Configuration errors always carry the offending
variant name and field, never credential values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class BuildPlannerError(Exception):
    """Base exception for all BuildPlanner errors."""

    message: str
    context: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def __str__(self) -> str:
        ctx = f" | context: {self.context}" if self.context else ""
        cause = f" | caused by: {self.cause}" if self.cause else ""
        return f"{self.message}{ctx}{cause}"


@dataclass
class ConfigurationError(BuildPlannerError):
    """Raised when the static build configuration is invalid.

    These errors are fatal to the current packaging run and are never retried:
    they describe misconfiguration that will not resolve itself.
    """

    variant_name: str | None = None
    field_name: str | None = None
    retryable: bool = False

    def __str__(self) -> str:
        base = super().__str__()
        where = []
        if self.variant_name:
            where.append(f"variant '{self.variant_name}'")
        if self.field_name:
            where.append(f"field '{self.field_name}'")
        if where:
            return f"[{', '.join(where)}] {base}"
        return base


@dataclass
class MissingSharedConfigError(ConfigurationError):
    """Raised when the shared framework configuration cannot be located."""

    searched_path: str = ""


@dataclass
class UnknownVariantError(ConfigurationError):
    """Raised when no signing identity is registered for a variant."""

    known_variants: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        base = super().__str__()
        if self.known_variants:
            return f"{base} (known variants: {', '.join(self.known_variants)})"
        return base


@dataclass
class KeystoreNotFoundError(ConfigurationError):
    """Raised when a declared keystore file is absent at resolution time."""

    keystore_path: str = ""


@dataclass
class InvalidSdkRangeError(ConfigurationError):
    """Raised when the minimum SDK level exceeds the target SDK level."""

    min_sdk: int = 0
    target_sdk: int = 0

    def __str__(self) -> str:
        base = super().__str__()
        return f"{base} (minSdk={self.min_sdk} > targetSdk={self.target_sdk})"


@dataclass
class CredentialUnavailableError(ConfigurationError):
    """Raised when no credential source can supply a signing config's secrets."""

    signing_config: str = ""


@dataclass
class DescriptorError(ConfigurationError):
    """Raised when a descriptor or shared config file is malformed."""

    source_path: str = ""
