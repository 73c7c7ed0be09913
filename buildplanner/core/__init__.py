"""Core infrastructure components for BuildPlanner."""

from .config import Config, get_config
from .exceptions import (
    BuildPlannerError,
    ConfigurationError,
    CredentialUnavailableError,
    DescriptorError,
    InvalidSdkRangeError,
    KeystoreNotFoundError,
    MissingSharedConfigError,
    UnknownVariantError,
)
from .logging import get_logger, setup_logging
from .types import KeystorePath, ServiceResult, VariantName

__all__ = [
    "Config",
    "get_config",
    "BuildPlannerError",
    "ConfigurationError",
    "CredentialUnavailableError",
    "DescriptorError",
    "InvalidSdkRangeError",
    "KeystoreNotFoundError",
    "MissingSharedConfigError",
    "UnknownVariantError",
    "get_logger",
    "setup_logging",
    "KeystorePath",
    "ServiceResult",
    "VariantName",
]
