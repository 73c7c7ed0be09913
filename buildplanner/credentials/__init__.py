"""Signing credential sources for BuildPlanner."""

from .interface import Credential, CredentialProvider
from .providers import (
    ChainedCredentialProvider,
    EnvironmentCredentialProvider,
    InlineCredentialProvider,
    env_key,
)

__all__ = [
    "Credential",
    "CredentialProvider",
    "ChainedCredentialProvider",
    "EnvironmentCredentialProvider",
    "InlineCredentialProvider",
    "env_key",
]
