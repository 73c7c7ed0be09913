"""
Credential provider interface.

The resolver depends on the ``fetch`` capability rather than on literal
credential values, so secret sourcing can be swapped without touching
resolution logic. Credentials are keyed by signing config name: key aliases
are only unique within one keystore and commonly repeat across keystores.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field, SecretStr


class Credential(BaseModel):
    """Keystore and key secrets for a single signing config."""

    store_password: SecretStr = Field(description="Keystore credential")
    key_password: SecretStr = Field(description="Key credential")

    model_config = {"frozen": True}


class CredentialProvider(ABC):
    """Abstract source of signing credentials."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short provider name used in logs and errors."""
        ...

    @abstractmethod
    def fetch(self, signing_config: str) -> Credential:
        """Fetch the credentials for a signing config.

        Args:
            signing_config: Name of the declared signing config.

        Returns:
            The credential pair.

        Raises:
            CredentialUnavailableError: If this provider has no credentials
                for the signing config.
        """
        ...

    @abstractmethod
    def has(self, signing_config: str) -> bool:
        """Check whether credentials for a signing config are available.

        Args:
            signing_config: Signing config name to check.

        Returns:
            True if ``fetch`` would succeed.
        """
        ...
