"""
Credential provider implementations.

Environment variables are the preferred source. Inline descriptor credentials
are supported for internal distribution only and log a warning when used.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping, Sequence

from pydantic import SecretStr

from ..core.exceptions import CredentialUnavailableError
from ..core.logging import get_logger
from .interface import Credential, CredentialProvider

logger = get_logger(__name__)


def env_key(prefix: str, signing_config: str, field: str) -> str:
    """Build the environment variable name for a signing config credential.

    Args:
        prefix: Variable prefix (e.g., BUILDPLANNER).
        signing_config: Signing config name; non-alphanumerics become underscores.
        field: STORE_PASSWORD or KEY_PASSWORD.

    Returns:
        The variable name, e.g. ``BUILDPLANNER_RELEASE_STORE_PASSWORD``.
    """
    normalized = re.sub(r"[^A-Za-z0-9]", "_", signing_config).upper()
    return f"{prefix}_{normalized}_{field}"


class EnvironmentCredentialProvider(CredentialProvider):
    """Reads credentials from environment variables."""

    def __init__(self, prefix: str = "BUILDPLANNER", environ: Mapping[str, str] | None = None) -> None:
        """Initialize the provider.

        Args:
            prefix: Variable prefix.
            environ: Mapping to read from; defaults to ``os.environ``.
        """
        self.prefix = prefix
        self._environ = environ if environ is not None else os.environ

    @property
    def name(self) -> str:
        return "environment"

    def _lookup(self, signing_config: str) -> tuple[str | None, str | None]:
        store = self._environ.get(env_key(self.prefix, signing_config, "STORE_PASSWORD"))
        key = self._environ.get(env_key(self.prefix, signing_config, "KEY_PASSWORD"))
        return store or None, key or None

    def has(self, signing_config: str) -> bool:
        store, key = self._lookup(signing_config)
        return store is not None and key is not None

    def fetch(self, signing_config: str) -> Credential:
        store, key = self._lookup(signing_config)
        if store is None or key is None:
            field = "STORE_PASSWORD" if store is None else "KEY_PASSWORD"
            raise CredentialUnavailableError(
                message=f"Environment variable '{env_key(self.prefix, signing_config, field)}' is not set",
                field_name=field.lower(),
                signing_config=signing_config,
            )
        return Credential(store_password=SecretStr(store), key_password=SecretStr(key))


class InlineCredentialProvider(CredentialProvider):
    """Serves credentials embedded in the build descriptor.

    Plaintext credentials in configuration are only acceptable when the
    repository itself is the trust boundary.
    """

    def __init__(self, credentials: Mapping[str, Credential]) -> None:
        """Initialize the provider.

        Args:
            credentials: Credentials keyed by signing config name.
        """
        self._credentials = dict(credentials)
        self._warned: set[str] = set()

    @property
    def name(self) -> str:
        return "inline"

    def has(self, signing_config: str) -> bool:
        return signing_config in self._credentials

    def fetch(self, signing_config: str) -> Credential:
        credential = self._credentials.get(signing_config)
        if credential is None:
            raise CredentialUnavailableError(
                message="No inline credentials declared",
                field_name="store_password",
                signing_config=signing_config,
            )
        if signing_config not in self._warned:
            logger.warning(
                "Using plaintext credentials embedded in the build descriptor",
                signing_config=signing_config,
            )
            self._warned.add(signing_config)
        return credential


class ChainedCredentialProvider(CredentialProvider):
    """Tries providers in order; the first one holding the signing config wins."""

    def __init__(self, providers: Sequence[CredentialProvider]) -> None:
        self.providers = list(providers)

    @property
    def name(self) -> str:
        return "+".join(p.name for p in self.providers) or "empty"

    def has(self, signing_config: str) -> bool:
        return any(p.has(signing_config) for p in self.providers)

    def fetch(self, signing_config: str) -> Credential:
        for provider in self.providers:
            if provider.has(signing_config):
                logger.debug(
                    "Credential source selected",
                    signing_config=signing_config,
                    provider=provider.name,
                )
                return provider.fetch(signing_config)
        raise CredentialUnavailableError(
            message=f"No credential source ({self.name}) can supply the key",
            field_name="store_password",
            signing_config=signing_config,
        )
