"""
Build plan data models.

These models represent the resolved parts of a packaging run: the application
identity, SDK constraint, signing identity, optimization flags, the tagged
build variant and the final build plan handed to the packaging toolchain.
"""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator

# Reserved signing config name for the platform-managed debug identity
DEBUG_SIGNING_CONFIG = "debug"

# Well-known values of the keystore the Android SDK generates on first build
AMBIENT_DEBUG_ALIAS = "androiddebugkey"
AMBIENT_DEBUG_PASSWORD = "android"

_APPLICATION_ID_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*(\.[A-Za-z][A-Za-z0-9_]*)+$")


class ApplicationIdentity(BaseModel):
    """Reverse-domain application ID, immutable for a build lineage."""

    value: str = Field(description="Application ID (e.g., com.example.app)")

    model_config = {"frozen": True}

    @field_validator("value")
    @classmethod
    def check_reverse_domain(cls, value: str) -> str:
        if not _APPLICATION_ID_RE.match(value):
            raise ValueError(f"'{value}' is not a reverse-domain application ID")
        return value

    def with_suffix(self, suffix: str | None) -> ApplicationIdentity:
        """Return the identity with a variant suffix appended.

        Args:
            suffix: Suffix such as ".debug"; a missing leading dot is added.

        Returns:
            ApplicationIdentity: The suffixed identity, or self if no suffix.
        """
        if not suffix:
            return self
        if not suffix.startswith("."):
            suffix = f".{suffix}"
        return ApplicationIdentity(value=f"{self.value}{suffix}")

    def __str__(self) -> str:
        return self.value


class SdkVersionConstraint(BaseModel):
    """Platform API levels a build declares compatibility with."""

    min_sdk: int = Field(ge=1, description="Minimum API level")
    target_sdk: int = Field(ge=1, description="Target API level")
    compile_sdk: int = Field(ge=1, description="Compile API level")
    ndk_version: str | None = Field(default=None, description="NDK version, if any")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_order(self) -> SdkVersionConstraint:
        if self.min_sdk > self.target_sdk:
            raise ValueError(
                f"min_sdk ({self.min_sdk}) must not exceed target_sdk ({self.target_sdk})"
            )
        return self


class SigningIdentity(BaseModel):
    """Credential set used to sign a build artifact.

    Credential fields are SecretStr so they never appear in reprs, logs or
    serialized output.
    """

    name: str = Field(description="Signing config name")
    keystore_path: Path = Field(description="Keystore file location")
    store_password: SecretStr = Field(description="Keystore credential")
    key_alias: str = Field(description="Key alias inside the keystore")
    key_password: SecretStr = Field(description="Key credential")
    ambient: bool = Field(default=False, description="Platform-managed debug identity")

    model_config = {"frozen": True}

    @classmethod
    def ambient_debug(cls, keystore_path: Path) -> SigningIdentity:
        """Create the platform-managed debug identity.

        Args:
            keystore_path: Location of the SDK debug keystore. It does not
                need to exist; the toolchain creates it on first use.

        Returns:
            SigningIdentity: The ambient, low-trust debug identity.
        """
        return cls(
            name=DEBUG_SIGNING_CONFIG,
            keystore_path=keystore_path,
            store_password=SecretStr(AMBIENT_DEBUG_PASSWORD),
            key_alias=AMBIENT_DEBUG_ALIAS,
            key_password=SecretStr(AMBIENT_DEBUG_PASSWORD),
            ambient=True,
        )

    @property
    def trust_level(self) -> str:
        """Get the trust level label for display."""
        return "debug" if self.ambient else "release"


class OptimizationFlags(BaseModel):
    """Build-time shrinking flags."""

    shrink_code: bool = Field(default=False, description="Remove unused code (minify)")
    shrink_resources: bool = Field(default=False, description="Remove unused resources")

    model_config = {"frozen": True}


class VariantKind(str, Enum):
    """Tag of a build variant."""

    DEBUG = "debug"
    RELEASE = "release"
    NAMED = "named"

    @classmethod
    def for_name(cls, name: str) -> VariantKind:
        """Classify a variant name."""
        if name == cls.DEBUG.value:
            return cls.DEBUG
        if name == cls.RELEASE.value:
            return cls.RELEASE
        return cls.NAMED


class BuildVariant(BaseModel):
    """A named build configuration with its own signing and optimization settings."""

    name: str = Field(description="Variant name (debug/release/...)")
    kind: VariantKind = Field(description="Variant tag")
    signing_config: str | None = Field(default=None, description="Referenced signing config")
    optimization: OptimizationFlags = Field(
        default_factory=OptimizationFlags, description="Declared flags merged over the default policy"
    )
    debuggable: bool = Field(default=False)
    application_id_suffix: str | None = Field(default=None)

    model_config = {"frozen": True}

    @property
    def is_debug(self) -> bool:
        """Whether this is the debug variant."""
        return self.kind == VariantKind.DEBUG

    @property
    def uses_ambient_signing(self) -> bool:
        """Whether the variant signs with the platform-managed debug identity."""
        return self.signing_config == DEBUG_SIGNING_CONFIG


class BuildPlan(BaseModel):
    """Fully resolved parameters for a single packaging run."""

    application_id: ApplicationIdentity
    namespace: str = Field(description="Code namespace")
    sdk: SdkVersionConstraint
    variant: BuildVariant
    signing_identity: SigningIdentity
    optimization: OptimizationFlags
    version_code: int = Field(ge=1)
    version_name: str
    java_version: int = Field(default=17)
    source_root: str = Field(default="../..", description="Framework source tree, relative")

    model_config = {"frozen": True}

    @property
    def effective_application_id(self) -> ApplicationIdentity:
        """Get the application ID including the variant suffix."""
        return self.application_id.with_suffix(self.variant.application_id_suffix)

    @property
    def summary(self) -> dict[str, str]:
        """Get a display summary with credentials masked."""
        return {
            "Variant": f"{self.variant.name} ({self.variant.kind.value})",
            "Application ID": str(self.effective_application_id),
            "Namespace": self.namespace,
            "Version": f"{self.version_name} ({self.version_code})",
            "Min SDK": str(self.sdk.min_sdk),
            "Target SDK": str(self.sdk.target_sdk),
            "Compile SDK": str(self.sdk.compile_sdk),
            "NDK": self.sdk.ndk_version or "-",
            "Signing": f"{self.signing_identity.name} ({self.signing_identity.trust_level})",
            "Keystore": str(self.signing_identity.keystore_path),
            "Key alias": self.signing_identity.key_alias,
            "Shrink code": str(self.optimization.shrink_code).lower(),
            "Shrink resources": str(self.optimization.shrink_resources).lower(),
        }
