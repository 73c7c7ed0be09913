"""
Build Plan Resolver Service.

Merges the static descriptor defaults with the requested variant's overrides,
selects the variant's signing identity and validates the result before it is
handed to the packaging toolchain.
"""

from __future__ import annotations

import time
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from ...core.config import Config, get_config
from ...core.exceptions import (
    BuildPlannerError,
    ConfigurationError,
    InvalidSdkRangeError,
    KeystoreNotFoundError,
    MissingSharedConfigError,
    UnknownVariantError,
)
from ...core.logging import bound_context, get_logger
from ...core.types import ServiceResult
from ...credentials import (
    ChainedCredentialProvider,
    Credential,
    CredentialProvider,
    EnvironmentCredentialProvider,
    InlineCredentialProvider,
)
from ...loaders import load_shared_config
from ...models.descriptor import BuildDescriptor
from ...models.plan import (
    DEBUG_SIGNING_CONFIG,
    ApplicationIdentity,
    BuildPlan,
    BuildVariant,
    OptimizationFlags,
    SdkVersionConstraint,
    SigningIdentity,
    VariantKind,
)
from ...models.shared import SharedConfig

logger = get_logger(__name__)


def default_credential_provider(descriptor: BuildDescriptor, config: Config) -> CredentialProvider:
    """Build the standard credential chain for a descriptor.

    Environment variables take precedence; inline descriptor credentials are
    appended when the configuration allows them.

    Args:
        descriptor: Descriptor whose signing configs may carry inline values.
        config: Application configuration.

    Returns:
        The chained provider.
    """
    providers: list[CredentialProvider] = [
        EnvironmentCredentialProvider(prefix=config.signing.credential_env_prefix)
    ]
    if config.signing.allow_inline_credentials:
        inline = {
            name: Credential(
                store_password=spec.store_password,
                key_password=spec.key_password,
            )
            for name, spec in descriptor.signing_configs.items()
            if spec.has_inline_credentials
        }
        if inline:
            providers.append(InlineCredentialProvider(inline))
    return ChainedCredentialProvider(providers)


class BuildPlanResolver:
    """Resolves a variant name and shared configuration into a build plan.

    Resolution is a pure function of its inputs plus a read-only keystore
    existence check, so it is re-run on every packaging invocation and
    keeps no state between calls.
    """

    def __init__(
        self,
        descriptor: BuildDescriptor,
        credentials: CredentialProvider | None = None,
        config: Config | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            descriptor: Static build configuration with variant overrides.
            credentials: Source of signing credentials for explicit identities.
            config: Application configuration; defaults to the cached one.
        """
        self.descriptor = descriptor
        self.config = config or get_config()
        self.credentials = credentials or default_credential_provider(descriptor, self.config)

    @property
    def default_flags(self) -> OptimizationFlags:
        """Flags inherited by variants that do not declare their own."""
        policy = self.config.optimization
        return OptimizationFlags(
            shrink_code=policy.shrink_code,
            shrink_resources=policy.shrink_resources,
        )

    def variant(self, variant_name: str) -> BuildVariant:
        """Get the tagged variant for a name.

        Raises:
            UnknownVariantError: If no build type with that name is declared.
        """
        variant = self.descriptor.variant(variant_name, self.default_flags)
        if variant is None:
            raise UnknownVariantError(
                message="No build type registered for variant",
                variant_name=variant_name,
                field_name="build_types",
                known_variants=self.descriptor.variant_names(),
            )
        return variant

    def _shared_config(
        self, shared_config: SharedConfig | Path | str | None, variant_name: str | None
    ) -> SharedConfig:
        if shared_config is None:
            raise MissingSharedConfigError(
                message="Shared configuration was not supplied",
                variant_name=variant_name,
                field_name="shared_config",
            )
        if isinstance(shared_config, (Path, str)):
            try:
                return load_shared_config(Path(shared_config), self.config.framework)
            except MissingSharedConfigError as e:
                e.variant_name = variant_name
                raise
        if not isinstance(shared_config, SharedConfig):
            raise MissingSharedConfigError(
                message=f"Unsupported shared configuration source: {type(shared_config).__name__}",
                variant_name=variant_name,
                field_name="shared_config",
            )
        return shared_config

    def resolve_sdk_versions(
        self,
        shared_config: SharedConfig | Path | str | None,
        variant_name: str | None = None,
    ) -> SdkVersionConstraint:
        """Read SDK levels from the shared framework configuration.

        Args:
            shared_config: Loaded shared config or the path to load it from.
            variant_name: Variant being planned, for error reporting.

        Returns:
            SdkVersionConstraint: The validated constraint.

        Raises:
            MissingSharedConfigError: If the shared config cannot be located.
            InvalidSdkRangeError: If minSdk exceeds targetSdk.
        """
        shared_config = self._shared_config(shared_config, variant_name)
        min_sdk = shared_config.min_sdk_version
        target_sdk = shared_config.target_sdk_version
        if min_sdk > target_sdk:
            raise InvalidSdkRangeError(
                message="minSdkVersion must not exceed targetSdkVersion",
                variant_name=variant_name,
                field_name="minSdkVersion",
                min_sdk=min_sdk,
                target_sdk=target_sdk,
            )
        if shared_config.compile_sdk_version < target_sdk:
            logger.warning(
                "compileSdkVersion is lower than targetSdkVersion",
                compile_sdk=shared_config.compile_sdk_version,
                target_sdk=target_sdk,
            )

        return SdkVersionConstraint(
            min_sdk=min_sdk,
            target_sdk=target_sdk,
            compile_sdk=shared_config.compile_sdk_version,
            ndk_version=shared_config.ndk_version,
        )

    def resolve_signing_identity(self, variant_name: str) -> SigningIdentity:
        """Look up the signing identity registered for a variant.

        The debug variant resolves to the ambient platform identity. Every
        other variant needs an explicitly declared identity whose keystore
        exists on disk.

        Args:
            variant_name: Variant to resolve.

        Returns:
            SigningIdentity: The variant's identity.

        Raises:
            UnknownVariantError: If no identity is registered for the variant.
            KeystoreNotFoundError: If the declared keystore file is absent.
            CredentialUnavailableError: If no credential source holds the key.
        """
        variant = self.variant(variant_name)
        ref = variant.signing_config
        if ref is None and variant.kind == VariantKind.DEBUG:
            ref = DEBUG_SIGNING_CONFIG

        if ref == DEBUG_SIGNING_CONFIG:
            identity = SigningIdentity.ambient_debug(self.config.signing.debug_keystore)
            logger.debug("Resolved ambient debug identity", variant=variant_name)
            return identity

        if ref is None:
            raise UnknownVariantError(
                message="Variant has no signing identity registered",
                variant_name=variant_name,
                field_name="signing_config",
                known_variants=self.descriptor.variant_names(),
            )

        spec = self.descriptor.signing_configs.get(ref)
        if spec is None:
            raise UnknownVariantError(
                message=f"Signing config '{ref}' is not declared",
                variant_name=variant_name,
                field_name="signing_config",
                known_variants=self.descriptor.variant_names(),
            )

        keystore = self.descriptor.keystore_path(spec)
        if not keystore.is_file():
            raise KeystoreNotFoundError(
                message=f"Keystore not found: {keystore}",
                variant_name=variant_name,
                field_name="store_file",
                keystore_path=str(keystore),
            )

        try:
            credential = self.credentials.fetch(ref)
        except ConfigurationError as e:
            e.variant_name = variant_name
            raise

        logger.debug(
            "Resolved signing identity",
            variant=variant_name,
            signing_config=ref,
            key_alias=spec.key_alias,
            keystore=str(keystore),
        )
        return SigningIdentity(
            name=ref,
            keystore_path=keystore,
            store_password=credential.store_password,
            key_alias=spec.key_alias,
            key_password=credential.key_password,
        )

    def resolve_optimization_flags(self, variant_name: str) -> OptimizationFlags:
        """Get the shrinking flags for a variant.

        Variants that are not declared, or declare no flags, inherit the
        default policy.

        Raises:
            ConfigurationError: If resource shrinking is enabled without code
                shrinking, which the packaging toolchain rejects.
        """
        variant = self.descriptor.variant(variant_name, self.default_flags)
        flags = variant.optimization if variant is not None else self.default_flags

        if flags.shrink_resources and not flags.shrink_code:
            raise ConfigurationError(
                message="Resource shrinking requires code shrinking to be enabled",
                variant_name=variant_name,
                field_name="shrink_resources",
            )
        return flags

    def application_identity(self, variant_name: str | None = None) -> ApplicationIdentity:
        """Validate the descriptor's application ID.

        Raises:
            ConfigurationError: If the ID is not a reverse-domain string.
        """
        try:
            return ApplicationIdentity(value=self.descriptor.application_id)
        except PydanticValidationError as e:
            raise ConfigurationError(
                message=f"Invalid application ID '{self.descriptor.application_id}'",
                variant_name=variant_name,
                field_name="application_id",
            ) from e

    def build_plan(self, variant_name: str, shared_config: SharedConfig | Path | str | None) -> BuildPlan:
        """Resolve a complete build plan.

        Sub-resolutions run in order (SDK versions, signing identity,
        optimization flags) and the first failure propagates; no partial
        plan is ever returned.

        Args:
            variant_name: Variant to plan.
            shared_config: Shared framework configuration or its path.

        Returns:
            BuildPlan: The resolved plan.
        """
        with bound_context(variant=variant_name):
            shared_config = self._shared_config(shared_config, variant_name)
            sdk = self.resolve_sdk_versions(shared_config, variant_name)
            identity = self.resolve_signing_identity(variant_name)
            flags = self.resolve_optimization_flags(variant_name)
            application_id = self.application_identity(variant_name)

            plan = BuildPlan(
                application_id=application_id,
                namespace=self.descriptor.namespace,
                sdk=sdk,
                variant=self.variant(variant_name),
                signing_identity=identity,
                optimization=flags,
                version_code=shared_config.version_code,
                version_name=shared_config.version_name,
                java_version=self.descriptor.java_version,
                source_root=str(shared_config.source_root),
            )
            logger.info(
                "Build plan resolved",
                application_id=str(plan.effective_application_id),
                min_sdk=sdk.min_sdk,
                target_sdk=sdk.target_sdk,
                signing=identity.name,
                shrink_code=flags.shrink_code,
                shrink_resources=flags.shrink_resources,
            )
            return plan

    def plan(self, variant_name: str, shared_config: SharedConfig | Path | str | None) -> ServiceResult[BuildPlan]:
        """Resolve a build plan without raising.

        Returns:
            ServiceResult wrapping the plan, or the configuration error text.
        """
        start = time.perf_counter()
        try:
            plan = self.build_plan(variant_name, shared_config)
        except BuildPlannerError as e:
            logger.error("Build plan resolution failed", error_type=type(e).__name__, error=str(e))
            return ServiceResult.fail(str(e), error_type=type(e).__name__, variant=variant_name)

        result = ServiceResult.ok(plan, variant=variant_name)
        if plan.variant.kind != VariantKind.DEBUG and not plan.optimization.shrink_code:
            result.warnings.append(f"Variant '{variant_name}' is packaged without code shrinking")
        result.duration_ms = (time.perf_counter() - start) * 1000
        return result
