"""
Build descriptor data models.

The descriptor is the static default configuration of the Android app module:
namespace, application ID, signing configurations and the named build types
that override the defaults.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, SecretStr

from .plan import DEBUG_SIGNING_CONFIG, BuildVariant, OptimizationFlags, VariantKind

DEFAULT_PLUGINS = [
    "com.android.application",
    "kotlin-android",
    # The framework plugin must be applied after the Android and Kotlin plugins
    "dev.flutter.flutter-gradle-plugin",
]


class SigningConfigSpec(BaseModel):
    """A declared, explicit signing configuration."""

    store_file: Path = Field(description="Keystore path, relative to the descriptor")
    key_alias: str = Field(description="Key alias")
    store_password: SecretStr | None = Field(
        default=None, description="Inline keystore credential (discouraged)"
    )
    key_password: SecretStr | None = Field(
        default=None, description="Inline key credential (discouraged)"
    )

    @property
    def has_inline_credentials(self) -> bool:
        """Whether both credentials are embedded in the descriptor."""
        return self.store_password is not None and self.key_password is not None


class BuildTypeSpec(BaseModel):
    """Per-variant overrides; unset fields fall back to defaults."""

    signing_config: str | None = Field(default=None, description="Signing config name")
    minify_enabled: bool | None = Field(default=None, description="Code shrinking")
    shrink_resources: bool | None = Field(default=None, description="Resource shrinking")
    debuggable: bool | None = Field(default=None)
    application_id_suffix: str | None = Field(default=None)

    @property
    def declares_optimization(self) -> bool:
        """Whether any optimization flag is explicitly set."""
        return self.minify_enabled is not None or self.shrink_resources is not None


class BuildDescriptor(BaseModel):
    """Static build configuration plus named build-type overrides."""

    namespace: str = Field(description="Code namespace")
    application_id: str = Field(description="Reverse-domain application ID")
    java_version: int = Field(default=17, ge=8, description="Source/target compatibility and JVM target")
    plugins: list[str] = Field(default_factory=lambda: list(DEFAULT_PLUGINS))
    source_root: str = Field(default="../..", description="Framework source tree, relative")
    signing_configs: dict[str, SigningConfigSpec] = Field(default_factory=dict)
    build_types: dict[str, BuildTypeSpec] = Field(default_factory=dict)
    base_dir: Path | None = Field(
        default=None, exclude=True, description="Directory relative paths resolve against"
    )

    model_config = {"extra": "ignore"}

    @classmethod
    def default(cls, application_id: str, base_dir: Path | None = None) -> BuildDescriptor:
        """Create the stock two-variant descriptor.

        Debug signs with the platform debug identity. Release signs with the
        ``release`` keystore and keeps shrinking explicitly disabled.

        Args:
            application_id: Application ID, also used as namespace.
            base_dir: Directory the release keystore path resolves against.

        Returns:
            BuildDescriptor: The default descriptor.
        """
        return cls(
            namespace=application_id,
            application_id=application_id,
            signing_configs={
                "release": SigningConfigSpec(
                    store_file=Path("release-keystore.jks"),
                    key_alias="release",
                ),
            },
            build_types={
                "debug": BuildTypeSpec(signing_config=DEBUG_SIGNING_CONFIG, debuggable=True),
                "release": BuildTypeSpec(
                    signing_config="release",
                    minify_enabled=False,
                    shrink_resources=False,
                ),
            },
            base_dir=base_dir,
        )

    def variant_names(self) -> list[str]:
        """List declared build type names in declaration order."""
        return list(self.build_types)

    def variant(self, name: str, defaults: OptimizationFlags | None = None) -> BuildVariant | None:
        """Get the tagged variant for a build type name.

        Args:
            name: Build type name.
            defaults: Flags inherited where the build type leaves them unset.

        Returns:
            The variant, or None if no build type with that name is declared.
        """
        spec = self.build_types.get(name)
        if spec is None:
            return None
        kind = VariantKind.for_name(name)
        defaults = defaults or OptimizationFlags()
        optimization = OptimizationFlags(
            shrink_code=defaults.shrink_code if spec.minify_enabled is None else spec.minify_enabled,
            shrink_resources=(
                defaults.shrink_resources if spec.shrink_resources is None else spec.shrink_resources
            ),
        )
        return BuildVariant(
            name=name,
            kind=kind,
            signing_config=spec.signing_config,
            optimization=optimization,
            debuggable=spec.debuggable if spec.debuggable is not None else kind == VariantKind.DEBUG,
            application_id_suffix=spec.application_id_suffix,
        )

    def variants(self, defaults: OptimizationFlags | None = None) -> list[BuildVariant]:
        """Get all declared variants."""
        return [v for v in (self.variant(n, defaults) for n in self.build_types) if v is not None]

    def keystore_path(self, spec: SigningConfigSpec) -> Path:
        """Resolve a signing config's keystore path against the base directory."""
        path = spec.store_file.expanduser()
        if not path.is_absolute() and self.base_dir is not None:
            path = self.base_dir / path
        return path
