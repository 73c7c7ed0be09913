"""Unit tests for core models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from buildplanner.models import (
    ApplicationIdentity,
    BuildDescriptor,
    BuildTypeSpec,
    OptimizationFlags,
    SdkVersionConstraint,
    SharedConfig,
    SigningIdentity,
    VariantKind,
)


class TestApplicationIdentity:
    """Tests for application identity."""

    @pytest.mark.parametrize("value", ["com.example.app", "com.yyh.antitools", "io.a_b.c9"])
    def test_valid(self, value):
        assert str(ApplicationIdentity(value=value)) == value

    @pytest.mark.parametrize("value", ["app", "com..app", "1com.app", "com.example-app", ""])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            ApplicationIdentity(value=value)

    def test_with_suffix(self):
        identity = ApplicationIdentity(value="com.example.app")
        assert str(identity.with_suffix(".debug")) == "com.example.app.debug"
        assert str(identity.with_suffix("qa")) == "com.example.app.qa"
        assert identity.with_suffix(None) is identity

    def test_immutable(self):
        identity = ApplicationIdentity(value="com.example.app")
        with pytest.raises(ValidationError):
            identity.value = "com.other.app"


class TestSdkVersionConstraint:
    """Tests for the SDK constraint invariant."""

    def test_rejects_inverted_range(self):
        with pytest.raises(ValidationError):
            SdkVersionConstraint(min_sdk=34, target_sdk=21, compile_sdk=34)

    def test_equal_bounds(self):
        sdk = SdkVersionConstraint(min_sdk=21, target_sdk=21, compile_sdk=21)
        assert sdk.min_sdk == sdk.target_sdk


class TestSigningIdentity:
    """Tests for signing identities."""

    def test_ambient_debug(self):
        identity = SigningIdentity.ambient_debug(Path("/home/dev/.android/debug.keystore"))
        assert identity.ambient
        assert identity.name == "debug"
        assert identity.key_alias == "androiddebugkey"
        assert identity.trust_level == "debug"

    def test_secrets_masked(self):
        identity = SigningIdentity.ambient_debug(Path("debug.keystore"))
        assert "android'" not in repr(identity)
        assert '"android"' not in identity.model_dump_json()


class TestVariants:
    """Tests for the tagged variant type."""

    @pytest.mark.parametrize(
        "name,kind",
        [("debug", VariantKind.DEBUG), ("release", VariantKind.RELEASE), ("profile", VariantKind.NAMED)],
    )
    def test_kind_for_name(self, name, kind):
        assert VariantKind.for_name(name) == kind

    def test_default_descriptor(self):
        """Test the stock debug/release layout.

        Verifies debug uses the platform identity and release references the
        release keystore with shrinking explicitly off.
        """
        descriptor = BuildDescriptor.default("com.example.app")
        debug = descriptor.variant("debug")
        release = descriptor.variant("release")

        assert debug.uses_ambient_signing
        assert debug.debuggable
        assert release.signing_config == "release"
        assert not release.debuggable
        assert release.optimization == OptimizationFlags(shrink_code=False, shrink_resources=False)
        assert descriptor.signing_configs["release"].store_file == Path("release-keystore.jks")
        assert descriptor.plugins[-1] == "dev.flutter.flutter-gradle-plugin"

    def test_variant_inherits_defaults(self):
        descriptor = BuildDescriptor(
            namespace="com.example.app",
            application_id="com.example.app",
            build_types={"profile": BuildTypeSpec(signing_config="debug", shrink_resources=False)},
        )
        variant = descriptor.variant("profile", OptimizationFlags(shrink_code=True, shrink_resources=True))
        assert variant.optimization == OptimizationFlags(shrink_code=True, shrink_resources=False)

    def test_unknown_variant(self):
        assert BuildDescriptor.default("com.example.app").variant("staging") is None

    def test_keystore_path_absolute(self, temp_dir):
        descriptor = BuildDescriptor.default("com.example.app", base_dir=temp_dir)
        spec = descriptor.signing_configs["release"]
        assert descriptor.keystore_path(spec) == temp_dir / "release-keystore.jks"

        spec = spec.model_copy(update={"store_file": temp_dir / "abs.jks"})
        assert descriptor.keystore_path(spec) == temp_dir / "abs.jks"


class TestSharedConfig:
    """Tests for the shared framework configuration model."""

    def test_camel_case_aliases(self):
        config = SharedConfig.model_validate(
            {
                "compileSdkVersion": 34,
                "minSdkVersion": 21,
                "targetSdkVersion": 34,
                "versionCode": 1,
                "versionName": "1.0",
            }
        )
        assert config.compile_sdk_version == 34
        assert config.source_root == Path("../..")

    def test_rejects_zero_version_code(self):
        with pytest.raises(ValidationError):
            SharedConfig(
                compile_sdk_version=34,
                min_sdk_version=21,
                target_sdk_version=34,
                version_code=0,
                version_name="1.0",
            )
