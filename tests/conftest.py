"""Test configuration for BuildPlanner."""

import tempfile
from pathlib import Path

import pytest
from pydantic import SecretStr

from buildplanner.core.config import Config, SigningConfig
from buildplanner.core.exceptions import CredentialUnavailableError
from buildplanner.credentials import Credential, CredentialProvider
from buildplanner.models import BuildDescriptor, SharedConfig


class FakeCredentialProvider(CredentialProvider):
    """In-memory credential provider that records every fetch."""

    def __init__(self, credentials=None):
        self.credentials = dict(credentials or {})
        self.fetched = []

    @property
    def name(self):
        return "fake"

    def has(self, signing_config):
        return signing_config in self.credentials

    def fetch(self, signing_config):
        self.fetched.append(signing_config)
        if signing_config not in self.credentials:
            raise CredentialUnavailableError(
                message="No fake credentials",
                field_name="store_password",
                signing_config=signing_config,
            )
        return self.credentials[signing_config]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests.

    Yields:
        Path: A Path object pointing to the temporary directory.
            The directory is automatically cleaned up after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config(temp_dir):
    """Create a configuration isolated from the developer's environment.

    Returns:
        Config: Configuration whose debug keystore lives in the temp dir.
    """
    return Config(
        signing=SigningConfig(
            debug_keystore=temp_dir / ".android" / "debug.keystore",
            credential_env_prefix="BUILDPLANNER_TEST",
        ),
    )


@pytest.fixture
def shared_config():
    """Create a valid shared framework configuration.

    Returns:
        SharedConfig: minSdk 21, targetSdk 34, compileSdk 34.
    """
    return SharedConfig(
        compile_sdk_version=34,
        min_sdk_version=21,
        target_sdk_version=34,
        version_code=7,
        version_name="1.2.0",
        ndk_version="26.1.10909125",
    )


@pytest.fixture
def descriptor(temp_dir):
    """Create the stock debug/release descriptor rooted at the temp dir.

    Returns:
        BuildDescriptor: Descriptor whose release keystore path resolves
            to ``temp_dir / "release-keystore.jks"``.
    """
    return BuildDescriptor.default("com.yyh.antitools", base_dir=temp_dir)


@pytest.fixture
def release_keystore(temp_dir):
    """Create the release keystore file the stock descriptor expects.

    Returns:
        Path: The keystore path.
    """
    path = temp_dir / "release-keystore.jks"
    path.write_bytes(b"\xfe\xed\xfe\xed\x00\x00\x00\x02")
    return path


@pytest.fixture
def release_credential():
    """Credentials for the ``release`` signing config."""
    return Credential(
        store_password=SecretStr("store-secret-123"),
        key_password=SecretStr("key-secret-456"),
    )


@pytest.fixture
def credentials(release_credential):
    """Fake provider holding the ``release`` signing config."""
    return FakeCredentialProvider({"release": release_credential})


@pytest.fixture
def local_properties(temp_dir):
    """Write a framework-generated local.properties file.

    Returns:
        Path: The properties file path.
    """
    path = temp_dir / "local.properties"
    path.write_text(
        "sdk.dir=C\\:\\\\Android\\\\sdk\n"
        "flutter.sdk=/opt/flutter\n"
        "flutter.buildMode=release\n"
        "flutter.versionName=2.0.1\n"
        "flutter.versionCode=42\n"
        "flutter.minSdkVersion=23\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def make_provider():
    """Factory for fake credential providers."""
    return FakeCredentialProvider
