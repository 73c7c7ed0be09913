"""Unit tests for descriptor and shared configuration loaders."""

import json

import pytest

from buildplanner.core.config import FrameworkDefaults
from buildplanner.core.exceptions import DescriptorError, MissingSharedConfigError
from buildplanner.loaders import load_descriptor, load_shared_config, parse_properties
from buildplanner.models import VariantKind


class TestParseProperties:
    """Tests for .properties parsing."""

    def test_basic_pairs_and_comments(self):
        props = parse_properties(
            "# generated\n"
            "! also a comment\n"
            "flutter.versionCode=3\n"
            "flutter.versionName : 1.0.0\n"
            "\n"
            "empty=\n"
        )
        assert props == {
            "flutter.versionCode": "3",
            "flutter.versionName": "1.0.0",
            "empty": "",
        }

    def test_windows_escapes(self):
        props = parse_properties("sdk.dir=C\\:\\\\Users\\\\dev\\\\sdk\n")
        assert props["sdk.dir"] == "C:\\Users\\dev\\sdk"

    def test_escaped_separator_in_key(self):
        props = parse_properties("a\\=b=c\n")
        assert props == {"a=b": "c"}

    def test_whitespace_separator(self):
        props = parse_properties("flutter.versionCode 12\nflutter.versionName\t=  3.1.0\n")
        assert props == {"flutter.versionCode": "12", "flutter.versionName": "3.1.0"}

    def test_line_continuation(self):
        props = parse_properties(
            "sdk.dir=/opt/\\\n"
            "    android/\\\n"
            "    sdk\n"
            "flutter.versionName=1.0\n"
        )
        assert props == {"sdk.dir": "/opt/android/sdk", "flutter.versionName": "1.0"}

    def test_escaped_trailing_backslash_is_not_continuation(self):
        props = parse_properties("dir=C\\:\\\\\nnext=1\n")
        assert props == {"dir": "C:\\", "next": "1"}


class TestLoadSharedConfig:
    """Tests for shared configuration loading."""

    def test_local_properties(self, local_properties):
        """Test loading a framework-generated local.properties.

        Verifies that declared values are read and the framework defaults
        fill in missing SDK levels.
        """
        defaults = FrameworkDefaults(compile_sdk_version=34, target_sdk_version=34)
        config = load_shared_config(local_properties, defaults)

        assert config.version_code == 42
        assert config.version_name == "2.0.1"
        assert config.min_sdk_version == 23
        assert config.target_sdk_version == 34
        assert config.compile_sdk_version == 34
        assert str(config.sdk_path) == "/opt/flutter"
        assert config.origin == local_properties

    def test_json_export(self, temp_dir):
        path = temp_dir / "shared.json"
        path.write_text(
            json.dumps(
                {
                    "compileSdkVersion": 35,
                    "minSdkVersion": 24,
                    "targetSdkVersion": 35,
                    "versionCode": 9,
                    "versionName": "3.1.4",
                    "ndkVersion": "27.0.12077973",
                    "source": "../..",
                }
            ),
            encoding="utf-8",
        )
        config = load_shared_config(path)

        assert config.min_sdk_version == 24
        assert config.ndk_version == "27.0.12077973"
        assert config.version_name == "3.1.4"

    def test_defaults_only(self, temp_dir):
        path = temp_dir / "local.properties"
        path.write_text("flutter.sdk=/opt/flutter\n", encoding="utf-8")
        config = load_shared_config(path)

        assert config.version_code == 1
        assert config.version_name == "1.0"
        assert config.min_sdk_version == 21

    def test_missing_file(self, temp_dir):
        with pytest.raises(MissingSharedConfigError) as exc_info:
            load_shared_config(temp_dir / "local.properties")
        assert exc_info.value.searched_path.endswith("local.properties")

    def test_non_integer_value(self, temp_dir):
        path = temp_dir / "local.properties"
        path.write_text("flutter.minSdkVersion=flutter.minSdkVersion\n", encoding="utf-8")

        with pytest.raises(DescriptorError) as exc_info:
            load_shared_config(path)
        assert exc_info.value.field_name == "minSdkVersion"

    def test_invalid_json(self, temp_dir):
        path = temp_dir / "shared.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(DescriptorError):
            load_shared_config(path)


class TestLoadDescriptor:
    """Tests for build descriptor loading."""

    def test_load(self, temp_dir):
        """Test loading a JSON descriptor.

        Verifies build types become tagged variants and relative keystore
        paths resolve against the descriptor directory.
        """
        path = temp_dir / "app" / "buildplan.json"
        path.parent.mkdir()
        path.write_text(
            json.dumps(
                {
                    "namespace": "com.example.app",
                    "application_id": "com.example.app",
                    "signing_configs": {
                        "release": {"store_file": "keys/release.jks", "key_alias": "upload"},
                    },
                    "build_types": {
                        "debug": {"signing_config": "debug"},
                        "release": {
                            "signing_config": "release",
                            "minify_enabled": False,
                            "shrink_resources": False,
                        },
                        "staging": {"signing_config": "release", "application_id_suffix": ".staging"},
                    },
                }
            ),
            encoding="utf-8",
        )
        descriptor = load_descriptor(path)

        assert descriptor.variant_names() == ["debug", "release", "staging"]
        assert descriptor.variant("staging").kind == VariantKind.NAMED
        assert descriptor.variant("release").kind == VariantKind.RELEASE
        spec = descriptor.signing_configs["release"]
        assert descriptor.keystore_path(spec) == path.resolve().parent / "keys" / "release.jks"

    def test_missing(self, temp_dir):
        with pytest.raises(DescriptorError) as exc_info:
            load_descriptor(temp_dir / "buildplan.json")
        assert exc_info.value.field_name == "descriptor"

    def test_malformed(self, temp_dir):
        path = temp_dir / "buildplan.json"
        path.write_text(json.dumps({"namespace": "com.example.app"}), encoding="utf-8")

        with pytest.raises(DescriptorError) as exc_info:
            load_descriptor(path)
        assert exc_info.value.field_name == "application_id"
