"""
Gradle Render Service.

Renders a resolved build plan as the Kotlin DSL app-module build script the
packaging toolchain consumes. Credentials are emitted as environment lookups,
never as literal values.
"""

from __future__ import annotations

import json
from pathlib import Path

from ...core.logging import get_logger
from ...credentials import env_key
from ...models.descriptor import DEFAULT_PLUGINS
from ...models.plan import BuildPlan

logger = get_logger(__name__)


def _kt_string(value: str) -> str:
    # JSON escapes are valid Kotlin escapes; "$" would otherwise start a template
    return json.dumps(value).replace("$", "\\$")


def _kt_path(path: Path) -> str:
    # Gradle accepts forward slashes on every host
    return _kt_string(str(path).replace("\\", "/"))


def _kt_bool(value: bool) -> str:
    return "true" if value else "false"


class GradleRenderer:
    """Renders build plans to ``build.gradle.kts`` content."""

    def __init__(self, credential_env_prefix: str = "BUILDPLANNER", plugins: list[str] | None = None) -> None:
        """Initialize the renderer.

        Args:
            credential_env_prefix: Prefix of the credential environment variables
                the rendered script reads.
            plugins: Plugin ids in application order.
        """
        self.credential_env_prefix = credential_env_prefix
        self.plugins = plugins or list(DEFAULT_PLUGINS)

    def _plugins_block(self) -> str:
        lines = "\n".join(f'    id("{p}")' for p in self.plugins)
        return f"plugins {{\n{lines}\n}}\n"

    def _signing_block(self, plan: BuildPlan) -> str:
        identity = plan.signing_identity
        if identity.ambient:
            return ""
        store_env = env_key(self.credential_env_prefix, identity.name, "STORE_PASSWORD")
        key_env = env_key(self.credential_env_prefix, identity.name, "KEY_PASSWORD")
        return f'''
    signingConfigs {{
        create({_kt_string(identity.name)}) {{
            storeFile = file({_kt_path(identity.keystore_path)})
            storePassword = System.getenv("{store_env}")
            keyAlias = {_kt_string(identity.key_alias)}
            keyPassword = System.getenv("{key_env}")
        }}
    }}
'''

    def _build_type_block(self, plan: BuildPlan) -> str:
        variant = plan.variant
        lines = [f'signingConfig = signingConfigs.getByName({_kt_string(plan.signing_identity.name)})']
        if variant.application_id_suffix:
            lines.append(f"applicationIdSuffix = {_kt_string(variant.application_id_suffix)}")
        if variant.debuggable and not variant.is_debug:
            lines.append("isDebuggable = true")
        lines.append(f"isMinifyEnabled = {_kt_bool(plan.optimization.shrink_code)}")
        lines.append(f"isShrinkResources = {_kt_bool(plan.optimization.shrink_resources)}")
        body = "\n".join(f"            {line}" for line in lines)
        opener = variant.name if variant.name in ("debug", "release") else f"create({_kt_string(variant.name)})"
        return f"""
    buildTypes {{
        {opener} {{
{body}
        }}
    }}
"""

    def render(self, plan: BuildPlan) -> str:
        """Render the app-module build script for a plan.

        Args:
            plan: Resolved build plan.

        Returns:
            str: Kotlin DSL build script content.
        """
        sdk = plan.sdk
        ndk_line = f"\n    ndkVersion = {_kt_string(sdk.ndk_version)}" if sdk.ndk_version else ""
        java = f"JavaVersion.VERSION_{plan.java_version}"

        content = f"""{self._plugins_block()}
android {{
    namespace = {_kt_string(plan.namespace)}
    compileSdk = {sdk.compile_sdk}{ndk_line}

    compileOptions {{
        sourceCompatibility = {java}
        targetCompatibility = {java}
    }}

    kotlinOptions {{
        jvmTarget = {java}.toString()
    }}
{self._signing_block(plan)}
    defaultConfig {{
        applicationId = {_kt_string(str(plan.application_id))}
        minSdk = {sdk.min_sdk}
        targetSdk = {sdk.target_sdk}
        versionCode = {plan.version_code}
        versionName = {_kt_string(plan.version_name)}
    }}
{self._build_type_block(plan)}}}

flutter {{
    source = {_kt_string(plan.source_root)}
}}
"""
        logger.debug("Rendered build script", variant=plan.variant.name, length=len(content))
        return content

    def write(self, plan: BuildPlan, path: Path) -> Path:
        """Render a plan and write it to a file.

        Args:
            plan: Resolved build plan.
            path: Destination file.

        Returns:
            The written path.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(plan), encoding="utf-8")
        logger.info("Wrote build script", path=str(path), variant=plan.variant.name)
        return path
