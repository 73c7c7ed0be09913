"""
Configuration management for BuildPlanner.

Provides centralized, type-safe configuration with environment variable overrides
and sensible defaults for descriptor lookup, framework defaults, credential
sourcing and the optimization policy.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load .env file if it exists (looks in cwd and parent directories)
load_dotenv()


class FrameworkDefaults(BaseModel):
    """Values the cross-platform framework supplies when the project omits them."""

    compile_sdk_version: int = Field(default=35, ge=1, description="Default compileSdk")
    min_sdk_version: int = Field(default=21, ge=1, description="Default minSdk")
    target_sdk_version: int = Field(default=35, ge=1, description="Default targetSdk")
    ndk_version: str | None = Field(default=None, description="Default NDK version")
    version_code: int = Field(default=1, ge=1, description="Default versionCode")
    version_name: str = Field(default="1.0", description="Default versionName")


class OptimizationPolicy(BaseModel):
    """Flags applied to variants that do not declare their own."""

    shrink_code: bool = Field(default=False, description="Default code shrinking")
    shrink_resources: bool = Field(default=False, description="Default resource shrinking")


class SigningConfig(BaseModel):
    """Signing identity sourcing configuration."""

    debug_keystore: Path = Field(
        default_factory=lambda: Path(
            os.environ.get("ANDROID_USER_HOME", "~/.android")
        ).expanduser() / "debug.keystore",
        description="Ambient debug keystore managed by the platform SDK",
    )
    credential_env_prefix: str = Field(
        default="BUILDPLANNER", description="Prefix for credential environment variables"
    )
    allow_inline_credentials: bool = Field(
        default=True, description="Accept plaintext credentials embedded in the descriptor"
    )


class Config(BaseModel):
    """Root configuration for BuildPlanner."""

    project_name: str = Field(default="BuildPlanner", description="Project identifier")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    descriptor_path: Path = Field(
        default=Path("android/app/buildplan.json"), description="Build descriptor file"
    )
    shared_config_path: Path = Field(
        default=Path("android/local.properties"), description="Shared framework configuration"
    )
    framework: FrameworkDefaults = Field(default_factory=FrameworkDefaults)
    optimization: OptimizationPolicy = Field(default_factory=OptimizationPolicy)
    signing: SigningConfig = Field(default_factory=SigningConfig)

    model_config = {"extra": "ignore"}

    @classmethod
    def from_env(cls) -> Config:
        """Create configuration from environment variables."""
        return cls(
            log_level=os.environ.get("BUILDPLANNER_LOG_LEVEL", "INFO"),  # type: ignore
            descriptor_path=Path(
                os.environ.get("BUILDPLANNER_DESCRIPTOR", "android/app/buildplan.json")
            ),
            shared_config_path=Path(
                os.environ.get("BUILDPLANNER_SHARED_CONFIG", "android/local.properties")
            ),
            optimization=OptimizationPolicy(
                shrink_code=os.environ.get("BUILDPLANNER_SHRINK_CODE", "false").lower() == "true",
                shrink_resources=os.environ.get("BUILDPLANNER_SHRINK_RESOURCES", "false").lower()
                == "true",
            ),
            signing=SigningConfig(
                credential_env_prefix=os.environ.get("BUILDPLANNER_CREDENTIAL_PREFIX", "BUILDPLANNER"),
                allow_inline_credentials=os.environ.get("BUILDPLANNER_ALLOW_INLINE_CREDENTIALS", "true").lower()
                == "true",
            ),
        )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()
