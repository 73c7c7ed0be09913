"""
Shared framework configuration model.

The cross-platform framework owns SDK levels and version numbering; every
variant reads them from here instead of duplicating them.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class SharedConfig(BaseModel):
    """Values supplied by the cross-platform framework collaborator."""

    compile_sdk_version: int = Field(alias="compileSdkVersion", ge=1)
    min_sdk_version: int = Field(alias="minSdkVersion", ge=1)
    target_sdk_version: int = Field(alias="targetSdkVersion", ge=1)
    version_code: int = Field(alias="versionCode", ge=1)
    version_name: str = Field(alias="versionName")
    ndk_version: str | None = Field(default=None, alias="ndkVersion")
    source_root: Path = Field(default=Path("../.."), alias="source", description="Framework source tree")
    sdk_path: Path | None = Field(default=None, alias="sdk", description="Framework SDK location")
    origin: Path | None = Field(default=None, exclude=True, description="File this was loaded from")

    model_config = {"populate_by_name": True, "extra": "ignore", "frozen": True}
