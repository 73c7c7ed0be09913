"""
Loaders for the build descriptor and the shared framework configuration.

Shared configuration is read from a ``local.properties`` file written by the
framework tooling, or from a JSON export using the framework's camelCase keys.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .core.config import FrameworkDefaults
from .core.exceptions import DescriptorError, MissingSharedConfigError
from .core.logging import get_logger
from .models.descriptor import BuildDescriptor
from .models.shared import SharedConfig

logger = get_logger(__name__)

# local.properties key -> SharedConfig field alias
_PROPERTY_KEYS = {
    "flutter.compileSdkVersion": "compileSdkVersion",
    "flutter.minSdkVersion": "minSdkVersion",
    "flutter.targetSdkVersion": "targetSdkVersion",
    "flutter.versionCode": "versionCode",
    "flutter.versionName": "versionName",
    "flutter.ndkVersion": "ndkVersion",
    "flutter.sdk": "sdk",
    "flutter.source": "source",
}

_INT_FIELDS = ("compileSdkVersion", "minSdkVersion", "targetSdkVersion", "versionCode")


def _unescape(value: str) -> str:
    out = []
    chars = iter(value)
    for ch in chars:
        if ch == "\\":
            nxt = next(chars, "")
            out.append({"n": "\n", "t": "\t"}.get(nxt, nxt))
        else:
            out.append(ch)
    return "".join(out)


def _logical_lines(text: str) -> Iterator[str]:
    """Join lines ending in an unescaped backslash with their continuation."""
    pending = ""
    for raw in text.splitlines():
        line = raw.lstrip()
        if not pending and (not line or line[0] in "#!"):
            continue
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2:
            pending += line[:-1]
            continue
        yield pending + line
        pending = ""
    if pending:
        yield pending


def parse_properties(text: str) -> dict[str, str]:
    """Parse Java ``.properties`` content.

    Supports ``=``, ``:`` and whitespace separators, ``#``/``!`` comments,
    trailing-backslash line continuations and backslash escapes such as the
    ``C\\:\\\\sdk`` paths Windows tooling writes.

    Args:
        text: File content.

    Returns:
        Mapping of keys to unescaped values.
    """
    props: dict[str, str] = {}
    for line in _logical_lines(text):
        i = 0
        while i < len(line) and line[i] not in "=: \t\f":
            i += 2 if line[i] == "\\" else 1
        key = line[:i]
        rest = line[i:].lstrip(" \t\f")
        if rest[:1] in ("=", ":"):
            rest = rest[1:].lstrip(" \t\f")
        props[_unescape(key)] = _unescape(rest.rstrip())
    return props


def _with_defaults(values: dict[str, Any], defaults: FrameworkDefaults) -> dict[str, Any]:
    merged: dict[str, Any] = {
        "compileSdkVersion": defaults.compile_sdk_version,
        "minSdkVersion": defaults.min_sdk_version,
        "targetSdkVersion": defaults.target_sdk_version,
        "versionCode": defaults.version_code,
        "versionName": defaults.version_name,
        "ndkVersion": defaults.ndk_version,
    }
    merged.update({k: v for k, v in values.items() if v is not None and v != ""})
    return merged


def load_shared_config(path: Path, defaults: FrameworkDefaults | None = None) -> SharedConfig:
    """Load the shared framework configuration.

    Args:
        path: ``local.properties`` or ``.json`` file.
        defaults: Framework defaults for values the file omits.

    Returns:
        SharedConfig: The parsed configuration.

    Raises:
        MissingSharedConfigError: If the file does not exist.
        DescriptorError: If a value is malformed.
    """
    defaults = defaults or FrameworkDefaults()
    if not path.is_file():
        raise MissingSharedConfigError(
            message=f"Shared configuration not found: {path}",
            field_name="shared_config",
            searched_path=str(path),
        )

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            values = json.loads(text)
        except json.JSONDecodeError as e:
            raise DescriptorError(
                message=f"Shared configuration is not valid JSON: {path}",
                field_name="shared_config",
                source_path=str(path),
                cause=e,
            ) from e
        if not isinstance(values, dict):
            raise DescriptorError(
                message=f"Shared configuration must be a JSON object: {path}",
                field_name="shared_config",
                source_path=str(path),
            )
    else:
        props = parse_properties(text)
        values = {alias: props[key] for key, alias in _PROPERTY_KEYS.items() if key in props}

    merged = _with_defaults(values, defaults)
    for name in _INT_FIELDS:
        try:
            merged[name] = int(merged[name])
        except (TypeError, ValueError) as e:
            raise DescriptorError(
                message=f"'{name}' must be an integer, got {merged[name]!r}",
                field_name=name,
                source_path=str(path),
                cause=e,
            ) from e

    try:
        config = SharedConfig.model_validate({**merged, "origin": path})
    except PydanticValidationError as e:
        first = e.errors()[0]
        raise DescriptorError(
            message=f"Invalid shared configuration: {first['msg']}",
            field_name=".".join(str(p) for p in first["loc"]),
            source_path=str(path),
        ) from e

    logger.debug(
        "Loaded shared configuration",
        path=str(path),
        min_sdk=config.min_sdk_version,
        target_sdk=config.target_sdk_version,
        compile_sdk=config.compile_sdk_version,
    )
    return config


def load_descriptor(path: Path) -> BuildDescriptor:
    """Load a JSON build descriptor.

    Relative keystore paths resolve against the descriptor's directory.

    Args:
        path: Descriptor file.

    Returns:
        BuildDescriptor: The parsed descriptor.

    Raises:
        DescriptorError: If the file is missing or malformed.
    """
    if not path.is_file():
        raise DescriptorError(
            message=f"Build descriptor not found: {path}",
            field_name="descriptor",
            source_path=str(path),
        )
    try:
        descriptor = BuildDescriptor.model_validate_json(path.read_text(encoding="utf-8"))
    except PydanticValidationError as e:
        first = e.errors()[0]
        raise DescriptorError(
            message=f"Invalid build descriptor: {first['msg']}",
            field_name=".".join(str(p) for p in first["loc"]) or "descriptor",
            source_path=str(path),
        ) from e

    descriptor = descriptor.model_copy(update={"base_dir": path.resolve().parent})
    logger.debug("Loaded build descriptor", path=str(path), variants=descriptor.variant_names())
    return descriptor
