"""Data models for BuildPlanner."""

from .descriptor import BuildDescriptor, BuildTypeSpec, SigningConfigSpec
from .plan import (
    DEBUG_SIGNING_CONFIG,
    ApplicationIdentity,
    BuildPlan,
    BuildVariant,
    OptimizationFlags,
    SdkVersionConstraint,
    SigningIdentity,
    VariantKind,
)
from .shared import SharedConfig

__all__ = [
    "DEBUG_SIGNING_CONFIG",
    "ApplicationIdentity",
    "BuildDescriptor",
    "BuildPlan",
    "BuildTypeSpec",
    "BuildVariant",
    "OptimizationFlags",
    "SdkVersionConstraint",
    "SharedConfig",
    "SigningConfigSpec",
    "SigningIdentity",
    "VariantKind",
]
