"""Build plan resolution service."""

from .service import BuildPlanResolver, default_credential_provider

__all__ = ["BuildPlanResolver", "default_credential_provider"]
