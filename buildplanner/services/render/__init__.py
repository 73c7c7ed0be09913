"""Build script rendering service."""

from .service import GradleRenderer

__all__ = ["GradleRenderer"]
