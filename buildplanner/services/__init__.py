"""Services package for BuildPlanner."""

from .render import GradleRenderer
from .resolver import BuildPlanResolver

__all__ = [
    "BuildPlanResolver",
    "GradleRenderer",
]
