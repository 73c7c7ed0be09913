"""
BuildPlanner: build-variant resolution for mobile application packaging.

Resolves signing identities, SDK version constraints and variant-specific
optimization flags into a validated build plan that an external packaging
toolchain (Gradle) consumes.
"""

__version__ = "1.0.0"
__author__ = "BuildPlanner Team"
