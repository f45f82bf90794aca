"""Detect languages, frameworks, version requirements and external dependencies of local repositories."""

__version__ = "0.1.0"