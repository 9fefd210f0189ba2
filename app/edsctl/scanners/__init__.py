"""Artifact discovery for edsctl."""

from edsctl.scanners.artifacts import ArtifactLocator

__all__ = ["ArtifactLocator"]
