"""Manifest loaders, one per ecosystem."""

from __future__ import annotations

from lopper.manifest import cpp, dotnet, golang, jvm, python
from lopper.manifest.base import DeclaredBuilder, ManifestInfo

__all__ = ["DeclaredBuilder", "ManifestInfo", "cpp", "dotnet", "golang", "jvm", "python"]
