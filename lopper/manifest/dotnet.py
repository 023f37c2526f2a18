"""MSBuild manifests: project files and central package management."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from lopper.manifest.base import (
    DeclaredBuilder,
    ManifestInfo,
    files_named,
    files_with_suffix,
    read_manifest,
)

logger = logging.getLogger(__name__)

CENTRAL_PACKAGES_FILE = "Directory.Packages.props"
PROJECT_SUFFIXES = (".csproj", ".fsproj")

_PACKAGE_REFERENCE_RE = re.compile(
    r"<PackageReference\b[^>]*\bInclude\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE | re.DOTALL,
)
_PACKAGE_VERSION_RE = re.compile(
    r"<PackageVersion\b[^>]*\bInclude\s*=\s*[\"']([^\"']+)[\"']", re.IGNORECASE | re.DOTALL,
)
_ROOT_NAMESPACE_RE = re.compile(r"<RootNamespace>\s*([^<\s]+)\s*</RootNamespace>", re.IGNORECASE)
_ASSEMBLY_NAME_RE = re.compile(r"<AssemblyName>\s*([^<\s]+)\s*</AssemblyName>", re.IGNORECASE)


def parse_project(text: str) -> tuple[list[str], list[str]]:
    """Return ``(package references, local namespaces)`` of one project file."""
    packages = [match.strip() for match in _PACKAGE_REFERENCE_RE.findall(text)]
    namespaces = [match.strip() for match in _ROOT_NAMESPACE_RE.findall(text)]
    namespaces.extend(match.strip() for match in _ASSEMBLY_NAME_RE.findall(text))
    return packages, namespaces


def parse_central_packages(text: str) -> list[str]:
    return [match.strip() for match in _PACKAGE_VERSION_RE.findall(text)]


def load(root: Path, files: list[Path]) -> ManifestInfo:
    info = ManifestInfo()
    builder = DeclaredBuilder()
    local: set[str] = set()

    for path in files_with_suffix(files, *PROJECT_SUFFIXES):
        text = read_manifest(path, info.warnings)
        if text is None:
            continue
        packages, namespaces = parse_project(text)
        for package in packages:
            builder.add(package)
        local.add(path.stem)
        local.update(namespaces)
        logger.debug("%s: %d package reference(s)", path.name, len(packages))

    for path in files_named(files, CENTRAL_PACKAGES_FILE):
        text = read_manifest(path, info.warnings)
        if text is None:
            continue
        for package in parse_central_packages(text):
            builder.add(package)

    info.declared = builder.build()
    info.local_prefixes = tuple(sorted(prefix for prefix in local if prefix))
    return info
