"""Shared helpers for manifest loaders."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from lopper.analysis.normalize import normalize_dependency_id
from lopper.models import DeclaredDependencySet

logger = logging.getLogger(__name__)


@dataclass
class ManifestInfo:
    """What the build manifests of one ecosystem say about a repository."""
    declared: DeclaredDependencySet = field(default_factory=DeclaredDependencySet)
    local_prefixes: tuple[str, ...] = ()
    warnings: list[str] = field(default_factory=list)


class DeclaredBuilder:
    """Collects declared ids and lookup hints, then freezes them."""

    def __init__(self):
        self.ids: set[str] = set()
        self.hints: set[tuple[str, str]] = set()
        self.aliases: set[tuple[str, str]] = set()

    def add(self, dependency: str) -> str:
        dependency = normalize_dependency_id(dependency)
        if dependency:
            self.ids.add(dependency)
        return dependency

    def hint(self, key: str, dependency: str) -> None:
        key = normalize_dependency_id(key)
        dependency = normalize_dependency_id(dependency)
        if key and dependency and key != dependency:
            self.hints.add((key, dependency))

    def alias(self, key: str, dependency: str) -> None:
        key = normalize_dependency_id(key)
        dependency = normalize_dependency_id(dependency)
        if key and dependency:
            self.aliases.add((key, dependency))

    def build(self) -> DeclaredDependencySet:
        return DeclaredDependencySet(
            ids=frozenset(self.ids),
            hints=tuple(sorted(self.hints)),
            aliases=tuple(sorted(self.aliases)),
        )


def read_manifest(path: Path, warnings: list[str]) -> str | None:
    """Read a manifest file, recording a warning instead of failing."""
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning("Cannot read manifest %s: %s", path, e)
        warnings.append(f"unable to read manifest {path.name}: {e.strerror or e}")
        return None


def files_named(files: list[Path], *names: str) -> list[Path]:
    wanted = {name.lower() for name in names}
    return [path for path in files if path.name.lower() in wanted]


def files_with_suffix(files: list[Path], *suffixes: str) -> list[Path]:
    wanted = tuple(suffix.lower() for suffix in suffixes)
    return [path for path in files if path.name.lower().endswith(wanted)]
