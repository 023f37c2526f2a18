"""Abstract base scanner."""

from __future__ import annotations

import abc
import fnmatch
import logging
from dataclasses import dataclass, field
from pathlib import Path

from lopper.analysis.attribution import DependencyMapper, EcosystemProfile
from lopper.analysis.snapshot import build_snapshot
from lopper.manifest.base import ManifestInfo
from lopper.models import (
    DeclaredDependencySet,
    Detection,
    FileUsageSnapshot,
    ImportBinding,
    Language,
)

logger = logging.getLogger(__name__)

MAX_SCAN_FILES = 4096
MAX_DETECT_FILES = 1024
MAX_FILE_BYTES = 1 << 20
MIN_CONFIDENCE = 35
MAX_CONFIDENCE = 95

DEFAULT_SKIP_DIRS = [
    ".git", ".hg", ".svn", ".idea", ".vscode", "node_modules", "vendor",
    "dist", "build", "out", "target", "bin", "obj", "__pycache__",
    ".venv", "venv", "*.egg-info",
]


@dataclass
class ScanResult:
    language: Language
    declared: DeclaredDependencySet = field(default_factory=DeclaredDependencySet)
    snapshots: list[FileUsageSnapshot] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class BaseScanner(abc.ABC):
    """Base class for language front ends.

    Subclasses declare their source ``extensions``, the ``profile`` used for
    attribution and the file names that signal the language, and implement
    import parsing and manifest loading.
    """

    language: Language
    extensions: tuple[str, ...]
    profile: EcosystemProfile
    # file-name glob in the repo root -> detection confidence
    root_signals: dict[str, int] = {}
    # manifest globs found anywhere in the tree
    manifest_patterns: tuple[str, ...] = ()
    manifest_weight: int = 10
    source_weight: int = 2

    def __init__(
        self,
        skip_dirs: list[str] | None = None,
        max_files: int = MAX_SCAN_FILES,
        max_file_size: int = MAX_FILE_BYTES,
    ):
        self.skip_dirs = skip_dirs or list(DEFAULT_SKIP_DIRS)
        self.max_files = max_files
        self.max_file_size = max_file_size

    @abc.abstractmethod
    def parse_imports(self, text: str, rel_path: str, file_path: Path, root: Path) -> list[ImportBinding]:
        """Extract the import bindings of one source file."""

    @abc.abstractmethod
    def load_manifests(self, root: Path, files: list[Path]) -> ManifestInfo:
        """Read the declared dependencies of the repository."""

    def file_local_prefixes(self, text: str) -> tuple[str, ...]:
        """Extra local module prefixes declared inside one file."""
        return ()

    def is_generated(self, path: Path, text: str) -> bool:
        return False

    def is_source(self, path: Path) -> bool:
        return path.suffix.lower() in self.extensions

    def walk(self, root: Path) -> list[Path]:
        """Files under ``root`` in sorted order, minus skipped dirs and links."""
        root = root.resolve()
        files: list[Path] = []
        for path in sorted(root.rglob("*")):
            rel = path.relative_to(root)
            if self._should_skip(rel):
                continue
            if path.is_symlink() or not path.is_file():
                continue
            if path.resolve() != root / rel:
                logger.debug("Skipping %s: resolves outside its own path", rel)
                continue
            files.append(path)
        return files

    def _should_skip(self, rel: Path) -> bool:
        for part in rel.parts[:-1]:
            for pattern in self.skip_dirs:
                if fnmatch.fnmatch(part, pattern):
                    return True
        return False

    def detect(self, root: Path) -> Detection:
        detection = Detection(language=self.language)
        for entry in sorted(root.iterdir()):
            if not entry.is_file():
                continue
            name = entry.name.lower()
            for pattern, weight in self.root_signals.items():
                if fnmatch.fnmatch(name, pattern):
                    detection.matched = True
                    detection.confidence += weight

        for path in self.walk(root)[:MAX_DETECT_FILES]:
            name = path.name.lower()
            if any(fnmatch.fnmatch(name, pattern) for pattern in self.manifest_patterns):
                detection.matched = True
                detection.confidence += self.manifest_weight
            elif self.is_source(path):
                detection.matched = True
                detection.confidence += self.source_weight

        if detection.matched:
            detection.confidence = max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, detection.confidence))
        else:
            detection.confidence = 0
        return detection

    def scan(self, root: Path) -> ScanResult:
        """Load manifests and build a usage snapshot for every source file."""
        root = root.resolve()
        files = self.walk(root)
        manifest = self.load_manifests(root, files)
        result = ScanResult(
            language=self.language,
            declared=manifest.declared,
            warnings=list(manifest.warnings),
        )
        if not len(manifest.declared):
            result.warnings.append(f"no declared {self.language.value} dependencies found in manifests")

        sources = [path for path in files if self.is_source(path)]
        if len(sources) > self.max_files:
            result.warnings.append(f"source scan capped at {self.max_files} files")
            sources = sources[:self.max_files]

        mapper = DependencyMapper(manifest.declared, self.profile)
        for path in sources:
            rel = path.relative_to(root).as_posix()
            text = self._read_source(path, rel, result.warnings)
            if text is None:
                continue
            if self.is_generated(path, text):
                logger.debug("Skipping generated file %s", rel)
                continue
            bindings = self.parse_imports(text, rel, path, root)
            prefixes = manifest.local_prefixes + self.file_local_prefixes(text)
            result.snapshots.append(build_snapshot(rel, text, bindings, mapper, prefixes))

        logger.info(
            "%s: scanned %d file(s), %d declared dependencies",
            self.language.value, len(result.snapshots), len(manifest.declared),
        )
        return result

    def _read_source(self, path: Path, rel: str, warnings: list[str]) -> str | None:
        try:
            size = path.stat().st_size
            if size > self.max_file_size:
                logger.warning("Skipping %s: %d bytes exceeds limit", rel, size)
                warnings.append(f"skipped {rel}: file larger than {self.max_file_size} bytes")
                return None
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning("Cannot read %s: %s", rel, e)
            warnings.append(f"skipped {rel}: {e.strerror or e}")
            return None


def first_content_column(line: str) -> int:
    """1-based column of the first non-blank character."""
    stripped = line.lstrip(" \t")
    return len(line) - len(stripped) + 1 if stripped else 1
