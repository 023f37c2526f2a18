"""Go scanner for single and grouped import declarations."""

from __future__ import annotations

import re
from pathlib import Path

from lopper.analysis.profiles import GO_PROFILE
from lopper.manifest import golang
from lopper.manifest.base import ManifestInfo
from lopper.models import ImportBinding, Language, Location
from lopper.scanner.base import BaseScanner, first_content_column
from lopper.scanner.language_map import extensions_for

_SPEC = r"""(?:([A-Za-z_][A-Za-z0-9_]*|\.)\s+)?(?:"([^"]+)"|`([^`]+)`)"""
_SINGLE_IMPORT_RE = re.compile(r"^\s*import\s+" + _SPEC)
_BLOCK_START_RE = re.compile(r"^\s*import\s*\((.*)$")
_SPEC_RE = re.compile(r"^\s*" + _SPEC)
_VERSION_RE = re.compile(r"^v\d+$")

GENERATED_HEADER_LINES = 20


def default_package_name(import_path: str) -> str:
    """Name an import binds when it has no explicit alias."""
    parts = [part for part in import_path.split("/") if part]
    if not parts:
        return import_path
    base = parts[-1]
    if _VERSION_RE.match(base) and len(parts) > 1:
        base = parts[-2]
    stem, dot, suffix = base.rpartition(".")
    if dot and stem and _VERSION_RE.match(suffix):
        base = stem
    return base


def is_generated_source(text: str) -> bool:
    for line in text.splitlines()[:GENERATED_HEADER_LINES]:
        line = line.strip().lower()
        if "code generated" in line and "do not edit" in line:
            return True
    return False


def _import_path(match: re.Match) -> str:
    return match.group(2) or match.group(3)


def _binding(name: str | None, import_path: str, location: Location) -> ImportBinding:
    base = default_package_name(import_path)
    if name == "_":
        return ImportBinding(module=import_path, symbol="_", local_alias="", location=location)
    if name == ".":
        return ImportBinding(module=import_path, symbol="*", local_alias="", location=location, wildcard=True)
    alias = name or base
    return ImportBinding(module=import_path, symbol=alias, local_alias=alias, location=location)


class GoScanner(BaseScanner):
    language = Language.GO
    extensions = extensions_for(Language.GO)
    profile = GO_PROFILE
    root_signals = {"go.mod": 55, "go.work": 45}
    manifest_patterns = ("go.mod", "go.work")
    manifest_weight = 12

    def load_manifests(self, root: Path, files: list[Path]) -> ManifestInfo:
        return golang.load(root, files)

    def is_generated(self, path: Path, text: str) -> bool:
        return is_generated_source(text)

    def parse_imports(self, text: str, rel_path: str, file_path: Path, root: Path) -> list[ImportBinding]:
        bindings: list[ImportBinding] = []
        in_block = False
        for index, raw in enumerate(text.splitlines(), start=1):
            line = raw.split("//", 1)[0]
            if in_block:
                body, closed, _ = line.partition(")")
                self._add_specs(bindings, body, raw, rel_path, index)
                in_block = not closed
                continue

            block = _BLOCK_START_RE.match(line)
            if block:
                body, closed, _ = block.group(1).partition(")")
                self._add_specs(bindings, body, raw, rel_path, index)
                in_block = not closed
                continue

            match = _SINGLE_IMPORT_RE.match(line)
            if match:
                location = Location(file=rel_path, line=index, column=first_content_column(raw))
                bindings.append(_binding(match.group(1), _import_path(match), location))
        return bindings

    @staticmethod
    def _add_specs(bindings: list[ImportBinding], text: str, raw: str, rel_path: str, line: int) -> None:
        """Add every ``;``-separated import spec found in ``text``."""
        for spec in text.split(";"):
            match = _SPEC_RE.match(spec)
            if not match:
                continue
            location = Location(file=rel_path, line=line, column=first_content_column(raw))
            bindings.append(_binding(match.group(1), _import_path(match), location))
