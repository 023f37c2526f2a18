"""C/C++ scanner for #include directives.

Includes carry no local name, so each one is recorded as a wildcard binding
whose symbol is the header path. Quoted includes that resolve to a file inside
the repository are project headers and are dropped, as are quoted includes
that resolve nowhere.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from lopper.analysis.profiles import CPP_PROFILE
from lopper.manifest import cpp
from lopper.manifest.base import ManifestInfo
from lopper.models import ImportBinding, Language, Location
from lopper.scanner.base import BaseScanner, first_content_column
from lopper.scanner.language_map import extensions_for

logger = logging.getLogger(__name__)

_INCLUDE_RE = re.compile(r"^\s*#\s*include\s*([<\"])([^>\"]+)[>\"]")


def parse_includes(text: str) -> list[tuple[str, str, int, int]]:
    """Return ``(header, delimiter, line, column)`` for every include."""
    includes = []
    for index, raw in enumerate(text.splitlines(), start=1):
        match = _INCLUDE_RE.match(raw)
        if not match:
            continue
        header = match.group(2).strip().replace("\\", "/")
        if header:
            includes.append((header, match.group(1), index, first_content_column(raw)))
    return includes


def resolves_within(root: Path, source: Path, header: str) -> bool:
    for base in (source.parent, root, root / "include"):
        candidate = (base / header).resolve()
        if candidate.is_file() and candidate.is_relative_to(root):
            return True
    return False


class CppScanner(BaseScanner):
    language = Language.CPP
    extensions = extensions_for(Language.CPP)
    profile = CPP_PROFILE
    root_signals = {
        "compile_commands.json": 60,
        "cmakelists.txt": 45,
        "makefile": 35,
        "gnumakefile": 35,
        "vcpkg.json": 45,
        "conanfile.txt": 45,
    }
    manifest_patterns = ("compile_commands.json", "cmakelists.txt", "makefile", "gnumakefile")
    manifest_weight = 12

    def load_manifests(self, root: Path, files: list[Path]) -> ManifestInfo:
        return cpp.load(root, files)

    def parse_imports(self, text: str, rel_path: str, file_path: Path, root: Path) -> list[ImportBinding]:
        bindings: list[ImportBinding] = []
        for header, delimiter, line, column in parse_includes(text):
            if resolves_within(root, file_path, header):
                continue
            if delimiter == '"':
                logger.debug("%s:%d: unresolved quoted include %s", rel_path, line, header)
                continue
            bindings.append(ImportBinding(
                module=header,
                symbol=header,
                local_alias="",
                location=Location(file=rel_path, line=line, column=column),
                wildcard=True,
            ))
        return bindings
