"""Java and Kotlin scanner for import statements."""

from __future__ import annotations

import re
from pathlib import Path

from lopper.analysis.profiles import JVM_PROFILE
from lopper.manifest import jvm
from lopper.manifest.base import ManifestInfo
from lopper.models import ImportBinding, Language, Location
from lopper.scanner.base import BaseScanner, first_content_column
from lopper.scanner.language_map import extensions_for

_PACKAGE_RE = re.compile(r"^\s*package\s+([A-Za-z_][A-Za-z0-9_.]*)\s*;?\s*$", re.MULTILINE)
_IMPORT_RE = re.compile(
    r"^\s*import\s+(?:static\s+)?([A-Za-z_][A-Za-z0-9_.]*?)(\.\*)?"
    r"(?:\s+as\s+([A-Za-z_][A-Za-z0-9_]*))?\s*;?\s*$"
)


def parse_package(text: str) -> str:
    match = _PACKAGE_RE.search(text)
    return match.group(1).strip() if match else ""


class JvmScanner(BaseScanner):
    language = Language.JVM
    extensions = extensions_for(Language.JVM)
    profile = JVM_PROFILE
    root_signals = {"pom.xml": 55, "build.gradle": 45, "build.gradle.kts": 45}
    manifest_patterns = ("pom.xml", "build.gradle", "build.gradle.kts")

    def load_manifests(self, root: Path, files: list[Path]) -> ManifestInfo:
        return jvm.load(root, files)

    def file_local_prefixes(self, text: str) -> tuple[str, ...]:
        package = parse_package(text)
        return (package,) if package else ()

    def parse_imports(self, text: str, rel_path: str, file_path: Path, root: Path) -> list[ImportBinding]:
        bindings: list[ImportBinding] = []
        for index, raw in enumerate(text.splitlines(), start=1):
            line = raw.split("//", 1)[0]
            match = _IMPORT_RE.match(line)
            if not match:
                continue
            module = match.group(1)
            wildcard = bool(match.group(2))
            symbol = "*" if wildcard else module.rsplit(".", 1)[-1]
            local = "" if wildcard else (match.group(3) or symbol)
            bindings.append(ImportBinding(
                module=module,
                symbol=symbol,
                local_alias=local,
                location=Location(file=rel_path, line=index, column=first_content_column(raw)),
                wildcard=wildcard,
            ))
        return bindings
