"""C# and F# scanner for using/open directives."""

from __future__ import annotations

import re
from pathlib import Path

from lopper.analysis.profiles import DOTNET_PROFILE
from lopper.manifest import dotnet
from lopper.manifest.base import ManifestInfo
from lopper.models import ImportBinding, Language, Location
from lopper.scanner.base import BaseScanner, first_content_column
from lopper.scanner.language_map import extensions_for

_CSHARP_USING_RE = re.compile(r"^\s*(?:global\s+)?using\s+(?:static\s+)?([^;(]+);")
_FSHARP_OPEN_RE = re.compile(r"^\s*open\s+([A-Za-z_][A-Za-z0-9_.]*)")
_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

GENERATED_SUFFIXES = (".g.cs", ".designer.cs", ".assemblyinfo.cs")


def _normalize_namespace(value: str) -> str:
    value = value.strip()
    if value.startswith("global::"):
        value = value[len("global::"):]
    return value.strip()


def _last_segment(module: str) -> str:
    return module.rsplit(".", 1)[-1]


def parse_using(line: str) -> tuple[str, str] | None:
    """Return ``(namespace, alias)`` for a C# using directive, else None."""
    match = _CSHARP_USING_RE.match(line)
    if not match:
        return None
    expression = match.group(1).strip()
    if not expression:
        return None
    if "=" in expression:
        alias, _, module = expression.partition("=")
        alias = alias.strip()
        # using-declarations such as `using var x = ...;` are statements
        if not _IDENTIFIER_RE.fullmatch(alias):
            return None
        return _normalize_namespace(module), alias
    return _normalize_namespace(expression), ""


class DotnetScanner(BaseScanner):
    language = Language.DOTNET
    extensions = extensions_for(Language.DOTNET)
    profile = DOTNET_PROFILE
    root_signals = {
        "directory.packages.props": 45,
        "*.csproj": 55,
        "*.fsproj": 55,
        "*.sln": 50,
    }
    manifest_patterns = ("directory.packages.props", "*.csproj", "*.fsproj", "*.sln")
    manifest_weight = 12

    def load_manifests(self, root: Path, files: list[Path]) -> ManifestInfo:
        return dotnet.load(root, files)

    def is_generated(self, path: Path, text: str) -> bool:
        return path.name.lower().endswith(GENERATED_SUFFIXES)

    def parse_imports(self, text: str, rel_path: str, file_path: Path, root: Path) -> list[ImportBinding]:
        fsharp = file_path.suffix.lower() == ".fs"
        bindings: list[ImportBinding] = []
        for index, raw in enumerate(text.splitlines(), start=1):
            line = raw.split("//", 1)[0]
            if fsharp:
                match = _FSHARP_OPEN_RE.match(line)
                parsed = (match.group(1), "") if match else None
            else:
                parsed = parse_using(line)
            if parsed is None:
                continue
            module, alias = parsed
            if not module:
                continue
            symbol = alias or _last_segment(module) or module
            bindings.append(ImportBinding(
                module=module,
                symbol=symbol,
                local_alias=alias or _last_segment(module),
                location=Location(file=rel_path, line=index, column=first_content_column(raw)),
            ))
        return bindings
