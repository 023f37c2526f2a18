"""Go module manifests (go.mod)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from lopper.manifest.base import DeclaredBuilder, ManifestInfo, files_named, read_manifest

GO_MOD = "go.mod"


@dataclass
class GoModule:
    path: str = ""
    requires: list[str] = field(default_factory=list)
    # import path of the replacement -> original module path
    replacements: dict[str, str] = field(default_factory=dict)


def _strip_comment(line: str) -> str:
    index = line.find("//")
    if index >= 0:
        line = line[:index]
    return line.strip()


def _first_token(value: str) -> str:
    fields = value.split()
    return fields[0].strip('"') if fields else ""


def _is_local_target(value: str) -> bool:
    if value.startswith(("./", "../", "/")):
        return True
    return len(value) >= 2 and value[1] == ":"


def _looks_external(value: str) -> bool:
    first = value.split("/", 1)[0]
    return "." in first


def parse_go_mod(text: str) -> GoModule:
    module = GoModule()
    block = ""
    for raw in text.splitlines():
        line = _strip_comment(raw)
        if not line:
            continue
        if block:
            if line == ")":
                block = ""
                continue
            _apply_directive(module, block, line)
            continue

        keyword, _, rest = line.partition(" ")
        rest = rest.strip()
        if keyword == "module":
            module.path = _first_token(rest)
        elif keyword in ("require", "replace"):
            if rest == "(":
                block = keyword
            else:
                _apply_directive(module, keyword, rest)
    return module


def _apply_directive(module: GoModule, keyword: str, line: str) -> None:
    if keyword == "require":
        dependency = _first_token(line)
        if dependency:
            module.requires.append(dependency)
        return

    old, sep, new = line.partition("=>")
    if not sep:
        return
    old_path, new_path = _first_token(old), _first_token(new)
    if not old_path or not new_path or _is_local_target(new_path):
        return
    if _looks_external(new_path):
        module.replacements[new_path] = old_path


def load(root: Path, files: list[Path]) -> ManifestInfo:
    info = ManifestInfo()
    builder = DeclaredBuilder()
    local: list[str] = []

    for path in files_named(files, GO_MOD):
        text = read_manifest(path, info.warnings)
        if text is None:
            continue
        module = parse_go_mod(text)
        if module.path:
            local.append(module.path)
        for dependency in module.requires:
            builder.add(dependency)
        for new_path, old_path in module.replacements.items():
            builder.hint(new_path, old_path)

    info.declared = builder.build()
    info.local_prefixes = tuple(sorted(set(local)))
    return info
