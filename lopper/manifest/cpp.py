"""C/C++ package manifests: vcpkg and Conan."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from lopper.manifest.base import DeclaredBuilder, ManifestInfo, files_named, read_manifest

logger = logging.getLogger(__name__)

VCPKG_JSON = "vcpkg.json"
CONANFILE = "conanfile.txt"


def parse_vcpkg(text: str) -> list[str]:
    data = json.loads(text)
    names = []
    for entry in data.get("dependencies", []):
        if isinstance(entry, str):
            names.append(entry)
        elif isinstance(entry, dict) and entry.get("name"):
            names.append(str(entry["name"]))
    return names


def parse_conanfile(text: str) -> list[str]:
    names = []
    section = ""
    for raw in text.splitlines():
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        if line.startswith("[") and line.endswith("]"):
            section = line[1:-1].strip().lower()
            continue
        if section == "requires":
            name = line.split("/", 1)[0].strip()
            if name:
                names.append(name)
    return names


def add_port(builder: DeclaredBuilder, name: str) -> None:
    dependency = builder.add(name)
    if "-" in dependency:
        builder.hint(dependency.replace("-", "/"), dependency)


def load(root: Path, files: list[Path]) -> ManifestInfo:
    info = ManifestInfo()
    builder = DeclaredBuilder()

    for path in files_named(files, VCPKG_JSON):
        text = read_manifest(path, info.warnings)
        if text is None:
            continue
        try:
            names = parse_vcpkg(text)
        except (json.JSONDecodeError, AttributeError) as e:
            logger.warning("Invalid %s: %s", path, e)
            info.warnings.append(f"unable to parse {path.name}: {e}")
            continue
        for name in names:
            add_port(builder, name)

    for path in files_named(files, CONANFILE):
        text = read_manifest(path, info.warnings)
        if text is not None:
            for name in parse_conanfile(text):
                add_port(builder, name)

    info.declared = builder.build()
    return info
