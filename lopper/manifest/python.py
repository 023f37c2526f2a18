"""Python manifests: requirements files and pyproject.toml."""

from __future__ import annotations

import logging
import re
import tomllib
from pathlib import Path

from lopper.manifest.base import DeclaredBuilder, ManifestInfo, files_named, read_manifest

logger = logging.getLogger(__name__)

PYPROJECT = "pyproject.toml"

# Distributions whose import name differs from the project name.
KNOWN_IMPORT_NAMES: dict[str, tuple[str, ...]] = {
    "attrs": ("attr",),
    "beautifulsoup4": ("bs4",),
    "google-cloud-storage": ("google.cloud.storage",),
    "opencv-python": ("cv2",),
    "opencv-python-headless": ("cv2",),
    "pillow": ("PIL",),
    "protobuf": ("google.protobuf",),
    "pycryptodome": ("Crypto",),
    "pyjwt": ("jwt",),
    "python-dateutil": ("dateutil",),
    "python-dotenv": ("dotenv",),
    "pyyaml": ("yaml",),
    "scikit-image": ("skimage",),
    "scikit-learn": ("sklearn",),
    "setuptools": ("pkg_resources",),
    "tree-sitter-language-pack": ("tree_sitter_language_pack",),
}

_REQUIREMENT_NAME_RE = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")
_SEPARATORS_RE = re.compile(r"[-_.]+")


def canonical_name(name: str) -> str:
    return _SEPARATORS_RE.sub("-", name).lower()


def requirement_name(spec: str) -> str:
    """Project name of one requirement string, or "" for options and URLs."""
    spec = spec.split("#", 1)[0].strip()
    if not spec or spec.startswith("-") or "://" in spec.split("@", 1)[0]:
        return ""
    match = _REQUIREMENT_NAME_RE.match(spec)
    return canonical_name(match.group(1)) if match else ""


def parse_requirements(text: str) -> list[str]:
    names = []
    for line in text.splitlines():
        name = requirement_name(line)
        if name:
            names.append(name)
    return names


def parse_pyproject(text: str) -> list[str]:
    data = tomllib.loads(text)
    specs: list[str] = []

    project = data.get("project", {})
    specs.extend(project.get("dependencies", []))
    for group in project.get("optional-dependencies", {}).values():
        specs.extend(group)

    poetry = data.get("tool", {}).get("poetry", {})
    specs.extend(name for name in poetry.get("dependencies", {}) if name.lower() != "python")
    for group in poetry.get("group", {}).values():
        specs.extend(group.get("dependencies", {}))

    names = []
    for spec in specs:
        if isinstance(spec, str):
            name = requirement_name(spec)
            if name:
                names.append(name)
    return names


def add_distribution(builder: DeclaredBuilder, name: str) -> None:
    dependency = builder.add(name)
    for import_name in KNOWN_IMPORT_NAMES.get(dependency, ()):
        builder.hint(import_name, dependency)
    if "-" in dependency:
        builder.hint(dependency.replace("-", "."), dependency)
    if dependency.startswith("python-"):
        builder.hint(dependency[len("python-"):], dependency)


def local_modules(root: Path) -> list[str]:
    """Top-level modules and packages importable from the repo root or src/."""
    names: set[str] = set()
    for base in (root, root / "src"):
        if not base.is_dir():
            continue
        for entry in base.iterdir():
            if entry.name.startswith("."):
                continue
            if entry.is_file() and entry.suffix == ".py":
                names.add(entry.stem)
            elif entry.is_dir() and (entry / "__init__.py").is_file():
                names.add(entry.name)
    return sorted(names)


def load(root: Path, files: list[Path]) -> ManifestInfo:
    info = ManifestInfo()
    builder = DeclaredBuilder()

    for path in files:
        name = path.name.lower()
        if not (name.startswith("requirements") and name.endswith(".txt")):
            continue
        text = read_manifest(path, info.warnings)
        if text is not None:
            for dependency in parse_requirements(text):
                add_distribution(builder, dependency)

    for path in files_named(files, PYPROJECT):
        text = read_manifest(path, info.warnings)
        if text is None:
            continue
        try:
            names = parse_pyproject(text)
        except tomllib.TOMLDecodeError as e:
            logger.warning("Invalid %s: %s", path, e)
            info.warnings.append(f"unable to parse {path.name}: {e}")
            continue
        for dependency in names:
            add_distribution(builder, dependency)

    info.declared = builder.build()
    info.local_prefixes = tuple(local_modules(root))
    return info
