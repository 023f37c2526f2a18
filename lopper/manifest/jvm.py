"""Maven and Gradle manifests."""

from __future__ import annotations

import re
from pathlib import Path

from lopper.manifest.base import DeclaredBuilder, ManifestInfo, files_named, read_manifest

POM_XML = "pom.xml"
GRADLE_FILES = ("build.gradle", "build.gradle.kts")

_POM_DEPENDENCY_RE = re.compile(
    r"<dependency>\s*.*?<groupId>\s*([^<\s]+)\s*</groupId>\s*.*?"
    r"<artifactId>\s*([^<\s]+)\s*</artifactId>.*?</dependency>",
    re.DOTALL,
)
_GRADLE_DEPENDENCY_RE = re.compile(
    r"(?:implementation|api|compileOnly|runtimeOnly|testImplementation|testRuntimeOnly|kapt)"
    r"\s*\(?\s*[\"']([^:\"'\s]+):([^:\"'\s]+):[^\"'\s]+[\"']\s*\)?"
)


def parse_pom(text: str) -> list[tuple[str, str]]:
    return [(group.strip(), artifact.strip()) for group, artifact in _POM_DEPENDENCY_RE.findall(text)]


def parse_gradle(text: str) -> list[tuple[str, str]]:
    return [(group.strip(), artifact.strip()) for group, artifact in _GRADLE_DEPENDENCY_RE.findall(text)]


def add_coordinate(builder: DeclaredBuilder, group: str, artifact: str) -> None:
    """Declare ``group:artifact`` and the package prefixes it is imported under.

    The group and ``group.artifact`` are exact prefixes. Artifacts often live
    under a different package than their group (Guava ships
    ``com.google.common``), so the organisation prefix, the last group
    segment and the dotted artifact name are kept as aliases.
    """
    if not group or not artifact:
        return
    dependency = builder.add(f"{group}:{artifact}")
    dotted_artifact = artifact.replace("-", ".")
    builder.hint(group, dependency)
    builder.hint(f"{group}.{dotted_artifact}", dependency)

    parts = group.split(".")
    if len(parts) >= 2:
        builder.alias(f"{parts[0]}.{parts[1]}", dependency)
        builder.alias(parts[-1], dependency)
    builder.alias(dotted_artifact, dependency)


def load(root: Path, files: list[Path]) -> ManifestInfo:
    info = ManifestInfo()
    builder = DeclaredBuilder()

    for path in files_named(files, POM_XML):
        text = read_manifest(path, info.warnings)
        if text is not None:
            for group, artifact in parse_pom(text):
                add_coordinate(builder, group, artifact)

    for path in files_named(files, *GRADLE_FILES):
        text = read_manifest(path, info.warnings)
        if text is not None:
            for group, artifact in parse_gradle(text):
                add_coordinate(builder, group, artifact)

    info.declared = builder.build()
    return info
