"""Scanner registry and language detection."""

from __future__ import annotations

import logging
from pathlib import Path

from lopper.models import Detection, Language
from lopper.scanner.base import BaseScanner, ScanResult
from lopper.scanner.cpp_scanner import CppScanner
from lopper.scanner.dotnet_scanner import DotnetScanner
from lopper.scanner.go_scanner import GoScanner
from lopper.scanner.jvm_scanner import JvmScanner
from lopper.scanner.python_scanner import PythonScanner

logger = logging.getLogger(__name__)

SCANNERS: dict[Language, type[BaseScanner]] = {
    Language.DOTNET: DotnetScanner,
    Language.GO: GoScanner,
    Language.JVM: JvmScanner,
    Language.PYTHON: PythonScanner,
    Language.CPP: CppScanner,
}


def get_scanner(language: Language | str, skip_dirs: list[str] | None = None) -> BaseScanner:
    """Instantiate the scanner for a language id; unknown ids raise ValueError."""
    if isinstance(language, str):
        try:
            language = Language(language.strip().lower())
        except ValueError:
            known = ", ".join(lang.value for lang in Language)
            raise ValueError(f"unknown language {language!r} (expected one of: {known})") from None
    return SCANNERS[language](skip_dirs=skip_dirs)


def detect_languages(repo: Path, skip_dirs: list[str] | None = None) -> list[Detection]:
    """Matching languages, highest confidence first, then by id."""
    detections = []
    for language, scanner_cls in SCANNERS.items():
        detection = scanner_cls(skip_dirs=skip_dirs).detect(repo)
        logger.debug("detect %s: matched=%s confidence=%d", language.value, detection.matched, detection.confidence)
        if detection.matched:
            detections.append(detection)
    detections.sort(key=lambda d: (-d.confidence, d.language.value))
    return detections


__all__ = [
    "BaseScanner",
    "CppScanner",
    "DotnetScanner",
    "GoScanner",
    "JvmScanner",
    "PythonScanner",
    "SCANNERS",
    "ScanResult",
    "detect_languages",
    "get_scanner",
]
