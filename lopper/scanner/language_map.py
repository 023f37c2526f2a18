"""Shared extension-to-language mapping for scanners and detection."""

from __future__ import annotations

from lopper.models import Language

EXT_TO_LANGUAGE: dict[str, Language] = {
    ".cs": Language.DOTNET,
    ".fs": Language.DOTNET,
    ".go": Language.GO,
    ".java": Language.JVM,
    ".kt": Language.JVM,
    ".kts": Language.JVM,
    ".py": Language.PYTHON,
    ".c": Language.CPP,
    ".cc": Language.CPP,
    ".cpp": Language.CPP,
    ".cxx": Language.CPP,
    ".c++": Language.CPP,
    ".h": Language.CPP,
    ".hh": Language.CPP,
    ".hpp": Language.CPP,
    ".hxx": Language.CPP,
    ".h++": Language.CPP,
}


def extensions_for(language: Language) -> tuple[str, ...]:
    return tuple(ext for ext, lang in EXT_TO_LANGUAGE.items() if lang == language)
