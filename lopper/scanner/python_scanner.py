"""Python scanner using the ast module."""

from __future__ import annotations

import ast
import logging
from pathlib import Path

from lopper.analysis.profiles import PYTHON_PROFILE
from lopper.manifest import python
from lopper.manifest.base import ManifestInfo
from lopper.models import ImportBinding, Language, Location
from lopper.scanner.base import BaseScanner
from lopper.scanner.language_map import extensions_for

logger = logging.getLogger(__name__)


class PythonScanner(BaseScanner):
    language = Language.PYTHON
    extensions = extensions_for(Language.PYTHON)
    profile = PYTHON_PROFILE
    root_signals = {"pyproject.toml": 50, "requirements.txt": 35, "setup.py": 35}
    manifest_patterns = ("pyproject.toml", "requirements*.txt", "setup.py")

    def load_manifests(self, root: Path, files: list[Path]) -> ManifestInfo:
        return python.load(root, files)

    def parse_imports(self, text: str, rel_path: str, file_path: Path, root: Path) -> list[ImportBinding]:
        try:
            tree = ast.parse(text, filename=rel_path)
        except (SyntaxError, ValueError) as e:
            logger.warning("Cannot parse %s: %s", rel_path, e)
            return []

        bindings: list[ImportBinding] = []
        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                location = Location(file=rel_path, line=node.lineno, column=node.col_offset + 1)
                for alias in node.names:
                    bindings.append(ImportBinding(
                        module=alias.name,
                        symbol=alias.name,
                        local_alias=alias.asname or alias.name.split(".")[0],
                        location=location,
                    ))
            elif isinstance(node, ast.ImportFrom):
                # relative imports never name a third-party package
                if node.level or not node.module:
                    continue
                location = Location(file=rel_path, line=node.lineno, column=node.col_offset + 1)
                for alias in node.names:
                    wildcard = alias.name == "*"
                    bindings.append(ImportBinding(
                        module=node.module,
                        symbol=alias.name,
                        local_alias="" if wildcard else (alias.asname or alias.name),
                        location=location,
                        wildcard=wildcard,
                    ))
        bindings.sort(key=lambda b: (b.location.line, b.location.column))
        return bindings
