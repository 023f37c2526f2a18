"""Lexical usage counting via word-boundary matching."""

from __future__ import annotations

import re
from collections import Counter
from functools import lru_cache
from typing import Iterable

from lopper.models import ImportBinding


@lru_cache(maxsize=4096)
def _usage_pattern(alias: str) -> re.Pattern:
    return re.compile(rf"\b{re.escape(alias)}\b")


def count_usage(text: str, bindings: Iterable[ImportBinding]) -> dict[str, int]:
    """Return ``{local_alias: occurrences}`` for the file body.

    Each binding that declares an alias accounts for one occurrence of it
    (the import statement itself), so those are subtracted. Wildcard and
    blank bindings carry no alias to count and are left out.
    """
    declared = Counter(
        binding.local_alias
        for binding in bindings
        if not binding.wildcard and binding.local_alias
    )

    usage: dict[str, int] = {}
    for alias in sorted(declared):
        occurrences = len(_usage_pattern(alias).findall(text)) - declared[alias]
        usage[alias] = max(occurrences, 0)
    return usage
