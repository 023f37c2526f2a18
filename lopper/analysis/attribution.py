"""Attribution engine: maps an import module path to a declared dependency.

Every declared id (and every manifest hint key) is scored against the import's
module path; the best score wins, ties go to the lexicographically smallest id
and are flagged ambiguous. When nothing scores, the longest leading module
prefix that is a declared alias wins. Imports that match neither fall back to
a synthetic id derived from the leading module segments and are flagged
undeclared.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Iterable

from lopper.analysis.normalize import normalize_dependency_id
from lopper.models import AttributionResult, DeclaredDependencySet

SCORE_EXACT = 100
SCORE_MODULE_UNDER_DEPENDENCY = 90
SCORE_DEPENDENCY_UNDER_MODULE = 75
SCORE_FIRST_SEGMENT = 60
SCORE_LAST_SEGMENT = 50
SCORE_SUBSTRING = 40


@dataclass(frozen=True)
class EcosystemProfile:
    """Per-ecosystem parameters for the shared attribution engine."""
    name: str
    separators: tuple[str, ...] = (".", "/")
    stdlib_prefixes: tuple[str, ...] = ()
    stdlib_modules: frozenset[str] = frozenset()
    stdlib_check: Callable[[str], bool] | None = None
    canonicalize: Callable[[str], str] | None = None
    fuzzy: bool = True
    fallback_depth: int = 2
    weighted_ranking: bool = False
    _split_re: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        pattern = "|".join(re.escape(sep) for sep in self.separators)
        object.__setattr__(self, "_split_re", re.compile(pattern))

    def segments(self, value: str) -> list[str]:
        return self._split_re.split(value)

    def has_prefix(self, value: str, prefix: str) -> bool:
        """True when ``value`` continues ``prefix`` past a separator."""
        return any(value.startswith(prefix + sep) for sep in self.separators)

    def within(self, value: str, prefix: str) -> bool:
        return value == prefix or self.has_prefix(value, prefix)

    def key(self, value: str) -> str:
        value = normalize_dependency_id(value)
        if self.canonicalize:
            value = self.canonicalize(value)
        return value

    def is_stdlib(self, module: str) -> bool:
        if self.stdlib_check and self.stdlib_check(module):
            return True
        if self.segments(module)[0] in self.stdlib_modules:
            return True
        return any(self.within(module, prefix) for prefix in self.stdlib_prefixes)

    def is_local(self, module: str, local_prefixes: Iterable[str]) -> bool:
        for prefix in local_prefixes:
            prefix = normalize_dependency_id(prefix)
            if prefix and self.within(module, prefix):
                return True
        return False

    def leading_prefixes(self, value: str) -> list[str]:
        """``value`` and each prefix of it ending before a separator, longest first."""
        cuts = [match.start() for match in self._split_re.finditer(value)]
        return [value] + [value[:cut] for cut in reversed(cuts) if cut]

    def fallback(self, module: str) -> str:
        """Leading ``fallback_depth`` segments of ``module``, separators kept."""
        cut = len(module)
        seen = 0
        for match in self._split_re.finditer(module):
            seen += 1
            if seen == self.fallback_depth:
                cut = match.start()
                break
        return normalize_dependency_id(module[:cut].strip(".").strip("/"))


GENERIC_PROFILE = EcosystemProfile(name="generic")


def match_score(module: str, dependency: str, profile: EcosystemProfile = GENERIC_PROFILE) -> int:
    """Score how strongly ``module`` belongs to ``dependency`` (both canonical)."""
    if not module or not dependency:
        return 0
    if module == dependency:
        return SCORE_EXACT
    if profile.has_prefix(module, dependency):
        return SCORE_MODULE_UNDER_DEPENDENCY
    if profile.has_prefix(dependency, module):
        return SCORE_DEPENDENCY_UNDER_MODULE
    if not profile.fuzzy:
        return 0

    module_segments = profile.segments(module)
    dependency_segments = profile.segments(dependency)
    if module_segments[0] and module_segments[0] == dependency_segments[0]:
        return SCORE_FIRST_SEGMENT
    if module_segments[-1] and module_segments[-1] == dependency_segments[-1]:
        return SCORE_LAST_SEGMENT
    if module in dependency or dependency in module:
        return SCORE_SUBSTRING
    return 0


class DependencyMapper:
    """Resolve import modules against one declared dependency set."""

    def __init__(self, declared: DeclaredDependencySet, profile: EcosystemProfile = GENERIC_PROFILE):
        self.declared = declared
        self.profile = profile
        lookups: set[tuple[str, str]] = set()
        for dependency in declared.ids:
            dependency = normalize_dependency_id(dependency)
            if dependency:
                lookups.add((profile.key(dependency), dependency))
        for hint, dependency in declared.hints:
            dependency = normalize_dependency_id(dependency)
            if hint.strip() and dependency:
                lookups.add((profile.key(hint), dependency))
        self._lookups = sorted(lookups)

        self._aliases: dict[str, set[str]] = {}
        for alias, dependency in declared.aliases:
            dependency = normalize_dependency_id(dependency)
            if alias.strip() and dependency:
                self._aliases.setdefault(profile.key(alias), set()).add(dependency)

    def _resolve_alias(self, module_key: str) -> AttributionResult | None:
        """Longest leading module prefix that is a declared alias."""
        for prefix in self.profile.leading_prefixes(module_key):
            candidates = self._aliases.get(prefix)
            if candidates:
                ranked = sorted(candidates)
                return AttributionResult(dependency_id=ranked[0], ambiguous=len(ranked) > 1)
        return None

    def resolve(self, module: str, local_prefixes: Iterable[str] = ()) -> AttributionResult:
        normalized = normalize_dependency_id(module)
        if not normalized:
            return AttributionResult()
        if self.profile.is_stdlib(normalized) or self.profile.is_local(normalized, local_prefixes):
            return AttributionResult()

        module_key = self.profile.key(normalized)
        scores: dict[str, int] = {}
        for lookup_key, dependency in self._lookups:
            score = match_score(module_key, lookup_key, self.profile)
            if score > scores.get(dependency, 0):
                scores[dependency] = score

        if not scores:
            aliased = self._resolve_alias(module_key)
            if aliased is not None:
                return aliased
            fallback = self.profile.fallback(module_key)
            if not fallback:
                return AttributionResult()
            return AttributionResult(dependency_id=fallback, undeclared=True)

        ranked = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
        best_id, best_score = ranked[0]
        # only the top two are compared; ties further down are ignored
        ambiguous = len(ranked) > 1 and ranked[1][1] == best_score
        return AttributionResult(dependency_id=best_id, ambiguous=ambiguous)


def attribute(
    module: str,
    declared: DeclaredDependencySet,
    profile: EcosystemProfile = GENERIC_PROFILE,
    local_prefixes: Iterable[str] = (),
) -> AttributionResult:
    """Attribute one import module path to a declared dependency id."""
    return DependencyMapper(declared, profile).resolve(module, local_prefixes)
