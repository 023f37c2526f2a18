"""Report synthesizer: aggregates per-file import usage into one dependency report."""

from __future__ import annotations

import logging
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from lopper.analysis.normalize import normalize_dependency_id
from lopper.models import (
    DependencyReport,
    FileUsageSnapshot,
    ImportUse,
    Recommendation,
    ResolvedImport,
    RiskCue,
    Severity,
    SymbolUsage,
)

logger = logging.getLogger(__name__)

DEFAULT_MIN_USAGE_PERCENT = 40
TOP_SYMBOL_LIMIT = 5
WILDCARD_SYMBOL = "*"


class _StatsAccumulator:
    def __init__(self):
        self.used_imports: dict[str, ImportUse] = {}
        self.unused_imports: dict[str, ImportUse] = {}
        self.used_symbols: set[str] = set()
        self.all_symbols: set[str] = set()
        self.symbol_counts: Counter[str] = Counter()
        self.wildcard_imports = 0
        self.blank_imports = 0
        self.ambiguous_imports = 0
        self.undeclared_imports = 0

    def collect(self, snapshot: FileUsageSnapshot, resolved: ResolvedImport) -> None:
        binding = resolved.binding
        self.all_symbols.add(binding.symbol)
        if binding.wildcard:
            self.wildcard_imports += 1
        if binding.is_blank:
            self.blank_imports += 1
        if resolved.attribution.ambiguous:
            self.ambiguous_imports += 1
        if resolved.attribution.undeclared:
            self.undeclared_imports += 1

        count = snapshot.usage.get(binding.local_alias, 0) if binding.local_alias else 0
        entry = ImportUse(name=binding.symbol, module=binding.module, locations=[binding.location])
        if binding.wildcard or count > 0:
            self.used_symbols.add(binding.symbol)
            if binding.wildcard and count == 0:
                count = 1
            self.symbol_counts[binding.symbol] += count
            _add_import(self.used_imports, entry)
        else:
            _add_import(self.unused_imports, entry)

    def top_symbols(self) -> list[SymbolUsage]:
        ranked = sorted(self.symbol_counts.items(), key=lambda item: (-item[1], item[0]))
        return [SymbolUsage(name=name, count=count) for name, count in ranked[:TOP_SYMBOL_LIMIT]]


def _add_import(dest: dict[str, ImportUse], entry: ImportUse) -> None:
    current = dest.get(entry.key)
    if current is not None:
        current.locations.extend(entry.locations)
        return
    dest[entry.key] = ImportUse(name=entry.name, module=entry.module, locations=list(entry.locations))


def _flatten(source: dict[str, ImportUse]) -> list[ImportUse]:
    return sorted(source.values(), key=lambda item: (item.module, item.name))


def _used_percent(used: int, total: int) -> float:
    if total == 0:
        return 0.0
    return used / total * 100


def has_wildcard_import(imports: Sequence[ImportUse]) -> bool:
    return any(item.name == WILDCARD_SYMBOL for item in imports)


def synthesize(
    dependency: str,
    snapshots: Sequence[FileUsageSnapshot],
    threshold: int = DEFAULT_MIN_USAGE_PERCENT,
    language: str = "",
) -> tuple[DependencyReport, list[str]]:
    """Build the usage report for ``dependency`` across all snapshots.

    Returns ``(report, warnings)``. Never raises; missing imports and risky
    mappings come back as warnings and risk cues.
    """
    dependency = normalize_dependency_id(dependency)
    acc = _StatsAccumulator()
    for snapshot in snapshots:
        for resolved in snapshot.imports:
            if normalize_dependency_id(resolved.attribution.dependency_id) != dependency:
                continue
            acc.collect(snapshot, resolved)

    used = _flatten(acc.used_imports)
    used_keys = {entry.key for entry in used}
    # used anywhere wins over unused elsewhere
    unused = [entry for entry in _flatten(acc.unused_imports) if entry.key not in used_keys]

    used_count = len(acc.used_symbols)
    total_count = len(acc.all_symbols)
    report = DependencyReport(
        name=dependency,
        language=language,
        used_symbol_count=used_count,
        total_symbol_count=total_count,
        used_percent=_used_percent(used_count, total_count),
        top_used_symbols=acc.top_symbols(),
        used_imports=used,
        unused_imports=unused,
    )

    warnings: list[str] = []
    if total_count == 0:
        warnings.append(f'no imports found for dependency "{dependency}"')

    report.risk_cues, cue_warnings = _build_risk_cues(dependency, acc)
    warnings.extend(cue_warnings)
    report.recommendations = build_recommendations(
        report,
        ambiguous_count=acc.ambiguous_imports,
        undeclared_count=acc.undeclared_imports,
        threshold=threshold,
    )
    logger.debug(
        "synthesized %s: %d/%d symbols used, %d risk cue(s)",
        dependency, used_count, total_count, len(report.risk_cues),
    )
    return report, warnings


def _build_risk_cues(dependency: str, acc: _StatsAccumulator) -> tuple[list[RiskCue], list[str]]:
    cues: list[RiskCue] = []
    warnings: list[str] = []
    if acc.wildcard_imports:
        cues.append(RiskCue(
            code="wildcard-import",
            severity=Severity.MEDIUM,
            message=f"found {acc.wildcard_imports} wildcard import(s) for this dependency",
        ))
        warnings.append(f'dependency "{dependency}" has {acc.wildcard_imports} wildcard import(s)')
    if acc.blank_imports:
        cues.append(RiskCue(
            code="side-effect-import",
            severity=Severity.MEDIUM,
            message="side-effect imports were detected; initialization side effects can hide coupling",
        ))
        warnings.append(f'dependency "{dependency}" has {acc.blank_imports} side-effect import(s)')
    if acc.ambiguous_imports:
        cues.append(RiskCue(
            code="ambiguous-namespace-mapping",
            severity=Severity.MEDIUM,
            message="namespace-to-package mapping is ambiguous for one or more imports",
        ))
        warnings.append(
            f'dependency "{dependency}" has ambiguous namespace mapping in {acc.ambiguous_imports} import(s)'
        )
    if acc.undeclared_imports:
        cues.append(RiskCue(
            code="undeclared-package-usage",
            severity=Severity.HIGH,
            message="imports suggest package usage that is not declared in project manifests",
        ))
        warnings.append(
            f'dependency "{dependency}" appears in source imports but is not declared in project manifests'
        )
    return cues, warnings


def build_recommendations(
    report: DependencyReport,
    ambiguous_count: int = 0,
    undeclared_count: int = 0,
    threshold: int = DEFAULT_MIN_USAGE_PERCENT,
) -> list[Recommendation]:
    """Derive recommendations in their fixed evaluation order."""
    recs: list[Recommendation] = []
    if undeclared_count > 0:
        recs.append(Recommendation(
            code="declare-dependency-explicitly",
            priority=Severity.HIGH,
            message="Declare this package explicitly in project manifests to avoid transitive drift.",
            rationale="Source imports appear without a direct package declaration.",
        ))
    if ambiguous_count > 0:
        recs.append(Recommendation(
            code="review-namespace-mapping",
            priority=Severity.MEDIUM,
            message="Review namespace-to-package mapping for this dependency.",
            rationale="Multiple declared packages matched the same namespace prefix.",
        ))
    if not report.used_imports and report.unused_imports:
        recs.append(Recommendation(
            code="remove-unused-dependency",
            priority=Severity.HIGH,
            message=f'No used imports were detected for "{report.name}"; consider removing it.',
            rationale="Unused dependencies increase attack and maintenance surface.",
        ))
    if has_wildcard_import(report.used_imports) or has_wildcard_import(report.unused_imports):
        recs.append(Recommendation(
            code="avoid-wildcard-imports",
            priority=Severity.MEDIUM,
            message="Wildcard imports were detected; prefer explicit imports.",
            rationale="Explicit imports improve analysis precision and maintainability.",
        ))
    if report.total_symbol_count > 0 and report.used_percent < threshold:
        recs.append(Recommendation(
            code="reduce-low-usage-package-surface",
            priority=Severity.LOW,
            message="Consider reducing or replacing low-usage package references.",
            rationale="Only a small portion of observed imports appears used.",
        ))
    return recs


def synthesize_all(
    dependencies: Sequence[str],
    snapshots: Sequence[FileUsageSnapshot],
    threshold: int = DEFAULT_MIN_USAGE_PERCENT,
    language: str = "",
    max_workers: int = 1,
) -> tuple[list[DependencyReport], list[str]]:
    """Synthesize every dependency; results keep the order of ``dependencies``."""
    def build(dependency: str) -> tuple[DependencyReport, list[str]]:
        return synthesize(dependency, snapshots, threshold=threshold, language=language)

    if max_workers > 1 and len(dependencies) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(build, dependencies))
    else:
        results = [build(dependency) for dependency in dependencies]

    reports: list[DependencyReport] = []
    warnings: list[str] = []
    for report, report_warnings in results:
        reports.append(report)
        warnings.extend(report_warnings)
    return reports, warnings
