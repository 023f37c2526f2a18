"""Analysis pipeline: detect -> scan -> synthesize -> rank -> summarize."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from lopper.analysis import (
    compute_summary,
    list_dependencies,
    rank_top_n,
    synthesize,
    synthesize_all,
)
from lopper.analysis.profiles import PROFILES
from lopper.config import load_thresholds
from lopper.models import (
    AnalysisConfig,
    DependencyReport,
    Language,
    Report,
)
from lopper.scanner import detect_languages, get_scanner

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]

AUTO_LANGUAGE = "auto"


def _validate(config: AnalysisConfig) -> Path:
    repo = Path(config.repo_path)
    if not repo.exists():
        raise ValueError(f"repository path does not exist: {repo}")
    if not repo.is_dir():
        raise ValueError(f"repository path is not a directory: {repo}")
    if config.top_n < 0:
        raise ValueError(f"top N must not be negative, got {config.top_n}")
    if config.workers < 1:
        raise ValueError(f"workers must be at least 1, got {config.workers}")
    return repo.resolve()


def resolve_languages(repo: Path, language: str, skip_dirs: list[str] | None = None) -> list[Language]:
    """Explicit language id, or every detected language for ``auto``."""
    language = (language or AUTO_LANGUAGE).strip().lower()
    if language != AUTO_LANGUAGE:
        return [get_scanner(language).language]
    return [detection.language for detection in detect_languages(repo, skip_dirs)]


def run_analysis(config: AnalysisConfig, progress: ProgressCallback | None = None) -> Report:
    """Run one analysis and return the finished report.

    Raises ValueError for an invalid repository path, language id or
    threshold configuration. Everything found during analysis that is not
    fatal comes back in ``Report.warnings``.
    """
    repo = _validate(config)
    thresholds = load_thresholds(repo, config.config_path, config.min_usage_percent, config.weights)
    effective = thresholds.effective()
    threshold = effective.min_usage_percent_for_recommendations
    weights = effective.removal_candidate_weights

    report = Report(
        repo_path=str(repo),
        generated_at=datetime.now(timezone.utc),
        effective_thresholds=effective,
    )

    languages = resolve_languages(repo, config.language, config.skip_dirs)
    report.languages = [language.value for language in languages]
    if not languages:
        report.warnings.append("no supported language detected in repository")
        return report

    dependency = (config.dependency or "").strip()
    if not dependency and config.top_n <= 0:
        report.warnings.append("no dependency or top-N target given; nothing to report")

    per_language: list[tuple[list[DependencyReport], list[str]]] = []
    for index, language in enumerate(languages):
        if progress:
            progress(f"Scanning {language.value}", index, len(languages))
        scan = get_scanner(language, config.skip_dirs).scan(repo)
        report.warnings.extend(scan.warnings)

        if dependency:
            dep_report, warnings = synthesize(dependency, scan.snapshots, threshold=threshold, language=language.value)
            per_language.append(([dep_report], warnings))
        elif config.top_n > 0:
            names = list_dependencies(scan.snapshots, scan.declared.ids)
            logger.info("%s: synthesizing %d dependencies", language.value, len(names))
            per_language.append(synthesize_all(
                names, scan.snapshots, threshold=threshold, language=language.value, max_workers=config.workers,
            ))
    if progress:
        progress("Scanning", len(languages), len(languages))

    if dependency:
        dependencies, warnings = _pick_dependency_reports(per_language, single=len(languages) == 1)
    else:
        dependencies = [item for reports, _ in per_language for item in reports]
        warnings = [line for _, lines in per_language for line in lines]
    report.warnings.extend(warnings)

    if config.top_n > 0 and not dependency:
        weighted = all(PROFILES[language].weighted_ranking for language in languages)
        dependencies = rank_top_n(config.top_n, dependencies, weights if weighted else None)
        if not dependencies:
            report.warnings.append("no dependency data available for top-N ranking")

    report.dependencies = dependencies
    report.summary = compute_summary(dependencies)
    logger.info("Analysis of %s finished: %d dependency report(s)", repo, len(dependencies))
    return report


def _pick_dependency_reports(
    per_language: list[tuple[list[DependencyReport], list[str]]],
    single: bool,
) -> tuple[list[DependencyReport], list[str]]:
    """Keep the languages where the requested dependency was actually seen.

    With several detected languages most will never import the dependency;
    their empty reports are dropped unless no language saw it at all, in
    which case the first one stands for the whole run.
    """
    if single:
        reports, warnings = per_language[0]
        return list(reports), list(warnings)

    found = [(reports, warnings) for reports, warnings in per_language if reports[0].has_imports]
    if not found:
        found = per_language[:1]
    return (
        [item for reports, _ in found for item in reports],
        [line for _, lines in found for line in lines],
    )
