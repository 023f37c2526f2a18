"""Ranking engine: waste scores, removal-candidate scoring and top-N ordering."""

from __future__ import annotations

import dataclasses
import math
from typing import Sequence

from lopper.analysis.synthesis import has_wildcard_import
from lopper.models import (
    DependencyReport,
    RemovalCandidate,
    RemovalCandidateWeights,
    Severity,
    Summary,
)

DEFAULT_WEIGHTS = RemovalCandidateWeights(usage=0.50, impact=0.30, confidence=0.20)

_MISSING_INVENTORY_PENALTY = 35.0
_WILDCARD_PENALTY = 15.0
_RISK_PENALTIES = {
    Severity.HIGH: 20.0,
    Severity.MEDIUM: 12.0,
    Severity.LOW: 6.0,
}


def normalize_weights(weights: RemovalCandidateWeights | None) -> RemovalCandidateWeights:
    """Scale weights to sum to 1; fall back to defaults on unusable input."""
    if weights is None:
        return DEFAULT_WEIGHTS
    values = (weights.usage, weights.impact, weights.confidence)
    if not all(math.isfinite(v) and v >= 0 for v in values):
        return DEFAULT_WEIGHTS
    total = sum(values)
    if not math.isfinite(total) or total <= 0:
        return DEFAULT_WEIGHTS
    return RemovalCandidateWeights(
        usage=weights.usage / total,
        impact=weights.impact / total,
        confidence=weights.confidence / total,
    )


def waste_score(report: DependencyReport) -> float | None:
    """``100 - used_percent``, or None when the symbol inventory is unknown."""
    if report.total_symbol_count <= 0:
        return None
    return 100 - report.used_percent


def _round1(value: float) -> float:
    """Round to one decimal place, halves away from zero."""
    scaled = abs(value) * 10
    whole = math.floor(scaled)
    if scaled - whole >= 0.5:
        whole += 1
    return math.copysign(whole / 10, value)


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def _raw_impact(report: DependencyReport) -> float:
    if report.total_symbol_count <= 0:
        return 0.0
    return float(max(report.total_symbol_count - report.used_symbol_count, 0))


def _confidence_signal(report: DependencyReport) -> tuple[float, list[str]]:
    penalty = 0.0
    rationale: list[str] = []
    if report.total_symbol_count <= 0:
        penalty += _MISSING_INVENTORY_PENALTY
    if has_wildcard_import(report.used_imports):
        penalty += _WILDCARD_PENALTY
        rationale.append("wildcard import usage reduces per-symbol confidence")
    for cue in report.risk_cues:
        penalty += _RISK_PENALTIES.get(cue.severity, 0.0)
    return _clamp(100 - penalty), rationale


def removal_candidate(
    report: DependencyReport,
    max_impact: float,
    weights: RemovalCandidateWeights,
) -> RemovalCandidate:
    known = waste_score(report)
    usage = _clamp(known) if known is not None else 0.0
    impact = _clamp(_raw_impact(report) / max_impact * 100) if max_impact > 0 else 0.0
    confidence, rationale = _confidence_signal(report)
    if known is None:
        rationale.append("usage coverage unknown because no imports were observed")

    score = usage * weights.usage + impact * weights.impact + confidence * weights.confidence
    return RemovalCandidate(
        score=_round1(score),
        usage=_round1(usage),
        impact=_round1(impact),
        confidence=_round1(confidence),
        weights=weights,
        rationale=rationale,
    )


def annotate_removal_candidates(
    reports: Sequence[DependencyReport],
    weights: RemovalCandidateWeights | None = None,
) -> list[DependencyReport]:
    """Return copies of ``reports`` carrying a removal-candidate score."""
    weights = normalize_weights(weights)
    max_impact = max((_raw_impact(report) for report in reports), default=0.0)
    return [
        dataclasses.replace(report, removal_candidate=removal_candidate(report, max_impact, weights))
        for report in reports
    ]


def rank_top_n(
    n: int,
    reports: Sequence[DependencyReport],
    weights: RemovalCandidateWeights | None = None,
) -> list[DependencyReport]:
    """Order reports by waste, most wasteful first, and keep the first ``n``.

    With ``weights`` the composite removal-candidate score replaces the plain
    ``100 - used_percent`` waste score. Reports with no observed imports have
    no known score and always sort after the scored ones, by name.
    """
    if weights is not None:
        ranked = annotate_removal_candidates(reports, weights)
    else:
        ranked = list(reports)

    known: list[tuple[float, DependencyReport]] = []
    unknown: list[DependencyReport] = []
    for report in ranked:
        score = waste_score(report)
        if score is None:
            unknown.append(report)
            continue
        if report.removal_candidate is not None and weights is not None:
            score = report.removal_candidate.score
        known.append((score, report))

    known.sort(key=lambda item: (-item[0], item[1].name, item[1].language))
    unknown.sort(key=lambda report: (report.name, report.language))
    ordered = [report for _, report in known] + unknown

    if 0 < n < len(ordered):
        ordered = ordered[:n]
    return ordered


def compute_summary(reports: Sequence[DependencyReport]) -> Summary | None:
    if not reports:
        return None
    used = sum(report.used_symbol_count for report in reports)
    total = sum(report.total_symbol_count for report in reports)
    return Summary(
        dependency_count=len(reports),
        used_symbol_count=used,
        total_symbol_count=total,
        used_percent=used / total * 100 if total else 0.0,
    )
