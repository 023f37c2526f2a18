"""Dependency attribution, usage measurement and report ranking."""

from __future__ import annotations

from lopper.analysis.attribution import (
    GENERIC_PROFILE,
    DependencyMapper,
    EcosystemProfile,
    attribute,
    match_score,
)
from lopper.analysis.normalize import normalize_dependency_id
from lopper.analysis.ranking import (
    DEFAULT_WEIGHTS,
    compute_summary,
    normalize_weights,
    rank_top_n,
    waste_score,
)
from lopper.analysis.snapshot import build_snapshot, list_dependencies
from lopper.analysis.synthesis import (
    DEFAULT_MIN_USAGE_PERCENT,
    build_recommendations,
    synthesize,
    synthesize_all,
)
from lopper.analysis.usage import count_usage

__all__ = [
    "DEFAULT_MIN_USAGE_PERCENT",
    "DEFAULT_WEIGHTS",
    "GENERIC_PROFILE",
    "DependencyMapper",
    "EcosystemProfile",
    "attribute",
    "build_recommendations",
    "build_snapshot",
    "compute_summary",
    "count_usage",
    "list_dependencies",
    "match_score",
    "normalize_dependency_id",
    "normalize_weights",
    "rank_top_n",
    "synthesize",
    "synthesize_all",
    "waste_score",
]
