"""Data models for the lopper analysis engine."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

SCHEMA_VERSION = "0.1.0"


class Language(enum.Enum):
    DOTNET = "dotnet"
    GO = "go"
    JVM = "jvm"
    PYTHON = "python"
    CPP = "cpp"


class Severity(enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Location:
    file: str
    line: int
    column: int = 1


@dataclass(frozen=True)
class ImportBinding:
    """One observed import in one file, as written by the language front end."""
    module: str
    symbol: str
    local_alias: str
    location: Location
    wildcard: bool = False

    @property
    def is_blank(self) -> bool:
        return not self.wildcard and self.local_alias == ""


@dataclass(frozen=True)
class DeclaredDependencySet:
    """Normalized dependency ids declared in manifests.

    ``hints`` maps an extra lookup key (a JVM group, a Go replace source, a
    Python import name) to the declared id it stands for. ``aliases`` are
    looser keys (a JVM organisation prefix or artifact name) consulted only
    when neither an id nor a hint matches.
    """
    ids: frozenset[str] = frozenset()
    hints: tuple[tuple[str, str], ...] = ()
    aliases: tuple[tuple[str, str], ...] = ()

    def __len__(self) -> int:
        return len(self.ids)

    def sorted_ids(self) -> list[str]:
        return sorted(self.ids)


@dataclass(frozen=True)
class AttributionResult:
    dependency_id: str = ""
    ambiguous: bool = False
    undeclared: bool = False

    @property
    def filtered(self) -> bool:
        return self.dependency_id == ""


@dataclass(frozen=True)
class ResolvedImport:
    binding: ImportBinding
    attribution: AttributionResult


@dataclass
class FileUsageSnapshot:
    """Per-file input to report synthesis."""
    path: str
    text: str
    imports: list[ResolvedImport] = field(default_factory=list)
    usage: dict[str, int] = field(default_factory=dict)


@dataclass
class SymbolUsage:
    name: str
    count: int


@dataclass
class ImportUse:
    name: str
    module: str
    locations: list[Location] = field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.module}:{self.name}"


@dataclass
class RiskCue:
    code: str
    severity: Severity
    message: str


@dataclass
class Recommendation:
    code: str
    priority: Severity
    message: str
    rationale: str = ""


@dataclass(frozen=True)
class RemovalCandidateWeights:
    usage: float = 0.50
    impact: float = 0.30
    confidence: float = 0.20


@dataclass
class RemovalCandidate:
    score: float
    usage: float
    impact: float
    confidence: float
    weights: RemovalCandidateWeights
    rationale: list[str] = field(default_factory=list)


@dataclass
class DependencyReport:
    name: str
    language: str = ""
    used_symbol_count: int = 0
    total_symbol_count: int = 0
    used_percent: float = 0.0
    top_used_symbols: list[SymbolUsage] = field(default_factory=list)
    used_imports: list[ImportUse] = field(default_factory=list)
    unused_imports: list[ImportUse] = field(default_factory=list)
    risk_cues: list[RiskCue] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)
    removal_candidate: RemovalCandidate | None = None

    @property
    def has_imports(self) -> bool:
        return self.total_symbol_count > 0


@dataclass
class Summary:
    dependency_count: int
    used_symbol_count: int
    total_symbol_count: int
    used_percent: float


@dataclass
class EffectiveThresholds:
    min_usage_percent_for_recommendations: int
    removal_candidate_weights: RemovalCandidateWeights


@dataclass
class Report:
    repo_path: str
    generated_at: datetime
    schema_version: str = SCHEMA_VERSION
    languages: list[str] = field(default_factory=list)
    dependencies: list[DependencyReport] = field(default_factory=list)
    summary: Summary | None = None
    warnings: list[str] = field(default_factory=list)
    effective_thresholds: EffectiveThresholds | None = None


@dataclass
class AnalysisConfig:
    """Configuration for one analysis run."""
    repo_path: Path = field(default_factory=lambda: Path("."))
    language: str = "auto"
    dependency: str | None = None
    top_n: int = 0
    workers: int = 1
    config_path: Path | None = None
    min_usage_percent: int | None = None
    weights: RemovalCandidateWeights | None = None
    skip_dirs: list[str] = field(default_factory=lambda: [
        ".git", ".hg", ".svn", ".idea", ".vscode", ".cache", ".next",
        "node_modules", "vendor", "dist", "build", "out", "target",
        "bin", "obj", "__pycache__", ".venv", "venv", ".mypy_cache",
        ".pytest_cache", "*.egg-info",
    ])


@dataclass
class Detection:
    """Whether a repository looks like it uses a language, and how strongly."""
    language: Language
    matched: bool = False
    confidence: int = 0
