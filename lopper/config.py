"""Threshold configuration loaded from .lopper.yml and command-line overrides."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from lopper.analysis.ranking import DEFAULT_WEIGHTS, normalize_weights
from lopper.analysis.synthesis import DEFAULT_MIN_USAGE_PERCENT
from lopper.models import EffectiveThresholds, RemovalCandidateWeights

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = (".lopper.yml", ".lopper.yaml")

_WEIGHT_KEYS = {
    "removal_candidate_weight_usage": "usage",
    "removal_candidate_weight_impact": "impact",
    "removal_candidate_weight_confidence": "confidence",
}
_KNOWN_KEYS = {"min_usage_percent_for_recommendations", *_WEIGHT_KEYS}


class ConfigError(ValueError):
    """Invalid configuration file or threshold value."""


@dataclass
class Thresholds:
    min_usage_percent_for_recommendations: int = DEFAULT_MIN_USAGE_PERCENT
    removal_candidate_weights: RemovalCandidateWeights = field(default_factory=lambda: DEFAULT_WEIGHTS)

    def validate(self) -> "Thresholds":
        percent = self.min_usage_percent_for_recommendations
        if isinstance(percent, bool) or not isinstance(percent, int) or not 0 <= percent <= 100:
            raise ConfigError(
                f"min_usage_percent_for_recommendations must be an integer between 0 and 100, got {percent!r}"
            )
        validate_weights(self.removal_candidate_weights)
        return self

    def effective(self) -> EffectiveThresholds:
        """The thresholds a run applies, with weights scaled to sum to 1."""
        return EffectiveThresholds(
            min_usage_percent_for_recommendations=self.min_usage_percent_for_recommendations,
            removal_candidate_weights=normalize_weights(self.removal_candidate_weights),
        )


def validate_weights(weights: RemovalCandidateWeights) -> RemovalCandidateWeights:
    values = {"usage": weights.usage, "impact": weights.impact, "confidence": weights.confidence}
    for name, value in values.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"removal candidate weight {name!r} must be a number, got {value!r}")
        if not math.isfinite(value) or value < 0:
            raise ConfigError(f"removal candidate weight {name!r} must be finite and non-negative, got {value!r}")
    if sum(values.values()) <= 0:
        raise ConfigError("at least one removal candidate weight must be positive")
    return weights


def parse_weights(value: str) -> RemovalCandidateWeights:
    """Parse ``"usage,impact,confidence"`` as given on the command line."""
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 3:
        raise ConfigError(f"weights must be three comma-separated numbers, got {value!r}")
    try:
        usage, impact, confidence = (float(part) for part in parts)
    except ValueError:
        raise ConfigError(f"weights must be numbers, got {value!r}") from None
    return validate_weights(RemovalCandidateWeights(usage=usage, impact=impact, confidence=confidence))


def find_config(repo: Path) -> Path | None:
    for name in CONFIG_FILENAMES:
        candidate = repo / name
        if candidate.is_file():
            return candidate
    return None


def _read_config(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    unknown = sorted(str(key) for key in data if key != "thresholds")
    if unknown:
        raise ConfigError(f"{path}: unknown key(s): {', '.join(unknown)}")

    section = data.get("thresholds") or {}
    if not isinstance(section, dict):
        raise ConfigError(f"{path}: 'thresholds' must be a mapping")
    unknown = sorted(str(key) for key in section if key not in _KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"{path}: unknown threshold key(s): {', '.join(unknown)}")
    return section


def load_thresholds(
    repo: Path,
    config_path: Path | None = None,
    min_usage_percent: int | None = None,
    weights: RemovalCandidateWeights | None = None,
) -> Thresholds:
    """Resolve thresholds: defaults, then the config file, then explicit overrides."""
    thresholds = Thresholds()
    path = config_path or find_config(repo)
    if path is not None:
        section = _read_config(path)
        logger.info("Loaded thresholds from %s", path)
        if "min_usage_percent_for_recommendations" in section:
            thresholds.min_usage_percent_for_recommendations = section["min_usage_percent_for_recommendations"]
        overrides = {
            attr: section[key] for key, attr in _WEIGHT_KEYS.items() if key in section
        }
        if overrides:
            current = thresholds.removal_candidate_weights
            thresholds.removal_candidate_weights = RemovalCandidateWeights(
                usage=overrides.get("usage", current.usage),
                impact=overrides.get("impact", current.impact),
                confidence=overrides.get("confidence", current.confidence),
            )

    if min_usage_percent is not None:
        thresholds.min_usage_percent_for_recommendations = min_usage_percent
    if weights is not None:
        thresholds.removal_candidate_weights = weights
    return thresholds.validate()
