"""Tests for threshold configuration."""

import pytest

from lopper.analysis import DEFAULT_WEIGHTS
from lopper.config import ConfigError, Thresholds, find_config, load_thresholds, parse_weights
from lopper.models import RemovalCandidateWeights


def test_defaults_without_config(tmp_path):
    thresholds = load_thresholds(tmp_path)
    assert thresholds.min_usage_percent_for_recommendations == 40
    assert thresholds.removal_candidate_weights == DEFAULT_WEIGHTS


def test_config_file_is_discovered(tmp_path):
    (tmp_path / ".lopper.yml").write_text(
        "thresholds:\n"
        "  min_usage_percent_for_recommendations: 55\n"
        "  removal_candidate_weight_usage: 0.7\n"
    )
    assert find_config(tmp_path) == tmp_path / ".lopper.yml"
    thresholds = load_thresholds(tmp_path)
    assert thresholds.min_usage_percent_for_recommendations == 55
    assert thresholds.removal_candidate_weights == RemovalCandidateWeights(usage=0.7, impact=0.30, confidence=0.20)


def test_overrides_beat_config(tmp_path):
    (tmp_path / ".lopper.yaml").write_text("thresholds:\n  min_usage_percent_for_recommendations: 55\n")
    weights = RemovalCandidateWeights(usage=1, impact=0, confidence=0)
    thresholds = load_thresholds(tmp_path, min_usage_percent=80, weights=weights)
    assert thresholds.min_usage_percent_for_recommendations == 80
    assert thresholds.removal_candidate_weights == weights


def test_explicit_config_path(tmp_path):
    path = tmp_path / "custom.yml"
    path.write_text("thresholds:\n  min_usage_percent_for_recommendations: 10\n")
    assert load_thresholds(tmp_path, config_path=path).min_usage_percent_for_recommendations == 10


def test_empty_config_file(tmp_path):
    (tmp_path / ".lopper.yml").write_text("")
    assert load_thresholds(tmp_path).min_usage_percent_for_recommendations == 40


@pytest.mark.parametrize("content, message", [
    ("thresholds: [1, 2]\n", "must be a mapping"),
    ("- a\n- b\n", "top level must be a mapping"),
    ("other: 1\n", "unknown key"),
    ("thresholds:\n  min_usage: 3\n", "unknown threshold key"),
    ("thresholds: {min_usage_percent_for_recommendations: 101}\n", "between 0 and 100"),
    ("thresholds: {min_usage_percent_for_recommendations: true}\n", "between 0 and 100"),
    ("thresholds: {removal_candidate_weight_usage: -1}\n", "non-negative"),
    ("thresholds: {removal_candidate_weight_usage: abc}\n", "must be a number"),
    ("thresholds: [\n", "invalid YAML"),
])
def test_invalid_config(tmp_path, content, message):
    (tmp_path / ".lopper.yml").write_text(content)
    with pytest.raises(ConfigError, match=message):
        load_thresholds(tmp_path)


def test_all_zero_weights_rejected(tmp_path):
    with pytest.raises(ConfigError, match="must be positive"):
        load_thresholds(tmp_path, weights=RemovalCandidateWeights(0, 0, 0))


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        Thresholds(min_usage_percent_for_recommendations=-1).validate()


def test_effective_thresholds_scale_weights():
    effective = Thresholds(30, RemovalCandidateWeights(2, 1, 1)).effective()
    assert effective.min_usage_percent_for_recommendations == 30
    assert effective.removal_candidate_weights == RemovalCandidateWeights(usage=0.5, impact=0.25, confidence=0.25)


def test_parse_weights():
    assert parse_weights("0.6, 0.2, 0.2") == RemovalCandidateWeights(usage=0.6, impact=0.2, confidence=0.2)
    with pytest.raises(ConfigError, match="three comma-separated"):
        parse_weights("1,2")
    with pytest.raises(ConfigError, match="must be numbers"):
        parse_weights("a,b,c")
    with pytest.raises(ConfigError, match="finite"):
        parse_weights("nan,1,1")
