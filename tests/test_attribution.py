"""Tests for dependency attribution."""

from lopper.analysis import DependencyMapper, attribute, match_score, normalize_dependency_id
from lopper.analysis.profiles import CPP_PROFILE, GO_PROFILE, JVM_PROFILE, PYTHON_PROFILE
from lopper.manifest import jvm
from lopper.manifest.base import DeclaredBuilder
from lopper.models import DeclaredDependencySet


def _declared(*ids, hints=(), aliases=()):
    return DeclaredDependencySet(ids=frozenset(ids), hints=tuple(hints), aliases=tuple(aliases))


def test_normalize():
    assert normalize_dependency_id("  Newtonsoft.Json \n") == "newtonsoft.json"
    assert normalize_dependency_id("") == ""


def test_exact_match():
    result = attribute("Newtonsoft.Json", _declared("newtonsoft.json", "serilog"))
    assert result.dependency_id == "newtonsoft.json"
    assert not result.ambiguous
    assert not result.undeclared


def test_exact_beats_prefix():
    declared = _declared("serilog", "serilog.sinks.console")
    result = attribute("Serilog.Sinks.Console", declared)
    assert result.dependency_id == "serilog.sinks.console"
    assert not result.ambiguous


def test_equal_prefix_scores_are_ambiguous():
    declared = _declared("serilog", "serilog.sinks.console")
    result = attribute("Serilog.Sinks.Console.Themes", declared)
    assert result.dependency_id == "serilog"
    assert result.ambiguous


def test_first_segment_tie_is_ambiguous():
    result = attribute("Acme.Foo", _declared("acme.bar", "acme.baz"))
    assert result.dependency_id == "acme.bar"
    assert result.ambiguous
    assert not result.undeclared


def test_only_top_two_compared_for_ambiguity():
    # acme.foo wins outright; the tie between the 60-point runners-up is ignored
    declared = _declared("acme.foo", "acme.bar", "acme.baz")
    result = attribute("Acme.Foo.Client", declared)
    assert result.dependency_id == "acme.foo"
    assert not result.ambiguous


def test_undeclared_fallback():
    result = attribute("Unknown.Vendor.Component", _declared())
    assert result.dependency_id == "unknown.vendor"
    assert result.undeclared
    assert not result.ambiguous


def test_score_tiers():
    assert match_score("acme.foo", "acme.foo") == 100
    assert match_score("acme.foo.bar", "acme.foo") == 90
    assert match_score("acme", "acme.foo") == 75
    assert match_score("acme.x", "acme.y") == 60
    assert match_score("one.core", "two.core") == 50
    assert match_score("xacmex", "acme") == 40
    assert match_score("alpha", "beta") == 0
    assert match_score("", "beta") == 0


def test_prefix_requires_separator():
    assert match_score("acme.foobar", "acme.foo", GO_PROFILE) == 0
    assert match_score("acme.foo.bar", "acme.foo", GO_PROFILE) == 0
    assert match_score("github.com/acme/foo/bar", "github.com/acme/foo", GO_PROFILE) == 90


def test_stdlib_and_local_are_filtered():
    declared = _declared("github.com/pkg/errors")
    mapper = DependencyMapper(declared, GO_PROFILE)
    assert mapper.resolve("fmt").filtered
    assert mapper.resolve("net/http").filtered
    assert mapper.resolve("example.com/app/internal", ["example.com/app"]).filtered
    assert not mapper.resolve("example.com/application", ["example.com/app"]).filtered


def test_go_fallback_uses_three_segments():
    result = attribute("github.com/lib/pq/oid", _declared(), GO_PROFILE)
    assert result.dependency_id == "github.com/lib/pq"
    assert result.undeclared


def test_go_replace_hint_maps_to_original_module():
    declared = _declared("github.com/old/lib", hints=[("github.com/new/lib", "github.com/old/lib")])
    result = attribute("github.com/new/lib/client", declared, GO_PROFILE)
    assert result.dependency_id == "github.com/old/lib"
    assert not result.undeclared


def test_jvm_group_hint():
    declared = _declared(
        "org.slf4j:slf4j-api",
        hints=[("org.slf4j", "org.slf4j:slf4j-api"), ("slf4j-api", "org.slf4j:slf4j-api")],
    )
    assert attribute("org.slf4j.Logger", declared, JVM_PROFILE).dependency_id == "org.slf4j:slf4j-api"
    assert attribute("java.util.List", declared, JVM_PROFILE).filtered
    assert attribute("com.example.app.Helper", declared, JVM_PROFILE, ["com.example.app"]).filtered


def _jvm_declared(*coordinates):
    builder = DeclaredBuilder()
    for coordinate in coordinates:
        jvm.add_coordinate(builder, *coordinate.split(":"))
    return builder.build()


def test_jvm_guava_resolves_through_organisation_alias():
    declared = _jvm_declared("com.google.guava:guava", "org.slf4j:slf4j-api")
    result = attribute("com.google.common.collect.ImmutableList", declared, JVM_PROFILE)
    assert result.dependency_id == "com.google.guava:guava"
    assert not result.undeclared
    assert not result.ambiguous


def test_jvm_jackson_resolves_through_organisation_alias():
    declared = _jvm_declared("com.fasterxml.jackson.core:jackson-databind")
    result = attribute("com.fasterxml.jackson.databind.ObjectMapper", declared, JVM_PROFILE)
    assert result.dependency_id == "com.fasterxml.jackson.core:jackson-databind"
    assert not result.undeclared


def test_jvm_prefix_match_beats_alias():
    declared = _jvm_declared("com.google.guava:guava", "com.google.code.gson:gson")
    result = attribute("com.google.gson.Gson", declared, JVM_PROFILE)
    # no group prefix matches, so the shared com.google alias decides
    assert result.dependency_id == "com.google.code.gson:gson"
    assert result.ambiguous
    exact = attribute("com.google.code.gson.internal.Excluder", declared, JVM_PROFILE)
    assert exact.dependency_id == "com.google.code.gson:gson"
    assert not exact.ambiguous


def test_alias_uses_longest_module_prefix():
    declared = _declared(
        "acme:core", "acme:web",
        aliases=[("com.acme", "acme:core"), ("com.acme.web", "acme:web")],
    )
    assert attribute("com.acme.web.Server", declared, JVM_PROFILE).dependency_id == "acme:web"
    assert attribute("com.acme.util.Strings", declared, JVM_PROFILE).dependency_id == "acme:core"
    other = attribute("org.other.Thing", declared, JVM_PROFILE)
    assert other.dependency_id == "org.other"
    assert other.undeclared


def test_python_import_name_hint_and_canonical_form():
    declared = _declared("pyyaml", "typing-extensions", hints=[("yaml", "pyyaml")])
    assert attribute("yaml", declared, PYTHON_PROFILE).dependency_id == "pyyaml"
    assert attribute("typing_extensions", declared, PYTHON_PROFILE).dependency_id == "typing-extensions"
    assert attribute("os.path", declared, PYTHON_PROFILE).filtered


def test_python_fallback_is_root_module():
    result = attribute("numpy.linalg", _declared(), PYTHON_PROFILE)
    assert result.dependency_id == "numpy"
    assert result.undeclared


def test_cpp_headers():
    declared = _declared("fmt", "nlohmann-json", hints=[("nlohmann/json", "nlohmann-json")])
    assert attribute("fmt/format.h", declared, CPP_PROFILE).dependency_id == "fmt"
    assert attribute("nlohmann/json.hpp", declared, CPP_PROFILE).dependency_id == "nlohmann-json"
    assert attribute("vector", declared, CPP_PROFILE).filtered
    assert attribute("sys/types.h", declared, CPP_PROFILE).filtered
    boost = attribute("boost/asio.hpp", declared, CPP_PROFILE)
    assert boost.dependency_id == "boost"
    assert boost.undeclared


def test_attribution_is_deterministic():
    declared = _declared("acme.bar", "acme.baz", "acme.qux")
    results = {attribute("Acme.Foo", declared) for _ in range(5)}
    assert len(results) == 1
