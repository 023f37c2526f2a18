"""Tests for per-dependency report synthesis."""

from lopper.analysis import build_recommendations, count_usage, synthesize, synthesize_all
from lopper.models import (
    AttributionResult,
    DependencyReport,
    FileUsageSnapshot,
    ImportBinding,
    Location,
    ResolvedImport,
    Severity,
)


def _resolved(module, symbol, alias, dependency, path="a.py", line=1,
              wildcard=False, ambiguous=False, undeclared=False):
    return ResolvedImport(
        binding=ImportBinding(
            module=module,
            symbol=symbol,
            local_alias=alias,
            location=Location(file=path, line=line),
            wildcard=wildcard,
        ),
        attribution=AttributionResult(dependency_id=dependency, ambiguous=ambiguous, undeclared=undeclared),
    )


def _snapshot(path, text, imports):
    return FileUsageSnapshot(
        path=path,
        text=text,
        imports=imports,
        usage=count_usage(text, [item.binding for item in imports]),
    )


def _codes(items):
    return [item.code for item in items]


def _sample_snapshots():
    first = _snapshot("a.py", "from acme import Client, Token\nClient()\nClient()\n", [
        _resolved("acme", "Client", "Client", "acme", "a.py", 1),
        _resolved("acme", "Token", "Token", "acme", "a.py", 1),
    ])
    second = _snapshot("b.py", "from acme import Token\nToken()\nfrom other import x\n", [
        _resolved("acme", "Token", "Token", "acme", "b.py", 1),
        _resolved("other", "x", "x", "other", "b.py", 3),
    ])
    return [first, second]


def test_counts_and_percent():
    report, warnings = synthesize("ACME", _sample_snapshots())
    assert report.name == "acme"
    assert report.used_symbol_count == 2
    assert report.total_symbol_count == 2
    assert report.used_percent == 100.0
    assert warnings == []


def test_used_anywhere_wins_and_locations_merge():
    report, _ = synthesize("acme", _sample_snapshots())
    assert [(item.module, item.name) for item in report.used_imports] == [("acme", "Client"), ("acme", "Token")]
    token = report.used_imports[1]
    assert [loc.file for loc in token.locations] == ["b.py"]
    # Token is unused in a.py but used in b.py, so it never shows as unused
    assert report.unused_imports == []


def test_same_symbol_in_two_files_merges_locations():
    snapshots = [
        _snapshot(path, "from acme import Client, Gone\nClient()\n", [
            _resolved("acme", "Client", "Client", "acme", path, 1),
            _resolved("acme", "Gone", "Gone", "acme", path, 1),
        ])
        for path in ("a.py", "b.py")
    ]
    report, _ = synthesize("acme", snapshots)
    [client] = report.used_imports
    assert client.name == "Client"
    assert [loc.file for loc in client.locations] == ["a.py", "b.py"]
    [gone] = report.unused_imports
    assert gone.name == "Gone"
    assert [loc.file for loc in gone.locations] == ["a.py", "b.py"]
    assert (report.used_symbol_count, report.total_symbol_count) == (1, 2)


def test_top_symbols_order():
    report, _ = synthesize("acme", _sample_snapshots())
    assert [(s.name, s.count) for s in report.top_used_symbols] == [("Client", 2), ("Token", 1)]


def test_top_symbols_capped_at_five():
    names = ["a1", "a2", "a3", "a4", "a5", "a6", "a7"]
    text = "\n".join(f"import {n}" for n in names) + "\n" + " ".join(names) + "\n"
    imports = [_resolved("pkg", n, n, "pkg", line=i + 1) for i, n in enumerate(names)]
    report, _ = synthesize("pkg", [_snapshot("a.py", text, imports)])
    assert len(report.top_used_symbols) == 5
    assert [s.name for s in report.top_used_symbols] == names[:5]


def test_wildcard_counts_as_used():
    snapshot = _snapshot("a.py", "from acme import *\n", [
        _resolved("acme", "*", "", "acme", wildcard=True),
    ])
    report, warnings = synthesize("acme", [snapshot])
    assert report.used_symbol_count == 1
    assert [(s.name, s.count) for s in report.top_used_symbols] == [("*", 1)]
    assert _codes(report.risk_cues) == ["wildcard-import"]
    assert "avoid-wildcard-imports" in _codes(report.recommendations)
    assert any("wildcard" in line for line in warnings)


def test_blank_import_is_unused_side_effect():
    snapshot = _snapshot("main.go", 'import _ "github.com/lib/pq"\n', [
        _resolved("github.com/lib/pq", "_", "", "github.com/lib/pq", "main.go", undeclared=True),
    ])
    report, warnings = synthesize("github.com/lib/pq", [snapshot])
    assert report.used_imports == []
    assert [item.name for item in report.unused_imports] == ["_"]
    assert _codes(report.risk_cues) == ["side-effect-import", "undeclared-package-usage"]
    assert _codes(report.recommendations) == [
        "declare-dependency-explicitly",
        "remove-unused-dependency",
        "reduce-low-usage-package-surface",
    ]
    assert len(warnings) == 2


def test_ambiguous_cue_and_recommendation():
    snapshot = _snapshot("a.cs", "using Acme.Foo;\nFoo.Run();\n", [
        _resolved("Acme.Foo", "Foo", "Foo", "acme.bar", "a.cs", ambiguous=True),
    ])
    report, _ = synthesize("acme.bar", [snapshot])
    cue = report.risk_cues[0]
    assert cue.code == "ambiguous-namespace-mapping"
    assert cue.severity == Severity.MEDIUM
    assert _codes(report.recommendations) == ["review-namespace-mapping"]


def test_no_imports_found():
    report, warnings = synthesize("missing", _sample_snapshots())
    assert report.total_symbol_count == 0
    assert report.used_percent == 0
    assert warnings == ['no imports found for dependency "missing"']
    assert report.recommendations == []


def test_recommendation_gating_by_threshold():
    report = DependencyReport(name="acme", used_symbol_count=1, total_symbol_count=2, used_percent=50.0)
    assert "reduce-low-usage-package-surface" in _codes(build_recommendations(report, threshold=80))
    assert "reduce-low-usage-package-surface" not in _codes(build_recommendations(report, threshold=0))


def test_recommendation_order():
    report = DependencyReport(name="acme", total_symbol_count=1, used_percent=0.0)
    report.unused_imports = []
    recs = build_recommendations(report, ambiguous_count=1, undeclared_count=1, threshold=40)
    assert _codes(recs) == [
        "declare-dependency-explicitly",
        "review-namespace-mapping",
        "reduce-low-usage-package-surface",
    ]
    assert [rec.priority for rec in recs] == [Severity.HIGH, Severity.MEDIUM, Severity.LOW]


def test_repeated_synthesis_is_identical():
    snapshots = _sample_snapshots()
    first, first_warnings = synthesize("acme", snapshots)
    second, second_warnings = synthesize("acme", snapshots)
    assert first == second
    assert repr(first) == repr(second)
    assert first_warnings == second_warnings


def test_used_never_exceeds_total():
    snapshots = _sample_snapshots()
    for dependency in ("acme", "other", "missing"):
        report, _ = synthesize(dependency, snapshots)
        assert report.used_symbol_count <= report.total_symbol_count
        if report.total_symbol_count == 0:
            assert report.used_percent == 0


def test_synthesize_all_keeps_input_order():
    snapshots = _sample_snapshots()
    serial, serial_warnings = synthesize_all(["other", "acme", "missing"], snapshots)
    threaded, threaded_warnings = synthesize_all(["other", "acme", "missing"], snapshots, max_workers=4)
    assert [r.name for r in serial] == ["other", "acme", "missing"]
    assert serial == threaded
    assert serial_warnings == threaded_warnings
