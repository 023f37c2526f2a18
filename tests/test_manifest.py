"""Tests for the per-ecosystem manifest loaders."""

from pathlib import Path

from lopper.manifest import DeclaredBuilder, cpp, dotnet, golang, jvm, python

FIXTURES = Path(__file__).parent / "fixtures"


def _files(root):
    return sorted(path for path in root.rglob("*") if path.is_file())


def test_declared_builder_normalizes_and_skips_self_hints():
    builder = DeclaredBuilder()
    assert builder.add("  Serilog ") == "serilog"
    builder.hint("Serilog", "serilog")
    builder.hint("Log", "Serilog")
    declared = builder.build()
    assert declared.sorted_ids() == ["serilog"]
    assert declared.hints == (("log", "serilog"),)


def test_dotnet_project_file():
    root = FIXTURES / "dotnet_repo"
    info = dotnet.load(root, _files(root))
    assert info.declared.sorted_ids() == ["dapper", "newtonsoft.json", "serilog"]
    assert info.local_prefixes == ("App",)
    assert info.warnings == []


def test_dotnet_central_packages():
    text = """
    <Project>
      <ItemGroup>
        <PackageVersion Include="Polly" Version="8.0.0" />
        <PackageVersion Include='Serilog.Sinks.Console' Version="5.0.0" />
      </ItemGroup>
    </Project>
    """
    assert dotnet.parse_central_packages(text) == ["Polly", "Serilog.Sinks.Console"]


def test_dotnet_assembly_name_is_local():
    text = "<Project><PropertyGroup><AssemblyName>Acme.Tools</AssemblyName></PropertyGroup></Project>"
    packages, namespaces = dotnet.parse_project(text)
    assert packages == []
    assert namespaces == ["Acme.Tools"]


def test_go_mod_parsing():
    module = golang.parse_go_mod((FIXTURES / "go_repo" / "go.mod").read_text())
    assert module.path == "example.com/app"
    assert module.requires == [
        "github.com/pkg/errors",
        "github.com/stretchr/testify",
        "gopkg.in/yaml.v3",
        "github.com/old/lib",
    ]
    # local filesystem replacements are not import paths
    assert module.replacements == {"github.com/new/lib": "github.com/old/lib"}


def test_go_replace_block():
    text = "module m\n\nreplace (\n\ta.io/x => b.io/x v1.0.0 // fork\n\tc.io/y => ./y\n)\n"
    assert golang.parse_go_mod(text).replacements == {"b.io/x": "a.io/x"}


def test_go_load():
    root = FIXTURES / "go_repo"
    info = golang.load(root, _files(root))
    assert "github.com/old/lib" in info.declared.ids
    assert ("github.com/new/lib", "github.com/old/lib") in info.declared.hints
    assert info.local_prefixes == ("example.com/app",)


def test_pom_parsing():
    text = (FIXTURES / "jvm_repo" / "pom.xml").read_text()
    assert jvm.parse_pom(text) == [
        ("org.apache.commons", "commons-lang3"),
        ("org.slf4j", "slf4j-api"),
        ("junit", "junit"),
    ]


def test_gradle_parsing():
    text = """
    dependencies {
        implementation("com.squareup.okhttp3:okhttp:4.12.0")
        testImplementation 'org.junit.jupiter:junit-jupiter:5.10.0'
        implementation project(':core')
    }
    """
    assert jvm.parse_gradle(text) == [
        ("com.squareup.okhttp3", "okhttp"),
        ("org.junit.jupiter", "junit-jupiter"),
    ]


def test_jvm_coordinate_hints():
    builder = DeclaredBuilder()
    jvm.add_coordinate(builder, "org.apache.commons", "commons-lang3")
    declared = builder.build()
    assert declared.sorted_ids() == ["org.apache.commons:commons-lang3"]
    assert dict(declared.hints) == {
        "org.apache.commons": "org.apache.commons:commons-lang3",
        "org.apache.commons.commons.lang3": "org.apache.commons:commons-lang3",
    }
    assert sorted(declared.aliases) == [
        ("commons", "org.apache.commons:commons-lang3"),
        ("commons.lang3", "org.apache.commons:commons-lang3"),
        ("org.apache", "org.apache.commons:commons-lang3"),
    ]


def test_jvm_single_segment_group_has_only_artifact_alias():
    builder = DeclaredBuilder()
    jvm.add_coordinate(builder, "junit", "junit")
    assert builder.build().aliases == (("junit", "junit:junit"),)


def test_requirements_parsing():
    text = (FIXTURES / "python_repo" / "requirements.txt").read_text()
    assert python.parse_requirements(text) == ["requests", "pyyaml", "rich"]
    assert python.requirement_name("git+https://example.com/repo.git") == ""
    assert python.requirement_name("Foo_Bar.baz[extra]>=1") == "foo-bar-baz"


def test_pyproject_parsing():
    text = """
[project]
dependencies = ["httpx>=0.27", "Typing_Extensions"]

[project.optional-dependencies]
test = ["pytest"]

[tool.poetry.dependencies]
python = "^3.11"
click = "^8"

[tool.poetry.group.dev.dependencies]
black = "*"
"""
    assert python.parse_pyproject(text) == ["httpx", "typing-extensions", "pytest", "click", "black"]


def test_python_load():
    root = FIXTURES / "python_repo"
    info = python.load(root, _files(root))
    assert info.declared.sorted_ids() == ["pytest", "pyyaml", "requests", "rich"]
    assert ("yaml", "pyyaml") in info.declared.hints
    assert info.local_prefixes == ("app",)


def test_python_invalid_pyproject_warns(tmp_path):
    (tmp_path / "pyproject.toml").write_text("[project\n")
    info = python.load(tmp_path, [tmp_path / "pyproject.toml"])
    assert info.declared.sorted_ids() == []
    assert info.warnings and info.warnings[0].startswith("unable to parse pyproject.toml")


def test_vcpkg_and_conan():
    root = FIXTURES / "cpp_repo"
    info = cpp.load(root, _files(root))
    assert info.declared.sorted_ids() == ["fmt", "nlohmann-json", "zlib"]
    assert ("nlohmann/json", "nlohmann-json") in info.declared.hints

    conan = "[requires]\nspdlog/1.12.0\nboost/1.83.0 # pinned\n\n[generators]\nCMakeDeps\n"
    assert cpp.parse_conanfile(conan) == ["spdlog", "boost"]


def test_invalid_vcpkg_warns(tmp_path):
    (tmp_path / "vcpkg.json").write_text("{not json")
    info = cpp.load(tmp_path, [tmp_path / "vcpkg.json"])
    assert len(info.declared) == 0
    assert info.warnings[0].startswith("unable to parse vcpkg.json")
