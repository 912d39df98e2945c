"""
Unit tests for the analyzers that read extractor output.

The external extractor process is replaced with a patched
``subprocess.run``; manifests are written to ``tmp_path``.
"""

import json
import subprocess
from unittest.mock import patch

import pytest

from type_dependencies.analysis.analyzer import (
    EdgeManifestAnalyzer,
    ExternalExtractorAnalyzer,
    TypeAnalyzer,
    analyze_modules,
    build_analyzer,
)
from type_dependencies.shared.config import BaseTypeDepSettings
from type_dependencies.shared.exceptions import AnalysisError


# ─── Fixtures ────────────────────────────────────────────────


ORDERS_EDGES = {
    "MyApp.Orders.Order": [
        "MyApp.Orders.Order/Line",
        "System.String",
        "MyApp.Repository`1<MyApp.Orders.Order>",
        "Microsoft.Extensions.Logging.ILogger",
    ],
    "MyApp.Orders.Order/Line": ["MyApp.Catalog.Product", "System.Decimal"],
    "MyApp.Orders.Empty": ["System.Object"],
    "System.Runtime.CompilerServices.Attr": ["MyApp.Orders.Order"],
}


@pytest.fixture
def dll(tmp_path):
    path = tmp_path / "MyApp.Orders.dll"
    path.write_bytes(b"MZ")
    return path


@pytest.fixture
def dll_with_manifest(dll):
    (dll.parent / (dll.name + ".deps.json")).write_text(json.dumps(ORDERS_EDGES))
    return dll


# ──────────────────────────────────────────────────
# EdgeManifestAnalyzer
# ──────────────────────────────────────────────────


class TestEdgeManifestAnalyzer:

    def test_reads_sidecar_manifest(self, dll_with_manifest):
        graph = EdgeManifestAnalyzer().analyze_assembly(str(dll_with_manifest))

        assert graph.get_dependencies("MyApp.Orders.Order") == frozenset({
            "MyApp.Orders.Order+Line", "MyApp.Repository`1",
        })
        assert graph.get_dependencies("MyApp.Orders.Order+Line") == frozenset({
            "MyApp.Catalog.Product",
        })

    def test_framework_only_type_has_no_entry(self, dll_with_manifest):
        graph = EdgeManifestAnalyzer().analyze_assembly(str(dll_with_manifest))
        assert not graph.contains_type("MyApp.Orders.Empty")

    def test_framework_dependents_dropped(self, dll_with_manifest):
        graph = EdgeManifestAnalyzer().analyze_assembly(str(dll_with_manifest))
        assert not any(t.startswith("System.") for t in graph.dependencies)

    def test_reads_json_path_directly(self, tmp_path):
        manifest = tmp_path / "edges.json"
        manifest.write_text(json.dumps({"A.B": ["A.C"]}))
        graph = EdgeManifestAnalyzer().analyze_assembly(str(manifest))
        assert graph.get_dependencies("A.B") == frozenset({"A.C"})

    def test_manifest_path(self):
        assert EdgeManifestAnalyzer.manifest_path("/x/App.dll").name == "App.dll.deps.json"
        assert EdgeManifestAnalyzer.manifest_path("/x/edges.JSON").name == "edges.JSON"

    def test_missing_manifest(self, dll):
        with pytest.raises(AnalysisError, match="Dependency manifest not found"):
            EdgeManifestAnalyzer().analyze_assembly(str(dll))

    def test_invalid_json(self, dll):
        (dll.parent / (dll.name + ".deps.json")).write_text("{not json")
        with pytest.raises(AnalysisError, match="Could not read"):
            EdgeManifestAnalyzer().analyze_assembly(str(dll))

    @pytest.mark.parametrize("payload", [["A"], {"A": "B"}, {"A": [1, 2]}])
    def test_wrong_shape(self, dll, payload):
        (dll.parent / (dll.name + ".deps.json")).write_text(json.dumps(payload))
        with pytest.raises(AnalysisError):
            EdgeManifestAnalyzer().analyze_assembly(str(dll))

    def test_blank_path(self):
        with pytest.raises(ValueError):
            EdgeManifestAnalyzer().analyze_assembly("  ")

    def test_custom_framework_namespaces(self, dll_with_manifest):
        graph = EdgeManifestAnalyzer(["MyApp.Catalog"]).analyze_assembly(str(dll_with_manifest))
        assert graph.get_dependencies("MyApp.Orders.Order+Line") == frozenset({"System.Decimal"})


# ──────────────────────────────────────────────────
# ExternalExtractorAnalyzer
# ──────────────────────────────────────────────────


def _completed(stdout: str = "", returncode: int = 0, stderr: str = "") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestExternalExtractorAnalyzer:

    def test_runs_command_with_path_appended(self, dll):
        with patch("type_dependencies.analysis.analyzer.subprocess.run") as mock_run:
            mock_run.return_value = _completed(json.dumps({"A.B": ["A.C", "System.Int32"]}))
            graph = ExternalExtractorAnalyzer(["typedep-extract", "--json"]).analyze_assembly(str(dll))

        args, kwargs = mock_run.call_args
        assert args[0] == ["typedep-extract", "--json", str(dll)]
        assert kwargs["capture_output"] is True
        assert graph.get_dependencies("A.B") == frozenset({"A.C"})

    def test_nonzero_exit(self, dll):
        with patch("type_dependencies.analysis.analyzer.subprocess.run") as mock_run:
            mock_run.return_value = _completed(returncode=2, stderr="bad image")
            with pytest.raises(AnalysisError, match="exited with code 2"):
                ExternalExtractorAnalyzer(["extract"]).analyze_assembly(str(dll))

    def test_non_json_output(self, dll):
        with patch("type_dependencies.analysis.analyzer.subprocess.run") as mock_run:
            mock_run.return_value = _completed("Loading...")
            with pytest.raises(AnalysisError, match="is not JSON"):
                ExternalExtractorAnalyzer(["extract"]).analyze_assembly(str(dll))

    def test_command_not_found(self, dll):
        with patch("type_dependencies.analysis.analyzer.subprocess.run", side_effect=FileNotFoundError):
            with pytest.raises(AnalysisError, match="Extractor command not found: extract"):
                ExternalExtractorAnalyzer(["extract"]).analyze_assembly(str(dll))

    def test_missing_assembly(self, tmp_path):
        with pytest.raises(AnalysisError, match="Assembly not found"):
            ExternalExtractorAnalyzer(["extract"]).analyze_assembly(str(tmp_path / "Nope.dll"))

    def test_empty_command_rejected(self):
        with pytest.raises(ValueError):
            ExternalExtractorAnalyzer([])


# ──────────────────────────────────────────────────
# build_analyzer / analyze_modules
# ──────────────────────────────────────────────────


class _StaticAnalyzer(TypeAnalyzer):

    def __init__(self, edges: dict[str, dict[str, list[str]]]):
        super().__init__()
        self._edges = edges

    def analyze_assembly(self, assembly_path):
        if assembly_path not in self._edges:
            raise AnalysisError("unreadable module")
        return self._graph_from_raw(self._edges[assembly_path], assembly_path)


class TestBuildAnalyzer:

    def test_manifest_by_default(self):
        assert isinstance(build_analyzer(BaseTypeDepSettings()), EdgeManifestAnalyzer)

    def test_extractor_when_configured(self):
        settings = BaseTypeDepSettings(extractor_command=["dotnet", "extract.dll"])
        assert isinstance(build_analyzer(settings), ExternalExtractorAnalyzer)


class TestAnalyzeModules:

    def test_merges_modules(self):
        analyzer = _StaticAnalyzer({
            "a.dll": {"A.X": ["B.Y"]},
            "b.dll": {"B.Y": ["A.X"], "A.X": ["B.Z"]},
        })
        graph = analyze_modules(analyzer, ["a.dll", "b.dll"])
        assert graph.get_dependencies("A.X") == frozenset({"B.Y", "B.Z"})
        assert graph.get_dependencies("B.Y") == frozenset({"A.X"})

    def test_failure_names_module(self):
        analyzer = _StaticAnalyzer({"a.dll": {"A.X": ["B.Y"]}})
        with pytest.raises(AnalysisError) as exc_info:
            analyze_modules(analyzer, ["a.dll", "broken.dll"])
        assert exc_info.value.message == "Error analyzing broken.dll: unreadable module"
