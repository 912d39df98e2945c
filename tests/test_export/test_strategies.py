"""
Unit tests for the export strategies and the HTML payload converter.
"""

import json

import pytest

from type_dependencies.export.html_converter import convert
from type_dependencies.export.strategies import (
    DotExportStrategy,
    HtmlExportStrategy,
    JsonExportStrategy,
    MermaidExportStrategy,
    default_extension,
    get_export_strategy,
)
from type_dependencies.graph.models import DependencyGraph
from type_dependencies.shared.exceptions import ExportError


# ─── Fixtures ────────────────────────────────────────────────


@pytest.fixture
def graph():
    g = DependencyGraph()
    g.add_dependencies("MyApp.Order", ["MyApp.Order+Line", "MyApp.Customer"])
    g.add_dependencies("MyApp.Order+Line", ["MyApp.Product"])
    return g


# ──────────────────────────────────────────────────
# Format selection
# ──────────────────────────────────────────────────


class TestFormatSelection:

    @pytest.mark.parametrize("fmt, strategy", [
        ("dot", DotExportStrategy),
        ("json", JsonExportStrategy),
        ("JSON", JsonExportStrategy),
        ("mermaid", MermaidExportStrategy),
        ("html", HtmlExportStrategy),
        ("svg", DotExportStrategy),
        (None, DotExportStrategy),
    ])
    def test_strategy_for_format(self, fmt, strategy):
        assert isinstance(get_export_strategy(fmt), strategy)

    @pytest.mark.parametrize("fmt, ext", [
        ("dot", "dot"), ("json", "json"), ("mermaid", "mmd"), ("html", "html"), ("svg", "dot"),
    ])
    def test_default_extension(self, fmt, ext):
        assert default_extension(fmt) == ext


# ──────────────────────────────────────────────────
# Renderers
# ──────────────────────────────────────────────────


class TestDot:

    def test_render(self, graph):
        output = DotExportStrategy().render(graph)
        assert output.startswith("digraph TypeDependencies {\n")
        assert output.endswith("}\n")
        assert '  "MyApp.Order" -> "MyApp.Customer";' in output
        assert '  "MyApp.Order+Line" -> "MyApp.Product";' in output
        assert output.count("->") == 3

    def test_escape(self):
        assert DotExportStrategy.escape('a"b\\c\nd') == 'a\\"b\\\\c\\nd'


class TestJson:

    def test_render_is_sorted_snapshot(self, graph):
        assert json.loads(JsonExportStrategy().render(graph)) == {
            "MyApp.Order": ["MyApp.Customer", "MyApp.Order+Line"],
            "MyApp.Order+Line": ["MyApp.Product"],
        }


class TestMermaid:

    def test_render(self, graph):
        output = MermaidExportStrategy().render(graph)
        lines = output.splitlines()
        assert lines[:2] == ["```mermaid", "graph TD"]
        assert lines[-1] == "```"
        assert '    MyApp_Order["MyApp.Order"] --> MyApp_Customer["MyApp.Customer"]' in lines
        assert '    MyApp_Order_Line["MyApp.Order+Line"] --> MyApp_Product["MyApp.Product"]' in lines

    @pytest.mark.parametrize("label, node_id", [
        ("MyApp.Repository`1", "MyApp_Repository_1"),
        ("<>c__DisplayClass", "c_DisplayClass"),
        ("1Type", "_1Type"),
        ("<>", "Type"),
        ("Order[]", "Order"),
    ])
    def test_node_id(self, label, node_id):
        assert MermaidExportStrategy.node_id(label) == node_id

    def test_quotes_escaped(self):
        assert MermaidExportStrategy.escape('a"b') == "a&quot;b"


class TestHtml:

    def test_tokens_replaced(self, graph):
        output = HtmlExportStrategy(title="Orders <v2>").render(graph)
        assert "{#SOURCE_TOKEN#}" not in output
        assert "{#TITLE_TOKEN#}" not in output
        assert "Orders &lt;v2&gt;" in output
        assert '"from": "MyApp.Order"' in output

    def test_template_is_packaged(self):
        template = HtmlExportStrategy.load_template()
        assert "{#SOURCE_TOKEN#}" in template
        assert "{#TITLE_TOKEN#}" in template


class TestHtmlConverter:

    def test_projects_and_references(self, graph):
        data = convert(graph).model_dump(by_alias=True)
        assert [p["name"] for p in data["projects"]] == [
            "MyApp.Customer", "MyApp.Order", "MyApp.Order+Line", "MyApp.Product",
        ]
        assert data["packages"] == []
        assert data["references"] == [
            {"from": "MyApp.Order", "to": "MyApp.Customer"},
            {"from": "MyApp.Order", "to": "MyApp.Order+Line"},
            {"from": "MyApp.Order+Line", "to": "MyApp.Product"},
        ]

    def test_none_graph(self):
        with pytest.raises(ValueError):
            convert(None)


# ──────────────────────────────────────────────────
# Writing files
# ──────────────────────────────────────────────────


class TestExport:

    def test_writes_file(self, graph, tmp_path):
        target = tmp_path / "out.json"
        JsonExportStrategy().export(graph, target)
        assert json.loads(target.read_text(encoding="utf-8"))["MyApp.Order+Line"] == ["MyApp.Product"]

    def test_empty_graph(self, tmp_path):
        target = tmp_path / "out.dot"
        DotExportStrategy().export(DependencyGraph(), target)
        assert target.read_text() == "digraph TypeDependencies {\n}\n"

    def test_blank_output_path(self, graph):
        with pytest.raises(ValueError):
            DotExportStrategy().export(graph, " ")

    def test_none_graph(self, tmp_path):
        with pytest.raises(ValueError):
            DotExportStrategy().export(None, tmp_path / "out.dot")

    def test_unwritable_path(self, graph, tmp_path):
        with pytest.raises(ExportError, match="Could not write"):
            DotExportStrategy().export(graph, tmp_path / "missing" / "out.dot")
