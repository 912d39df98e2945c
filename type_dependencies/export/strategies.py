"""
Export Strategies — render a DependencyGraph as Graphviz dot, JSON,
Mermaid markup or a self-contained HTML page.
"""

import html
import json
import logging
import re
from abc import ABC, abstractmethod
from importlib import resources
from pathlib import Path

from type_dependencies.export.html_converter import convert
from type_dependencies.graph.models import DependencyGraph
from type_dependencies.shared.exceptions import ExportError

logger = logging.getLogger("type_dependencies.export")

HTML_TITLE = "Type Dependencies"
SOURCE_TOKEN = "{#SOURCE_TOKEN#}"
TITLE_TOKEN = "{#TITLE_TOKEN#}"

_EXTENSIONS = {"json": "json", "mermaid": "mmd", "html": "html"}


class ExportStrategy(ABC):
    """Renders a graph to text and writes it to a file."""

    @abstractmethod
    def render(self, graph: DependencyGraph) -> str:
        """Return the full export as a string."""

    def export(self, graph: DependencyGraph, output_path: str | Path) -> None:
        if graph is None:
            raise ValueError("graph must not be None")
        if output_path is None or not str(output_path).strip():
            raise ValueError("Output path cannot be null or empty.")

        content = self.render(graph)
        try:
            Path(output_path).write_text(content, encoding="utf-8")
        except OSError as exc:
            raise ExportError(f"Could not write {output_path}: {exc}") from exc
        logger.info("Exported %d types to %s", len(graph), output_path)


class DotExportStrategy(ExportStrategy):
    """``digraph TypeDependencies { "A" -> "B"; }``"""

    @staticmethod
    def escape(text: str) -> str:
        return (
            text.replace("\\", "\\\\")
            .replace('"', '\\"')
            .replace("\n", "\\n")
            .replace("\r", "\\r")
        )

    def render(self, graph: DependencyGraph) -> str:
        lines = ["digraph TypeDependencies {"]
        for type_name, dependencies in graph.dependencies.items():
            for dependency in sorted(dependencies):
                lines.append(f'  "{self.escape(type_name)}" -> "{self.escape(dependency)}";')
        lines.append("}")
        return "\n".join(lines) + "\n"


class JsonExportStrategy(ExportStrategy):
    """Indented ``{type: sorted dependencies}``, the same shape sessions persist."""

    def render(self, graph: DependencyGraph) -> str:
        return json.dumps(graph.to_snapshot(), indent=2)


_MERMAID_INVALID = re.compile(r"[ \-.+\[\]<>(){},:;/\\&*%$#@!?=|~`^]")


class MermaidExportStrategy(ExportStrategy):
    """Fenced ``graph TD`` block with one ``A --> B`` line per edge."""

    @staticmethod
    def escape(text: str) -> str:
        return text.replace('"', "&quot;").replace("\n", " ").replace("\r", " ")

    @staticmethod
    def node_id(label: str) -> str:
        """Mermaid ids: word characters only, not starting with a digit."""
        node_id = re.sub(r"_{2,}", "_", _MERMAID_INVALID.sub("_", label)).strip("_")
        if not node_id:
            return "Type"
        if node_id[0].isdigit():
            node_id = "_" + node_id
        return node_id

    def render(self, graph: DependencyGraph) -> str:
        lines = ["```mermaid", "graph TD"]
        for type_name, dependencies in graph.dependencies.items():
            label = self.escape(type_name)
            type_id = self.node_id(label)
            for dependency in sorted(dependencies):
                dep_label = self.escape(dependency)
                lines.append(
                    f'    {type_id}["{label}"] --> {self.node_id(dep_label)}["{dep_label}"]'
                )
        lines.append("```")
        return "\n".join(lines) + "\n"


class HtmlExportStrategy(ExportStrategy):
    """Interactive page built from the packaged template."""

    def __init__(self, title: str = HTML_TITLE):
        self._title = title

    @staticmethod
    def load_template() -> str:
        return (
            resources.files("type_dependencies.export")
            .joinpath("templates/dependency_graph.html")
            .read_text(encoding="utf-8")
        )

    def render(self, graph: DependencyGraph) -> str:
        payload = json.dumps(convert(graph).model_dump(by_alias=True), indent=2)
        return (
            self.load_template()
            .replace(SOURCE_TOKEN, payload)
            .replace(TITLE_TOKEN, html.escape(self._title))
        )


def default_extension(export_format: str | None) -> str:
    return _EXTENSIONS.get((export_format or "dot").lower(), "dot")


def get_export_strategy(export_format: str | None) -> ExportStrategy:
    """Strategy for a format name; unknown names fall back to dot."""
    fmt = (export_format or "dot").lower()
    if fmt == "json":
        return JsonExportStrategy()
    if fmt == "mermaid":
        return MermaidExportStrategy()
    if fmt == "html":
        return HtmlExportStrategy()
    return DotExportStrategy()
