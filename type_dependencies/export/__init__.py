"""Graph renderers: dot, json, mermaid and html."""

from type_dependencies.export.strategies import (
    DotExportStrategy,
    ExportStrategy,
    HtmlExportStrategy,
    JsonExportStrategy,
    MermaidExportStrategy,
    default_extension,
    get_export_strategy,
)

__all__ = [
    "DotExportStrategy",
    "ExportStrategy",
    "HtmlExportStrategy",
    "JsonExportStrategy",
    "MermaidExportStrategy",
    "default_extension",
    "get_export_strategy",
]
