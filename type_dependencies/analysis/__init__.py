"""Edge ingestion from the external metadata extractor."""

from type_dependencies.analysis.analyzer import (
    EdgeManifestAnalyzer,
    ExternalExtractorAnalyzer,
    TypeAnalyzer,
    analyze_modules,
    build_analyzer,
)

__all__ = [
    "EdgeManifestAnalyzer",
    "ExternalExtractorAnalyzer",
    "TypeAnalyzer",
    "analyze_modules",
    "build_analyzer",
]
