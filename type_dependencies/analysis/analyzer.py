"""
Type Analyzers — turn extractor output for one compiled module into a
DependencyGraph.

The metadata extractor that walks base types, interfaces, fields,
properties, method signatures, attributes and generic constraints is
an external program.  It emits a JSON object mapping each type to the
list of types it depends on; the analyzers here read that output,
canonicalise every name and drop framework-owned types.
"""

import json
import logging
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

from type_dependencies.analysis.type_names import (
    DEFAULT_FRAMEWORK_NAMESPACES,
    is_framework_type,
    normalize_type_name,
)
from type_dependencies.graph.models import DependencyGraph
from type_dependencies.shared.config import BaseTypeDepSettings
from type_dependencies.shared.exceptions import AnalysisError

logger = logging.getLogger("type_dependencies.analysis")

MANIFEST_SUFFIX = ".deps.json"


class TypeAnalyzer(ABC):
    """Builds the dependency graph of a single compiled module."""

    def __init__(self, framework_namespaces: Iterable[str] = DEFAULT_FRAMEWORK_NAMESPACES):
        self._framework_namespaces = tuple(framework_namespaces)

    @abstractmethod
    def analyze_assembly(self, assembly_path: str) -> DependencyGraph:
        """Analyze one module and return its edges."""

    def _keep(self, type_name: str) -> bool:
        return bool(type_name) and not is_framework_type(type_name, self._framework_namespaces)

    def _graph_from_raw(self, raw: Any, source: str) -> DependencyGraph:
        """Validate and canonicalise a ``{type: [dependencies]}`` payload."""
        if not isinstance(raw, dict):
            raise AnalysisError(f"Extractor output for {source} must be a JSON object")

        graph = DependencyGraph()
        for raw_type, raw_dependencies in raw.items():
            if not isinstance(raw_dependencies, list) or not all(
                isinstance(d, str) for d in raw_dependencies
            ):
                raise AnalysisError(
                    f"Dependencies of '{raw_type}' in {source} must be a list of strings"
                )
            type_name = normalize_type_name(raw_type)
            if not self._keep(type_name):
                continue
            graph.add_dependencies(
                type_name,
                (d for d in map(normalize_type_name, raw_dependencies) if self._keep(d)),
            )

        logger.debug("Read %d types with edges from %s", len(graph), source)
        return graph


class EdgeManifestAnalyzer(TypeAnalyzer):
    """Reads extractor output saved next to the module.

    A ``.json`` path is read directly; for any other path the sidecar
    ``<path>.deps.json`` is read.
    """

    @staticmethod
    def manifest_path(assembly_path: str) -> Path:
        path = Path(assembly_path)
        if path.suffix.lower() == ".json":
            return path
        return path.with_name(path.name + MANIFEST_SUFFIX)

    def analyze_assembly(self, assembly_path: str) -> DependencyGraph:
        if assembly_path is None or not assembly_path.strip():
            raise ValueError("Assembly path cannot be null or empty.")

        manifest = self.manifest_path(assembly_path)
        if not manifest.is_file():
            raise AnalysisError(f"Dependency manifest not found: {manifest}")

        try:
            raw = json.loads(manifest.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise AnalysisError(f"Could not read {manifest}: {exc}") from exc

        return self._graph_from_raw(raw, str(manifest))


class ExternalExtractorAnalyzer(TypeAnalyzer):
    """Runs an extractor command with the module path appended and reads its stdout."""

    def __init__(
        self,
        command: Sequence[str],
        framework_namespaces: Iterable[str] = DEFAULT_FRAMEWORK_NAMESPACES,
    ):
        if not command:
            raise ValueError("Extractor command cannot be empty.")
        super().__init__(framework_namespaces)
        self._command = list(command)

    def analyze_assembly(self, assembly_path: str) -> DependencyGraph:
        if assembly_path is None or not assembly_path.strip():
            raise ValueError("Assembly path cannot be null or empty.")
        if not Path(assembly_path).is_file():
            raise AnalysisError(f"Assembly not found: {assembly_path}")

        try:
            process = subprocess.run(
                [*self._command, assembly_path],
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as exc:
            raise AnalysisError(f"Extractor command not found: {self._command[0]}") from exc

        if process.returncode != 0:
            raise AnalysisError(
                f"Extractor exited with code {process.returncode} for {assembly_path}: "
                f"{process.stderr.strip()}"
            )

        try:
            raw = json.loads(process.stdout)
        except json.JSONDecodeError as exc:
            raise AnalysisError(f"Extractor output for {assembly_path} is not JSON: {exc}") from exc

        return self._graph_from_raw(raw, assembly_path)


def build_analyzer(settings: BaseTypeDepSettings) -> TypeAnalyzer:
    """Use the external extractor when one is configured, sidecar manifests otherwise."""
    if settings.extractor_command:
        return ExternalExtractorAnalyzer(settings.extractor_command, settings.framework_namespaces)
    return EdgeManifestAnalyzer(settings.framework_namespaces)


def analyze_modules(analyzer: TypeAnalyzer, assembly_paths: Iterable[str]) -> DependencyGraph:
    """Analyze each module and merge the results into one graph.

    Types discovered with no outgoing edges are not recorded.

    Raises:
        AnalysisError: Naming the first module that failed.
    """
    combined = DependencyGraph()
    for assembly_path in assembly_paths:
        logger.info("Analyzing: %s", assembly_path)
        try:
            combined.merge(analyzer.analyze_assembly(assembly_path))
        except AnalysisError as exc:
            raise AnalysisError(f"Error analyzing {assembly_path}: {exc.message}") from exc
    return combined
