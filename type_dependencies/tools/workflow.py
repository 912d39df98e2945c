"""
Type Dependency Workflow — the session workflow behind the CLI and
the MCP server.

  init -> add <module> ... -> generate -> export / query ...

Every operation returns the text shown to the user, or raises a
``TypeDepError`` subclass whose message the front end reports.
Result ordering and the suppression of compiler-generated names are
applied here, not in the query executor.
"""

import logging
import threading
from dataclasses import dataclass
from pathlib import Path

from type_dependencies.analysis.analyzer import TypeAnalyzer, analyze_modules, build_analyzer
from type_dependencies.analysis.type_names import is_anonymous_type
from type_dependencies.export.strategies import default_extension, get_export_strategy
from type_dependencies.graph.count_expression import CountSubject, parse_count_expression
from type_dependencies.graph.models import DependencyGraph
from type_dependencies.graph.query_executor import DependencyGraphQueryExecutor
from type_dependencies.shared.exceptions import (
    GraphNotGeneratedError,
    NoActiveSessionError,
    NoModulesAddedError,
    TypeNotFoundError,
    WorkflowError,
)
from type_dependencies.state.session_finder import CurrentSessionFinder
from type_dependencies.state.state_manager import AnalysisStateManager
from type_dependencies.suggest.suggester import DllSuggester
from type_dependencies.tools.config import ToolSettings

logger = logging.getLogger("type_dependencies.workflow")


@dataclass(frozen=True)
class CommandHints:
    """How each front end names the commands it suggests in error messages."""

    init: str
    add: str
    generate: str


CLI_HINTS = CommandHints(init="'type-dep init'", add="'type-dep add <dll-path>'", generate="'type-dep generate'")
MCP_HINTS = CommandHints(init="td_init", add="td_add", generate="td_generate")


class TypeDependencyWorkflow:
    """Session-level operations shared by every front end."""

    def __init__(
        self,
        state_manager: AnalysisStateManager,
        analyzer: TypeAnalyzer,
        session_finder: CurrentSessionFinder,
        suggester: DllSuggester | None = None,
        hints: CommandHints = CLI_HINTS,
        default_export_format: str = "dot",
        hide_anonymous_types: bool = True,
    ):
        self._state_manager = state_manager
        self._analyzer = analyzer
        self._session_finder = session_finder
        self._suggester = suggester or DllSuggester()
        self._hints = hints
        self._default_export_format = default_export_format
        self._hide_anonymous_types = hide_anonymous_types
        self._write_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: ToolSettings, hints: CommandHints = CLI_HINTS) -> "TypeDependencyWorkflow":
        return cls(
            state_manager=AnalysisStateManager(settings.state_directory, settings.state_file_prefix),
            analyzer=build_analyzer(settings),
            session_finder=CurrentSessionFinder(settings.state_directory, settings.state_file_prefix),
            hints=hints,
            default_export_format=settings.default_export_format,
            hide_anonymous_types=settings.hide_anonymous_types,
        )

    # ─── Session helpers ──────────────────────────────────

    def _current_session(self) -> str:
        session_id = self._session_finder.find_current_session_id()
        if session_id is None:
            raise NoActiveSessionError(
                f"No active session found. Please run {self._hints.init} first."
            )
        return session_id

    def _load_graph(self) -> DependencyGraph:
        graph = self._state_manager.get_generated_graph(self._current_session())
        if graph is None:
            raise GraphNotGeneratedError(
                f"No generated graph found. Please run {self._hints.generate} first."
            )
        return graph

    def _executor(self) -> DependencyGraphQueryExecutor:
        return DependencyGraphQueryExecutor(self._load_graph())

    def _analyze_session(self, session_id: str) -> DependencyGraph:
        dll_paths = self._state_manager.get_dll_paths(session_id)
        if not dll_paths:
            raise NoModulesAddedError(
                f"No DLLs added to the session. Please run {self._hints.add} first."
            )
        return analyze_modules(self._analyzer, dll_paths)

    @staticmethod
    def _require_name(value: str | None, what: str) -> str:
        if value is None or not value.strip():
            raise WorkflowError(f"{what} cannot be empty.")
        return value.strip()

    # ─── Formatting ───────────────────────────────────────

    def _visible(self, names) -> list[str]:
        if not self._hide_anonymous_types:
            return list(names)
        return [n for n in names if not is_anonymous_type(n)]

    def format_results(self, results: set[str] | frozenset[str]) -> str:
        return "\n".join(sorted(self._visible(results)))

    def format_detailed(
        self,
        results: set[str],
        executor: DependencyGraphQueryExecutor,
        subject: CountSubject,
    ) -> str:
        """Sort by the queried count, then the other count, then name; show the other count."""
        if subject == "dependencies":
            primary, secondary, label = (
                executor.get_dependency_count, executor.get_dependent_count, "dependents",
            )
        else:
            primary, secondary, label = (
                executor.get_dependent_count, executor.get_dependency_count, "dependencies",
            )
        ordered = sorted(self._visible(results), key=lambda t: (primary(t), secondary(t), t))
        return "\n".join(f"{t} ({secondary(t)} {label})" for t in ordered)

    def format_cycles(self, cycles: list[list[str]]) -> str:
        lines = []
        for cycle in cycles:
            visible = self._visible(cycle)
            if visible:
                lines.append(" -> ".join(visible))
        return "\n".join(lines)

    # ─── Session commands ─────────────────────────────────

    def init(self) -> str:
        session_id = self._state_manager.initialize_session()
        return f"Session initialized: {session_id}"

    def add(self, dll_path: str) -> str:
        dll_path = self._require_name(dll_path, "DLL path")
        if not Path(dll_path).is_file():
            raise WorkflowError(f"DLL file not found: {dll_path}")

        with self._write_lock:
            session_id = self._current_session()
            self._state_manager.add_dll_path(session_id, str(Path(dll_path).resolve()))
        return f"Added DLL: {dll_path}"

    def generate(self) -> str:
        with self._write_lock:
            session_id = self._current_session()
            graph = self._analyze_session(session_id)
            self._state_manager.save_generated_graph(session_id, graph)
        logger.info("Generated %r for session %s", graph, session_id)
        return f"Dependency graph generated successfully. Found {len(graph)} types."

    def _output_path(self, export_format: str, output_path: str | None) -> Path:
        if output_path and output_path.strip():
            return Path(output_path)
        return Path.cwd() / f"type-dependencies.{default_extension(export_format)}"

    def export(self, export_format: str | None = None, output_path: str | None = None) -> str:
        export_format = export_format or self._default_export_format
        graph = self._load_graph()
        target = self._output_path(export_format, output_path)
        get_export_strategy(export_format).export(graph, target)
        return f"Dependency graph exported to: {target}"

    def finalize(self, export_format: str | None = None, output_path: str | None = None) -> str:
        """Analyze every added module, export the result and delete the session."""
        export_format = export_format or self._default_export_format
        with self._write_lock:
            session_id = self._current_session()
            graph = self._analyze_session(session_id)
            target = self._output_path(export_format, output_path)
            get_export_strategy(export_format).export(graph, target)
            self._state_manager.clear_session(session_id)
        return f"Dependency graph exported to: {target}"

    def suggest(self, directory: str | None = None) -> str:
        directory = directory if directory and directory.strip() else str(Path.cwd())
        if not Path(directory).is_dir():
            raise WorkflowError(f"Directory not found: {directory}")
        suggestions = self._suggester.suggest_dlls(directory)
        if not suggestions:
            return "No DLL files found matching .csproj files in the specified directory."
        return "\n".join(f"{s.project_name} -> {s.dll_path}" for s in suggestions)

    # ─── Queries ──────────────────────────────────────────

    def dependents_of(self, type_name: str) -> str:
        type_name = self._require_name(type_name, "Type name")
        dependents = self._executor().get_dependents_of(type_name)
        if not dependents:
            return f"No types depend on '{type_name}'."
        return self.format_results(dependents)

    def dependencies_of(self, type_name: str) -> str:
        type_name = self._require_name(type_name, "Type name")
        dependencies = self._executor().get_dependencies_of(type_name)
        if dependencies is None:
            raise TypeNotFoundError(f"Type '{type_name}' not found in the dependency graph.")
        if not dependencies:
            return f"Type '{type_name}' has no dependencies."
        return self.format_results(dependencies)

    def _count_query(self, expression: str, subject: CountSubject, detailed: bool) -> str:
        expression = self._require_name(expression, "Count expression")
        executor = self._executor()
        result = parse_count_expression(expression).apply(executor, subject)
        if not result:
            return "No types match the specified criteria."
        if detailed:
            return self.format_detailed(result, executor, subject)
        return self.format_results(result)

    def dependents(self, count_expression: str, detailed: bool = False) -> str:
        return self._count_query(count_expression, "dependents", detailed)

    def dependencies(self, count_expression: str, detailed: bool = False) -> str:
        return self._count_query(count_expression, "dependencies", detailed)

    def transitive_dependencies_of(self, type_name: str) -> str:
        type_name = self._require_name(type_name, "Type name")
        result = self._executor().get_transitive_dependencies_of(type_name)
        if not result:
            return f"Type '{type_name}' has no transitive dependencies."
        return self.format_results(result)

    def transitive_dependents_of(self, type_name: str) -> str:
        type_name = self._require_name(type_name, "Type name")
        result = self._executor().get_transitive_dependents_of(type_name)
        if not result:
            return f"No types transitively depend on '{type_name}'."
        return self.format_results(result)

    def circular_dependencies(self, all_cycles: bool = False) -> str:
        executor = self._executor()
        cycles = (
            executor.get_all_elementary_cycles() if all_cycles
            else executor.get_circular_dependencies()
        )
        formatted = self.format_cycles(cycles)
        return formatted or "No circular dependencies found."

    # ─── Help ─────────────────────────────────────────────

    def help_text(self) -> str:
        return HELP_TEXT


HELP_TEXT = """TypeDependencies - Analyze and visualize type dependencies in compiled .NET modules

WORKFLOW:
  1. td_init()                    - Initialize a new analysis session
  2. td_add(dllPath)              - Add DLL files to analyze
  3. td_generate()                - Generate the dependency graph
  4. td_export(format?, output?)  - Export the graph (optional)
  5. td_query_*()                 - Query the generated graph

EDGE INPUT:
  Each DLL is read through its extractor output: either the sidecar
  manifest <dll>.deps.json ({"Type": ["Dependency", ...]}) or, when
  TYPEDEP_EXTRACTOR_COMMAND is set to a JSON array such as
  '["dotnet", "extract.dll"]', the stdout of that command run with the
  DLL path appended. System and Microsoft namespaces are filtered out.

EXPORT:
  td_export(format?: string, outputPath?: string)
    format: "dot", "json", "mermaid" or "html" (defaults to
            TYPEDEP_DEFAULT_EXPORT_FORMAT, "dot" unless set)
    outputPath: defaults to type-dependencies.{ext} in the current directory

QUERY TOOLS:
  td_query_dependents_of(typeName)            Types that depend on typeName
  td_query_dependencies_of(typeName)          Types typeName depends on
  td_query_dependents(countExpression, detailed?)
  td_query_dependencies(countExpression, detailed?)
    countExpression: number, >number, >=number, <number, <=number, or min-max
    detailed: sort by the queried count, then the other count, then name
  td_query_transitive_dependencies_of(typeName)
  td_query_transitive_dependents_of(typeName)
  td_query_circular_dependencies(allCycles?)
    Cycles are shown as "TypeA -> TypeB -> TypeA". By default a type that
    was already explored is not searched again, so a type on several cycles
    may be reported through only one; allCycles=true lists every cycle.

SUGGESTIONS:
  td_suggest(directory?)  Match *.csproj files to <ProjectName>.dll outputs

NOTES:
  - The most recently modified session is the current one
  - Query results are sorted alphabetically; compiler-generated names
    (starting with '<') are hidden
  - Types with no dependencies that nothing references do not appear
"""
