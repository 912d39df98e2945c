"""
Type Dependencies — MCP Server

Exposes the session workflow (init, add, generate, export) and every
graph query as MCP tools.  Each tool returns plain text; failures come
back as ``Error: ...`` strings rather than protocol errors so the
calling model can read and act on them.

Run as:  python -m type_dependencies.tools.server          (stdio transport)
         python -m type_dependencies.tools.server --sse    (SSE on host:port)
"""

import sys
from collections.abc import Callable

from mcp.server.fastmcp import FastMCP

from type_dependencies.shared.exceptions import TypeDepError
from type_dependencies.shared.logging import setup_logging
from type_dependencies.tools.config import ToolSettings
from type_dependencies.tools.workflow import MCP_HINTS, TypeDependencyWorkflow

logger = setup_logging("type_dependencies.server", level="INFO")

mcp = FastMCP("TypeDependencies")

# ─── Shared resources (lazy init) ─────────────────────────

_settings: ToolSettings | None = None
_workflow: TypeDependencyWorkflow | None = None


def _get_settings() -> ToolSettings:
    """Lazy-initialise settings from environment variables."""
    global _settings
    if _settings is None:
        _settings = ToolSettings()
    return _settings


def _get_workflow() -> TypeDependencyWorkflow:
    """Lazy-initialise the workflow on first tool call."""
    global _workflow
    if _workflow is None:
        _workflow = TypeDependencyWorkflow.from_settings(_get_settings(), hints=MCP_HINTS)
    return _workflow


def _run(operation: Callable[..., str], *args) -> str:
    try:
        return operation(*args)
    except TypeDepError as exc:
        logger.warning("%s failed: %s", operation.__name__, exc)
        return f"Error: {exc.message}"
    except (OSError, ValueError) as exc:
        logger.exception("%s failed", operation.__name__)
        return f"Error: {exc}"


# ─── Session tools ────────────────────────────────────────


@mcp.tool(name="td_init")
def td_init() -> str:
    """Initialize a new analysis session.

    Each call creates a fresh session; the newest session is the one
    every other tool works on.
    """
    return _run(_get_workflow().init)


@mcp.tool(name="td_add")
def td_add(dll_path: str) -> str:
    """Add a DLL to the current analysis session.

    Args:
        dll_path: Path to the DLL file to add.
    """
    return _run(_get_workflow().add, dll_path)


@mcp.tool(name="td_generate")
def td_generate() -> str:
    """Generate the dependency graph from every DLL added to the session."""
    return _run(_get_workflow().generate)


@mcp.tool(name="td_export")
def td_export(format: str = "", output_path: str = "") -> str:
    """Export the generated dependency graph.

    Args:
        format: Output format: "dot", "json", "mermaid" or "html".
              Empty = the configured default format.
        output_path: Output file path.  Empty = type-dependencies.{ext}
              in the current directory.
    """
    return _run(_get_workflow().export, format or None, output_path or None)


@mcp.tool(name="td_suggest")
def td_suggest(directory: str = "") -> str:
    """Suggest DLLs to analyze by matching *.csproj files to built <Project>.dll files.

    Args:
        directory: Directory to search.  Empty = current directory.
    """
    return _run(_get_workflow().suggest, directory or None)


# ─── Query tools ──────────────────────────────────────────


@mcp.tool(name="td_query_dependents_of")
def td_query_dependents_of(type_name: str) -> str:
    """Find all types that depend on the specified type.

    Args:
        type_name: Fully-qualified type name (nested types use '+').
    """
    return _run(_get_workflow().dependents_of, type_name)


@mcp.tool(name="td_query_dependencies_of")
def td_query_dependencies_of(type_name: str) -> str:
    """Find all types that the specified type depends on.

    Args:
        type_name: Fully-qualified type name (nested types use '+').
    """
    return _run(_get_workflow().dependencies_of, type_name)


@mcp.tool(name="td_query_dependents")
def td_query_dependents(count_expression: str, detailed: bool = False) -> str:
    """Find types by how many types depend on them.

    Args:
        count_expression: number, >number, >=number, <number, <=number,
              or min-max.  E.g. "0" (nothing depends on it), ">5", "2-10".
        detailed: Show each type's dependency count and sort by dependent
              count, then dependency count, then name.
    """
    return _run(_get_workflow().dependents, count_expression, detailed)


@mcp.tool(name="td_query_dependencies")
def td_query_dependencies(count_expression: str, detailed: bool = False) -> str:
    """Find types by how many types they depend on.

    Args:
        count_expression: number, >number, >=number, <number, <=number,
              or min-max.  E.g. "0" (leaf types), ">10" (highly coupled).
        detailed: Show each type's dependent count and sort by dependency
              count, then dependent count, then name.
    """
    return _run(_get_workflow().dependencies, count_expression, detailed)


@mcp.tool(name="td_query_transitive_dependencies_of")
def td_query_transitive_dependencies_of(type_name: str) -> str:
    """Find all types a type depends on, following the whole chain."""
    return _run(_get_workflow().transitive_dependencies_of, type_name)


@mcp.tool(name="td_query_transitive_dependents_of")
def td_query_transitive_dependents_of(type_name: str) -> str:
    """Find all types that depend on a type, following the whole chain in reverse."""
    return _run(_get_workflow().transitive_dependents_of, type_name)


@mcp.tool(name="td_query_circular_dependencies")
def td_query_circular_dependencies(all_cycles: bool = False) -> str:
    """Find circular dependency cycles, shown as "A -> B -> A".

    Args:
        all_cycles: List every elementary cycle.  By default a type that
              was already explored is not searched again, so a type on
              several cycles may appear in only one of them.
    """
    return _run(_get_workflow().circular_dependencies, all_cycles)


@mcp.tool(name="td_help")
def td_help() -> str:
    """Get help information about the TypeDependencies tools."""
    return _get_workflow().help_text()


# ─── Entry point ──────────────────────────────────────────


def main() -> None:
    settings = _get_settings()
    setup_logging("type_dependencies", level=settings.log_level)

    if "--sse" in sys.argv[1:]:
        import uvicorn

        logger.info(f"Starting TypeDependencies MCP server (SSE transport on {settings.host}:{settings.port})")
        uvicorn.run(mcp.sse_app(), host=settings.host, port=settings.port, log_level="info")
    else:
        logger.info("Starting TypeDependencies MCP server (stdio transport)")
        mcp.run()


if __name__ == "__main__":
    main()
