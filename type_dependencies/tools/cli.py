"""
type-dep — command-line front end.

Usage:
    type-dep init
    type-dep add path/to/MyProject.dll
    type-dep generate
    type-dep query dependents ">5"
    type-dep export --format mermaid
"""

from collections.abc import Callable

import typer

from type_dependencies.shared.exceptions import TypeDepError
from type_dependencies.shared.logging import setup_logging
from type_dependencies.tools.config import ToolSettings
from type_dependencies.tools.workflow import CLI_HINTS, TypeDependencyWorkflow

app = typer.Typer(
    name="type-dep",
    help="Type dependency analyzer for compiled .NET modules",
    add_completion=False,
)
query_app = typer.Typer(help="Query the generated dependency graph")
app.add_typer(query_app, name="query")


def _workflow() -> TypeDependencyWorkflow:
    settings = ToolSettings()
    setup_logging("type_dependencies", level=settings.log_level)
    return TypeDependencyWorkflow.from_settings(settings, hints=CLI_HINTS)


def _run(operation: Callable[[TypeDependencyWorkflow], str]) -> None:
    try:
        output = operation(_workflow())
    except TypeDepError as exc:
        typer.echo(f"Error: {exc.message}", err=True)
        raise typer.Exit(code=1)
    except (OSError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(output)


# ─── Session commands ─────────────────────────────────────


@app.command()
def init():
    """Initialize a new analysis session."""
    _run(lambda w: w.init())


@app.command()
def add(dll_path: str = typer.Argument(..., help="Path to the DLL file to add")):
    """Add a DLL to the current analysis session."""
    _run(lambda w: w.add(dll_path))


@app.command()
def generate():
    """Generate the dependency graph from the added DLLs."""
    _run(lambda w: w.generate())


@app.command()
def export(
    format: str | None = typer.Option(None, "--format", "-f", help="dot, json, mermaid or html"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output file path"),
):
    """Export the generated dependency graph."""
    _run(lambda w: w.export(format, output))


@app.command()
def finalize(
    format: str | None = typer.Option(None, "--format", "-f", help="dot, json, mermaid or html"),
    output: str | None = typer.Option(None, "--output", "-o", help="Output file path"),
):
    """Analyze all DLLs, export the dependency graph and end the session."""
    _run(lambda w: w.finalize(format, output))


@app.command()
def suggest(
    directory: str | None = typer.Option(None, "--directory", "-d", help="Directory to search"),
):
    """Suggest DLLs by matching .csproj files to built outputs."""
    _run(lambda w: w.suggest(directory))


# ─── Queries ──────────────────────────────────────────────

_DETAILED = typer.Option(False, "--detailed", help="Show the other count and sort by counts")


@query_app.command("dependents-of")
def dependents_of(type_name: str = typer.Argument(..., help="Type name to find dependents for")):
    """Find all types that depend on the specified type."""
    _run(lambda w: w.dependents_of(type_name))


@query_app.command("dependencies-of")
def dependencies_of(type_name: str = typer.Argument(..., help="Type name to find dependencies for")):
    """Find all types that the specified type depends on."""
    _run(lambda w: w.dependencies_of(type_name))


@query_app.command("dependents")
def dependents(
    count_expression: str = typer.Argument(..., help="e.g. 5, >5, >=5, <5, <=5, 2-10"),
    detailed: bool = _DETAILED,
):
    """Find types with a specific dependent count."""
    _run(lambda w: w.dependents(count_expression, detailed))


@query_app.command("dependencies")
def dependencies(
    count_expression: str = typer.Argument(..., help="e.g. 0, >10, 2-10"),
    detailed: bool = _DETAILED,
):
    """Find types with a specific dependency count."""
    _run(lambda w: w.dependencies(count_expression, detailed))


@query_app.command("transitive-dependencies-of")
def transitive_dependencies_of(type_name: str = typer.Argument(...)):
    """Find all types a type depends on, recursively."""
    _run(lambda w: w.transitive_dependencies_of(type_name))


@query_app.command("transitive-dependents-of")
def transitive_dependents_of(type_name: str = typer.Argument(...)):
    """Find all types that depend on a type, recursively."""
    _run(lambda w: w.transitive_dependents_of(type_name))


@query_app.command("circular")
def circular(
    all_cycles: bool = typer.Option(False, "--all", help="List every elementary cycle"),
):
    """Find circular dependency cycles."""
    _run(lambda w: w.circular_dependencies(all_cycles))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
