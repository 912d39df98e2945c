"""
Graph routes — read-only queries over the current session's graph.

    GET /api/types/{type_name}/dependents
    GET /api/types/{type_name}/dependencies
    GET /api/types/{type_name}/transitive-dependencies
    GET /api/types/{type_name}/transitive-dependents
    GET /api/query/dependents?expr=...
    GET /api/query/dependencies?expr=...
    GET /api/cycles
"""

from dataclasses import dataclass
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from type_dependencies.analysis.type_names import is_anonymous_type
from type_dependencies.gateway.config import GatewaySettings
from type_dependencies.graph.count_expression import CountSubject, parse_count_expression
from type_dependencies.graph.models import DependencyGraph
from type_dependencies.graph.query_executor import DependencyGraphQueryExecutor
from type_dependencies.shared.exceptions import InvalidCountExpressionError, StateError
from type_dependencies.shared.logging import setup_logging
from type_dependencies.state.session_finder import CurrentSessionFinder
from type_dependencies.state.state_manager import AnalysisStateManager

logger = setup_logging("gateway.routes.graph", level="INFO")

router = APIRouter()


@lru_cache
def get_settings() -> GatewaySettings:
    return GatewaySettings()


@dataclass
class CurrentGraph:
    session_id: str
    graph: DependencyGraph
    modules: list[str]
    hide_anonymous_types: bool

    @property
    def executor(self) -> DependencyGraphQueryExecutor:
        return DependencyGraphQueryExecutor(self.graph)

    def visible(self, names) -> list[str]:
        if not self.hide_anonymous_types:
            return sorted(names)
        return sorted(n for n in names if not is_anonymous_type(n))

    def visible_cycles(self, cycles: list[list[str]]) -> list[list[str]]:
        """Drop hidden names from each cycle, keeping path order; drop emptied cycles."""
        if not self.hide_anonymous_types:
            return cycles
        filtered = ([n for n in cycle if not is_anonymous_type(n)] for cycle in cycles)
        return [cycle for cycle in filtered if cycle]


def current_graph(settings: GatewaySettings = Depends(get_settings)) -> CurrentGraph:
    """Load the generated graph of the most recently modified session."""
    finder = CurrentSessionFinder(settings.state_directory, settings.state_file_prefix)
    session_id = finder.find_current_session_id()
    if session_id is None:
        raise HTTPException(status_code=409, detail="No active session found.")

    manager = AnalysisStateManager(settings.state_directory, settings.state_file_prefix)
    try:
        graph = manager.get_generated_graph(session_id)
        modules = manager.get_dll_paths(session_id)
    except StateError as e:
        logger.error(f"Failed to load session {session_id}: {e}")
        raise HTTPException(status_code=500, detail=e.message)

    if graph is None:
        raise HTTPException(status_code=409, detail="No generated graph found.")
    return CurrentGraph(session_id, graph, modules, settings.hide_anonymous_types)


# ─── Response Models ─────────────────────────────────────────


class TypeListResponse(BaseModel):
    """Types related to a single type."""

    type_name: str = Field(..., description="Type the query was run for")
    types: list[str] = Field(default_factory=list, description="Related types, sorted")
    count: int = Field(..., description="Number of related types")


class TypeCount(BaseModel):
    type_name: str
    dependent_count: int
    dependency_count: int


class CountQueryResponse(BaseModel):
    """Response model for GET /api/query/{subject}."""

    expression: str = Field(..., description="Count expression as given")
    subject: str = Field(..., description="dependents or dependencies")
    types: list[TypeCount] = Field(
        default_factory=list,
        description="Matches sorted by the queried count, then the other count, then name",
    )


class CyclesResponse(BaseModel):
    """Response model for GET /api/cycles."""

    all_cycles: bool
    cycles: list[list[str]] = Field(
        default_factory=list, description="Each cycle starts and ends with the same type"
    )


def _type_list(current: CurrentGraph, type_name: str, types) -> TypeListResponse:
    names = current.visible(types)
    return TypeListResponse(type_name=type_name, types=names, count=len(names))


# ─── Single-type queries ────────────────────────────────────


@router.get("/types/{type_name}/dependents", response_model=TypeListResponse)
async def get_dependents(type_name: str, current: CurrentGraph = Depends(current_graph)):
    """Types that directly depend on ``type_name``."""
    return _type_list(current, type_name, current.executor.get_dependents_of(type_name))


@router.get("/types/{type_name}/dependencies", response_model=TypeListResponse)
async def get_dependencies(type_name: str, current: CurrentGraph = Depends(current_graph)):
    """Types ``type_name`` directly depends on; 404 if it has no entry."""
    dependencies = current.executor.get_dependencies_of(type_name)
    if dependencies is None:
        raise HTTPException(
            status_code=404,
            detail=f"Type '{type_name}' not found in the dependency graph.",
        )
    return _type_list(current, type_name, dependencies)


@router.get("/types/{type_name}/transitive-dependencies", response_model=TypeListResponse)
async def get_transitive_dependencies(type_name: str, current: CurrentGraph = Depends(current_graph)):
    return _type_list(current, type_name, current.executor.get_transitive_dependencies_of(type_name))


@router.get("/types/{type_name}/transitive-dependents", response_model=TypeListResponse)
async def get_transitive_dependents(type_name: str, current: CurrentGraph = Depends(current_graph)):
    return _type_list(current, type_name, current.executor.get_transitive_dependents_of(type_name))


# ─── Count queries ──────────────────────────────────────────


def _count_query(current: CurrentGraph, expr: str, subject: CountSubject) -> CountQueryResponse:
    try:
        expression = parse_count_expression(expr)
    except InvalidCountExpressionError as e:
        raise HTTPException(status_code=400, detail=e.message)

    executor = current.executor
    matches = [
        TypeCount(
            type_name=name,
            dependent_count=executor.get_dependent_count(name),
            dependency_count=executor.get_dependency_count(name),
        )
        for name in current.visible(expression.apply(executor, subject))
    ]
    if subject == "dependencies":
        matches.sort(key=lambda t: (t.dependency_count, t.dependent_count, t.type_name))
    else:
        matches.sort(key=lambda t: (t.dependent_count, t.dependency_count, t.type_name))
    return CountQueryResponse(expression=expr, subject=subject, types=matches)


@router.get("/query/dependents", response_model=CountQueryResponse)
async def query_dependents(
    expr: str = Query(..., description="number, >number, >=number, <number, <=number, or min-max"),
    current: CurrentGraph = Depends(current_graph),
):
    """Types whose dependent count matches ``expr``."""
    return _count_query(current, expr, "dependents")


@router.get("/query/dependencies", response_model=CountQueryResponse)
async def query_dependencies(
    expr: str = Query(..., description="number, >number, >=number, <number, <=number, or min-max"),
    current: CurrentGraph = Depends(current_graph),
):
    """Types whose dependency count matches ``expr``."""
    return _count_query(current, expr, "dependencies")


# ─── GET /api/cycles ────────────────────────────────────────


@router.get("/cycles", response_model=CyclesResponse)
async def get_cycles(
    all_cycles: bool = Query(False, description="List every elementary cycle"),
    current: CurrentGraph = Depends(current_graph),
):
    """Circular dependencies, each as a closed list of type names."""
    executor = current.executor
    cycles = executor.get_all_elementary_cycles() if all_cycles else executor.get_circular_dependencies()
    return CyclesResponse(all_cycles=all_cycles, cycles=current.visible_cycles(cycles))
