"""
Health routes — GET /api/health and GET /api/graph/statistics.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from type_dependencies.gateway.routes.graph import CurrentGraph, current_graph
from type_dependencies.shared.logging import setup_logging

logger = setup_logging("gateway.routes.health", level="INFO")

router = APIRouter()


# ─── Response Models ─────────────────────────────────────────


class GraphStatistics(BaseModel):
    """Response model for GET /api/graph/statistics."""

    session_id: str = Field(..., description="Session the graph belongs to")
    analyzed_types: int = Field(..., description="Types with at least one dependency")
    total_types: int = Field(..., description="Distinct types appearing anywhere in the graph")
    total_edges: int = Field(..., description="Number of dependency edges")
    modules: list[str] = Field(default_factory=list, description="Modules added to the session")


# ─── GET /api/graph/statistics ──────────────────────────────


@router.get("/graph/statistics", response_model=GraphStatistics)
async def get_graph_statistics(current: CurrentGraph = Depends(current_graph)) -> GraphStatistics:
    """Size of the current session's generated graph."""
    graph = current.graph
    logger.info(f"Graph statistics requested for session {current.session_id}")
    return GraphStatistics(
        session_id=current.session_id,
        analyzed_types=len(graph),
        total_types=graph.type_count,
        total_edges=graph.edge_count,
        modules=current.modules,
    )


# ─── GET /api/health (simple health check) ──────────────────


@router.get("/health")
async def simple_health() -> dict:
    """Simple health check endpoint.

    Returns a basic health status without touching session state.
    Useful for load balancers and uptime monitors.
    """
    return {
        "status": "healthy",
        "service": "Type Dependencies Gateway",
        "version": "0.1.0",
    }
