"""
FastAPI Gateway — HTTP API layer.

Read-only view over the dependency graph generated in the current
session.  Sessions are created and graphs generated through the
``type-dep`` CLI or the MCP server; the gateway only reads them.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from type_dependencies.gateway.config import GatewaySettings
from type_dependencies.gateway.routes import graph, health
from type_dependencies.shared.logging import setup_logging

logger = setup_logging("gateway.app", level="INFO")

# Global settings
settings = GatewaySettings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Type Dependencies Gateway")
    logger.info(f"Reading session state from {settings.state_directory}")
    yield
    logger.info("Shutting down Type Dependencies Gateway")


# Create FastAPI app
app = FastAPI(
    title="Type Dependencies Gateway",
    description="Query the type dependency graph of the current analysis session",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(graph.router, prefix="/api", tags=["Graph"])
app.include_router(health.router, prefix="/api", tags=["Health"])


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with basic info."""
    return {
        "name": "Type Dependencies Gateway",
        "version": "0.1.0",
        "status": "operational",
        "endpoints": {
            "health": "/api/health",
            "statistics": "/api/graph/statistics",
            "types": "/api/types/{type_name}/dependents",
            "query": "/api/query/dependents?expr=>5",
            "cycles": "/api/cycles",
        },
    }


def main() -> None:
    import uvicorn

    setup_logging("type_dependencies", level=settings.log_level)
    uvicorn.run(
        "type_dependencies.gateway.app:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    main()
