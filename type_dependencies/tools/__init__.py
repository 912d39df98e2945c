"""Front ends: shared workflow, type-dep CLI and MCP server."""

from type_dependencies.tools.workflow import TypeDependencyWorkflow

__all__ = ["TypeDependencyWorkflow"]
