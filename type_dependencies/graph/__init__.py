"""Dependency graph store, query executor and count-expression parsing."""

from type_dependencies.graph.count_expression import CountExpression, parse_count_expression
from type_dependencies.graph.models import DependencyGraph
from type_dependencies.graph.query_executor import DependencyGraphQueryExecutor

__all__ = [
    "CountExpression",
    "DependencyGraph",
    "DependencyGraphQueryExecutor",
    "parse_count_expression",
]
