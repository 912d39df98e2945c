"""Type dependency graph analysis for compiled .NET modules."""

__version__ = "0.1.0"
