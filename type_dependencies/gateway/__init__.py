"""Read-only HTTP API over the current session's dependency graph."""
