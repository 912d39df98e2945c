"""
Custom exception hierarchy for type-dependencies.

All errors inherit from TypeDepError so they can be caught
uniformly by the CLI, the MCP server or the gateway.
"""


class TypeDepError(Exception):
    """Base exception for all type-dependencies errors."""

    def __init__(self, message: str, component: str = "unknown"):
        self.message = message
        self.component = component
        super().__init__(f"[{component}] {message}")


class AnalysisError(TypeDepError):
    """Reading extractor output for a module failed."""

    def __init__(self, message: str):
        super().__init__(message, component="analysis")


class StateError(TypeDepError):
    """Errors raised by the session state store."""

    def __init__(self, message: str):
        super().__init__(message, component="state")


class SessionNotFoundError(StateError):
    """The requested session has no state file."""
    pass


class StateCorruptedError(StateError):
    """A state file exists but cannot be parsed."""
    pass


class ExportError(TypeDepError):
    """Rendering or writing an export failed."""

    def __init__(self, message: str):
        super().__init__(message, component="export")


class WorkflowError(TypeDepError):
    """Errors raised by the front-end workflow."""

    def __init__(self, message: str):
        super().__init__(message, component="workflow")


class NoActiveSessionError(WorkflowError):
    """No session has been initialised."""
    pass


class NoModulesAddedError(WorkflowError):
    """The current session has no module paths."""
    pass


class GraphNotGeneratedError(WorkflowError):
    """The current session has no generated graph yet."""
    pass


class TypeNotFoundError(WorkflowError):
    """A queried type is not a key of the graph."""
    pass


class InvalidCountExpressionError(WorkflowError):
    """A textual count expression could not be parsed."""
    pass
