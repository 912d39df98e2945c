"""Session persistence: state model, state manager and current-session lookup."""

from type_dependencies.state.models import AnalysisState
from type_dependencies.state.session_finder import CurrentSessionFinder
from type_dependencies.state.state_manager import AnalysisStateManager

__all__ = [
    "AnalysisState",
    "AnalysisStateManager",
    "CurrentSessionFinder",
]
