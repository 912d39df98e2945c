"""
Analysis State Manager

Stores one JSON state file per session in a state directory
(the system temp directory by default), named ``<prefix><session_id>.json``.
"""

import logging
import uuid
from pathlib import Path

from pydantic import ValidationError

from type_dependencies.graph.models import DependencyGraph
from type_dependencies.state.models import AnalysisState
from type_dependencies.shared.exceptions import SessionNotFoundError, StateCorruptedError

logger = logging.getLogger("type_dependencies.state")


def _require(value: str | None, what: str) -> None:
    if value is None or not value.strip():
        raise ValueError(f"{what} cannot be null or empty.")


class AnalysisStateManager:
    """Creates, reads, updates and deletes session state files."""

    def __init__(self, state_directory: str | Path, file_prefix: str = "typedep-"):
        self._state_directory = Path(state_directory)
        self._file_prefix = file_prefix

    @property
    def state_directory(self) -> Path:
        return self._state_directory

    def state_file_path(self, session_id: str) -> Path:
        return self._state_directory / f"{self._file_prefix}{session_id}.json"

    # ─── Sessions ──────────────────────────────────────────

    def initialize_session(self) -> str:
        """Create an empty session and return its id."""
        session_id = str(uuid.uuid4())
        self._state_directory.mkdir(parents=True, exist_ok=True)
        self._save(AnalysisState(session_id=session_id))
        logger.info("Initialized session %s", session_id)
        return session_id

    def session_exists(self, session_id: str | None) -> bool:
        if session_id is None or not session_id.strip():
            return False
        return self.state_file_path(session_id).is_file()

    def clear_session(self, session_id: str) -> None:
        _require(session_id, "Session ID")
        self.state_file_path(session_id).unlink(missing_ok=True)
        logger.info("Cleared session %s", session_id)

    # ─── Module paths ──────────────────────────────────────

    def add_dll_path(self, session_id: str, dll_path: str) -> None:
        """Append a module path unless it is already present (case-insensitive)."""
        _require(session_id, "Session ID")
        _require(dll_path, "DLL path")

        if not self.session_exists(session_id):
            raise SessionNotFoundError(f"Session {session_id} does not exist.")

        state = self._load(session_id)
        if dll_path.casefold() not in (p.casefold() for p in state.dll_paths):
            state.dll_paths.append(dll_path)
            self._save(state)

    def get_dll_paths(self, session_id: str) -> list[str]:
        _require(session_id, "Session ID")
        return list(self._load(session_id).dll_paths)

    # ─── Generated graph ───────────────────────────────────

    def save_generated_graph(self, session_id: str, graph: DependencyGraph) -> None:
        _require(session_id, "Session ID")
        if graph is None:
            raise ValueError("graph must not be None")
        state = self._load(session_id)
        state.generated_graph = graph.to_snapshot()
        self._save(state)
        logger.info("Saved graph with %d types for session %s", len(graph), session_id)

    def get_generated_graph(self, session_id: str) -> DependencyGraph | None:
        """Return the stored graph, or ``None`` if none has been generated yet."""
        _require(session_id, "Session ID")
        state = self._load(session_id)
        if state.generated_graph is None:
            return None
        return DependencyGraph.from_snapshot(state.generated_graph)

    # ─── File I/O ──────────────────────────────────────────

    def _load(self, session_id: str) -> AnalysisState:
        path = self.state_file_path(session_id)
        if not path.is_file():
            raise SessionNotFoundError(f"State file not found for session {session_id}")
        try:
            return AnalysisState.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as exc:
            raise StateCorruptedError(
                f"Failed to deserialize state for session {session_id}: {exc}"
            ) from exc

    def _save(self, state: AnalysisState) -> None:
        self.state_file_path(state.session_id).write_text(state.to_json(), encoding="utf-8")
