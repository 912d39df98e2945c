"""Locates the current session: the one whose state file changed last."""

from pathlib import Path


class CurrentSessionFinder:
    """Finds the most recently modified ``<prefix>*.json`` state file."""

    def __init__(self, state_directory: str | Path, file_prefix: str = "typedep-"):
        self._state_directory = Path(state_directory)
        self._file_prefix = file_prefix

    def find_current_session_id(self) -> str | None:
        if not self._state_directory.is_dir():
            return None

        state_files = list(self._state_directory.glob(f"{self._file_prefix}*.json"))
        if not state_files:
            return None

        most_recent = max(state_files, key=lambda p: p.stat().st_mtime)
        session_id = most_recent.stem[len(self._file_prefix):]
        return session_id or None
