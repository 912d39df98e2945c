"""
DLL Suggester — finds build outputs worth analyzing.

For every ``*.csproj`` under a directory, each ``<ProjectName>.dll``
anywhere under the same directory is suggested.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DllSuggestion:
    """A compiled module matched to the project that produces it."""

    project_name: str
    dll_path: str


class DllSuggester:
    """Scans a source tree for project files and their compiled modules."""

    def suggest_dlls(self, search_directory: str | Path) -> list[DllSuggestion]:
        if search_directory is None or not str(search_directory).strip():
            raise ValueError("Search directory cannot be null or empty.")

        root = Path(search_directory)
        if not root.is_dir():
            raise FileNotFoundError(f"Directory not found: {search_directory}")

        suggestions: list[DllSuggestion] = []
        for csproj in sorted(root.rglob("*.csproj")):
            project_name = csproj.stem
            for dll in sorted(root.rglob(f"{project_name}.dll")):
                suggestions.append(DllSuggestion(project_name, str(dll.resolve())))
        return suggestions
