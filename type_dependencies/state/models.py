"""
Session State Model

The on-disk snapshot of one analysis session: the module paths added
so far and, once generated, the dependency graph as
``{type: sorted list of dependencies}``.
"""

from pydantic import BaseModel, ConfigDict, Field


class AnalysisState(BaseModel):
    """Persisted working set of a session."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field("", alias="sessionId")
    dll_paths: list[str] = Field(default_factory=list, alias="dllPaths")
    generated_graph: dict[str, list[str]] | None = Field(None, alias="generatedGraph")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
