"""
HTML payload conversion — the graph as the ``projects`` / ``packages`` /
``references`` structure the visualisation template reads.
"""

from pydantic import BaseModel, Field

from type_dependencies.graph.models import DependencyGraph


class Project(BaseModel):
    """One node; every type is shown as a project."""

    id: str
    name: str


class Package(BaseModel):
    id: str
    name: str


class Reference(BaseModel):
    """One edge, dependent -> dependency."""

    from_: str = Field(..., serialization_alias="from")
    to: str


class TemplateData(BaseModel):
    projects: list[Project] = Field(default_factory=list)
    packages: list[Package] = Field(default_factory=list)
    references: list[Reference] = Field(default_factory=list)


def convert(graph: DependencyGraph) -> TemplateData:
    """Build the template payload: all types sorted by name, one reference per edge."""
    if graph is None:
        raise ValueError("graph must not be None")

    all_types: set[str] = set(graph.dependencies)
    for dependencies in graph.dependencies.values():
        all_types.update(dependencies)

    projects = [Project(id=name, name=name) for name in sorted(all_types)]
    references = [
        Reference(from_=type_name, to=dependency)
        for type_name in sorted(graph.dependencies)
        for dependency in sorted(graph.dependencies[type_name])
    ]
    return TemplateData(projects=projects, packages=[], references=references)
