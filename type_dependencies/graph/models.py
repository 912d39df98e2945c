"""
Dependency Graph Model

In-memory adjacency store: each dependent type maps to the set of
types it depends on.  Edge insertion is the only mutation.
"""

from collections.abc import Iterable, Mapping
from types import MappingProxyType


def _is_blank(name: str | None) -> bool:
    return name is None or not name.strip()


class DependencyGraph:
    """Directed type-dependency graph keyed by dependent type name."""

    def __init__(self) -> None:
        self._dependencies: dict[str, set[str]] = {}

    @property
    def dependencies(self) -> Mapping[str, frozenset[str]]:
        """Read-only snapshot of the dependent -> dependency-set mapping."""
        return MappingProxyType({k: frozenset(v) for k, v in self._dependencies.items()})

    def add_dependency(self, type_name: str | None, dependency_type_name: str | None) -> None:
        """Record that ``type_name`` depends on ``dependency_type_name``.

        Blank names are ignored and repeated edges are no-ops.
        """
        if _is_blank(type_name) or _is_blank(dependency_type_name):
            return
        self._dependencies.setdefault(type_name, set()).add(dependency_type_name)

    def add_dependencies(
        self, type_name: str | None, dependency_type_names: Iterable[str | None]
    ) -> None:
        """Record one edge per dependency.  An empty iterable adds no key."""
        if _is_blank(type_name):
            return
        for dependency_type_name in dependency_type_names:
            self.add_dependency(type_name, dependency_type_name)

    def contains_type(self, type_name: str) -> bool:
        """True only for types with at least one recorded outgoing edge."""
        return type_name in self._dependencies

    def get_dependencies(self, type_name: str) -> frozenset[str] | None:
        """Return the dependency set of a key, or ``None`` if it is not a key."""
        dependencies = self._dependencies.get(type_name)
        if dependencies is None:
            return None
        return frozenset(dependencies)

    def merge(self, other: "DependencyGraph") -> None:
        """Add every edge of ``other`` to this graph."""
        for type_name, dependency_type_names in other.dependencies.items():
            self.add_dependencies(type_name, dependency_type_names)

    # ─── Snapshot shape ────────────────────────────────────

    @classmethod
    def from_snapshot(cls, snapshot: Mapping[str, Iterable[str]]) -> "DependencyGraph":
        """Rebuild a graph from the persisted ``{type: [dependencies]}`` shape."""
        graph = cls()
        for type_name, dependency_type_names in snapshot.items():
            graph.add_dependencies(type_name, dependency_type_names)
        return graph

    def to_snapshot(self) -> dict[str, list[str]]:
        """Serialise to ``{type: sorted dependency list}`` with sorted keys."""
        return {
            type_name: sorted(self._dependencies[type_name])
            for type_name in sorted(self._dependencies)
        }

    # ─── Statistics ────────────────────────────────────────

    @property
    def type_count(self) -> int:
        """Number of distinct types appearing as a key or a dependency."""
        all_types = set(self._dependencies)
        for dependency_type_names in self._dependencies.values():
            all_types.update(dependency_type_names)
        return len(all_types)

    @property
    def edge_count(self) -> int:
        return sum(len(deps) for deps in self._dependencies.values())

    def __len__(self) -> int:
        return len(self._dependencies)

    def __repr__(self) -> str:
        return f"DependencyGraph(keys={len(self)}, edges={self.edge_count})"
