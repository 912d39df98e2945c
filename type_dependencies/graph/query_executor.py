"""
Query Executor — read-only queries over a DependencyGraph.

Every method is a pure function of the graph's current contents:
nothing is cached between calls and the graph is never written.
Blank or unknown type names degrade to empty results (or ``None``
for ``get_dependencies_of``) instead of raising.

Counting queries scan the full type universe (all keys plus all
dependency targets) and are linear in the edge count per candidate.
"""

from collections.abc import Callable

from type_dependencies.graph.models import DependencyGraph


def _is_blank(name: str | None) -> bool:
    return name is None or not name.strip()


class DependencyGraphQueryExecutor:
    """Answers direct, counted, transitive and cyclic queries."""

    def __init__(self, graph: DependencyGraph):
        if graph is None:
            raise ValueError("graph must not be None")
        self._graph = graph

    # ─── Direct queries ───────────────────────────────────

    def get_dependents_of(self, type_name: str) -> set[str]:
        """Types whose dependency set contains ``type_name``."""
        if _is_blank(type_name):
            return set()
        return {
            dependent
            for dependent, dependencies in self._graph.dependencies.items()
            if type_name in dependencies
        }

    def get_dependencies_of(self, type_name: str) -> frozenset[str] | None:
        """Direct dependencies of a key, or ``None`` when it is not a key."""
        if _is_blank(type_name):
            return None
        return self._graph.get_dependencies(type_name)

    def get_dependent_count(self, type_name: str) -> int:
        if _is_blank(type_name):
            return 0
        return sum(
            1 for dependencies in self._graph.dependencies.values()
            if type_name in dependencies
        )

    def get_dependency_count(self, type_name: str) -> int:
        dependencies = self.get_dependencies_of(type_name)
        return len(dependencies) if dependencies is not None else 0

    def get_all_types(self) -> set[str]:
        """Every type that appears as a key or as a dependency target."""
        all_types = set(self._graph.dependencies)
        for dependencies in self._graph.dependencies.values():
            all_types.update(dependencies)
        return all_types

    def get_types_with_no_dependents(self) -> set[str]:
        """Keys that no key depends on.  Pure dependency targets are not candidates."""
        keys = set(self._graph.dependencies)
        depended_on: set[str] = set()
        for dependencies in self._graph.dependencies.values():
            depended_on.update(d for d in dependencies if d in keys)
        return keys - depended_on

    # ─── Counting filters ─────────────────────────────────

    def _filter_by(self, count_of: Callable[[str], int], predicate: Callable[[int], bool]) -> set[str]:
        return {t for t in self.get_all_types() if predicate(count_of(t))}

    def get_types_with_dependent_count(self, count: int) -> set[str]:
        return self._filter_by(self.get_dependent_count, lambda c: c == count)

    def get_types_with_dependent_count_greater_than(self, minimum: int) -> set[str]:
        return self._filter_by(self.get_dependent_count, lambda c: c > minimum)

    def get_types_with_dependent_count_greater_than_or_equal(self, minimum: int) -> set[str]:
        return self._filter_by(self.get_dependent_count, lambda c: c >= minimum)

    def get_types_with_dependent_count_less_than(self, maximum: int) -> set[str]:
        return self._filter_by(self.get_dependent_count, lambda c: c < maximum)

    def get_types_with_dependent_count_less_than_or_equal(self, maximum: int) -> set[str]:
        return self._filter_by(self.get_dependent_count, lambda c: c <= maximum)

    def get_types_with_dependent_count_range(self, minimum: int, maximum: int) -> set[str]:
        """Inclusive on both ends."""
        return self._filter_by(self.get_dependent_count, lambda c: minimum <= c <= maximum)

    def get_types_with_dependency_count(self, count: int) -> set[str]:
        return self._filter_by(self.get_dependency_count, lambda c: c == count)

    def get_types_with_dependency_count_greater_than(self, minimum: int) -> set[str]:
        return self._filter_by(self.get_dependency_count, lambda c: c > minimum)

    def get_types_with_dependency_count_greater_than_or_equal(self, minimum: int) -> set[str]:
        return self._filter_by(self.get_dependency_count, lambda c: c >= minimum)

    def get_types_with_dependency_count_less_than(self, maximum: int) -> set[str]:
        return self._filter_by(self.get_dependency_count, lambda c: c < maximum)

    def get_types_with_dependency_count_less_than_or_equal(self, maximum: int) -> set[str]:
        return self._filter_by(self.get_dependency_count, lambda c: c <= maximum)

    def get_types_with_dependency_count_range(self, minimum: int, maximum: int) -> set[str]:
        """Inclusive on both ends."""
        return self._filter_by(self.get_dependency_count, lambda c: minimum <= c <= maximum)

    # ─── Transitive closure ───────────────────────────────

    @staticmethod
    def _reachable(origin: str, neighbours: Callable[[str], set[str] | frozenset[str]]) -> set[str]:
        """Nodes reachable from ``origin`` in one or more hops, excluding ``origin``."""
        visited: set[str] = set()
        stack = [n for n in neighbours(origin) if n != origin]
        while stack:
            node = stack.pop()
            if node in visited:
                continue
            visited.add(node)
            stack.extend(
                n for n in neighbours(node) if n != origin and n not in visited
            )
        return visited

    def get_transitive_dependencies_of(self, type_name: str) -> set[str]:
        """Everything ``type_name`` depends on, directly or indirectly."""
        if _is_blank(type_name):
            return set()
        return self._reachable(
            type_name, lambda t: self._graph.get_dependencies(t) or frozenset()
        )

    def get_transitive_dependents_of(self, type_name: str) -> set[str]:
        """Everything that depends on ``type_name``, directly or indirectly.

        The reverse adjacency is built once for this call, which yields
        the same set as calling ``get_dependents_of`` at every step.
        """
        if _is_blank(type_name):
            return set()
        reverse: dict[str, set[str]] = {}
        for dependent, dependencies in self._graph.dependencies.items():
            for dependency in dependencies:
                reverse.setdefault(dependency, set()).add(dependent)
        return self._reachable(type_name, lambda t: reverse.get(t, set()))

    # ─── Cycles ───────────────────────────────────────────

    def _sorted_dependencies(self, type_name: str) -> list[str]:
        return sorted(self._graph.get_dependencies(type_name) or ())

    def get_circular_dependencies(self) -> list[list[str]]:
        """Cycles found by a single depth-first pass over every type.

        A node explored once is never used as a root again, so a node on
        several distinct cycles may be reported through only one of them.
        Roots and neighbours are taken in sorted order, which makes the
        output deterministic for a given graph.

        Each cycle starts and ends with the same type, and every
        consecutive pair is a direct edge.
        """
        cycles: list[list[str]] = []
        visited: set[str] = set()

        for root in sorted(self.get_all_types()):
            if root in visited:
                continue

            on_stack: set[str] = {root}
            path: list[str] = [root]
            visited.add(root)
            frames = [iter(self._sorted_dependencies(root))]

            while frames:
                dependency = next(frames[-1], None)
                if dependency is None:
                    frames.pop()
                    on_stack.discard(path.pop())
                    continue
                if dependency not in visited:
                    visited.add(dependency)
                    on_stack.add(dependency)
                    path.append(dependency)
                    frames.append(iter(self._sorted_dependencies(dependency)))
                elif dependency in on_stack:
                    start = path.index(dependency)
                    cycles.append(path[start:] + [dependency])

        return cycles

    def get_all_elementary_cycles(self) -> list[list[str]]:
        """Every elementary cycle exactly once.

        Each cycle is rooted at its smallest member (in sorted order) and
        only nodes not smaller than the root are explored from it, so no
        rotation of a cycle is reported twice.  Exponential in the worst case.
        """
        cycles: list[list[str]] = []
        ordered = sorted(self.get_all_types())
        rank = {name: index for index, name in enumerate(ordered)}

        for root in ordered:
            root_rank = rank[root]
            path: list[str] = [root]
            on_path: set[str] = {root}
            frames = [iter(self._sorted_dependencies(root))]

            while frames:
                dependency = next(frames[-1], None)
                if dependency is None:
                    frames.pop()
                    on_path.discard(path.pop())
                    continue
                if dependency == root:
                    cycles.append(path + [root])
                elif rank[dependency] > root_rank and dependency not in on_path:
                    on_path.add(dependency)
                    path.append(dependency)
                    frames.append(iter(self._sorted_dependencies(dependency)))

        return cycles
