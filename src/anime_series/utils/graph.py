"""Undirected relation graph with deterministic connected-component discovery."""

from collections.abc import Iterable, Iterator


class RelationGraph:
    """Undirected graph over anime ids.

    Vertices and neighbours keep insertion order, so component discovery order
    depends only on the order edges were added.
    """

    def __init__(self, edges: Iterable[tuple[str, str]] = ()) -> None:
        self._adjacency: dict[str, dict[str, None]] = {}
        for source, target in edges:
            self.add_edge(source, target)

    def __len__(self) -> int:
        return len(self._adjacency)

    def __contains__(self, vertex: object) -> bool:
        return vertex in self._adjacency

    def __iter__(self) -> Iterator[str]:
        return iter(self._adjacency)

    def add_vertex(self, vertex: str) -> None:
        self._adjacency.setdefault(vertex, {})

    def add_edge(self, source: str, target: str) -> None:
        self.add_vertex(source)
        self.add_vertex(target)
        self._adjacency[source][target] = None
        self._adjacency[target][source] = None

    def neighbors(self, vertex: str) -> list[str]:
        return list(self._adjacency.get(vertex, ()))

    def component_from(self, start: str, visited: set[str]) -> list[str]:
        """Collect every vertex reachable from ``start`` with an explicit stack.

        Vertices are appended in visit order and added to ``visited``.
        """
        component: list[str] = []
        stack = [start]
        while stack:
            vertex = stack.pop()
            if vertex in visited:
                continue
            visited.add(vertex)
            component.append(vertex)
            for neighbor in self._adjacency.get(vertex, ()):
                if neighbor not in visited:
                    stack.append(neighbor)
        return component

    def connected_components(self) -> list[list[str]]:
        """Return components in discovery order (first vertex insertion order)."""
        visited: set[str] = set()
        components: list[list[str]] = []
        for vertex in self._adjacency:
            if vertex not in visited:
                components.append(self.component_from(vertex, visited))
        return components
