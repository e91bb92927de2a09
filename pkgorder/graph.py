"""Graph data structure — DependencyGraph (adjacency list) and builder."""

from __future__ import annotations

from typing import Iterable


class DependencyGraph:
    """Directed graph of packages using adjacency list representation.

    Edges go from dependent → dependency:
        add_edge("app", "flask")  means  app depends-on flask

    Adjacency entries are insertion-ordered and deduplicated, and vertices
    iterate in the order they were first registered.  The graph knows
    nothing about cycles; that is the resolver's job.
    """

    def __init__(self) -> None:
        # dict-as-ordered-set: keys are dependency names, values unused
        self._adj: dict[str, dict[str, None]] = {}

    # ── Mutators ──────────────────────────────────────────────

    def add_vertex(self, name: str) -> None:
        """Register *name*; a no-op if it is already present."""
        if name not in self._adj:
            self._adj[name] = {}

    def add_edge(self, src: str, dst: str) -> None:
        """Add a directed edge *src* → *dst*.

        Both vertices are created automatically if they don't exist.
        Self-edges are accepted.
        """
        self.add_vertex(src)
        self.add_vertex(dst)
        self._adj[src].setdefault(dst, None)

    # ── Queries ───────────────────────────────────────────────

    def get_all_vertices(self) -> set[str]:
        """Return a copy of the vertex set."""
        return set(self._adj)

    def get_adjacent_vertices_of(self, name: str) -> list[str]:
        """Return direct dependencies of *name* in insertion order.

        Unknown names yield an empty list rather than an error.
        """
        return list(self._adj.get(name, ()))

    def copy(self) -> DependencyGraph:
        """Return an independent copy of the graph."""
        g = DependencyGraph()
        g._adj = {name: dict(deps) for name, deps in self._adj.items()}
        return g

    def vertex_names(self) -> list[str]:
        """Return all vertex names in insertion order."""
        return list(self._adj)

    def has_vertex(self, name: str) -> bool:
        return name in self._adj

    def has_edge(self, src: str, dst: str) -> bool:
        return src in self._adj and dst in self._adj[src]

    def vertex_count(self) -> int:
        return len(self._adj)

    def edge_count(self) -> int:
        return sum(len(deps) for deps in self._adj.values())

    # ── Dunder helpers ────────────────────────────────────────

    def __contains__(self, name: str) -> bool:
        return self.has_vertex(name)

    def __len__(self) -> int:
        return self.vertex_count()

    def __repr__(self) -> str:
        return f"DependencyGraph(vertices={self.vertex_count()}, edges={self.edge_count()})"


# ── Builder ──────────────────────────────────────────────────


def build_graph(entries: Iterable[tuple[str, Iterable[str]]]) -> DependencyGraph:
    """Construct a *DependencyGraph* from ``(package, [dependencies])`` pairs.

    This is the output format of every manifest parser.
    """
    g = DependencyGraph()
    for name, dependencies in entries:
        g.add_vertex(name)
        for dep in dependencies:
            g.add_edge(name, dep)
    return g
