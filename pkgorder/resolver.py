"""Dependency resolution — installation orders, install diffs, cycle checks."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from pkgorder.graph import DependencyGraph, build_graph

logger = logging.getLogger(__name__)


# ── Errors ───────────────────────────────────────────────────


class ResolverError(Exception):
    """Base class for structural errors found while resolving."""


class PackageNotFound(ResolverError):
    """Raised when a query names a package that is not in the graph."""

    def __init__(self, package: str) -> None:
        self.package = package
        super().__init__(f"Package '{package}' not found in dependency graph")


class CycleDetected(ResolverError):
    """Raised when a package can reach itself through its dependencies."""

    def __init__(self, cycle: list[str] | None = None, package: str | None = None) -> None:
        self.cycle = list(cycle or [])
        self.package = package
        scope = f" reachable from '{package}'" if package else ""
        detail = f": {' → '.join(self.cycle)}" if self.cycle else ""
        super().__init__(f"Dependency cycle detected{scope}{detail}")


# ── Resolver ─────────────────────────────────────────────────


class DependencyResolver:
    """Answers ordering queries over a single :class:`DependencyGraph`.

    The resolver keeps a private copy of the graph it is given, so later
    changes to the caller's graph do not reach it.  Every query either
    returns a complete answer or raises :class:`PackageNotFound` /
    :class:`CycleDetected` without partial results.

    Vertex iteration follows graph insertion order, so
    :meth:`installation_order_for_all_packages` and the tie-break in
    :meth:`package_with_max_dependencies` are deterministic.
    """

    def __init__(self, graph: DependencyGraph | None = None) -> None:
        self._graph = graph.copy() if graph is not None else DependencyGraph()

    @classmethod
    def from_entries(cls, entries: Iterable[tuple[str, Iterable[str]]]) -> DependencyResolver:
        """Build a resolver from ``(package, [dependencies])`` pairs."""
        graph = build_graph(entries)
        logger.debug("Built %r", graph)
        return cls(graph)

    @classmethod
    def from_manifest(cls, filepath: str | Path) -> DependencyResolver:
        """Parse a JSON/YAML manifest and build a resolver from it."""
        from pkgorder.manifest import parse_manifest

        return cls.from_entries(parse_manifest(filepath))

    # ── Queries ───────────────────────────────────────────────

    def all_packages(self) -> set[str]:
        """Return every known package name."""
        return self._graph.get_all_vertices()

    def package_names(self) -> list[str]:
        """Return every known package name in registration order."""
        return self._graph.vertex_names()

    def installation_order(self, pkg: str) -> list[str]:
        """Return *pkg* and its transitive dependencies, dependencies first.

        Only the part of the graph reachable from *pkg* is checked for
        cycles; a cycle elsewhere does not matter.
        """
        self._require(pkg)
        self._ensure_acyclic(pkg)
        order: list[str] = []
        self._emit_dependency_first(pkg, order, set())
        logger.debug("Installation order for %s: %d package(s)", pkg, len(order))
        return order

    def installation_order_for_all_packages(self) -> list[str]:
        """Return one global installation order covering every package."""
        self._ensure_acyclic()
        order: list[str] = []
        emitted: set[str] = set()
        for vertex in self._graph.vertex_names():
            self._emit_dependency_first(vertex, order, emitted)
        return order

    def to_install(self, new_pkg: str, installed_pkg: str) -> list[str]:
        """Return the packages needed for *new_pkg* given *installed_pkg*.

        *installed_pkg* and everything it depends on count as installed.
        The result is *new_pkg* followed by its missing dependencies in
        discovery order; it is not an installation order.
        """
        self._require(new_pkg)
        self._require(installed_pkg)
        self._ensure_acyclic(new_pkg)
        self._ensure_acyclic(installed_pkg)

        installed = set(self._collect_dependencies(installed_pkg))
        result = [new_pkg]
        result.extend(dep for dep in self._collect_dependencies(new_pkg) if dep not in installed)
        if installed_pkg in result:
            result.remove(installed_pkg)
        return result

    def package_with_max_dependencies(self) -> str | None:
        """Return the package with the most transitive dependencies.

        Ties keep the package registered first.  Returns ``None`` for an
        empty graph.
        """
        self._ensure_acyclic()
        best: str | None = None
        best_count = -1
        for vertex in self._graph.vertex_names():
            count = len(self._collect_dependencies(vertex))
            if count > best_count:
                best, best_count = vertex, count
        return best

    def transitive_dependencies(self, pkg: str) -> list[str]:
        """Return every package reachable from *pkg*, in DFS preorder.

        Contains *pkg* itself only when *pkg* sits on a cycle.
        """
        self._require(pkg)
        return self._collect_dependencies(pkg)

    def dependency_count(self, pkg: str) -> int:
        return len(self.transitive_dependencies(pkg))

    # ── Cycle detection ───────────────────────────────────────

    def has_cycle(self, vertex: str | None = None) -> bool:
        """Check for a cycle reachable from *vertex*, or anywhere if ``None``."""
        if vertex is None:
            return self.find_cycle() is not None
        self._require(vertex)
        return self.find_cycle(vertex) is not None

    def find_cycle(self, *starts: str) -> list[str] | None:
        """Return one cycle reachable from *starts* (all vertices by default).

        The cycle is a path such as ``['a', 'b', 'a']``; ``None`` means the
        searched part of the graph is acyclic.  Uses iterative DFS with
        white/gray/black colouring, so each vertex and edge is visited once.
        """
        WHITE, GRAY, BLACK = 0, 1, 2
        color: dict[str, int] = {}
        roots = starts or tuple(self._graph.vertex_names())

        for start in roots:
            if color.get(start, WHITE) != WHITE:
                continue

            # path mirrors stack: path[i] is the vertex whose neighbors stack[i] yields
            path: list[str] = [start]
            stack = [iter(self._graph.get_adjacent_vertices_of(start))]
            color[start] = GRAY

            while stack:
                try:
                    v = next(stack[-1])
                except StopIteration:
                    color[path.pop()] = BLACK
                    stack.pop()
                    continue

                state = color.get(v, WHITE)
                if state == GRAY:
                    # Back-edge → the loop is the tail of the current path
                    return path[path.index(v):] + [v]
                if state == WHITE:
                    color[v] = GRAY
                    path.append(v)
                    stack.append(iter(self._graph.get_adjacent_vertices_of(v)))

        return None

    # ── Internals ─────────────────────────────────────────────

    def _require(self, pkg: str) -> None:
        if not self._graph.has_vertex(pkg):
            raise PackageNotFound(pkg)

    def _ensure_acyclic(self, *starts: str) -> None:
        cycle = self.find_cycle(*starts)
        if cycle is not None:
            logger.debug("Cycle detected: %s", " -> ".join(cycle))
            raise CycleDetected(cycle, package=starts[0] if len(starts) == 1 else None)

    def _collect_dependencies(self, vertex: str) -> list[str]:
        """Flatten the dependencies of *vertex* in DFS preorder.

        Equivalent to recursing into each not-yet-seen dependency right after
        recording it, but driven by an explicit stack of neighbor iterators.
        Terminates on cyclic input.
        """
        seen: dict[str, None] = {}
        stack = [iter(self._graph.get_adjacent_vertices_of(vertex))]

        while stack:
            for dep in stack[-1]:
                if dep not in seen:
                    seen[dep] = None
                    stack.append(iter(self._graph.get_adjacent_vertices_of(dep)))
                    break
            else:
                stack.pop()

        return list(seen)

    def _emit_dependency_first(self, start: str, order: list[str], emitted: set[str]) -> None:
        """Append *start*'s dependency-first order to *order*.

        Post-order DFS: a vertex is appended once all of its dependencies
        have been.  Vertices already in *emitted* are skipped, together with
        their subtrees, which are complete by then.  Requires an acyclic
        reachable subgraph.
        """
        if start in emitted:
            return

        stack = [(start, iter(self._graph.get_adjacent_vertices_of(start)))]
        while stack:
            vertex, deps = stack[-1]
            for dep in deps:
                if dep not in emitted:
                    stack.append((dep, iter(self._graph.get_adjacent_vertices_of(dep))))
                    break
            else:
                stack.pop()
                if vertex not in emitted:
                    emitted.add(vertex)
                    order.append(vertex)
