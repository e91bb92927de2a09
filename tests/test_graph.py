"""Tests for pkgorder.graph — DependencyGraph and build_graph."""

from pkgorder.graph import DependencyGraph, build_graph


# ── DependencyGraph tests ────────────────────────────────────


class TestDependencyGraph:
    def test_empty_graph(self):
        g = DependencyGraph()
        assert g.vertex_count() == 0
        assert g.edge_count() == 0
        assert len(g) == 0
        assert g.get_all_vertices() == set()

    def test_add_vertex(self):
        g = DependencyGraph()
        g.add_vertex("flask")
        assert g.has_vertex("flask")
        assert g.get_adjacent_vertices_of("flask") == []

    def test_no_duplicate_vertices(self):
        g = DependencyGraph()
        g.add_vertex("flask")
        g.add_vertex("flask")
        assert g.vertex_count() == 1

    def test_add_vertex_keeps_existing_edges(self):
        g = DependencyGraph()
        g.add_edge("app", "flask")
        g.add_vertex("app")
        assert g.get_adjacent_vertices_of("app") == ["flask"]

    def test_add_edge_creates_endpoints(self):
        g = DependencyGraph()
        g.add_edge("app", "flask")
        assert g.has_vertex("app")
        assert g.has_vertex("flask")
        assert g.has_edge("app", "flask")
        assert not g.has_edge("flask", "app")

    def test_duplicate_edge_is_noop(self):
        g = DependencyGraph()
        g.add_edge("app", "flask")
        g.add_edge("app", "flask")
        assert g.edge_count() == 1
        assert g.get_adjacent_vertices_of("app") == ["flask"]

    def test_self_edge_allowed(self):
        g = DependencyGraph()
        g.add_edge("loop", "loop")
        assert g.has_edge("loop", "loop")
        assert g.vertex_count() == 1

    def test_adjacent_in_insertion_order(self):
        g = DependencyGraph()
        g.add_edge("app", "zlib")
        g.add_edge("app", "click")
        g.add_edge("app", "flask")
        assert g.get_adjacent_vertices_of("app") == ["zlib", "click", "flask"]

    def test_adjacent_unknown_is_empty(self):
        g = DependencyGraph()
        assert g.get_adjacent_vertices_of("nonexistent") == []

    def test_adjacent_returns_copy(self):
        g = DependencyGraph()
        g.add_edge("app", "flask")
        g.get_adjacent_vertices_of("app").append("evil")
        assert g.get_adjacent_vertices_of("app") == ["flask"]

    def test_all_vertices_returns_copy(self):
        g = DependencyGraph()
        g.add_edge("app", "flask")
        vertices = g.get_all_vertices()
        vertices.add("evil")
        assert g.get_all_vertices() == {"app", "flask"}

    def test_copy_is_independent(self):
        g = DependencyGraph()
        g.add_edge("app", "lib")
        clone = g.copy()
        g.add_edge("lib", "zlib")
        clone.add_edge("app", "extra")
        assert clone.vertex_names() == ["app", "lib", "extra"]
        assert clone.get_adjacent_vertices_of("lib") == []
        assert g.get_adjacent_vertices_of("app") == ["lib"]

    def test_vertex_names_insertion_order(self):
        g = DependencyGraph()
        g.add_edge("b", "c")
        g.add_vertex("a")
        assert g.vertex_names() == ["b", "c", "a"]

    def test_every_edge_endpoint_is_vertex(self):
        g = DependencyGraph()
        g.add_edge("a", "b")
        g.add_edge("c", "d")
        vertices = g.get_all_vertices()
        for v in g.vertex_names():
            assert set(g.get_adjacent_vertices_of(v)) <= vertices

    def test_contains(self):
        g = DependencyGraph()
        g.add_vertex("flask")
        assert "flask" in g
        assert "django" not in g

    def test_repr(self):
        g = DependencyGraph()
        g.add_edge("a", "b")
        assert "vertices=2" in repr(g)
        assert "edges=1" in repr(g)


# ── build_graph tests ────────────────────────────────────────


class TestBuildGraph:
    def test_simple_entries(self):
        g = build_graph([("app", ["flask", "click"]), ("flask", ["werkzeug"])])
        assert g.vertex_count() == 4
        assert g.has_edge("app", "flask")
        assert g.has_edge("flask", "werkzeug")

    def test_undeclared_dependency_becomes_vertex(self):
        g = build_graph([("app", ["lib"])])
        assert "lib" in g
        assert g.get_adjacent_vertices_of("lib") == []

    def test_empty_entries(self):
        g = build_graph([])
        assert g.vertex_count() == 0

    def test_leaf_with_empty_list(self):
        g = build_graph([("app", ["lib"]), ("lib", [])])
        assert g.vertex_count() == 2
        assert g.get_adjacent_vertices_of("lib") == []
