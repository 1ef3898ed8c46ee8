"""Tests for gridcalc.calc dependency graph."""

from __future__ import annotations

from gridcalc import parse_address
from gridcalc.calc._graph import DependencyGraph

A1 = parse_address("A1")
B1 = parse_address("B1")
C1 = parse_address("C1")
D1 = parse_address("D1")


class TestAddEdges:
    def test_simple_dependency(self) -> None:
        g = DependencyGraph()
        g.add_outgoing_edges(B1, {A1})
        assert g.get_dependents(A1) == {B1}
        assert g.get_dependents(B1) == frozenset()

    def test_multiple_dependents(self) -> None:
        g = DependencyGraph()
        g.add_outgoing_edges(B1, {A1})
        g.add_outgoing_edges(C1, {A1})
        assert g.get_dependents(A1) == {B1, C1}
        assert g.edge_count() == 2
        assert len(g) == 1

    def test_add_is_idempotent(self) -> None:
        g = DependencyGraph()
        g.add_outgoing_edges(B1, {A1, C1})
        g.add_outgoing_edges(B1, {A1, C1})
        assert g.edge_count() == 2

    def test_get_dependents_has_no_side_effects(self) -> None:
        g = DependencyGraph()
        assert g.get_dependents(A1) == frozenset()
        assert A1 not in g
        assert len(g) == 0


class TestRemoveEdges:
    def test_empty_sets_pruned(self) -> None:
        g = DependencyGraph()
        g.add_outgoing_edges(B1, {A1})
        g.remove_outgoing_edges(B1, {A1})
        assert A1 not in g
        assert len(g) == 0

    def test_only_own_edge_removed(self) -> None:
        g = DependencyGraph()
        g.add_outgoing_edges(B1, {A1})
        g.add_outgoing_edges(C1, {A1})
        g.remove_outgoing_edges(B1, {A1})
        assert g.get_dependents(A1) == {C1}

    def test_stale_set_is_harmless(self) -> None:
        g = DependencyGraph()
        g.add_outgoing_edges(B1, {A1})
        g.remove_outgoing_edges(B1, {C1, D1})
        g.remove_outgoing_edges(D1, {A1})
        assert g.get_dependents(A1) == {B1}
        assert len(g) == 1


class TestTransitiveDependents:
    def test_linear_chain(self) -> None:
        """A1 <- B1 <- C1 (B1 reads A1, C1 reads B1)."""
        g = DependencyGraph()
        g.add_outgoing_edges(B1, {A1})
        g.add_outgoing_edges(C1, {B1})
        assert g.transitive_dependents(A1) == [B1, C1]

    def test_diamond(self) -> None:
        g = DependencyGraph()
        g.add_outgoing_edges(B1, {A1})
        g.add_outgoing_edges(C1, {A1})
        g.add_outgoing_edges(D1, {B1, C1})
        assert g.transitive_dependents(A1) == [B1, C1, D1]

    def test_cycle_terminates(self) -> None:
        g = DependencyGraph()
        g.add_outgoing_edges(A1, {B1})
        g.add_outgoing_edges(B1, {A1})
        assert g.transitive_dependents(A1) == [B1, A1]

    def test_unreferenced(self) -> None:
        g = DependencyGraph()
        g.add_outgoing_edges(B1, {A1})
        assert g.transitive_dependents(C1) == []
