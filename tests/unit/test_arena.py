"""
Tests for ObservableArena handle bookkeeping.
"""

import pytest

from notifyval.arena import ObservableArena


class TestObservableArena:
    """Test suite for ObservableArena."""

    def test_empty_arena(self):
        arena = ObservableArena()
        assert len(arena) == 0
        assert list(arena) == []

    def test_allocate_returns_sequential_handles(self):
        arena = ObservableArena()
        assert arena.allocate("a", None, object()) == 0
        assert arena.allocate("b", None, object()) == 1
        assert arena.key_of(1) == "b"

    def test_parent_links_and_paths(self):
        arena = ObservableArena()
        root = arena.allocate("root", None, None)
        mid = arena.allocate("mid", root, None)
        arena.allocate("sibling", root, None)
        leaf = arena.allocate("leaf", mid, None)

        assert arena.parent_of(root) is None
        assert arena.parent_of(leaf) == mid
        assert arena.lineage(leaf) == [root, mid, leaf]
        assert arena.path_of(leaf) == "root.mid.leaf"
        assert arena.path_of(leaf, "/") == "root/mid/leaf"

    def test_children_and_descendants(self):
        arena = ObservableArena()
        root = arena.allocate("root", None, None)
        a = arena.allocate("a", root, None)
        other = arena.allocate("other", None, None)
        b = arena.allocate("b", a, None)
        c = arena.allocate("c", root, None)

        assert arena.children_of(root) == [a, c]
        assert arena.descendants_of(root) == [a, b, c]
        assert other not in arena.descendants_of(root)

    def test_grows_past_initial_capacity(self):
        arena = ObservableArena(initial_capacity=2)
        handles = [arena.allocate(str(i), None, None) for i in range(10)]

        assert handles == list(range(10))
        assert arena.capacity >= 10
        assert arena.parent_of(9) is None

    def test_unknown_parent_rejected(self):
        arena = ObservableArena()
        with pytest.raises(ValueError, match="Unknown parent handle"):
            arena.allocate("orphan", 3, None)

    def test_invalid_handle_rejected(self):
        arena = ObservableArena()
        with pytest.raises(IndexError):
            arena.key_of(0)
