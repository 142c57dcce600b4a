"""Unit tests for CompositeNode."""

import pytest

from notifyval import (
    ArrayMode,
    CompositeNode,
    ConfigurationError,
    KeyNotFoundError,
    ParseError,
    ScalarCell,
)


@pytest.fixture
def s1(registry):
    node = CompositeNode(None, "s1", registry=registry)
    node.add_scalar("i1", int)
    node.add_scalar("d1", float, 1.0)
    node.add_array("af1", "float32", 7)
    return node


@pytest.mark.unit
def test_nested_scalar_notifies_with_dotted_path(s1, listener):
    """Assigning a field of a composite emits under parent.key"""
    s1.i1 = 5

    assert listener.events == [("s1.i1", "5")]


@pytest.mark.unit
def test_field_reads_return_plain_values(s1, listener):
    assert s1.d1 == 1.0
    assert isinstance(s1.d1, float)
    assert listener.events == []


@pytest.mark.unit
def test_array_field_is_returned_as_node(s1, listener):
    s1.af1[0] = 3.5

    assert listener.events == [("s1.af1.0", "3.5")]


@pytest.mark.unit
def test_children_keep_declaration_order(s1):
    assert s1.keys() == ["i1", "d1", "af1"]
    assert [c.key for c in s1.children()] == ["i1", "d1", "af1"]
    assert len(s1) == 3
    assert "d1" in s1


@pytest.mark.unit
def test_composite_send_update_is_noop(s1, listener):
    s1.send_update()

    assert listener.events == []


@pytest.mark.unit
def test_notify_all_on_composite_emits_each_leaf_once(s1, listener):
    """One notification per value-bearing leaf, none for the composite"""
    s1.notify_all()

    paths = listener.paths()
    assert "s1" not in paths
    assert paths[:2] == ["s1.i1", "s1.d1"]
    assert len(paths) == len(s1.leaves()) == 2 + 7


@pytest.mark.unit
def test_deep_nesting_builds_full_path(registry, listener):
    """root.mid.leaf regardless of siblings at each level"""
    root = CompositeNode(None, "root", registry=registry)
    root.add_scalar("a")
    mid = root.add_struct("mid")
    root.add_scalar("b")
    mid.add_scalar("before")
    leaf = mid.add_scalar("leaf")
    mid.add_scalar("after")

    leaf.value = 1

    assert listener.events == [("root.mid.leaf", "1")]
    assert leaf.path == "root.mid.leaf"


@pytest.mark.unit
def test_str_of_composite(s1):
    assert str(s1) == "<Struct s1 updated>"


@pytest.mark.unit
@pytest.mark.edge_case
def test_apply_text_update_on_composite_is_unsupported(s1):
    with pytest.raises(ParseError):
        s1.apply_text_update("i1=3")


@pytest.mark.unit
@pytest.mark.edge_case
def test_duplicate_child_key_rejected(s1):
    with pytest.raises(ConfigurationError):
        s1.add_scalar("i1")


@pytest.mark.unit
@pytest.mark.edge_case
def test_reserved_child_key_rejected(registry):
    node = CompositeNode(None, "n", registry=registry)
    with pytest.raises(ConfigurationError):
        node.add_scalar("path")


@pytest.mark.unit
@pytest.mark.edge_case
def test_key_with_separator_rejected(registry):
    with pytest.raises(ConfigurationError):
        CompositeNode(None, "a.b", registry=registry)


@pytest.mark.unit
@pytest.mark.edge_case
def test_unknown_child_raises(s1):
    with pytest.raises(KeyNotFoundError):
        s1.child("nope")
    with pytest.raises(AttributeError):
        s1.nope


@pytest.mark.unit
def test_child_constructed_directly_is_attached(registry, listener):
    """Passing a composite as parent attaches the child to it"""
    node = CompositeNode(None, "n", registry=registry)
    cell = ScalarCell(node, "x", int)

    assert node.child("x") is cell
    node.x = 2
    assert listener.events == [("n.x", "2")]


@pytest.mark.unit
def test_assigning_array_field_sets_values(registry, listener):
    node = CompositeNode(None, "n", registry=registry)
    node.add_array("a", int, 3, mode=ArrayMode.WHOLE_ARRAY)

    node.a = [1, 2, 3]

    assert listener.events == [("n.a", "[1 2 3 ]")]


@pytest.mark.unit
def test_to_dict(s1):
    s1.i1 = 4
    assert s1.to_dict()["i1"] == 4
    assert s1.to_dict()["af1"] == [0.0] * 7


@pytest.mark.unit
@pytest.mark.edge_case
def test_child_must_share_parent_registry(registry):
    from notifyval import Registry

    node = CompositeNode(None, "n", registry=registry)
    with pytest.raises(ConfigurationError):
        ScalarCell(node, "x", int, registry=Registry())
