"""End-to-end scenario: a legacy-style structure of notifying fields."""

from enum import Enum

import pytest

from notifyval import (
    ArrayMode,
    FloatCodec,
    RecordingListener,
    Registry,
    Struct,
    array_field,
    scalar_field,
    struct_field,
)


class Colors(Enum):
    Red = 0
    Blue = 1
    White = 2
    Yellow = 3
    Black = 4


class S1(Struct):
    i1 = scalar_field(int)
    d1 = scalar_field(FloatCodec("g"), 1.0)
    af1 = array_field("float32", 7, mode=ArrayMode.WHOLE_ARRAY)


class Values(Struct):
    i1 = scalar_field("uint16")
    f1 = scalar_field("float32")
    i2 = scalar_field("int32")
    d1 = scalar_field(FloatCodec("g"))
    e2 = scalar_field(Colors)
    a2 = array_field("uint32", 4, mode=ArrayMode.WHOLE_ARRAY)
    s1 = struct_field(S1)


@pytest.fixture
def values(registry):
    return Values(registry=registry)


@pytest.mark.integration
def test_initial_notify_all_reports_defaults(registry, listener, values):
    registry.notify_all()

    assert listener.events == [
        ("i1", "0"),
        ("f1", "0.0"),
        ("i2", "0"),
        ("d1", "0"),
        ("e2", "Red"),
        ("a2", "[0 0 0 0 ]"),
        ("s1.i1", "0"),
        ("s1.d1", "1"),
        ("s1.af1", "[0.0 0.0 0.0 0.0 0.0 0.0 0.0 ]"),
    ]


@pytest.mark.integration
def test_field_assignments_notify_with_paths(listener, values):
    values.i1 = 42
    values.d1 = 6.555
    values.f1 = 0.33
    values.i2 = -56
    values.e2 = Colors.Blue
    values.a2[1] = 6
    values.s1.i1 = 5
    values.s1.d1 = 5.5
    values.s1.af1[0] = 3.5

    assert listener.events == [
        ("i1", "42"),
        ("d1", "6.555"),
        ("f1", "0.33"),
        ("i2", "-56"),
        ("e2", "Blue"),
        ("a2", "[0 6 0 0 ]"),
        ("s1.i1", "5"),
        ("s1.d1", "5.5"),
        ("s1.af1", "[3.5 0.0 0.0 0.0 0.0 0.0 0.0 ]"),
    ]


@pytest.mark.integration
def test_reads_and_comparisons_are_silent(listener, values):
    values.i1 = 42
    values.s1.d1 = 5.5
    listener.clear()

    i = values.i1
    d = values.s1.d1
    f = values.s1.af1[0]

    assert i == 42
    assert d == 5.5
    assert f == 0.0
    assert listener.events == []


@pytest.mark.integration
def test_external_update_by_path(registry, listener, values):
    values.i1 = 42
    listener.clear()

    assert registry.update("i1", "45") is True
    assert values.i1 == 45
    assert listener.events == []

    assert registry.update("s1.i1", "7") is True
    assert values.s1.i1 == 7
    assert values.i1 == 45

    assert registry.update("e2", "Yellow")
    assert values.e2 is Colors.Yellow

    assert registry.update("missing", "1") is False


@pytest.mark.integration
def test_second_registry_tracks_a_separate_structure():
    """Two structures on two registries report independently"""
    first_events = RecordingListener()
    second_events = RecordingListener()
    first = Values(registry=Registry(listener=first_events))
    second = Values(registry=Registry(listener=second_events))

    first.i1 = 1
    second.i1 = 2

    assert first_events.events == [("i1", "1")]
    assert second_events.events == [("i1", "2")]
