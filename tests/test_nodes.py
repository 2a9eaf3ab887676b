import datetime as dt

import pytest

from bplistkit.model import PlistType, new_node
from bplistkit.nodes import Boolean, Data, Date, Integer, Key, Node, Real, String, Uid


@pytest.mark.parametrize(
    "cls, expected_type, default",
    [
        (Boolean, PlistType.BOOLEAN, False),
        (Integer, PlistType.UINT, 0),
        (Real, PlistType.REAL, 0.0),
        (String, PlistType.STRING, ""),
        (Key, PlistType.KEY, ""),
        (Uid, PlistType.UID, 0),
        (Data, PlistType.DATA, b""),
    ],
)
def test_defaults(cls, expected_type, default):
    node = cls()
    assert node.type is expected_type
    assert node.value == default
    assert node.parent is None


@pytest.mark.parametrize(
    "cls, value",
    [
        (Boolean, True),
        (Integer, 2**64 - 1),
        (Real, 2.5),
        (String, "héllo"),
        (Key, "name"),
        (Uid, 42),
        (Data, b"\x00\x01\xff"),
    ],
)
def test_value_round_trip(cls, value):
    assert cls(value).value == value


def test_setting_value_replaces_payload():
    node = Integer(3)
    node.value = 7
    assert node.value == 7
    assert node.tree.data.value == 7


def test_string_setter_updates_length():
    node = String()
    node.value = "ab"
    assert node.tree.data.length == len("ab".encode("utf-8"))


def test_invalid_values_raise():
    with pytest.raises(ValueError):
        Integer(-1)
    with pytest.raises(ValueError):
        Uid(2**64)
    with pytest.raises(TypeError):
        String(5)
    with pytest.raises(TypeError):
        Data("text")


def test_setter_validates():
    node = Integer(1)
    with pytest.raises(ValueError):
        node.value = -5
    assert node.value == 1


def test_clone_is_independent():
    original = Data(b"abc")
    copy = original.clone()
    assert isinstance(copy, Data)
    assert copy.value == b"abc"
    copy.value = b"xyz"
    assert original.value == b"abc"
    assert copy.tree is not original.tree


def test_clone_drops_parent():
    owner = Node()
    child = String("x", owner)
    assert child.parent is owner
    assert child.clone().parent is None


def test_empty_node_has_none_type():
    assert Node().type is PlistType.NONE
    assert Node().clone().type is PlistType.NONE


def test_node_wraps_tree():
    tree = new_node(PlistType.REAL, 1.5)
    node = Node(tree)
    assert node.type is PlistType.REAL
    assert node.tree is tree


def test_node_rejects_non_tree():
    with pytest.raises(TypeError):
        Node("not a tree")


def test_date_epoch():
    assert Date(0, 0).to_datetime() == dt.datetime(1970, 1, 1)


def test_date_parts():
    date = Date(100, 25)
    assert (date.seconds, date.microseconds) == (100, 25)
    assert date.value == (100, 25)


def test_date_round_trip_naive():
    moment = dt.datetime(2011, 3, 9, 12, 30, 45, 123456)
    date = Date.from_datetime(moment)
    assert date.to_datetime() == moment
    assert date.microseconds == moment.microsecond


def test_date_from_aware_datetime_uses_utc():
    aware = dt.datetime(2020, 6, 1, 12, 0, tzinfo=dt.timezone(dt.timedelta(hours=2)))
    naive_utc = dt.datetime(2020, 6, 1, 10, 0)
    assert Date.from_datetime(aware).value == Date.from_datetime(naive_utc).value


def test_date_from_non_datetime_raises():
    with pytest.raises(TypeError):
        Date.from_datetime("2020-01-01")


def test_date_clone_keeps_value():
    date = Date(12345, 6)
    copy = date.clone()
    assert isinstance(copy, Date)
    assert copy.value == (12345, 6)