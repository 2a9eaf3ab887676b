import pytest

from bplistkit.bplist_reader import BinaryPlistError
from bplistkit.bplist_writer import to_bin
from bplistkit.containers import Array, Dictionary, Structure, from_tree
from bplistkit.model import PlistData, PlistType, new_node
from bplistkit.nodes import Boolean, Data, Date, Integer, Real, String, Uid
from bplistkit.tree import TreeNode


def _values(array):
    return [item.value for item in array]


def test_new_array_is_empty():
    array = Array()
    assert len(array) == 0
    assert array.type is PlistType.ARRAY


def test_append_stores_independent_copy():
    original = Integer(5)
    array = Array()
    array.append(original)
    assert array[0] is not original
    assert array[0].value == 5
    assert array[0].parent is array
    assert original.parent is None
    original.value = 9
    assert array[0].value == 5


def test_insert_positions_and_tree_order():
    array = Array()
    array.append(String("a"))
    array.append(String("c"))
    array.insert(String("b"), 1)
    array.insert(String("z"), 10)
    assert _values(array) == ["a", "b", "c", "z"]
    assert [child.data.value for child in array.tree] == ["a", "b", "c", "z"]


def test_insert_negative_position_rejected():
    array = Array()
    with pytest.raises(IndexError):
        array.insert(Integer(1), -1)


def test_append_non_node_rejected():
    with pytest.raises(TypeError):
        Array().append(None)


def test_remove_by_index_and_node():
    array = Array()
    for number in (1, 2, 3):
        array.append(Integer(number))
    array.remove(0)
    assert _values(array) == [2, 3]
    victim = array[1]
    array.remove(victim)
    assert _values(array) == [2]
    assert len(array.tree) == 1
    assert victim.parent is None


def test_remove_errors():
    array = Array()
    array.append(Integer(1))
    with pytest.raises(ValueError):
        array.remove(Integer(1))
    with pytest.raises(IndexError):
        array.remove(5)


def test_index_and_getitem():
    array = Array()
    array.append(Boolean(True))
    array.append(Boolean(False))
    second = array[1]
    assert array.index(second) == 1
    assert list(array) == [array[0], second]
    with pytest.raises(ValueError):
        array.index(Boolean(False))
    with pytest.raises(IndexError):
        array[2]


def test_array_clone_is_independent():
    array = Array()
    array.append(Integer(1))
    copy = array.clone()
    copy[0].value = 2
    copy.append(Integer(3))
    assert _values(array) == [1]
    assert _values(copy) == [2, 3]
    assert copy.parent is None


def test_empty_array_wire_bytes():
    expected = (
        b"bplist00\xa0\x08"
        + bytes(6)
        + b"\x01\x01"
        + (1).to_bytes(8, "big")
        + (0).to_bytes(8, "big")
        + (9).to_bytes(8, "big")
    )
    assert Array().to_bin() == expected


def test_dictionary_set_get_contains():
    d = Dictionary()
    d["name"] = String("widget")
    d["count"] = Integer(3)
    assert len(d) == 2
    assert d["name"].value == "widget"
    assert "count" in d
    assert "missing" not in d
    assert d["count"].parent is d
    with pytest.raises(KeyError):
        d["missing"]


def test_dictionary_iterates_in_key_order():
    d = Dictionary()
    for key in ("b", "a", "c"):
        d[key] = String(key)
    assert list(d) == ["a", "b", "c"]
    assert [(k, v.value) for k, v in d.items()] == [("a", "a"), ("b", "b"), ("c", "c")]


def test_dictionary_replace_keeps_size():
    d = Dictionary()
    d["k"] = Integer(1)
    old = d["k"]
    d["k"] = Integer(2)
    assert len(d) == 1
    assert len(d.tree) == 2
    assert d["k"].value == 2
    assert old.parent is None


def test_dictionary_rejects_non_str_key():
    with pytest.raises(TypeError):
        Dictionary()[1] = Integer(1)


def test_dictionary_remove_by_key_and_node():
    d = Dictionary()
    d["a"] = Integer(1)
    d["b"] = Integer(2)
    d["c"] = Integer(3)
    d.remove("a")
    d.remove(d["c"])
    assert list(d) == ["b"]
    assert len(d) == 1
    assert [child.data.value for child in d.tree] == ["b", 2]
    with pytest.raises(KeyError):
        d.remove("a")
    with pytest.raises(ValueError):
        d.remove(Integer(2))


def test_key_of():
    d = Dictionary()
    d["x"] = Real(1.5)
    assert d.key_of(d["x"]) == "x"
    with pytest.raises(ValueError):
        d.key_of(Real(1.5))


def test_dictionary_clone_is_independent():
    d = Dictionary()
    d["k"] = String("v")
    copy = d.clone()
    copy["k"] = String("w")
    copy["n"] = Integer(1)
    assert d["k"].value == "v"
    assert list(d) == ["k"]
    assert list(copy) == ["k", "n"]


def test_dictionary_from_tree():
    tree = new_node(PlistType.DICT)
    tree.attach(new_node(PlistType.KEY, "k"))
    tree.attach(new_node(PlistType.UINT, 3))
    d = Dictionary(tree)
    assert d["k"].value == 3
    assert d["k"].tree is tree.nth_child(1)


def test_wrong_tree_type_rejected():
    with pytest.raises(TypeError):
        Array(new_node(PlistType.DICT))
    with pytest.raises(TypeError):
        Dictionary(new_node(PlistType.ARRAY))


def test_from_tree_dispatch():
    assert from_tree(None) is None
    node = from_tree(new_node(PlistType.STRING, "x"))
    assert isinstance(node, String)
    assert node.value == "x"
    assert isinstance(from_tree(new_node(PlistType.ARRAY)), Array)
    with pytest.raises(ValueError):
        from_tree(TreeNode(PlistData(PlistType.NONE)))


def test_value_change_is_serialized():
    array = Array()
    array.append(Integer(1))
    array[0].value = 7
    parsed = Structure.from_bin(array.to_bin())
    assert _values(parsed) == [7]


def test_removed_entry_not_serialized():
    d = Dictionary()
    d["a"] = Integer(1)
    d["b"] = Integer(2)
    d.remove("a")
    parsed = Structure.from_bin(d.to_bin())
    assert list(parsed) == ["b"]
    assert parsed["b"].value == 2


def test_to_bin_has_magic():
    assert Dictionary().to_bin().startswith(b"bplist00")


def test_from_bin_scalar_root_rejected():
    with pytest.raises(ValueError):
        Structure.from_bin(to_bin(new_node(PlistType.UINT, 1)))


def test_from_bin_garbage_rejected():
    with pytest.raises(BinaryPlistError):
        Structure.from_bin(b"not a property list at all, just text")