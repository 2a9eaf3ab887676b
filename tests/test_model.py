import pytest

from bplistkit.model import PlistData, PlistType, new_node


def test_defaults_per_type():
    assert new_node(PlistType.BOOLEAN).data.value is False
    assert new_node(PlistType.UINT).data.value == 0
    assert new_node(PlistType.REAL).data.value == 0.0
    assert new_node(PlistType.STRING).data.value == ""
    assert new_node(PlistType.KEY).data.value == ""
    assert new_node(PlistType.DATA).data.value == b""
    assert new_node(PlistType.DATE).data.value == (0, 0)
    assert new_node(PlistType.UID).data.value == 0
    assert new_node(PlistType.ARRAY).data.value is None


def test_node_is_detached_root_leaf():
    node = new_node(PlistType.DICT)
    assert node.is_root and node.is_leaf
    assert len(node) == 0
    assert node.data.type is PlistType.DICT


def test_string_length_counts_utf8_bytes():
    text = "h\u00e9llo"
    node = new_node(PlistType.STRING, text)
    assert node.data.length == len(text.encode("utf-8"))
    assert node.data.value == text


def test_data_length_and_bytes_conversion():
    node = new_node(PlistType.DATA, bytearray(b"\x00\x01\x02"))
    assert node.data.value == b"\x00\x01\x02"
    assert isinstance(node.data.value, bytes) and node.data.length == 3


def test_uint_limits():
    top = (1 << 64) - 1
    assert new_node(PlistType.UINT, top).data.value == top
    with pytest.raises(ValueError):
        new_node(PlistType.UINT, 1 << 64)
    with pytest.raises(ValueError):
        new_node(PlistType.UID, -1)


def test_uint_rejects_bool_and_float():
    with pytest.raises(TypeError):
        new_node(PlistType.UINT, True)
    with pytest.raises(TypeError):
        new_node(PlistType.UINT, 1.5)


def test_real_accepts_int_and_rejects_text():
    assert new_node(PlistType.REAL, 3).data.value == 3.0
    with pytest.raises(TypeError):
        new_node(PlistType.REAL, "3")


def test_string_and_data_type_errors():
    with pytest.raises(TypeError):
        new_node(PlistType.STRING, b"bytes")
    with pytest.raises(TypeError):
        new_node(PlistType.DATA, "text")


def test_date_validation():
    assert new_node(PlistType.DATE, (10, 500)).data.value == (10, 500)
    with pytest.raises(TypeError):
        new_node(PlistType.DATE, 10)
    with pytest.raises(TypeError):
        new_node(PlistType.DATE, (1.0, 2))


def test_container_with_value_rejected():
    with pytest.raises(ValueError):
        new_node(PlistType.ARRAY, [1, 2])


def test_none_type_rejected():
    with pytest.raises(ValueError):
        new_node(PlistType.NONE)


def test_copy_is_equal_and_independent():
    original = PlistData(PlistType.ARRAY, [1, 2], 2)
    duplicate = original.copy()
    assert duplicate == original
    duplicate.value.append(3)
    assert original.value == [1, 2]


def test_copy_with_tree_copy_deep():
    root = new_node(PlistType.ARRAY)
    root.attach(new_node(PlistType.STRING, "a"))
    root.attach(new_node(PlistType.UINT, 7))
    clone = root.copy_deep(PlistData.copy)
    assert [child.data for child in clone] == [child.data for child in root]
    assert all(a.data is not b.data for a, b in zip(clone, root))