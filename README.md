# bplistkit

A pure-Python toolkit for binary property lists (`bplist00`). It has no
dependencies outside the standard library.

## What it contains

- `bplistkit.bplist_reader.from_bin(data)` parses a binary plist and returns
  the root `TreeNode`. Each node carries a `PlistData` value. Data that is too
  short, has the wrong magic or version, or has a broken trailer, offset table
  or root object raises `BinaryPlistError`, which is a `ValueError`. An object
  that cannot be decoded is left out, and so is any reference to it. An object
  that is referenced from more than one place is copied for each reference
  after the first.
- `bplistkit.bplist_writer.to_bin(root)` serialises such a tree back to bytes.
  Equal scalar values are written once and shared by reference. Data, arrays
  and dictionaries are written once per node.
- `bplistkit.tree.TreeNode` is an ordered n-ary tree. It provides:
  - `attach`, `insert` and `detach` for children;
  - `first_child`, `nth_child` and `child_position`;
  - the `next_sibling` and `prev_sibling` properties;
  - `copy_deep(copy_func)`;
  - `debug_lines()` and `debug(file)`, which give an indented
    ROOT/NODE/LEAF outline.
- `bplistkit.model` provides:
  - the `PlistType` enumeration;
  - the `PlistData` payload, with its `copy()` method;
  - `new_node(plist_type, value)`, which builds nodes by hand.
- `bplistkit.b64` has `encode(data)` and a lenient `decode(text)`. The decoder
  treats runs of whitespace as separators between chunks. It ignores
  characters outside the base64 alphabet and drops a trailing partial group of
  four characters.
- `bplistkit.nodes` and `bplistkit.containers` form an object model over the
  tree:
  - Scalar values: `Boolean`, `Integer`, `Real`, `String`, `Key`, `Uid`,
    `Data` and `Date`. Each has a `value` property.
  - Structures: `Array` and `Dictionary`, which are `Structure` subclasses.
  - Adding a value to a structure stores an independent copy of it.
  - `Dictionary` iterates its keys in sorted order.
  - `Structure.to_bin()` serialises a structure to binary.
  - `Structure.from_bin(data)` parses binary data. It raises `ValueError` if
    the root object is not an array or a dictionary.
  - `containers.from_tree(tree)` wraps any tree node in the matching class.

## Installation

```
pip install .
```

## Example

```python
from bplistkit.containers import Array, Dictionary, Structure
from bplistkit.nodes import Integer, String

doc = Dictionary()
doc["name"] = String("example")
doc["count"] = Integer(3)

items = Array()
items.append(Integer(1))
items.append(Integer(2))
doc["items"] = items

blob = doc.to_bin()
again = Structure.from_bin(blob)
print(again["name"].value, len(again["items"]))   # example 2
```

A `Date` stores whole seconds and microseconds since 1970-01-01 UTC.
`Date.to_datetime()` returns a naive UTC `datetime`.
`Date.from_datetime(moment)` builds a `Date` from a `datetime`, and treats a
naive `datetime` as UTC.

## Demo

The following command builds a small sample tree and prints its outline:

```
bplistkit-demo
```

`bplistkit.demo.build_sample_tree()` returns the same tree without printing.

## What it does not do

Only the binary format is handled. The package neither reads nor writes XML
property lists, and it has no command for converting files between formats.

## Tests

```
pip install .[test]
pytest
```