"""Binary property list reading and writing, with a tree and object model."""

__version__ = "0.1.0"

__all__ = [
    "b64",
    "bplist_reader",
    "bplist_writer",
    "containers",
    "demo",
    "model",
    "nodes",
    "tree",
]