"""
Encoding: turns a value into a tree and flattens the tree into lines.

The encoding policies drive a `TreeBuilder` exactly the way a reflection
layer would, one `enter`/`leave` pair per nested field and one
`write_scalar` per primitive. The flattener then walks the finished tree
and emits `path=value` for each leaf in the order the leaves were created.
"""
from typing import Any, List, Set, TextIO

from .exceptions import UnsupportedConstructError
from .path import LENGTH_SEGMENT, TYPE_SEGMENT, VALUE_SEPARATOR, join_path
from .tree import TreeBuilder, TreeNode
from .values import Keyed, Scalar, Sequence, Value, Variant, to_value


def encode_value(builder: TreeBuilder, value: Value) -> None:
    """Writes `value` below the builder's current node."""
    if isinstance(value, Scalar):
        builder.write_scalar(value.text)
    elif isinstance(value, Sequence):
        _encode_sequence(builder, value)
    elif isinstance(value, Keyed):
        _encode_entries(builder, value.entries, value.named)
    elif isinstance(value, Variant):
        _encode_variant(builder, value)
    else:
        raise UnsupportedConstructError(f"Not a dotline value: {type(value).__name__}")


def _encode_sequence(builder: TreeBuilder, value: Sequence) -> None:
    for index, item in enumerate(value.items):
        builder.enter(str(index))
        encode_value(builder, item)
        if not builder.leave():
            raise UnsupportedConstructError(
                f"Sequence element {index} writes no lines and could not be read back"
            )
    builder.enter(LENGTH_SEGMENT)
    builder.write_scalar(str(len(value.items)))
    builder.leave()


def _encode_entries(builder: TreeBuilder, entries, named: bool = False) -> None:
    seen: Set[str] = set()
    for segment, item in entries:
        if segment in seen:
            raise UnsupportedConstructError(f"Duplicate key '{segment}'")
        seen.add(segment)
        builder.enter(segment)
        encode_value(builder, item)
        if not builder.leave() and not named:
            raise UnsupportedConstructError(f"Entry '{segment}' writes no lines and could not be read back")


def _encode_variant(builder: TreeBuilder, value: Variant) -> None:
    if any(segment == TYPE_SEGMENT for segment, _ in value.fields):
        raise UnsupportedConstructError(f"A variant payload cannot have a field named '{TYPE_SEGMENT}'")
    builder.enter(TYPE_SEGMENT)
    builder.write_scalar(str(value.index))
    builder.leave()
    _encode_entries(builder, value.fields, named=True)


def build_tree(obj: Any) -> TreeNode:
    """Converts `obj` with `to_value` and encodes it into a fresh tree."""
    builder = TreeBuilder()
    encode_value(builder, to_value(obj))
    return builder.build()


def flatten(tree: TreeNode) -> List[str]:
    """Produces one `path=value` line (without line terminator) per leaf.

    Raises:
        UnsupportedConstructError: If a leaf hangs directly below the root,
            i.e. a top-level scalar, which has no path to write.
    """
    lines = []
    for leaf in tree.iter_leaves():
        path = leaf.path()
        if not path:
            raise UnsupportedConstructError("A top-level scalar cannot be written; wrap it in a structure")
        lines.append(f"{join_path(path)}{VALUE_SEPARATOR}{leaf.payload}")
    return lines


def write_tree(tree: TreeNode, stream: TextIO) -> None:
    # Flatten first so a failure leaves the stream untouched.
    for line in flatten(tree):
        stream.write(line + "\n")


def serialize(obj: Any) -> str:
    """Serializes a value into the flat `path.to.field=value` format.

    Args:
        obj: Anything `to_value` accepts, typically a dataclass instance, a
            dict or a list.

    Returns:
        The document text, one newline-terminated line per leaf. An empty
        structure yields an empty string.

    Raises:
        UnsupportedConstructError: If the value contains something the
            format cannot represent.
    """
    return "".join(line + "\n" for line in flatten(build_tree(obj)))


def serialize_to(obj: Any, stream: TextIO) -> None:
    """Serializes `obj` and writes the document to a text stream."""
    write_tree(build_tree(obj), stream)
