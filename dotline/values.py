"""
The logical value model written by the encoder, and the conversion of plain
Python objects into it.

A value is one of four variants:
- `Scalar`: a leaf holding its canonical text rendering.
- `Sequence`: an ordered list of values. Written as `0`, `1`, ... followed by
  a synthetic `length` entry.
- `Keyed`: an ordered list of `(segment, value)` entries (structs and maps).
- `Variant`: a tagged payload. Written as a synthetic `type` entry holding the
  discriminant index, followed by the payload's fields.

`to_value` maps ordinary Python data (dicts, lists, dataclasses, enums and
primitives) onto this model so callers rarely need to build it by hand.
"""
import dataclasses
import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, List, Tuple, Union

from .exceptions import UnsupportedConstructError
from .path import validate_segment

RENAME_METADATA_KEY = "rename"


@dataclass
class Scalar:
    text: str


@dataclass
class Sequence:
    items: List["Value"] = field(default_factory=list)


@dataclass
class Keyed:
    """An ordered list of `(segment, value)` entries.

    `named` marks the fixed fields of a struct. A named entry that writes no
    lines can be dropped, since decoding fills an absent field with its empty
    value. A map entry cannot, because nothing would bring its key back.
    """
    entries: List[Tuple[str, "Value"]] = field(default_factory=list)
    named: bool = False


@dataclass
class Variant:
    """A tagged variant: the discriminant `index` plus the payload fields.

    When passed to `to_value`, `fields` may also be a mapping or a dataclass
    instance; it is normalised into `(segment, Value)` pairs.
    """
    index: int
    fields: Any = field(default_factory=list)


Value = Union[Scalar, Sequence, Keyed, Variant]


def scalar_text(obj: Any) -> str:
    """Renders a primitive as the text written after `=`.

    Raises:
        UnsupportedConstructError: If `obj` is not a primitive the format
            can represent, or its rendering spans several lines.
    """
    if isinstance(obj, bool):
        text = "true" if obj else "false"
    elif isinstance(obj, int):
        text = str(obj)
    elif isinstance(obj, float):
        text = repr(obj)
    elif isinstance(obj, str):
        text = obj
    elif isinstance(obj, enum.Enum):
        text = str(list(type(obj)).index(obj))
    elif obj is None:
        raise UnsupportedConstructError("Optional values with an absent marker are not supported")
    elif isinstance(obj, (bytes, bytearray, memoryview)):
        raise UnsupportedConstructError("Raw byte buffers are not supported")
    else:
        raise UnsupportedConstructError(f"Cannot write a value of type {type(obj).__name__}")

    if "\n" in text or "\r" in text:
        raise UnsupportedConstructError(f"Scalar text cannot span several lines: {text!r}")
    if text != text.rstrip():
        # The reader trims each line, so trailing whitespace would be lost.
        raise UnsupportedConstructError(f"Scalar text cannot end with whitespace: {text!r}")
    return text


def key_segment(key: Any) -> str:
    """Renders a mapping key as a single path segment.

    Only scalar-like keys are accepted; the rendering must itself be a valid
    segment.
    """
    if isinstance(key, (str, bool, int, enum.Enum)):
        return validate_segment(scalar_text(key))
    raise UnsupportedConstructError(f"Mapping keys must be scalars, got {type(key).__name__}")


def _field_segment(f: dataclasses.Field) -> str:
    return validate_segment(f.metadata.get(RENAME_METADATA_KEY, f.name))


def _entries(obj: Any) -> List[Tuple[str, Value]]:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return [(_field_segment(f), to_value(getattr(obj, f.name))) for f in dataclasses.fields(obj)]
    if isinstance(obj, Mapping):
        return [(key_segment(k), to_value(v)) for k, v in obj.items()]
    if isinstance(obj, Keyed):
        return [(validate_segment(k), to_value(v)) for k, v in obj.entries]
    return [(validate_segment(k), to_value(v)) for k, v in obj]


def to_value(obj: Any) -> Value:
    """Converts a Python object into the logical value model.

    Args:
        obj: A value instance, a primitive, an enum member, a list or tuple,
            a mapping, a dataclass instance or a `Variant`.

    Returns:
        The equivalent `Value`. Nested data is converted recursively.

    Raises:
        UnsupportedConstructError: If `obj` (or anything inside it) has no
            representation in the format.
    """
    if isinstance(obj, Scalar):
        return Scalar(scalar_text(obj.text))
    if isinstance(obj, Sequence):
        return Sequence([to_value(item) for item in obj.items])
    if isinstance(obj, Keyed):
        return Keyed(_entries(obj), obj.named)
    if isinstance(obj, Variant):
        return Variant(obj.index, _entries(obj.fields))
    if isinstance(obj, (list, tuple)):
        return Sequence([to_value(item) for item in obj])
    if isinstance(obj, Mapping):
        return Keyed(_entries(obj))
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return Keyed(_entries(obj), named=True)
    return Scalar(scalar_text(obj))
