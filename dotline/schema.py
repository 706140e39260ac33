"""
Shapes that drive decoding.

Each shape knows how to read itself from a `Scope` through a `Decoder`, and
what its empty representation is when the document holds nothing for it.
Shapes nest: `Struct({"points": Seq(Float())})` reads a keyed structure whose
`points` field is a sequence of floats.

`Struct.from_dataclass` derives a shape from a dataclass's type hints, which
covers most uses without spelling the schema out by hand.
"""
import collections.abc
import dataclasses
import enum
import re
import types
import typing
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type

from .cursor import Line
from .decoder import Decoder
from .exceptions import (
    InvalidScalarTextError,
    ShapeMismatchError,
    UnexpectedEndOfInputError,
    UnsupportedConstructError,
)
from .grouping import Scope
from .path import join_path, validate_segment
from .values import RENAME_METADATA_KEY, Variant

_INT_RE = re.compile(r"^[+-]?\d+$", re.ASCII)


def _child_path(scope: Scope, segment: str) -> str:
    return join_path((scope.prefix or ()) + (segment,))


class Schema:
    """Base class for all shapes."""
    def decode(self, decoder: Decoder, scope: Scope) -> Any:
        raise NotImplementedError

    def empty(self, path: str) -> Any:
        """Returns the value for a shape with no lines at `path`.

        Raises:
            UnexpectedEndOfInputError: If the shape has no empty form.
        """
        raise UnexpectedEndOfInputError(f"Missing value for '{path}'", path)


# -- Scalars ---------------------------------------------------------------

class ScalarSchema(Schema):
    """A shape read from a single `path=value` line."""
    type_name = "text"

    def parse(self, text: str, line_number: Optional[int] = None) -> Any:
        raise NotImplementedError

    def decode(self, decoder: Decoder, scope: Scope) -> Any:
        line: Line = decoder.expect_scalar(scope)
        return self.parse(line.value, line.line_number)


class Str(ScalarSchema):
    type_name = "a string"

    def parse(self, text, line_number=None):
        return text


class Int(ScalarSchema):
    type_name = "an integer"

    def parse(self, text, line_number=None):
        if not _INT_RE.match(text.strip()):
            raise InvalidScalarTextError(text, self.type_name, line_number)
        return int(text)


class Float(ScalarSchema):
    type_name = "a float"

    def parse(self, text, line_number=None):
        if "_" in text:
            raise InvalidScalarTextError(text, self.type_name, line_number)
        try:
            return float(text)
        except ValueError:
            raise InvalidScalarTextError(text, self.type_name, line_number)


class Bool(ScalarSchema):
    type_name = "a boolean"

    def parse(self, text, line_number=None):
        if text == "true":
            return True
        if text == "false":
            return False
        raise InvalidScalarTextError(text, self.type_name, line_number)


class Char(ScalarSchema):
    type_name = "a single character"

    def parse(self, text, line_number=None):
        if len(text) != 1:
            raise InvalidScalarTextError(text, self.type_name, line_number)
        return text


class EnumOf(ScalarSchema):
    """A unit variant, written as the member's position within its enum."""
    def __init__(self, enum_cls: Type[enum.Enum]):
        self.enum_cls = enum_cls
        self.type_name = f"a {enum_cls.__name__} index"

    def parse(self, text, line_number=None):
        members = list(self.enum_cls)
        if not (text.isascii() and text.isdigit()) or int(text) >= len(members):
            raise InvalidScalarTextError(text, self.type_name, line_number)
        return members[int(text)]


class Bytes(Schema):
    def decode(self, decoder, scope):
        raise UnsupportedConstructError(f"Raw byte buffers are not supported (at '{scope.path_text}')")


class Nullable(Schema):
    """An optional value. The format has no absent marker, so it cannot be read."""
    def __init__(self, inner: Schema):
        self.inner = inner

    def decode(self, decoder, scope):
        raise UnsupportedConstructError(f"Optional values are not supported (at '{scope.path_text}')")

    def empty(self, path):
        raise UnsupportedConstructError(f"Optional values are not supported (at '{path}')")


# -- Containers ------------------------------------------------------------

class Seq(Schema):
    """A homogeneous sequence, decoded into a list (or into `container`)."""
    def __init__(self, item: Schema, container: Callable[[Iterable[Any]], Any] = list):
        self.item = item
        self.container = container

    def decode(self, decoder, scope):
        return self.container(self.item.decode(decoder, child) for child in decoder.expect_sequence(scope))

    def empty(self, path):
        return self.container(())


class TupleOf(Schema):
    """A fixed-length sequence with one shape per position, decoded into a tuple."""
    def __init__(self, *items: Schema):
        self.items = items

    def decode(self, decoder, scope):
        values = []
        for child in decoder.expect_sequence(scope):
            position = len(values)
            if position >= len(self.items):
                line = child.peek_line()
                raise ShapeMismatchError(
                    f"Tuple '{scope.path_text}' has more than {len(self.items)} element(s)",
                    line.line_number if line is not None else None,
                )
            values.append(self.items[position].decode(decoder, child))
        if len(values) != len(self.items):
            if not values:
                return self.empty(scope.path_text)
            raise ShapeMismatchError(
                f"Tuple '{scope.path_text}' has {len(values)} element(s), expected {len(self.items)}"
            )
        return tuple(values)

    def empty(self, path):
        if self.items:
            return super().empty(path)
        return ()


class MapOf(Schema):
    """A keyed structure with arbitrary keys, decoded into a dict."""
    def __init__(self, value: Schema, key: Optional[ScalarSchema] = None):
        self.value = value
        self.key = key or Str()

    def decode(self, decoder, scope):
        result = {}
        for label, child in decoder.expect_keyed(scope):
            line = child.peek_line()
            key = self.key.parse(label, line.line_number if line is not None else None)
            if key in result:
                raise ShapeMismatchError(
                    f"Duplicate key '{_child_path(scope, label)}'",
                    line.line_number if line is not None else None,
                )
            result[key] = self.value.decode(decoder, child)
        return result

    def empty(self, path):
        return {}


class Struct(Schema):
    """
    A keyed structure with a fixed set of named fields.

    Args:
        fields: Maps each field's segment to its shape, in declaration order.
        factory: Called with the decoded fields as keyword arguments. If
            omitted, the struct decodes into a dict keyed by segment.
        names: Maps segments to the keyword names passed to `factory`, for
            fields whose segment differs from their attribute name.
        deny_unknown: If True, a label that is not a known field is an error
            instead of being skipped.
    """
    def __init__(
        self,
        fields: Dict[str, Schema],
        factory: Optional[Callable[..., Any]] = None,
        names: Optional[Dict[str, str]] = None,
        deny_unknown: bool = False,
    ):
        self.fields = {validate_segment(segment): schema for segment, schema in fields.items()}
        self.factory = factory
        self.names = names or {}
        self.deny_unknown = deny_unknown

    @classmethod
    def from_dataclass(cls, dataclass_type: type, deny_unknown: bool = False) -> "Struct":
        """Builds a struct shape from a dataclass's fields and type hints.

        A field can be written under another segment with
        `field(metadata={"rename": "segment"})`.
        """
        if not dataclasses.is_dataclass(dataclass_type):
            raise TypeError(f"{dataclass_type!r} is not a dataclass")
        hints = typing.get_type_hints(dataclass_type)
        fields: Dict[str, Schema] = {}
        names: Dict[str, str] = {}
        for f in dataclasses.fields(dataclass_type):
            segment = f.metadata.get(RENAME_METADATA_KEY, f.name)
            fields[segment] = schema_for(hints[f.name])
            names[segment] = f.name
        return cls(fields, factory=dataclass_type, names=names, deny_unknown=deny_unknown)

    def collect(self, decoder: Decoder, entries: Iterable[Tuple[str, Scope]], scope: Scope) -> Dict[str, Any]:
        """Reads the known fields from `(label, scope)` pairs, filling absent ones with their empty value."""
        values: Dict[str, Any] = {}
        for label, child in entries:
            schema = self.fields.get(label)
            if schema is None:
                if self.deny_unknown:
                    line = child.peek_line()
                    raise ShapeMismatchError(
                        f"Unknown field '{_child_path(scope, label)}'",
                        line.line_number if line is not None else None,
                    )
                continue
            if label in values:
                line = child.peek_line()
                raise ShapeMismatchError(
                    f"Duplicate field '{_child_path(scope, label)}'",
                    line.line_number if line is not None else None,
                )
            values[label] = schema.decode(decoder, child)

        return {
            segment: values[segment] if segment in values else schema.empty(_child_path(scope, segment))
            for segment, schema in self.fields.items()
        }

    def build(self, values: Dict[str, Any]) -> Any:
        if self.factory is None:
            return values
        return self.factory(**{self.names.get(segment, segment): value for segment, value in values.items()})

    def decode(self, decoder, scope):
        return self.build(self.collect(decoder, decoder.expect_keyed(scope), scope))

    def empty(self, path):
        prefix = (path,) if path else ()
        return self.build({
            segment: schema.empty(join_path(prefix + (segment,)))
            for segment, schema in self.fields.items()
        })


class Tagged(Schema):
    """
    A tagged variant: a `type` entry holding the variant index, then the
    fields of the selected variant.

    Decodes into `Variant(index, fields)` where `fields` lists the decoded
    `(segment, value)` pairs of the selected variant's struct.
    """
    def __init__(self, variants: List[Struct]):
        self.variants = variants

    def decode(self, decoder, scope):
        index, entries = decoder.expect_variant(scope)
        if not 0 <= index < len(self.variants):
            raise ShapeMismatchError(
                f"Variant index {index} at '{scope.path_text}' is out of range (0-{len(self.variants) - 1})"
            )
        values = self.variants[index].collect(decoder, entries, scope)
        return Variant(index, list(values.items()))


# -- Type hints ------------------------------------------------------------

_SCALAR_HINTS: Dict[Any, Callable[[], Schema]] = {
    str: Str,
    int: Int,
    float: Float,
    bool: Bool,
    bytes: Bytes,
    bytearray: Bytes,
}

# `X | None` has its own origin type on Python 3.10+.
_UNION_ORIGINS = tuple(
    origin for origin in (typing.Union, getattr(types, "UnionType", None)) if origin is not None
)


def schema_for(hint: Any) -> Schema:
    """Maps a type hint onto a shape.

    Raises:
        UnsupportedConstructError: If the hint has no corresponding shape.
    """
    if isinstance(hint, Schema):
        return hint
    if hint in _SCALAR_HINTS:
        return _SCALAR_HINTS[hint]()
    if isinstance(hint, type) and issubclass(hint, enum.Enum):
        return EnumOf(hint)
    if dataclasses.is_dataclass(hint):
        return Struct.from_dataclass(hint)

    origin = typing.get_origin(hint)
    args = typing.get_args(hint)
    if origin in (list, collections.abc.Sequence):
        return Seq(schema_for(args[0]) if args else Str())
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return Seq(schema_for(args[0]), container=tuple)
        return TupleOf(*(schema_for(arg) for arg in args))
    if origin in (dict, collections.abc.Mapping):
        key_schema = schema_for(args[0]) if args else Str()
        if not isinstance(key_schema, ScalarSchema):
            raise UnsupportedConstructError(f"Mapping keys must be scalars: {hint!r}")
        return MapOf(schema_for(args[1]) if args else Str(), key=key_schema)
    if origin in _UNION_ORIGINS and type(None) in args:
        inner = [arg for arg in args if arg is not type(None)]
        return Nullable(schema_for(inner[0]) if len(inner) == 1 else Str())
    raise UnsupportedConstructError(f"No dotline shape for type {hint!r}")
