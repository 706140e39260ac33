"""
Schema-guided decoding.

The decoder never infers structure. The caller (normally a schema from
`dotline.schema`) asks for a shape at a scope, and the decoder either hands
back the lines or child scopes that make up that shape, or raises.
"""
from typing import Any, Iterator, Tuple

from .cursor import Line, LineCursor
from .exceptions import (
    InvalidScalarTextError,
    ShapeMismatchError,
    UnexpectedEndOfInputError,
)
from .grouping import Scope, Scopes
from .path import LENGTH_SEGMENT, TYPE_SEGMENT, join_path


def _describe(scope: Scope) -> str:
    return f"'{scope.path_text}'" if scope.prefix else "the top level"


def parse_index(line: Line) -> int:
    text = line.value.strip()
    if not (text.isascii() and text.isdigit()):
        raise InvalidScalarTextError(line.value, "an index", line.line_number)
    return int(text)


class Decoder:
    """Answers shape requests over one document.

    Attributes:
        cursor: The `LineCursor` shared by every scope of this decode pass.
            After a failure it is left on the offending line.
    """
    def __init__(self, text: str):
        self.cursor = LineCursor(text)

    def root(self) -> Scope:
        return Scope(self.cursor, 0)

    def expect_scalar(self, scope: Scope) -> Line:
        """Returns the single line holding the scalar of a leaf scope.

        Raises:
            UnexpectedEndOfInputError: If the scope has no line left.
            ShapeMismatchError: If the scope holds nested fields, or more than
                one value.
        """
        line = scope.peek_line()
        if line is None:
            raise UnexpectedEndOfInputError(f"Expected a value at {_describe(scope)}", scope.path_text)
        if len(line.path) != scope.depth:
            raise ShapeMismatchError(
                f"Expected a value at {_describe(scope)} but found nested field '{line.path_text}'",
                line.line_number,
            )
        scope.next_line()
        extra = scope.peek_line()
        if extra is not None:
            raise ShapeMismatchError(
                f"Unexpected second entry for {_describe(scope)}: '{extra.path_text}'",
                extra.line_number,
            )
        return line

    def expect_keyed(self, scope: Scope) -> Iterator[Tuple[str, Scope]]:
        """Yields `(label, child_scope)` for each field of a keyed structure, in document order."""
        return self._labelled(scope.subdivide())

    def expect_sequence(self, scope: Scope) -> Iterator[Scope]:
        """Yields the element scopes of a sequence, in order.

        Labels must run `0, 1, 2, ...` and be followed by a `length` entry
        equal to the element count. The `length` entry may only be omitted
        when there are no elements at all.
        """
        count = 0
        for child in scope.subdivide():
            if child.label == LENGTH_SEGMENT:
                line = self.expect_scalar(child)
                declared = parse_index(line)
                if declared != count:
                    raise ShapeMismatchError(
                        f"Sequence {_describe(scope)} declares length {declared} but has {count} element(s)",
                        line.line_number,
                    )
                trailing = scope.peek_line()
                if trailing is not None:
                    raise ShapeMismatchError(
                        f"Unexpected entry '{trailing.path_text}' after the length of {_describe(scope)}",
                        trailing.line_number,
                    )
                return
            if child.label != str(count):
                line = child.peek_line()
                raise ShapeMismatchError(
                    f"Expected element {count} of sequence {_describe(scope)}, found '{child.label}'",
                    line.line_number if line is not None else None,
                )
            yield child
            count += 1
        if count:
            raise UnexpectedEndOfInputError(
                f"Sequence {_describe(scope)} has no '{LENGTH_SEGMENT}' entry",
                join_path((scope.prefix or ()) + (LENGTH_SEGMENT,)),
            )

    def expect_variant(self, scope: Scope) -> Tuple[int, Iterator[Tuple[str, Scope]]]:
        """Reads the `type` discriminant of a tagged variant.

        Returns:
            The variant index and an iterator over the payload's
            `(label, child_scope)` pairs.
        """
        children = scope.subdivide()
        first = children.next_scope()
        if first is None:
            raise UnexpectedEndOfInputError(f"Expected a tagged variant at {_describe(scope)}", scope.path_text)
        if first.label != TYPE_SEGMENT:
            line = first.peek_line()
            raise ShapeMismatchError(
                f"Expected '{TYPE_SEGMENT}' first in variant {_describe(scope)}, found '{first.label}'",
                line.line_number if line is not None else None,
            )
        index = parse_index(self.expect_scalar(first))
        return index, self._labelled(children)

    @staticmethod
    def _labelled(children: Scopes) -> Iterator[Tuple[str, Scope]]:
        for child in children:
            yield child.label, child

    def decode(self, schema: Any) -> Any:
        """Decodes the whole document with `schema` and checks nothing is left over."""
        value = schema.decode(self, self.root())
        leftover = self.cursor.peek()
        if leftover is not None:
            raise ShapeMismatchError(f"Unexpected trailing entry '{leftover.path_text}'", leftover.line_number)
        return value


def deserialize(text: str, schema: Any) -> Any:
    """Deserializes a document using a schema.

    Args:
        text: The document, one `path=value` record per line.
        schema: A shape from `dotline.schema` describing the top-level value,
            for example `Struct.from_dataclass(MyClass)` or `Seq(Float())`.

    Returns:
        The decoded value, as produced by the schema.

    Raises:
        DotlineError: One of its subclasses, depending on what went wrong.
    """
    return Decoder(text).decode(schema)
