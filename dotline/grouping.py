"""
Regroups flat lines into nested scopes by their shared path prefixes.

Nothing is written in the document to mark where a structure starts or ends;
the only structure is that the lines of one structure are contiguous and
share a path prefix. A `Scope` is a run of such lines: every line whose
first `depth` segments equal the scope's prefix, up to the first line that
does not. Subdividing a scope (`Scopes`) splits its run into the maximal
contiguous sub-runs that agree on one more segment.

Scopes never copy lines or build nodes. They share one `LineCursor` and only
decide, line by line, whether the line under the cursor still belongs to
them. The run iterator never consumes a line it does not own, so it can be
stopped and resumed at any point, and a scope can always be drained to put
the cursor exactly on the first line after it.
"""
from typing import Iterator, Optional

from .cursor import Line, LineCursor
from .exceptions import ShapeMismatchError
from .path import Path, join_path


class Scope:
    """
    A run of lines sharing a path prefix of length `depth`.

    The prefix is committed lazily from the first line the scope observes
    (the root scope, at depth 0, has the empty prefix and owns every line).
    A scope whose run is a single line with exactly `depth` segments is a
    leaf scope; that line's value is the scalar it holds.
    """
    def __init__(self, cursor: LineCursor, depth: int = 0, prefix: Optional[Path] = None):
        self._cursor = cursor
        self.depth = depth
        self._prefix: Optional[Path] = () if depth == 0 else prefix

    def __repr__(self) -> str:
        return f"Scope(depth={self.depth}, prefix={self.path_text!r})"

    @property
    def cursor(self) -> LineCursor:
        return self._cursor

    @property
    def prefix(self) -> Optional[Path]:
        return self._prefix

    @property
    def label(self) -> Optional[str]:
        """The last committed segment, i.e. the name this scope was grouped by."""
        if not self._prefix:
            return None
        return self._prefix[-1]

    @property
    def path_text(self) -> str:
        return join_path(self._prefix or ())

    def _belongs(self, line: Line) -> bool:
        candidate = line.prefix(self.depth)
        if len(candidate) < self.depth:
            return False
        if self._prefix is None:
            self._prefix = candidate
        return candidate == self._prefix

    # -- Run iteration ---------------------------------------------------

    def peek_line(self) -> Optional[Line]:
        """Returns the next line of this run without consuming it."""
        line = self._cursor.peek()
        if line is None or not self._belongs(line):
            return None
        return line

    def next_line(self) -> Optional[Line]:
        """Consumes and returns the next line of this run, or None when the run has ended."""
        line = self.peek_line()
        if line is not None:
            self._cursor.advance()
        return line

    def __iter__(self) -> Iterator[Line]:
        while True:
            line = self.next_line()
            if line is None:
                return
            yield line

    def drain(self) -> int:
        """Consumes the rest of the run; returns how many lines were skipped."""
        skipped = 0
        while self.next_line() is not None:
            skipped += 1
        return skipped

    # -- Scope dispatch --------------------------------------------------

    def peek_label(self) -> Optional[str]:
        """Returns the segment the next line would be grouped by, without consuming it.

        None means the run has ended, or the next line is this scope's own
        scalar.
        """
        line = self.peek_line()
        if line is None:
            return None
        return self._cursor.segment_at(line, self.depth)

    def is_leaf(self) -> bool:
        line = self.peek_line()
        return line is not None and len(line.path) == self.depth

    def subdivide(self) -> "Scopes":
        return Scopes(self)


class Scopes:
    """
    Iterates over the child scopes of a parent scope.

    Each step first drains the previously yielded child, so the cursor sits
    on the first line outside it regardless of how much of it the caller
    consumed, then stops as soon as the next line leaves the parent's run.
    That check is what keeps the children of one group from spilling into
    the next sibling group.
    """
    def __init__(self, parent: Scope):
        self.parent = parent
        self._current: Optional[Scope] = None

    def __iter__(self) -> "Scopes":
        return self

    def __next__(self) -> Scope:
        scope = self.next_scope()
        if scope is None:
            raise StopIteration
        return scope

    def _finish_current(self) -> None:
        if self._current is not None:
            self._current.drain()
            self._current = None

    def next_scope(self) -> Optional[Scope]:
        self._finish_current()
        line = self.parent.peek_line()
        if line is None:
            return None
        depth = self.parent.depth
        if len(line.path) == depth:
            raise ShapeMismatchError(
                f"Expected nested fields under '{self.parent.path_text}' but found a value",
                line.line_number,
            )
        self._current = Scope(self.parent.cursor, depth + 1, line.prefix(depth + 1))
        return self._current

    def peek_label(self) -> Optional[str]:
        """Returns the label of the next child scope without creating it."""
        self._finish_current()
        return self.parent.peek_label()
