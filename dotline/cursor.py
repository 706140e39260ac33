"""
Line records and the cursor that reads them.

The cursor is a plain position index over the non-blank lines of a document.
Lines are parsed when they are first peeked at, so a malformed line is
reported exactly when decoding reaches it, with the cursor still on it.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .exceptions import MalformedLineError, UnexpectedEndOfInputError
from .path import VALUE_SEPARATOR, Path, join_path, split_path


@dataclass(frozen=True)
class Line:
    """A parsed `path=value` record.

    Attributes:
        path: The segments left of the first `=`.
        value: The verbatim text right of the first `=`.
        line_number: The 1-based line number in the source text.
    """
    path: Path
    value: str
    line_number: int = 0

    @property
    def path_text(self) -> str:
        return join_path(self.path)

    def prefix(self, depth: int) -> Path:
        return self.path[:depth]


def parse_line(text: str, line_number: int = 0) -> Line:
    """Parses one line of a document.

    Surrounding whitespace is trimmed from the line and from each path
    segment. The value is everything after the first `=`.

    Raises:
        MalformedLineError: If there is no `=`, or the path is empty or has
            an empty segment.
    """
    stripped = text.strip()
    lhs, separator, value = stripped.partition(VALUE_SEPARATOR)
    if not separator:
        raise MalformedLineError(line_number, stripped)
    path = split_path(lhs)
    if not all(path):
        raise MalformedLineError(line_number, stripped, "empty path segment")
    return Line(path, value, line_number)


class LineCursor:
    """A repositionable, read-only view over a document's lines."""
    def __init__(self, text: str):
        self._raw: List[Tuple[int, str]] = []
        # Only "\n" ends a line; a trailing "\r" goes with the rest of the
        # surrounding whitespace.
        for number, raw in enumerate(text.split("\n"), start=1):
            stripped = raw.strip()
            if stripped:
                self._raw.append((number, stripped))
        self._parsed: Dict[int, Line] = {}
        self.position = 0

    def __len__(self) -> int:
        return len(self._raw)

    @property
    def exhausted(self) -> bool:
        return self.position >= len(self._raw)

    def peek(self) -> Optional[Line]:
        """Returns the line at the current position, or None at the end."""
        if self.exhausted:
            return None
        line = self._parsed.get(self.position)
        if line is None:
            number, text = self._raw[self.position]
            line = parse_line(text, number)
            self._parsed[self.position] = line
        return line

    def advance(self) -> None:
        if self.exhausted:
            raise UnexpectedEndOfInputError("Cannot advance past the end of the document")
        self.position += 1

    def seek(self, position: int) -> None:
        if not 0 <= position <= len(self._raw):
            raise IndexError(f"Cursor position {position} is outside the document")
        self.position = position

    @property
    def line_number(self) -> Optional[int]:
        """The source line number under the cursor, or None at the end."""
        if self.exhausted:
            return None
        return self._raw[self.position][0]

    @staticmethod
    def segment_at(line: Line, depth: int) -> Optional[str]:
        """Returns the `depth`-th segment of `line`'s path, or None if it is shorter."""
        if depth < len(line.path):
            return line.path[depth]
        return None
