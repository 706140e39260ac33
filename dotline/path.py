"""Segment and path helpers shared by the encoder and the decoder.

A path is a tuple of segments. Comparisons are always done segment by
segment; the dotted text form is only produced for output and messages.
"""
from typing import Iterable, Sequence, Tuple

from .exceptions import InvalidSegmentError

SEGMENT_SEPARATOR = "."
VALUE_SEPARATOR = "="

# Synthetic labels written by the encoder.
LENGTH_SEGMENT = "length"
TYPE_SEGMENT = "type"

Path = Tuple[str, ...]


def validate_segment(segment: str) -> str:
    """Checks that `segment` can be written as a single path segment.

    Args:
        segment: The candidate label.

    Returns:
        The segment, unchanged.

    Raises:
        InvalidSegmentError: If the label is empty, contains a separator or a
            line break, or has surrounding whitespace (which the reader would
            strip).
    """
    if not isinstance(segment, str):
        raise InvalidSegmentError(repr(segment), "segments must be strings")
    if not segment:
        raise InvalidSegmentError(segment, "segments cannot be empty")
    if SEGMENT_SEPARATOR in segment or VALUE_SEPARATOR in segment:
        raise InvalidSegmentError(segment, "segments cannot contain '.' or '='")
    if "\n" in segment or "\r" in segment:
        raise InvalidSegmentError(segment, "segments cannot contain line breaks")
    if segment != segment.strip():
        raise InvalidSegmentError(segment, "segments cannot start or end with whitespace")
    return segment


def split_path(text: str) -> Path:
    """Splits dotted text into a path. Segments are trimmed but not validated."""
    return tuple(part.strip() for part in text.split(SEGMENT_SEPARATOR))


def join_path(path: Iterable[str]) -> str:
    return SEGMENT_SEPARATOR.join(path)


def is_prefix(prefix: Sequence[str], path: Sequence[str]) -> bool:
    """Returns True if `prefix` is a segment-wise prefix of `path`.

    `("a", "b")` is a prefix of `("a", "b", "c")` but not of `("a", "bc")`.
    """
    if len(prefix) > len(path):
        return False
    return tuple(path[:len(prefix)]) == tuple(prefix)
