"""
This module defines the exceptions raised by the dotline codec.

Every error is a subclass of `DotlineError`, so callers can catch the whole
family at once, while the individual classes keep the different failure
kinds (bad input text, missing data, unconvertible scalars, shapes the codec
does not support) apart for targeted handling.
"""
from typing import Optional


class DotlineError(Exception):
    """Base class for all exceptions raised by the dotline package."""
    pass


class MalformedLineError(DotlineError):
    """Raised when an input line is not a `path=value` record.

    Attributes:
        line_number (int): The 1-based number of the offending line.
        line (str): The offending line, trimmed.
        reason (str): What is wrong with it.
    """
    def __init__(self, line_number: int, line: str, reason: str = "missing '='"):
        super().__init__(f"Malformed line {line_number}: {reason}: {line!r}")
        self.line_number = line_number
        self.line = line
        self.reason = reason


class UnexpectedEndOfInputError(DotlineError):
    """Raised when a line or scope required by the schema is absent.

    Attributes:
        path (str): The dotted path that was expected, or an empty string
            for the top level.
    """
    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class InvalidScalarTextError(DotlineError):
    """Raised when scalar text cannot be converted to the requested type.

    Attributes:
        text (str): The scalar text that failed to convert.
        expected (str): The name of the requested type.
        line_number (Optional[int]): The line holding the scalar, if known.
    """
    def __init__(self, text: str, expected: str, line_number: Optional[int] = None):
        location = f" on line {line_number}" if line_number is not None else ""
        super().__init__(f"Cannot read {text!r} as {expected}{location}")
        self.text = text
        self.expected = expected
        self.line_number = line_number


class UnsupportedConstructError(DotlineError):
    """Raised for value shapes the format defines no representation for.

    Raw byte buffers, optional values with an absent marker and top-level
    scalars all end up here instead of being silently dropped.
    """
    pass


class InvalidSegmentError(UnsupportedConstructError):
    """Raised when a label cannot be used as a path segment.

    Attributes:
        segment (str): The rejected label.
    """
    def __init__(self, segment: str, reason: str):
        super().__init__(f"Invalid path segment {segment!r}: {reason}")
        self.segment = segment


class ShapeMismatchError(DotlineError):
    """Raised when the document's structure does not fit the requested shape.

    Attributes:
        line_number (Optional[int]): The line where the mismatch was detected.
    """
    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)
        self.line_number = line_number


class MergeConflictError(DotlineError):
    """Raised when two trees disagree on whether a path is a leaf or a node.

    Attributes:
        path (str): The dotted path of the conflicting node.
    """
    def __init__(self, path: str):
        super().__init__(f"Cannot merge '{path}': it is a value on one side and a group of fields on the other")
        self.path = path
