"""dotline: a codec between nested values and flat `path.to.field=value` lines."""

__version__ = "0.1.0"

from .cursor import Line, LineCursor, parse_line
from .decoder import Decoder, deserialize
from .encoder import build_tree, encode_value, flatten, serialize, serialize_to
from .exceptions import (
    DotlineError,
    InvalidScalarTextError,
    InvalidSegmentError,
    MalformedLineError,
    MergeConflictError,
    ShapeMismatchError,
    UnexpectedEndOfInputError,
    UnsupportedConstructError,
)
from .grouping import Scope, Scopes
from .merge import merge_documents, merge_trees, read_tree
from .schema import (
    Bool,
    Bytes,
    Char,
    EnumOf,
    Float,
    Int,
    MapOf,
    Nullable,
    Schema,
    Seq,
    Str,
    Struct,
    Tagged,
    TupleOf,
    schema_for,
)
from .tree import TreeBuilder, TreeNode
from .values import Keyed, Scalar, Sequence, Value, Variant, to_value

__all__ = [
    "__version__",
    "serialize",
    "serialize_to",
    "deserialize",
    "merge_documents",
    "merge_trees",
    "read_tree",
    "build_tree",
    "encode_value",
    "flatten",
    "to_value",
    "Decoder",
    "Line",
    "LineCursor",
    "parse_line",
    "Scope",
    "Scopes",
    "TreeBuilder",
    "TreeNode",
    "Value",
    "Scalar",
    "Sequence",
    "Keyed",
    "Variant",
    "Schema",
    "Str",
    "Int",
    "Float",
    "Bool",
    "Char",
    "Bytes",
    "Nullable",
    "EnumOf",
    "Seq",
    "TupleOf",
    "MapOf",
    "Struct",
    "Tagged",
    "schema_for",
    "DotlineError",
    "MalformedLineError",
    "UnexpectedEndOfInputError",
    "InvalidScalarTextError",
    "UnsupportedConstructError",
    "InvalidSegmentError",
    "ShapeMismatchError",
    "MergeConflictError",
]
