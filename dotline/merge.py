"""
Merging of documents.

A document is rebuilt into a tree (one leaf per line, interior nodes matched
by label), two trees are merged label by label, and the result is flattened
again.
"""
from typing import Dict

from .cursor import LineCursor
from .encoder import flatten
from .exceptions import MergeConflictError, ShapeMismatchError
from .path import LENGTH_SEGMENT, join_path
from .tree import ROOT_LABEL, TreeNode, index_children


def read_tree(text: str) -> TreeNode:
    """Rebuilds the encoding tree of a document.

    Args:
        text: The document text.

    Returns:
        The root of a tree whose flattening reproduces the document's lines.

    Raises:
        MalformedLineError: If a line is not a `path=value` record.
        ShapeMismatchError: If a path appears twice, or is used both for a
            value and for nested fields.
    """
    root = TreeNode(ROOT_LABEL)
    cursor = LineCursor(text)
    while True:
        line = cursor.peek()
        if line is None:
            return root
        node = root
        for segment in line.path:
            if node.holds_scalar:
                raise ShapeMismatchError(
                    f"'{join_path(node.path())}' holds a value and cannot have nested fields",
                    line.line_number,
                )
            child = node.find_child(segment)
            if child is None:
                child = node.append(TreeNode(segment))
            node = child
        if node.children:
            raise ShapeMismatchError(f"Duplicate or conflicting entry '{line.path_text}'", line.line_number)
        node.append(TreeNode(payload=line.value))
        cursor.advance()


def merge_trees(primary: TreeNode, secondary: TreeNode) -> TreeNode:
    """Recursively merges two trees into a new one, giving precedence to the first.

    The merging logic is as follows:
    - Nodes are matched by label at each level. Where both trees have a node
      with the same label, their children are merged recursively.
    - If both matched nodes hold a value, the value from `primary` is used.
    - Nodes unique to either tree are included; `primary`'s keep their
      order and `secondary`'s are appended after them.
    - Merged sequences are renumbered: the elements are put in index order,
      followed by a `length` entry holding the merged element count.

    Neither input is modified.

    Raises:
        MergeConflictError: If a label holds a value in one tree and nested
            fields in the other.
    """
    merged = primary.copy()
    _merge_into(merged, secondary)
    return merged


def _merge_into(target: TreeNode, other: TreeNode) -> None:
    if target.holds_scalar or other.holds_scalar:
        if target.holds_scalar and other.holds_scalar:
            return
        raise MergeConflictError(join_path(target.path()))
    existing: Dict[str, TreeNode] = index_children(target)
    for child in other.children:
        match = existing.get(child.label)
        if match is None:
            existing[child.label] = target.append(child.copy())
        else:
            _merge_into(match, child)
    _renumber_sequence(target)


def _renumber_sequence(node: TreeNode) -> None:
    """Puts `length` back after the elements of a merged sequence and updates its value.

    A node counts as a sequence when its labels are `0` to `n-1` plus a
    `length` holding a value. Any other node is left alone.
    """
    length = node.find_child(LENGTH_SEGMENT)
    if length is None or not length.holds_scalar:
        return
    elements = [child for child in node.children if child is not length]
    if not all(child.label.isascii() and child.label.isdigit() for child in elements):
        return
    elements.sort(key=lambda child: int(child.label))
    if [child.label for child in elements] != [str(i) for i in range(len(elements))]:
        return
    node.children = elements + [length]
    length.children[0].payload = str(len(elements))


def merge_documents(primary: str, secondary: str) -> str:
    """Merges two documents, giving precedence to `primary`.

    This is useful for combining a set of overrides with a base document:
    every line of `primary` is kept, and lines of `secondary` whose paths
    `primary` does not define are added.

    Args:
        primary: The document whose values win on conflict.
        secondary: The document providing values `primary` lacks.

    Returns:
        The merged document text.
    """
    merged = merge_trees(read_tree(primary), read_tree(secondary))
    return "".join(line + "\n" for line in flatten(merged))
