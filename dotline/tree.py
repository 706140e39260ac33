"""
The ordered, labelled tree built while encoding.

Interior nodes carry a segment label and an ordered list of children. Leaves
carry no label, only the scalar text that ends up after the `=`; the path of
a leaf is the chain of its ancestors' labels, root excluded.
"""
from typing import Dict, Iterator, List, Optional

from .path import Path, validate_segment

ROOT_LABEL = "<root>"


class TreeNode:
    """A single node of an encoding tree."""
    def __init__(self, label: Optional[str] = None, payload: Optional[str] = None):
        self.label = label
        self.payload = payload
        self.parent: Optional["TreeNode"] = None
        self.children: List["TreeNode"] = []

    def __repr__(self) -> str:
        if self.is_leaf:
            return f"TreeNode(payload={self.payload!r})"
        return f"TreeNode({self.label!r}, children={len(self.children)})"

    @property
    def is_leaf(self) -> bool:
        return self.payload is not None

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def holds_scalar(self) -> bool:
        """True for a labelled node whose only content is a leaf."""
        return any(child.is_leaf for child in self.children)

    def append(self, child: "TreeNode") -> "TreeNode":
        child.parent = self
        self.children.append(child)
        return child

    def find_child(self, label: str) -> Optional["TreeNode"]:
        for child in self.children:
            if not child.is_leaf and child.label == label:
                return child
        return None

    def scalar(self) -> Optional[str]:
        for child in self.children:
            if child.is_leaf:
                return child.payload
        return None

    def path(self) -> Path:
        """Collects the labels from just below the root down to this node."""
        labels = []
        node: Optional[TreeNode] = self
        while node is not None and not node.is_root:
            if not node.is_leaf:
                labels.append(node.label)
            node = node.parent
        return tuple(reversed(labels))

    def iter_leaves(self) -> Iterator["TreeNode"]:
        """Yields the leaves below this node, depth-first and left to right."""
        for child in self.children:
            if child.is_leaf:
                yield child
            else:
                yield from child.iter_leaves()

    def copy(self) -> "TreeNode":
        clone = TreeNode(self.label, self.payload)
        for child in self.children:
            clone.append(child.copy())
        return clone


class TreeBuilder:
    """
    Builds a tree incrementally from a sequence of visit calls.

    The builder keeps a "current insertion node" (initially the root) and a
    stack of saved insertion points. `enter` opens a labelled child and makes
    it current, `leave` restores the previous one, and `write_scalar` appends
    a leaf under the current node. Every `enter` must be paired with a
    `leave`.

    A node that is left without having received any children is removed
    again, so the returned tree never contains an empty interior node.
    """
    def __init__(self):
        self.root = TreeNode(ROOT_LABEL)
        self._current = self.root
        self._stack: List[TreeNode] = []

    @property
    def current(self) -> TreeNode:
        return self._current

    @property
    def depth(self) -> int:
        return len(self._stack)

    def enter(self, label: str) -> TreeNode:
        if self._current.holds_scalar:
            raise RuntimeError(f"enter({label!r}) called on a node that already holds a value")
        child = self._current.append(TreeNode(validate_segment(label)))
        self._stack.append(self._current)
        self._current = child
        return child

    def leave(self) -> bool:
        """Restores the previous insertion node.

        Returns:
            False if the node being left received no children and was
            removed again, True if it stays in the tree.
        """
        if not self._stack:
            raise RuntimeError("leave() called without a matching enter()")
        left = self._current
        self._current = self._stack.pop()
        if not left.children:
            # Everything written since enter() went below `left`, so it is
            # still the last child here.
            self._current.children.pop()
            left.parent = None
            return False
        return True

    def write_scalar(self, text: str) -> TreeNode:
        if self._current.children:
            raise RuntimeError("write_scalar() called on a node that already has content")
        return self._current.append(TreeNode(payload=text))

    def build(self) -> TreeNode:
        if self._stack:
            raise RuntimeError(f"build() called with {len(self._stack)} unmatched enter() call(s)")
        return self.root


def index_children(node: TreeNode) -> Dict[str, TreeNode]:
    return {child.label: child for child in node.children if not child.is_leaf}
