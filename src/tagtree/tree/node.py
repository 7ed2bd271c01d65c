"""Node type for first-child / next-sibling document trees.

A ``Node`` owns two links: its first child and its next sibling. An n-ary
tree is encoded by chaining a node's children through their ``next_sibling``
links, starting at ``first_child``. There are no parent pointers; edits that
need to rewrite "the slot this node hangs from" receive the owning node and a
``Link`` naming which of its two slots is meant.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterator, List, Optional


class Link(Enum):
    """The two owning slots of a node."""

    FIRST_CHILD = auto()
    NEXT_SIBLING = auto()


@dataclass(eq=False)
class Node:
    """Single tree node holding an element tag name or a run of text.

    There is no kind flag. A node with a first child is rendered as an
    element; a childless node is rendered as its bare label.
    """

    label: str
    first_child: Optional["Node"] = field(default=None, repr=False)
    next_sibling: Optional["Node"] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Validate node label."""
        if not isinstance(self.label, str):
            raise TypeError("Node label must be a string")
        if not self.label:
            raise ValueError("Node label cannot be empty")

    @property
    def is_leaf(self) -> bool:
        """Check if node has no child chain."""
        return self.first_child is None

    def linked(self, link: Link) -> Optional["Node"]:
        """Get the node occupying one of this node's slots."""
        if link is Link.FIRST_CHILD:
            return self.first_child
        return self.next_sibling

    def relink(self, link: Link, node: Optional["Node"]) -> None:
        """Point one of this node's slots at another node (or nothing)."""
        if link is Link.FIRST_CHILD:
            self.first_child = node
        else:
            self.next_sibling = node

    def iter_chain(self) -> Iterator["Node"]:
        """Iterate over this node and every node after it in its sibling chain."""
        node: Optional[Node] = self
        while node is not None:
            yield node
            node = node.next_sibling

    def children(self) -> Iterator["Node"]:
        """Iterate over the direct children of this node."""
        if self.first_child is not None:
            yield from self.first_child.iter_chain()

    def last_child(self) -> Optional["Node"]:
        """Get the last node of the child chain by walking it."""
        last = None
        for last in self.children():
            pass
        return last

    def append_child(self, child: "Node") -> None:
        """Append a node at the end of the child chain.

        No tail pointer is kept, so this walks the existing chain.
        """
        if not isinstance(child, Node):
            raise TypeError("Child must be a Node instance")

        last = self.last_child()
        if last is None:
            self.first_child = child
        else:
            last.next_sibling = child

    def iter_subtree(self) -> Iterator["Node"]:
        """Iterate over this node and its descendants in pre-order.

        Siblings of this node are not included.
        """
        yield self
        stack: List[Node] = []
        if self.first_child is not None:
            stack.append(self.first_child)
        while stack:
            node = stack.pop()
            yield node
            if node.next_sibling is not None:
                stack.append(node.next_sibling)
            if node.first_child is not None:
                stack.append(node.first_child)

    def find_all(self, label: str) -> List["Node"]:
        """Find all nodes in this subtree with a matching label."""
        return [node for node in self.iter_subtree() if node.label == label]

    def depth_of_subtree(self) -> int:
        """Get the number of levels below this node (a leaf has depth 0)."""
        deepest = 0
        stack = [(self, 0)]
        while stack:
            node, depth = stack.pop()
            deepest = max(deepest, depth)
            for child in node.children():
                stack.append((child, depth + 1))
        return deepest

    def to_dict(self) -> Dict[str, Any]:
        """Convert this node and its subtree to a nested dictionary."""
        result: Dict[str, Any] = {"label": self.label}
        if self.first_child is not None:
            result["children"] = [child.to_dict() for child in self.children()]
        return result
