"""Tree engine for the tag tree editor.

Key Components:
    Node: Tree node with first-child and next-sibling links
    DOMTreeBuilder: Builds a tree from line-oriented markup
    StructuralEditor: Relabel, bold-row, remove-tag and add-tag edits
    DOMSerializer: Renders a tree back to line-oriented markup
"""

from .node import Link, Node
from .builder import DOMTreeBuilder, TreeParseError
from .editor import RemovalPolicy, StructuralEditor
from .serializer import DOMSerializer

__all__ = [
    "Link",
    "Node",
    "DOMTreeBuilder",
    "TreeParseError",
    "RemovalPolicy",
    "StructuralEditor",
    "DOMSerializer",
]
