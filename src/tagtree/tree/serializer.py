"""Serialization of trees back to the line-oriented form."""

from typing import List, Optional

from tagtree.shared import RenderConfig
from tagtree.tree.node import Node


class DOMSerializer:
    """Renders a tree as one token per line.

    A node with children becomes ``<label>``, its rendered child chain and
    ``</label>``; a childless node becomes its label on a line of its own.
    This inverts ``DOMTreeBuilder.build`` line for line.
    """

    def __init__(self, config: Optional[RenderConfig] = None) -> None:
        self.config = config or RenderConfig()

    def render_lines(self, root: Node) -> List[str]:
        """Render ``root`` and its subtree to a list of lines without terminators."""
        lines: List[str] = []
        self._render_chain(root, lines, include_siblings=False)
        return lines

    def _render_chain(self, start: Node, lines: List[str], include_siblings: bool) -> None:
        node: Optional[Node] = start
        while node is not None:
            if node.first_child is None:
                lines.append(node.label)
            else:
                lines.append(f"<{node.label}>")
                self._render_chain(node.first_child, lines, include_siblings=True)
                lines.append(f"</{node.label}>")
            node = node.next_sibling if include_siblings else None

    def render_text(self, root: Node) -> str:
        """Render ``root`` to a single string using the configured line terminator."""
        separator = self.config.line_separator
        text = separator.join(self.render_lines(root))
        if self.config.trailing_newline:
            text += separator
        return text
