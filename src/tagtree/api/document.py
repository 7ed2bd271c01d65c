"""Public API with progressive disclosure for the tag tree editor.

Level 1 is a set of module functions working on a bare ``Node`` root:
``parse`` / ``replace_label`` / ``bold_row`` / ``remove_tag`` / ``add_tag`` /
``render``. Level 2 is ``DOMTree``, which keeps the root, configuration and
an edit history together for repeated use.
"""

import io
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from tagtree.shared import (
    EditResult,
    ParseStatistics,
    TreeConfig,
    TreeStatistics,
    get_logger,
)
from tagtree.tree import DOMSerializer, DOMTreeBuilder, Node, StructuralEditor

# Type definitions for input data
InputType = Union[str, Path, Iterable[str]]

MS_PER_SECOND = 1000


def _resolve_config(config: Optional[TreeConfig]) -> TreeConfig:
    return config or TreeConfig()


def _split_lines(text: str) -> io.StringIO:
    # Same line boundaries as reading a file in text mode: \n, \r\n and \r only
    return io.StringIO(text, newline=None)


def parse(
    source: InputType,
    config: Optional[TreeConfig] = None,
    correlation_id: Optional[str] = None
) -> Node:
    """Parse line-oriented markup into a tree.

    Args:
        source: Markup as a string, a ``Path`` to read, or an iterable of lines
        config: Optional configuration (parser section is used)
        correlation_id: Optional correlation ID for request tracking

    Returns:
        Root node of the parsed tree

    Raises:
        TreeParseError: If the input is not a well-formed document

    Examples:
        >>> root = parse(["<html>", "<body>", "hello", "</body>", "</html>"])
        >>> root.label
        'html'
        >>> root.first_child.first_child.label
        'hello'
    """
    if isinstance(source, Path):
        return parse_file(source, config=config, correlation_id=correlation_id)
    if isinstance(source, str):
        return parse_string(source, config=config, correlation_id=correlation_id)

    builder = DOMTreeBuilder(_resolve_config(config).parser, correlation_id)
    return builder.build(source)


def parse_string(
    text: str,
    config: Optional[TreeConfig] = None,
    correlation_id: Optional[str] = None
) -> Node:
    """Parse markup held in a single string.

    Lines end at ``\\n``, ``\\r\\n`` or ``\\r``, as when reading a file; other
    Unicode line separators stay inside the text.

    Examples:
        >>> parse_string("<html>\\n<p>\\nhi\\n</p>\\n</html>\\n").first_child.label
        'p'
    """
    builder = DOMTreeBuilder(_resolve_config(config).parser, correlation_id)
    return builder.build(_split_lines(text))


def parse_file(
    file_path: Union[str, Path],
    encoding: str = "utf-8",
    config: Optional[TreeConfig] = None,
    correlation_id: Optional[str] = None
) -> Node:
    """Parse markup from a file.

    Args:
        file_path: Path to the markup file
        encoding: Text encoding of the file
        config: Optional configuration (parser section is used)
        correlation_id: Optional correlation ID for request tracking

    Raises:
        OSError: If the file cannot be read
        TreeParseError: If the content is not a well-formed document
    """
    path_obj = Path(file_path)
    logger = get_logger(__name__, correlation_id, "parse_file")
    logger.info("Starting file parse operation", extra={"file_path": str(path_obj)})

    builder = DOMTreeBuilder(_resolve_config(config).parser, correlation_id)
    with path_obj.open(encoding=encoding) as handle:
        return builder.build(handle)


def replace_label(
    tree: Node,
    old: str,
    new: str,
    config: Optional[TreeConfig] = None,
    correlation_id: Optional[str] = None
) -> EditResult:
    """Relabel every node labeled ``old`` to ``new``."""
    editor = StructuralEditor(_resolve_config(config).editor, correlation_id)
    return editor.replace_label(tree, old, new)


def bold_row(
    tree: Node,
    row: int,
    config: Optional[TreeConfig] = None,
    correlation_id: Optional[str] = None
) -> EditResult:
    """Bold every cell of the given row (1-indexed) of the first table found.

    Examples:
        >>> root = parse(["<html>", "x", "</html>"])
        >>> bold_row(root, 1).found
        False
    """
    editor = StructuralEditor(_resolve_config(config).editor, correlation_id)
    return editor.bold_row(tree, row)


def remove_tag(
    tree: Node,
    tag: str,
    config: Optional[TreeConfig] = None,
    correlation_id: Optional[str] = None
) -> EditResult:
    """Remove every ``tag`` element, promoting its children into its place."""
    editor = StructuralEditor(_resolve_config(config).editor, correlation_id)
    return editor.remove_tag(tree, tag)


def add_tag(
    tree: Node,
    word: str,
    tag: str,
    config: Optional[TreeConfig] = None,
    correlation_id: Optional[str] = None
) -> EditResult:
    """Wrap occurrences of ``word`` in text with a new ``tag`` element."""
    editor = StructuralEditor(_resolve_config(config).editor, correlation_id)
    return editor.add_tag(tree, word, tag)


def render(tree: Node, config: Optional[TreeConfig] = None) -> List[str]:
    """Render a tree to its lines (without line terminators)."""
    return DOMSerializer(_resolve_config(config).render).render_lines(tree)


def render_string(tree: Node, config: Optional[TreeConfig] = None) -> str:
    """Render a tree to a single string, one token per line."""
    return DOMSerializer(_resolve_config(config).render).render_text(tree)


def tree_statistics(tree: Node) -> TreeStatistics:
    """Collect node counts and depth for a tree."""
    stats = TreeStatistics(max_depth=tree.depth_of_subtree())
    for node in tree.iter_subtree():
        stats.node_count += 1
        if node.first_child is None:
            stats.leaf_count += 1
        else:
            stats.element_count += 1
        stats.label_counts[node.label] = stats.label_counts.get(node.label, 0) + 1
    return stats


class DOMTree:
    """Editable document tree with configuration and edit history.

    Attributes:
        config: Active configuration
        correlation_id: Correlation ID for request tracking
        root: Root node, None until ``build`` succeeds
        history: EditResults of the edits applied since the last build

    Examples:
        >>> tree = DOMTree()
        >>> _ = tree.build(["<html>", "<em>", "a", "</em>", "<em>", "b", "</em>", "</html>"])
        >>> tree.remove_tag("em").nodes_removed
        2
        >>> tree.lines()
        ['<html>', 'a', 'b', '</html>']
    """

    def __init__(
        self,
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = _resolve_config(config)
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "dom_tree")

        self.root: Optional[Node] = None
        self.history: List[EditResult] = []
        self.parse_statistics: Optional[ParseStatistics] = None

        self._builder = DOMTreeBuilder(self.config.parser, correlation_id)
        self._editor = StructuralEditor(self.config.editor, correlation_id)
        self._serializer = DOMSerializer(self.config.render)

    def build(self, source: InputType, encoding: str = "utf-8") -> Node:
        """Parse ``source`` and make it the current tree.

        The previous tree and history are kept if parsing fails.
        """
        start_time = time.time()
        if isinstance(source, Path):
            with source.open(encoding=encoding) as handle:
                root = self._builder.build(handle)
        elif isinstance(source, str):
            root = self._builder.build(_split_lines(source))
        else:
            root = self._builder.build(source)

        self.root = root
        self.history = []
        self.parse_statistics = self._builder.statistics
        self.logger.info(
            "Document built",
            extra={"processing_time_ms": (time.time() - start_time) * MS_PER_SECOND},
        )
        return root

    def _require_root(self) -> Node:
        if self.root is None:
            raise RuntimeError("No document has been built yet")
        return self.root

    def _record(self, result: EditResult) -> EditResult:
        self.history.append(result)
        return result

    def replace_tag(self, old_tag: str, new_tag: str) -> EditResult:
        """Replace all occurrences of a label."""
        return self._record(self._editor.replace_label(self._require_root(), old_tag, new_tag))

    def bold_row(self, row: int) -> EditResult:
        """Bold every column of the given row (first row is 1)."""
        return self._record(self._editor.bold_row(self._require_root(), row))

    def remove_tag(self, tag: str) -> EditResult:
        """Remove all occurrences of a tag, promoting children."""
        return self._record(self._editor.remove_tag(self._require_root(), tag))

    def add_tag(self, word: str, tag: str) -> EditResult:
        """Add a tag around occurrences of a word."""
        return self._record(self._editor.add_tag(self._require_root(), word, tag))

    def lines(self) -> List[str]:
        """Get the rendered lines of the current tree."""
        return self._serializer.render_lines(self._require_root())

    def get_html(self) -> str:
        """Get the markup of the current tree, one token per line."""
        return self._serializer.render_text(self._require_root())

    def write(self, file_path: Union[str, Path], encoding: str = "utf-8") -> Path:
        """Write the rendered tree to a file and return its path."""
        path_obj = Path(file_path)
        with path_obj.open("w", encoding=encoding, newline="") as handle:
            handle.write(self.get_html())
        self.logger.info("Document written", extra={"file_path": str(path_obj)})
        return path_obj

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get tree shape and edit history statistics."""
        stats: Dict[str, Any] = {
            "built": self.root is not None,
            "edits_applied": len(self.history),
            "edits_changed_tree": sum(1 for result in self.history if result.changed),
            "correlation_id": self.correlation_id,
            "edits": [
                result.summary(self.config.global_.diagnostic_detail_level)
                for result in self.history
            ],
        }
        if self.root is not None:
            stats["tree"] = tree_statistics(self.root).to_dict()
        return stats
