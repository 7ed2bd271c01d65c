"""Tree building from line-oriented markup.

The input format has one token per line: ``<tag>`` opens an element,
``</tag>`` closes the most recently opened one, and any other non-empty line
is a run of text. The builder keeps an explicit stack of open elements and
appends each new node at the end of the current element's child chain.
"""

import re
import time
from typing import Iterable, List, Optional

from tagtree.shared import (
    ParserConfig,
    ParseStatistics,
    get_logger,
)
from tagtree.tree.node import Node

OPEN_TAG_PATTERN = re.compile(r"^<(\w+)>$")
CLOSE_TAG_PATTERN = re.compile(r"^</(\w+)>$")
MS_PER_SECOND = 1000


class TreeParseError(ValueError):
    """Raised when input lines do not form a well-formed document."""

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        line: Optional[str] = None
    ) -> None:
        location = f" (line {line_number}: {line!r})" if line_number is not None else ""
        super().__init__(f"{message}{location}")
        self.line_number = line_number
        self.line = line


class DOMTreeBuilder:
    """Builds a first-child / next-sibling tree from input lines.

    A builder can be reused; every call to ``build`` starts from an empty
    stack and replaces ``statistics``.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Parser configuration (root label, closing-tag matching)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "dom_tree_builder")
        self.statistics = ParseStatistics()

    def build(self, lines: Iterable[str]) -> Node:
        """Build a tree and return its root.

        Args:
            lines: Input lines, with or without trailing line terminators

        Returns:
            The node whose closing line names the root label

        Raises:
            TreeParseError: On stack underflow, mismatched closing tags, text
                outside any element, unclosed elements or a missing root
        """
        start_time = time.time()
        stats = ParseStatistics()
        stack: List[Node] = []
        root: Optional[Node] = None

        self.logger.debug("Starting tree build", extra={"root_label": self.config.root_label})

        line_number = 0
        for line_number, raw_line in enumerate(lines, start=1):
            stats.lines_read += 1
            line = raw_line.rstrip("\r\n")
            if not line:
                stats.blank_lines_skipped += 1
                continue

            match = OPEN_TAG_PATTERN.match(line)
            if match:
                element = Node(match.group(1))
                if stack:
                    stack[-1].append_child(element)
                stack.append(element)
                stats.elements_opened += 1
                continue

            match = CLOSE_TAG_PATTERN.match(line)
            if match:
                if not stack:
                    raise TreeParseError(
                        "Closing tag without an open element", line_number, line
                    )
                closed = stack.pop()
                if self.config.match_closing_tags and closed.label != match.group(1):
                    raise TreeParseError(
                        f"Closing tag does not match open element <{closed.label}>",
                        line_number,
                        line,
                    )
                if closed.label == self.config.root_label:
                    root = closed
                continue

            if not stack:
                raise TreeParseError("Text outside of any element", line_number, line)
            stack[-1].append_child(Node(line))
            stats.text_nodes += 1

        if stack:
            raise TreeParseError(
                f"Unclosed element <{stack[-1].label}> at end of input",
                line_number,
            )
        if root is None:
            raise TreeParseError(f"No <{self.config.root_label}> root element found")

        stats.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
        self.statistics = stats

        self.logger.info(
            "Tree build completed",
            extra={
                "lines_read": stats.lines_read,
                "elements": stats.elements_opened,
                "text_nodes": stats.text_nodes,
                "processing_time_ms": stats.processing_time_ms,
            },
        )
        return root
