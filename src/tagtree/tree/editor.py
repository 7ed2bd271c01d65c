"""Structural edits over first-child / next-sibling trees.

All four edits mutate the tree in place. Traversals recurse into child chains
and loop along sibling chains. When a node is replaced, the walk is handed the
owner of the slot it came through (``Link.FIRST_CHILD`` of the parent or
``Link.NEXT_SIBLING`` of the predecessor) and continues from whatever node now
occupies the end of the rewritten span.
"""

import re
import time
from enum import Enum, auto
from typing import Optional, Tuple

from tagtree.shared import (
    DiagnosticSeverity,
    EditorConfig,
    EditResult,
    get_logger,
)
from tagtree.tree.node import Link, Node

MS_PER_SECOND = 1000
COMPONENT = "structural_editor"


class RemovalPolicy(Enum):
    """How a removed element's children are promoted."""

    SIMPLE_UNWRAP = auto()    # Children take the element's place unchanged
    LIST_CONVERSION = auto()  # Immediate list items are relabeled first


def _require_text(value: str, name: str) -> None:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{name} must be a non-empty string")


class StructuralEditor:
    """Applies label substitution, row bolding, tag removal and tag insertion."""

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize structural editor.

        Args:
            config: Editor configuration (labels and punctuation in use)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or EditorConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, COMPONENT)

    def _new_result(self, operation: str) -> EditResult:
        return EditResult(operation=operation, correlation_id=self.correlation_id)

    def _finish(self, result: EditResult, start_time: float) -> EditResult:
        result.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
        self.logger.bind(result.operation).debug("Edit finished", extra=result.summary())
        return result

    # Label substitution

    def replace_label(self, root: Node, old_label: str, new_label: str) -> EditResult:
        """Relabel every node whose label equals ``old_label`` exactly.

        Args:
            root: Tree root
            old_label: Label to look for (case-sensitive)
            new_label: Replacement label

        Returns:
            EditResult with ``nodes_relabeled`` set
        """
        _require_text(old_label, "old_label")
        _require_text(new_label, "new_label")
        start_time = time.time()
        result = self._new_result("replace_label")

        if old_label != new_label:
            for node in root.iter_subtree():
                if node.label == old_label:
                    node.label = new_label
                    result.nodes_relabeled += 1

        result.details = {"old_label": old_label, "new_label": new_label}
        return self._finish(result, start_time)

    # Row-scoped wrap

    def find_first(self, start: Node, label: str) -> Optional[Node]:
        """Find the first node labeled ``label`` in first-child-first order.

        A node's child chain is searched before the node itself, and both
        before the node's following siblings. A table nested inside another
        table is therefore found before the outer one.
        """
        # An inner match is returned; the enclosing node is only considered
        # when its child chain has none.
        node: Optional[Node] = start
        while node is not None:
            if node.first_child is not None:
                found = self.find_first(node.first_child, label)
                if found is not None:
                    return found
            if node.label == label:
                return node
            node = node.next_sibling
        return None

    def bold_row(self, root: Node, row: int) -> EditResult:
        """Wrap the content of every cell of a table row in a bold element.

        Args:
            root: Tree root
            row: Row number, first row is 1

        Returns:
            EditResult; ``found`` is False when there is no table or no such
            row, in which case the tree is untouched
        """
        start_time = time.time()
        result = self._new_result("bold_row")
        result.details = {"row": row}

        table = self.find_first(root, self.config.table_label)
        if table is None:
            return self._not_found(result, "No table exists", start_time)

        target = table.first_child
        position = 1
        while target is not None and position < row:
            target = target.next_sibling
            position += 1
        if row < 1 or target is None:
            return self._not_found(result, "The given row does not exist", start_time)

        for cell in target.children():
            if cell.first_child is None:
                self.logger.debug("Skipping cell without content", extra={"cell": cell.label})
                continue
            cell.first_child = Node(self.config.bold_label, first_child=cell.first_child)
            result.nodes_created += 1

        return self._finish(result, start_time)

    def _not_found(self, result: EditResult, message: str, start_time: float) -> EditResult:
        result.found = False
        result.add_diagnostic(DiagnosticSeverity.WARNING, message, COMPONENT, dict(result.details))
        self.logger.bind(result.operation).warning(message, extra=dict(result.details))
        return self._finish(result, start_time)

    # Tag removal

    def removal_policy(self, tag: str) -> RemovalPolicy:
        """Select the removal policy for a tag."""
        if tag in self.config.simple_unwrap_tags:
            return RemovalPolicy.SIMPLE_UNWRAP
        return RemovalPolicy.LIST_CONVERSION

    def remove_tag(self, root: Node, tag: str) -> EditResult:
        """Remove every node labeled ``tag``, promoting its children in place.

        Args:
            root: Tree root (never removed itself)
            tag: Label of the nodes to remove

        Returns:
            EditResult with ``nodes_removed`` and ``nodes_relabeled`` set
        """
        _require_text(tag, "tag")
        start_time = time.time()
        result = self._new_result("remove_tag")
        policy = self.removal_policy(tag)
        result.details = {"tag": tag, "policy": policy.name}

        if root.label == tag:
            message = "Root element cannot be removed"
            result.add_diagnostic(DiagnosticSeverity.WARNING, message, COMPONENT, {"tag": tag})
            self.logger.bind(result.operation).warning(message, extra={"tag": tag})

        if root.first_child is not None:
            self._remove_in_chain(root, Link.FIRST_CHILD, tag, policy, result)
        return self._finish(result, start_time)

    def _remove_in_chain(
        self,
        owner: Node,
        link: Link,
        tag: str,
        policy: RemovalPolicy,
        result: EditResult
    ) -> None:
        node = owner.linked(link)
        while node is not None:
            if node.first_child is not None:
                self._remove_in_chain(node, Link.FIRST_CHILD, tag, policy, result)

            if node.label == tag:
                tail = self._unwrap(owner, link, node, policy, result)
                if tail is not None:
                    owner, link = tail, Link.NEXT_SIBLING
            else:
                owner, link = node, Link.NEXT_SIBLING
            node = owner.linked(link)

    def _unwrap(
        self,
        owner: Node,
        link: Link,
        node: Node,
        policy: RemovalPolicy,
        result: EditResult
    ) -> Optional[Node]:
        """Splice ``node``'s children into the slot ``node`` occupies.

        Returns:
            The last promoted child, or None when ``node`` had no children
        """
        following = node.next_sibling
        promoted = node.first_child
        node.first_child = None
        node.next_sibling = None
        result.nodes_removed += 1

        if promoted is None:
            owner.relink(link, following)
            return None

        tail = promoted
        for child in promoted.iter_chain():
            if (
                policy is RemovalPolicy.LIST_CONVERSION
                and child.label == self.config.list_item_label
            ):
                child.label = self.config.list_item_replacement
                result.nodes_relabeled += 1
            tail = child

        tail.next_sibling = following
        owner.relink(link, promoted)
        return tail

    # Word-scoped tag insertion

    def match_word(self, label: str, word: str) -> Optional[Tuple[int, int]]:
        """Locate the span of ``label`` to wrap for ``word``.

        Only the first case-insensitive occurrence is considered. It counts
        when followed by the end of the label, a space, or one boundary
        punctuation mark; that mark is included in the span.

        Returns:
            ``(start, end)`` offsets into ``label``, or None
        """
        match = re.search(re.escape(word), label, re.IGNORECASE)
        if match is None:
            return None

        start, end = match.span()
        if end == len(label) or label[end] == " ":
            return start, end
        if label[end] in self.config.word_boundary_punctuation:
            return start, end + 1
        return None

    def add_tag(self, root: Node, word: str, tag: str) -> EditResult:
        """Wrap occurrences of ``word`` in text leaves with a new ``tag`` node.

        At most one occurrence per original text node is wrapped; the text
        split off after a match is not searched again.

        Args:
            root: Tree root
            word: Word to look for (case-insensitive)
            tag: Label of the wrapping element

        Returns:
            EditResult with node counters set
        """
        _require_text(word, "word")
        _require_text(tag, "tag")
        start_time = time.time()
        result = self._new_result("add_tag")
        result.details = {"word": word, "tag": tag, "wrapped": 0}

        if root.first_child is not None:
            self._tag_in_chain(root, Link.FIRST_CHILD, word, tag, result)
        return self._finish(result, start_time)

    def _tag_in_chain(
        self,
        owner: Node,
        link: Link,
        word: str,
        tag: str,
        result: EditResult
    ) -> None:
        node = owner.linked(link)
        while node is not None:
            if node.first_child is not None:
                self._tag_in_chain(node, Link.FIRST_CHILD, word, tag, result)
                owner = node
            else:
                span = self.match_word(node.label, word)
                owner = node if span is None else self._wrap_span(
                    owner, link, node, span, tag, result
                )
            link = Link.NEXT_SIBLING
            node = owner.linked(link)

    def _wrap_span(
        self,
        owner: Node,
        link: Link,
        node: Node,
        span: Tuple[int, int],
        tag: str,
        result: EditResult
    ) -> Node:
        """Replace a text leaf by its wrapped form.

        Returns:
            The last node of the replacement, whose next sibling is the node
            that followed the original leaf
        """
        start, end = span
        label = node.label
        following = node.next_sibling
        node.next_sibling = None
        result.details["wrapped"] += 1

        if start == 0 and end == len(label):
            wrapper = Node(tag, first_child=node, next_sibling=following)
            owner.relink(link, wrapper)
            result.nodes_created += 1
            return wrapper

        pieces = []
        if start > 0:
            pieces.append(Node(label[:start]))
        pieces.append(Node(tag, first_child=Node(label[start:end])))
        if end < len(label):
            pieces.append(Node(label[end:]))

        for previous, current in zip(pieces, pieces[1:]):
            previous.next_sibling = current
        pieces[-1].next_sibling = following
        owner.relink(link, pieces[0])

        result.nodes_created += len(pieces) + 1
        result.nodes_removed += 1
        return pieces[-1]
