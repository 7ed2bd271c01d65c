"""Integration adapters for exchanging trees with lxml and BeautifulSoup.

Adapters convert in both directions. Export follows the serializer's view of
the tree: a node with children is an element, a childless node is text.
Consecutive text leaves are joined with newlines so that importing splits them
back into one leaf per line. Attributes, comments and processing instructions
have no representation in the line format and are dropped on import.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from html import escape
from typing import Any, Dict, List, Optional, Type

from tagtree.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParserConfig,
    get_logger,
)
from tagtree.tree import DOMTreeBuilder, Node

MS_PER_SECOND = 1000


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    version: str
    target_library: str
    description: str


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


def text_lines(text: Optional[str]) -> List[str]:
    """Split a text run into non-blank lines, trimming surrounding whitespace."""
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters.

    ``to_target`` converts a tree root into the library's object;
    ``from_target`` converts the library's object into a tree root. Neither
    raises on bad input; failures come back as unsuccessful results.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def _export(self, root: Node) -> Any:
        """Build the library object for ``root``."""

    @abstractmethod
    def _import_lines(self, target_data: Any) -> List[str]:
        """Flatten the library object into line-oriented markup."""

    def to_target(self, root: Node) -> ConversionResult:
        """Convert a tree to the target library's representation."""
        start_time = time.time()
        try:
            converted = self._export(root)
        except Exception as e:
            return self._create_error_result(
                f"Failed to convert to {self.metadata.target_library}: {e}",
                root,
                (time.time() - start_time) * MS_PER_SECOND,
            )

        return ConversionResult(
            success=True,
            converted_data=converted,
            original_data=root,
            conversion_time_ms=(time.time() - start_time) * MS_PER_SECOND,
            metadata={"adapter": self.metadata.name},
        )

    def from_target(self, target_data: Any, root_label: str = "html") -> ConversionResult:
        """Convert the target library's representation to a tree."""
        start_time = time.time()
        try:
            lines = self._import_lines(target_data)
            root = DOMTreeBuilder(
                ParserConfig(root_label=root_label), self.correlation_id
            ).build(lines)
        except Exception as e:
            return self._create_error_result(
                f"Failed to convert from {self.metadata.target_library}: {e}",
                target_data,
                (time.time() - start_time) * MS_PER_SECOND,
            )

        return ConversionResult(
            success=True,
            converted_data=root,
            original_data=target_data,
            conversion_time_ms=(time.time() - start_time) * MS_PER_SECOND,
            metadata={"adapter": self.metadata.name, "line_count": len(lines)},
        )

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        conversion_time_ms: float = 0.0
    ) -> ConversionResult:
        """Create a ConversionResult for error conditions."""
        self._logger.warning(error_message)
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=conversion_time_ms,
            errors=[error_message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=error_message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id,
                )
            ],
        )


class LxmlAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with lxml.etree."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            version="1.0.0",
            target_library="lxml",
            description="Conversion between tag trees and lxml.etree elements",
        )

    def is_available(self) -> bool:
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def _export(self, root: Node) -> Any:
        import lxml.etree as ET

        if root.first_child is None:
            raise ValueError("Root has no children and would export as text")
        return self._convert_node(root, ET)

    def _convert_node(self, node: Node, ET: Any) -> Any:
        element = ET.Element(node.label)
        last_element = None
        pending: List[str] = []

        def flush() -> None:
            if not pending:
                return
            text = "\n".join(pending)
            if last_element is None:
                element.text = text
            else:
                last_element.tail = text
            pending.clear()

        for child in node.children():
            if child.first_child is None:
                pending.append(child.label)
                continue
            flush()
            last_element = self._convert_node(child, ET)
            element.append(last_element)
        flush()
        return element

    def _import_lines(self, target_data: Any) -> List[str]:
        if hasattr(target_data, "getroot"):
            target_data = target_data.getroot()
        if not hasattr(target_data, "tag") or not isinstance(target_data.tag, str):
            raise TypeError("Target data is not an lxml element")

        lines: List[str] = []
        self._flatten(target_data, lines)
        return lines

    def _flatten(self, element: Any, lines: List[str]) -> None:
        lines.append(f"<{element.tag}>")
        lines.extend(text_lines(element.text))
        for child in element:
            if isinstance(child.tag, str):
                self._flatten(child, lines)
            lines.extend(text_lines(child.tail))
        lines.append(f"</{element.tag}>")


class BeautifulSoupAdapter(IntegrationAdapter):
    """Adapter for bidirectional conversion with BeautifulSoup."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="beautifulsoup",
            version="1.0.0",
            target_library="beautifulsoup4",
            description="Conversion between tag trees and BeautifulSoup documents",
        )

    def is_available(self) -> bool:
        try:
            from bs4 import BeautifulSoup  # noqa: F401
            return True
        except ImportError:
            return False

    def _export(self, root: Node) -> Any:
        from bs4 import BeautifulSoup

        return BeautifulSoup(self._markup(root), "html.parser")

    def _markup(self, node: Node) -> str:
        if node.first_child is None:
            return escape(node.label, quote=False)
        inner = "\n".join(self._markup(child) for child in node.children())
        return f"<{node.label}>\n{inner}\n</{node.label}>"

    def _import_lines(self, target_data: Any) -> List[str]:
        from bs4 import NavigableString, Tag
        from bs4.element import Comment, Declaration, Doctype, ProcessingInstruction

        skipped = (Comment, Declaration, Doctype, ProcessingInstruction)
        if not isinstance(target_data, Tag):
            raise TypeError("Target data is not a BeautifulSoup document or tag")

        lines: List[str] = []

        def flatten(tag: Any, emit_self: bool) -> None:
            if emit_self:
                lines.append(f"<{tag.name}>")
            for child in tag.children:
                if isinstance(child, Tag):
                    flatten(child, True)
                elif isinstance(child, NavigableString) and not isinstance(child, skipped):
                    lines.extend(text_lines(str(child)))
            if emit_self:
                lines.append(f"</{tag.name}>")

        # The BeautifulSoup object itself is a tag named "[document]"
        flatten(target_data, emit_self=target_data.name != "[document]")
        return lines


class AdapterRegistry:
    """Registry for managing integration adapters."""

    def __init__(self) -> None:
        self._adapters: Dict[str, Type[IntegrationAdapter]] = {}

    def register(self, adapter_class: Type[IntegrationAdapter]) -> None:
        """Register an adapter class under its metadata name."""
        self._adapters[adapter_class().metadata.name] = adapter_class

    def get_adapter(
        self,
        adapter_name: str,
        correlation_id: Optional[str] = None
    ) -> Optional[IntegrationAdapter]:
        """Get an adapter instance if registered and its library is importable."""
        adapter_class = self._adapters.get(adapter_name)
        if adapter_class is None:
            return None
        instance = adapter_class(correlation_id)
        return instance if instance.is_available() else None

    def list_available_adapters(self) -> List[AdapterMetadata]:
        """List metadata of adapters whose library is importable."""
        available = []
        for adapter_class in self._adapters.values():
            instance = adapter_class()
            if instance.is_available():
                available.append(instance.metadata)
        return available


# Global adapter registry instance
_adapter_registry = AdapterRegistry()


def register_adapter(adapter_class: Type[IntegrationAdapter]) -> None:
    """Register an integration adapter globally."""
    _adapter_registry.register(adapter_class)


def get_adapter(
    adapter_name: str,
    correlation_id: Optional[str] = None
) -> Optional[IntegrationAdapter]:
    """Get a registered adapter instance, or None if unknown or unavailable."""
    return _adapter_registry.get_adapter(adapter_name, correlation_id)


def list_available_adapters() -> List[AdapterMetadata]:
    """List all available integration adapters."""
    return _adapter_registry.list_available_adapters()


register_adapter(LxmlAdapter)
register_adapter(BeautifulSoupAdapter)
