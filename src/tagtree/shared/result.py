"""Result objects and diagnostic types for tag tree operations.

Parsing raises on malformed input, but every structural edit reports back
through an ``EditResult`` carrying counters and diagnostics, so not-found
conditions reach the caller without an exception.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional

DETAIL_LEVELS = ("minimal", "standard", "detailed")


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Non-fatal conditions such as a missing table row
    ERROR = auto()      # Failed conversions or rejected input
    CRITICAL = auto()


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class ParseStatistics:
    """Counters collected while building a tree from input lines."""

    lines_read: int = 0
    blank_lines_skipped: int = 0
    elements_opened: int = 0
    text_nodes: int = 0
    processing_time_ms: float = 0.0

    @property
    def nodes_created(self) -> int:
        """Total nodes created by the parse."""
        return self.elements_opened + self.text_nodes


@dataclass
class TreeStatistics:
    """Shape of a tree as seen by the serializer.

    A node with a first child counts as an element, a childless node counts as
    a leaf, which is how it will be rendered.
    """

    node_count: int = 0
    element_count: int = 0
    leaf_count: int = 0
    max_depth: int = 0
    label_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert statistics to dictionary representation."""
        return {
            "node_count": self.node_count,
            "element_count": self.element_count,
            "leaf_count": self.leaf_count,
            "max_depth": self.max_depth,
            "label_counts": dict(self.label_counts),
        }


@dataclass
class EditResult:
    """Outcome of one structural edit applied to a tree.

    ``found`` is False only for the not-found conditions of ``bold_row``; an
    edit that simply matched nothing is found but unchanged.
    """

    operation: str
    found: bool = True
    nodes_created: int = 0
    nodes_removed: int = 0
    nodes_relabeled: int = 0
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    processing_time_ms: float = 0.0
    correlation_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate result."""
        if not self.operation:
            raise ValueError("Edit operation name cannot be empty")

    @property
    def changed(self) -> bool:
        """Check if the edit mutated the tree."""
        return bool(self.nodes_created or self.nodes_removed or self.nodes_relabeled)

    @property
    def has_warnings(self) -> bool:
        """Check if result contains warning or worse diagnostics."""
        return any(
            diag.severity not in (DiagnosticSeverity.DEBUG, DiagnosticSeverity.INFO)
            for diag in self.diagnostics
        )

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self, severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def summary(self, detail_level: str = "standard") -> Dict[str, Any]:
        """Get summary of the edit for reporting.

        Args:
            detail_level: ``minimal`` replaces the diagnostic list by a count,
                ``standard`` lists severity, message and component, and
                ``detailed`` adds diagnostic details, correlation IDs and the
                operation's own details

        Raises:
            ValueError: If the detail level is unknown
        """
        if detail_level not in DETAIL_LEVELS:
            raise ValueError(f"detail_level must be one of {list(DETAIL_LEVELS)}")

        summary: Dict[str, Any] = {
            "operation": self.operation,
            "found": self.found,
            "changed": self.changed,
            "nodes_created": self.nodes_created,
            "nodes_removed": self.nodes_removed,
            "nodes_relabeled": self.nodes_relabeled,
            "processing_time_ms": self.processing_time_ms,
        }
        if detail_level == "minimal":
            summary["diagnostic_count"] = len(self.diagnostics)
            return summary

        diagnostics = []
        for diag in self.diagnostics:
            entry: Dict[str, Any] = {
                "severity": diag.severity.name,
                "message": diag.message,
                "component": diag.component,
            }
            if detail_level == "detailed":
                entry["details"] = diag.details
                entry["correlation_id"] = diag.correlation_id
            diagnostics.append(entry)
        summary["diagnostics"] = diagnostics

        if detail_level == "detailed":
            summary["details"] = dict(self.details)
            summary["correlation_id"] = self.correlation_id
        return summary
