"""Tag Tree.

Parser, structural editor and serializer for line-oriented markup, where each
line holds an opening tag, a closing tag or a run of text.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), replace_label(), bold_row(),
  remove_tag(), add_tag(), render()
- Level 2: Document object - DOMTree class with configuration and history
"""

__version__ = "0.1.0"
__author__ = "Tag Tree Team"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2: Document object
from .api import (
    DOMTree,
    add_tag,
    bold_row,
    parse,
    parse_file,
    parse_string,
    remove_tag,
    render,
    render_string,
    replace_label,
    tree_statistics,
)

# Configuration and result objects for advanced usage
from .shared import EditResult, TreeConfig
from .tree import Node, TreeParseError

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "parse",
    "parse_string",
    "parse_file",
    "replace_label",
    "bold_row",
    "remove_tag",
    "add_tag",
    "render",
    "render_string",
    "tree_statistics",

    # Level 2: Document object
    "DOMTree",

    # Data structures, results and errors
    "Node",
    "EditResult",
    "TreeParseError",

    # Configuration
    "TreeConfig",
]
