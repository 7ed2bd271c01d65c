"""Public API for the tag tree editor.

Level 1 functions operate on a bare root ``Node``; ``DOMTree`` keeps a
document, its configuration and its edit history together. Adapters exchange
trees with lxml and BeautifulSoup.
"""

from .adapters import (
    AdapterMetadata,
    BeautifulSoupAdapter,
    ConversionResult,
    IntegrationAdapter,
    LxmlAdapter,
    get_adapter,
    list_available_adapters,
    register_adapter,
)
from .document import (
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

__all__ = [
    "DOMTree",
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
    "AdapterMetadata",
    "ConversionResult",
    "IntegrationAdapter",
    "LxmlAdapter",
    "BeautifulSoupAdapter",
    "register_adapter",
    "get_adapter",
    "list_available_adapters",
]
