"""tagtree.

A small, strict XML parser: tags are tokenized line by line, nested into a
single rooted tree of elements and text, and can be queried and written back
out. Malformed markup raises instead of being repaired.

API levels:
- Level 1: Simple functions - parse(), parse_string(), parse_file(), save_file()
- Level 2: Configured parser - XMLParser class with ParserConfig
"""

__version__ = "0.1.0"
__author__ = "tagtree developers"

# Level 1: Simple functions
# Level 2: Configured parser
from .api import XMLParser, parse, parse_file, parse_string, save_file

# Configuration and errors
from .shared.config import ParserConfig
from .shared.errors import StructureError, TagTreeError, XMLSyntaxError

# Document model
from .tree.nodes import Element, Node, Text

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "parse",
    "parse_string",
    "parse_file",
    "save_file",

    # Level 2: Configured parser
    "XMLParser",
    "ParserConfig",

    # Document model
    "Element",
    "Node",
    "Text",

    # Errors
    "TagTreeError",
    "XMLSyntaxError",
    "StructureError",
]
