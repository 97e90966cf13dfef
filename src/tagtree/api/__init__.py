"""Public parsing API for tagtree."""

from .parser import (
    InputType,
    XMLParser,
    parse,
    parse_file,
    parse_string,
    save_file,
)

__all__ = [
    "InputType",
    "XMLParser",
    "parse",
    "parse_file",
    "parse_string",
    "save_file",
]
