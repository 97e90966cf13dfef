"""Exception hierarchy raised while reading tagtree documents."""

from typing import Optional


class TagTreeError(Exception):
    """Base class for fatal document errors.

    Attributes:
        line: 1-based line where the problem was detected, when known
    """

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        self.message = message
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class XMLSyntaxError(TagTreeError):
    """Malformed markup found by the tokenizer or attribute parser."""


class StructureError(TagTreeError):
    """Tags that do not nest into exactly one rooted tree."""
