"""Tokenization layer for tagtree.

Key Components:
    TagTokenizer: Pulls lines from a character source and yields tag tokens
    TagToken: One tag with its attributes and the text that follows it
    TagKind: Opening, closing, self-closing, processing instruction, declaration
    AttributeParser: Classifies raw tag text and parses its attributes
"""

from .attributes import (
    Attribute,
    AttributeParser,
    AttributeState,
    ParsedTag,
    TagKind,
)
from .tokenizer import TagToken, TagTokenizer

__all__ = [
    "Attribute",
    "AttributeParser",
    "AttributeState",
    "ParsedTag",
    "TagKind",
    "TagToken",
    "TagTokenizer",
]
