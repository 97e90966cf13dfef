"""Character source layer for tagtree.

Holds documents in memory as bytes, detects their encoding and serves the
decoded text sequentially to the readers built on top of it.
"""

from .buffer import END_OF_BUFFER, TextBuffer
from .encoding import (
    BOMDetector,
    DetectionMethod,
    EncodingDetector,
    EncodingResult,
    XMLDeclarationParser,
)
from .reader import CharacterSource, LineReader

__all__ = [
    "END_OF_BUFFER",
    "TextBuffer",
    "BOMDetector",
    "DetectionMethod",
    "EncodingDetector",
    "EncodingResult",
    "XMLDeclarationParser",
    "CharacterSource",
    "LineReader",
]
