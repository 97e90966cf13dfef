"""Encoding detection for byte buffers.

Detection runs in stages and stops at the first confident answer: byte order
mark, the ``encoding`` pseudo-attribute of an ``<?xml ...?>`` declaration,
strict UTF-8 validation, and finally the configured fallback encoding.
"""

import codecs
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, List, Optional

from tagtree.shared.config import CharacterConfig

# Only the start of the buffer is searched for a declaration
DECLARATION_SEARCH_LIMIT = 1024


class DetectionMethod(Enum):
    """Enumeration of encoding detection methods."""
    BOM = "bom"
    XML_DECLARATION = "xml_declaration"
    UTF8_VALIDATION = "utf8_validation"
    FALLBACK = "fallback"


@dataclass
class EncodingResult:
    """Result of encoding detection.

    Attributes:
        encoding: Codec name usable with ``bytes.decode``
        method: Detection stage that produced the answer
        bom_length: Number of leading bytes to skip before decoding
        issues: Problems noticed along the way
    """
    encoding: str
    method: DetectionMethod
    bom_length: int = 0
    issues: List[str] = field(default_factory=list)


class BOMDetector:
    """Byte Order Mark (BOM) detection for the common Unicode encodings."""

    # Longer marks first so UTF-32 LE is not mistaken for UTF-16 LE
    BOM_PATTERNS: ClassVar[Dict[bytes, str]] = {
        b"\xff\xfe\x00\x00": "utf-32-le",
        b"\x00\x00\xfe\xff": "utf-32-be",
        b"\xef\xbb\xbf": "utf-8",
        b"\xff\xfe": "utf-16-le",
        b"\xfe\xff": "utf-16-be",
    }

    def detect(self, data: bytes) -> Optional[EncodingResult]:
        for bom_bytes, encoding in self.BOM_PATTERNS.items():
            if data.startswith(bom_bytes):
                return EncodingResult(
                    encoding=encoding,
                    method=DetectionMethod.BOM,
                    bom_length=len(bom_bytes),
                )
        return None


class XMLDeclarationParser:
    """Reads the encoding named by a leading ``<?xml ... ?>`` declaration."""

    XML_DECLARATION_PATTERN = re.compile(
        rb'<\?xml\s+.*?encoding\s*=\s*["\']([^"\']+)["\'].*?\?>',
        re.IGNORECASE
    )

    ALIASES: ClassVar[Dict[str, str]] = {
        "utf8": "utf-8",
        "iso-8859-1": "latin-1",
        "windows-1252": "cp1252",
    }

    def parse_declaration(self, data: bytes) -> Optional[EncodingResult]:
        """Return the declared encoding, or None when nothing usable is declared."""
        match = self.XML_DECLARATION_PATTERN.search(data[:DECLARATION_SEARCH_LIMIT])
        if not match:
            return None

        declared = match.group(1).decode("ascii", errors="ignore").lower()
        encoding = self.ALIASES.get(declared, declared)
        try:
            codecs.lookup(encoding)
        except LookupError:
            return EncodingResult(
                encoding="utf-8",
                method=DetectionMethod.FALLBACK,
                issues=[f"Unknown declared encoding: {declared}"],
            )
        return EncodingResult(encoding=encoding, method=DetectionMethod.XML_DECLARATION)


class EncodingDetector:
    """Cascading encoding detection driven by :class:`CharacterConfig`."""

    def __init__(self, config: Optional[CharacterConfig] = None) -> None:
        self.config = config or CharacterConfig()
        self.bom_detector = BOMDetector()
        self.xml_parser = XMLDeclarationParser()

    def detect(self, data: bytes) -> EncodingResult:
        if self.config.detect_bom:
            bom_result = self.bom_detector.detect(data)
            if bom_result:
                return bom_result

        issues: List[str] = []
        if self.config.honour_xml_declaration:
            declared = self.xml_parser.parse_declaration(data)
            if declared and declared.method is DetectionMethod.XML_DECLARATION:
                return declared
            if declared:
                issues.extend(declared.issues)

        try:
            data.decode("utf-8", errors="strict")
        except UnicodeDecodeError as e:
            issues.append(f"UTF-8 decode error: {e}")
        else:
            return EncodingResult(
                encoding="utf-8",
                method=DetectionMethod.UTF8_VALIDATION,
                issues=issues,
            )

        return EncodingResult(
            encoding=self.config.fallback_encoding,
            method=DetectionMethod.FALLBACK,
            issues=issues,
        )

    def decode(self, data: bytes) -> str:
        """Detect the encoding of ``data`` and decode it."""
        result = self.detect(data)
        return data[result.bom_length:].decode(
            result.encoding, errors=self.config.decode_errors
        )
