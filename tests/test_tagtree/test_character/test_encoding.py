"""Tests for encoding detection."""

import pytest

from tagtree.character.encoding import (
    BOMDetector,
    DetectionMethod,
    EncodingDetector,
    XMLDeclarationParser,
)
from tagtree.shared.config import CharacterConfig


class TestBOMDetector:
    """Test byte order mark detection."""

    @pytest.mark.parametrize("data,encoding,length", [
        (b"\xef\xbb\xbf<a/>", "utf-8", 3),
        (b"\xff\xfe<\x00", "utf-16-le", 2),
        (b"\xfe\xff\x00<", "utf-16-be", 2),
        (b"\xff\xfe\x00\x00<\x00\x00\x00", "utf-32-le", 4),
    ])
    def test_detects_bom(self, data, encoding, length):
        """Test each supported BOM."""
        result = BOMDetector().detect(data)
        assert result.encoding == encoding
        assert result.bom_length == length
        assert result.method is DetectionMethod.BOM

    def test_no_bom(self):
        """Test plain data."""
        assert BOMDetector().detect(b"<a/>") is None


class TestXMLDeclarationParser:
    """Test encoding declarations."""

    def test_declared_encoding(self):
        """Test a declaration naming a known codec."""
        result = XMLDeclarationParser().parse_declaration(
            b'<?xml version="1.0" encoding="ISO-8859-1"?><a/>'
        )
        assert result.encoding == "latin-1"
        assert result.method is DetectionMethod.XML_DECLARATION

    def test_unknown_encoding(self):
        """Test a declaration naming an unknown codec."""
        result = XMLDeclarationParser().parse_declaration(
            b"<?xml version='1.0' encoding='no-such-codec'?><a/>"
        )
        assert result.method is DetectionMethod.FALLBACK
        assert "no-such-codec" in result.issues[0]

    def test_no_declaration(self):
        """Test data without a declaration."""
        assert XMLDeclarationParser().parse_declaration(b"<a/>") is None


class TestEncodingDetector:
    """Test the detection cascade."""

    def test_utf8_validation(self):
        """Test that valid UTF-8 is recognised."""
        result = EncodingDetector().detect("<a>é</a>".encode("utf-8"))
        assert result.encoding == "utf-8"
        assert result.method is DetectionMethod.UTF8_VALIDATION

    def test_fallback_on_invalid_utf8(self):
        """Test the fallback encoding."""
        detector = EncodingDetector(CharacterConfig(fallback_encoding="latin-1"))
        result = detector.detect(b"<a>\xe9</a>")
        assert result.encoding == "latin-1"
        assert result.method is DetectionMethod.FALLBACK
        assert detector.decode(b"<a>\xe9</a>") == "<a>é</a>"

    def test_decode_skips_bom(self):
        """Test that the BOM is not part of the text."""
        assert EncodingDetector().decode(b"\xef\xbb\xbf<a/>") == "<a/>"

    def test_decode_utf16(self):
        """Test decoding UTF-16 with a BOM."""
        data = b"\xff\xfe" + "<a>x</a>".encode("utf-16-le")
        assert EncodingDetector().decode(data) == "<a>x</a>"

    def test_declaration_can_be_ignored(self):
        """Test that honour_xml_declaration=False skips the declaration."""
        data = b'<?xml version="1.0" encoding="latin-1"?><a/>'
        config = CharacterConfig(honour_xml_declaration=False)
        assert EncodingDetector(config).detect(data).method is DetectionMethod.UTF8_VALIDATION

    def test_strict_errors(self):
        """Test that strict decoding raises on bad bytes."""
        data = b'<?xml version="1.0" encoding="ascii"?><a>\xff</a>'
        with pytest.raises(UnicodeDecodeError):
            EncodingDetector(CharacterConfig(decode_errors="strict")).decode(data)
