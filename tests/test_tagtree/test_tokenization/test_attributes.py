"""Tests for tag classification and attribute parsing."""

import pytest

from tagtree.shared import TokenizationConfig, XMLSyntaxError
from tagtree.tokenization import AttributeParser, ParsedTag, TagKind


@pytest.fixture
def parser():
    return AttributeParser()


class TestTagClassification:
    """Test kind detection from the marker characters."""

    @pytest.mark.parametrize("raw,kind,name", [
        ("a", TagKind.OPENING, "a"),
        ("/a", TagKind.CLOSING, "a"),
        ("a/", TagKind.SELF_CLOSING, "a"),
        ("?xml?", TagKind.PROCESSING_INSTRUCTION, "xml"),
        ("!DOCTYPE", TagKind.DECLARATION, "DOCTYPE"),
    ])
    def test_kinds(self, parser, raw, kind, name):
        """Test each tag kind."""
        parsed = parser.parse(raw)
        assert parsed.kind is kind
        assert parsed.name == name
        assert parsed.attributes == ()

    def test_processing_instruction_with_attributes(self, parser):
        """Test an XML declaration."""
        parsed = parser.parse('?xml version="1.0" encoding="UTF-8"?')
        assert parsed == ParsedTag(
            TagKind.PROCESSING_INSTRUCTION,
            "xml",
            (("version", "1.0"), ("encoding", "UTF-8")),
        )

    @pytest.mark.parametrize("raw", ['?xml version="1.0"', "?"])
    def test_unterminated_processing_instruction(self, parser, raw):
        """Test that '<?' needs a matching '?>'."""
        with pytest.raises(XMLSyntaxError, match=r"must end with '\?>'"):
            parser.parse(raw)

    def test_empty_tag(self, parser):
        """Test '<>'."""
        with pytest.raises(XMLSyntaxError, match="empty tag"):
            parser.parse("", line=4)

    @pytest.mark.parametrize("raw", ["/", " a", "/ a"])
    def test_missing_name(self, parser, raw):
        """Test tags whose name is empty."""
        with pytest.raises(XMLSyntaxError, match="missing tag name"):
            parser.parse(raw)

    def test_error_carries_line(self, parser):
        """Test that the line number is attached."""
        with pytest.raises(XMLSyntaxError) as exc_info:
            parser.parse("", line=7)
        assert exc_info.value.line == 7


class TestAttributeParsing:
    """Test the attribute word scanner."""

    def test_spaces_around_equals(self, parser):
        """Test the single-quoted, spaced form."""
        parsed = parser.parse("a attr = 'hello world'/")
        assert parsed.kind is TagKind.SELF_CLOSING
        assert parsed.name == "a"
        assert parsed.attributes == (("attr", "hello world"),)

    @pytest.mark.parametrize("text", [
        'x="1"',
        'x ="1"',
        'x= "1"',
        'x = "1"',
    ])
    def test_equals_placement(self, parser, text):
        """Test every position of '=' relative to the words."""
        assert parser.parse_attributes(text) == (("x", "1"),)

    def test_order_and_duplicates_are_kept(self, parser):
        """Test that pairs come back in document order without dedup."""
        assert parser.parse_attributes('b="2" a="1" b="3"') == (
            ("b", "2"), ("a", "1"), ("b", "3"),
        )

    def test_extra_spaces_between_attributes(self, parser):
        """Test empty words outside values."""
        assert parser.parse_attributes('x="1"   y="2" ') == (("x", "1"), ("y", "2"))

    def test_spaces_inside_value_are_kept(self, parser):
        """Test that each delimiter inside a value becomes one space."""
        assert parser.parse_attributes('x="a  b c"') == (("x", "a  b c"),)

    def test_other_quote_inside_value(self, parser):
        """Test quotes of the other kind inside a value."""
        assert parser.parse_attributes('x="say \'hi\'"') == (("x", "say 'hi'"),)
        assert parser.parse_attributes("x='say \"hi\"'") == (("x", 'say "hi"'),)

    def test_empty_value(self, parser):
        """Test an empty quoted value."""
        assert parser.parse_attributes('x=""') == (("x", ""),)

    def test_case_is_preserved(self, parser):
        """Test that names are not case folded."""
        assert parser.parse_attributes('ID="1" id="2"') == (("ID", "1"), ("id", "2"))

    @pytest.mark.parametrize("text", ['x=1', 'x="1"y', 'x="a"b"'])
    def test_invalid_quoting(self, parser, text):
        """Test unquoted values and closing quotes that do not end a word."""
        with pytest.raises(XMLSyntaxError, match="quoting"):
            parser.parse_attributes(text)

    @pytest.mark.parametrize("text", ["x", "x=", "x =", 'x="open'])
    def test_unexpected_end(self, parser, text):
        """Test attribute sections that stop in the middle of a pair."""
        with pytest.raises(XMLSyntaxError, match="unexpected end of the attribute section"):
            parser.parse_attributes(text)

    def test_missing_equals(self, parser):
        """Test a second word that is not '='."""
        with pytest.raises(XMLSyntaxError, match="expected '='"):
            parser.parse_attributes('x y="1"')

    def test_value_without_name(self, parser):
        """Test '=' with nothing before it."""
        with pytest.raises(XMLSyntaxError, match="without a name"):
            parser.parse_attributes('="1"')


class TestDeclarationAttributes:
    """Test the parse_declaration_attributes setting."""

    def test_doctype_rejected_by_default(self, parser):
        """Test that DOCTYPE bodies are not attribute lists."""
        with pytest.raises(XMLSyntaxError):
            parser.parse('!DOCTYPE note SYSTEM "note.dtd"')

    def test_doctype_accepted_when_disabled(self):
        """Test that declarations keep only their name."""
        parser = AttributeParser(TokenizationConfig(parse_declaration_attributes=False))
        parsed = parser.parse('!DOCTYPE note SYSTEM "note.dtd"')
        assert parsed == ParsedTag(TagKind.DECLARATION, "DOCTYPE")

    def test_other_tags_still_parsed_when_disabled(self):
        """Test that the setting only affects declarations."""
        parser = AttributeParser(TokenizationConfig(parse_declaration_attributes=False))
        assert parser.parse('a x="1"').attributes == (("x", "1"),)
