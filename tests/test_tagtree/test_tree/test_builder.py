"""Tests for the stack-based tree builder."""

import pytest

from tagtree.character import LineReader
from tagtree.shared import StructureError, TreeConfig
from tagtree.tokenization import TagKind, TagToken, TagTokenizer
from tagtree.tree import Element, Text, TreeBuilder


def build(text, config=None):
    return TreeBuilder(config).build(TagTokenizer(LineReader(text)))


class TestTreeBuilderEvents:
    """Test the event methods directly."""

    def test_open_text_close(self):
        """Test the smallest complete document."""
        builder = TreeBuilder()
        builder.on_opening_tag("a", [("x", "1")])
        builder.on_text("  hi  ")
        builder.on_closing_tag("a")

        root = builder.finalize()
        assert builder.finalized
        assert root.name == "a"
        assert root.attributes == [("x", "1")]
        assert root.children == [Text("hi")]

    def test_closed_children_attach_to_parent(self):
        """Test that popped elements become children of the new top."""
        builder = TreeBuilder()
        builder.on_opening_tag("a")
        builder.on_opening_tag("b")
        assert builder.depth == 2
        builder.on_closing_tag("b")
        builder.on_self_closing_tag("c", [("k", "v")])
        builder.on_closing_tag("a")

        root = builder.root
        assert [e.name for e in root.elements()] == ["b", "c"]
        assert root.first_tag("c").attribute_value("k") == "v"
        assert builder.elements_created == 3

    def test_blank_text_is_ignored(self):
        """Test whitespace-only text."""
        builder = TreeBuilder()
        builder.on_text("   ")
        builder.on_opening_tag("a")
        builder.on_text("\t")
        builder.on_closing_tag("a")
        builder.on_text("  ")
        assert builder.root.children == []

    def test_mismatched_close(self):
        """Test closing a tag other than the innermost open one."""
        builder = TreeBuilder()
        builder.on_opening_tag("a")
        builder.on_opening_tag("b")
        with pytest.raises(StructureError, match="Mismatch tags"):
            builder.on_closing_tag("c", line=3)

    def test_close_without_open(self):
        """Test a closing tag with nothing open."""
        with pytest.raises(StructureError, match="never opened"):
            TreeBuilder().on_closing_tag("a")

    def test_text_before_root(self):
        """Test text with nothing open."""
        with pytest.raises(StructureError, match="before the root tag"):
            TreeBuilder().on_text("hello")

    @pytest.mark.parametrize("event", [
        lambda b: b.on_opening_tag("b"),
        lambda b: b.on_closing_tag("a"),
        lambda b: b.on_self_closing_tag("b"),
        lambda b: b.on_text("late"),
    ])
    def test_nothing_after_root(self, event):
        """Test that the root must be the last thing in the document."""
        builder = TreeBuilder()
        builder.on_self_closing_tag("a")
        with pytest.raises(StructureError, match="inside the root tag"):
            event(builder)

    def test_finalize_with_open_tags(self):
        """Test finalizing before the root is closed."""
        builder = TreeBuilder()
        builder.on_opening_tag("a")
        builder.on_opening_tag("b")
        with pytest.raises(StructureError, match="Must close the root tag") as exc_info:
            builder.finalize()
        assert "<a>, <b>" in str(exc_info.value)

    def test_finalize_empty(self):
        """Test finalizing when nothing was seen."""
        with pytest.raises(StructureError, match="Must close the root tag"):
            TreeBuilder().finalize()

    def test_root_before_finalization(self):
        """Test that the root is not available early."""
        builder = TreeBuilder()
        builder.on_opening_tag("a")
        with pytest.raises(StructureError, match="not been closed"):
            builder.root

    def test_max_depth(self):
        """Test the optional nesting limit."""
        builder = TreeBuilder(TreeConfig(max_depth=2))
        builder.on_opening_tag("a")
        builder.on_opening_tag("b")
        with pytest.raises(StructureError, match="maximum depth of 2"):
            builder.on_opening_tag("c")


class TestTreeBuilderTokens:
    """Test building from tokenizer output."""

    def test_feed_skips_non_element_tokens(self):
        """Test that declarations and processing instructions create nothing."""
        builder = TreeBuilder()
        builder.feed(TagToken(TagKind.PROCESSING_INSTRUCTION, "xml", (("version", "1.0"),)))
        builder.feed(TagToken(TagKind.OPENING, "a", trailing_text="hi"))
        builder.feed(TagToken(TagKind.CLOSING, "a"))
        root = builder.finalize()
        assert root.children == [Text("hi")]
        assert builder.elements_created == 1

    def test_simple_document(self):
        """Test a document with attributes, text and a self-closing tag."""
        root = build('<a><b x="1">hi</b><c/></a>')

        assert root.name == "a"
        b, c = root.elements()
        assert b.name == "b"
        assert b.attributes == [("x", "1")]
        assert b.children == [Text("hi")]
        assert c.name == "c"
        assert c.children == []

    def test_mixed_content_order(self):
        """Test that text and elements keep document order."""
        root = build("<p>one<b>two</b>three</p>")
        assert root.children[0] == Text("one")
        assert isinstance(root.children[1], Element)
        assert root.children[2] == Text("three")

    def test_declaration_and_comments(self):
        """Test a realistic document prologue."""
        root = build(
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            "<!-- generated -->\n"
            "<note>\n"
            "  <to>Tove</to>\n"
            "  <!-- <from>nobody</from> -->\n"
            "  <body>Don't forget\n  me</body>\n"
            "</note>\n"
        )
        assert [e.name for e in root.elements()] == ["to", "body"]
        assert root.first_tag("body").text == "Don't forget me"

    def test_mismatched_document(self):
        """Test that bad nesting in a document is a StructureError."""
        with pytest.raises(StructureError, match="Mismatch tags") as exc_info:
            build("<a>\n<b>\n</c>\n</a>")
        assert exc_info.value.line == 3

    def test_unclosed_root(self):
        """Test a document that ends with tags open."""
        with pytest.raises(StructureError, match="Must close the root tag"):
            build("<a><b></b>")

    def test_second_root(self):
        """Test two top-level elements."""
        with pytest.raises(StructureError):
            build("<a/><b/>")
