"""Stack-based tree builder.

The builder keeps the elements that are still open on a stack, outermost at
the bottom. Closing a tag pops the stack and attaches the popped element to
the new top; the pop that empties the stack finalizes the document and its
element becomes the root. Nothing may follow the root.
"""

from typing import Iterable, List, Optional

from tagtree.shared import StructureError, TreeConfig, get_logger
from tagtree.tokenization import Attribute, TagKind, TagToken

from .nodes import Element, Text


class TreeBuilder:
    """Builds one rooted :class:`Element` tree from tag events.

    Examples:
        >>> builder = TreeBuilder()
        >>> builder.on_opening_tag("a", [])
        >>> builder.on_text("hi")
        >>> builder.on_closing_tag("a")
        >>> builder.finalize().serialize()
        '<a>\\n\\thi\\n</a>'
    """

    def __init__(
        self,
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or TreeConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")

        self._open: List[Element] = []
        self._root: Optional[Element] = None
        self._finalized = False
        self.elements_created = 0

    @property
    def finalized(self) -> bool:
        """True once the root element has been closed."""
        return self._finalized

    @property
    def depth(self) -> int:
        """Number of elements currently open."""
        return len(self._open)

    @property
    def root(self) -> Element:
        """The finished tree.

        Raises:
            StructureError: if the root element has not been closed yet
        """
        if not self._finalized or self._root is None:
            raise StructureError("the root tag has not been closed yet")
        return self._root

    def _check_open_for_content(self, what: str, line: Optional[int]) -> None:
        if self._finalized:
            raise StructureError(
                f"all content must be inside the root tag, found {what} after it",
                line,
            )

    def on_opening_tag(
        self,
        name: str,
        attributes: Iterable[Attribute] = (),
        line: Optional[int] = None
    ) -> None:
        """Open a new element on top of the stack."""
        self._check_open_for_content(f"<{name}>", line)
        if self.config.max_depth is not None and len(self._open) >= self.config.max_depth:
            raise StructureError(
                f"<{name}> exceeds the maximum depth of {self.config.max_depth}", line
            )
        self._open.append(Element(name, list(attributes)))
        self.elements_created += 1

    def on_closing_tag(self, name: str, line: Optional[int] = None) -> None:
        """Close the element on top of the stack, which must be called ``name``."""
        self._check_open_for_content(f"</{name}>", line)
        if not self._open:
            raise StructureError(f"</{name}> closes a tag that was never opened", line)

        element = self._open.pop()
        if element.name != name:
            raise StructureError(
                f"Mismatch tags: <{element.name}> closed by </{name}>", line
            )

        if self._open:
            self._open[-1].add_child(element)
            return

        self._finalized = True
        self._root = element
        self.logger.debug(
            "Root element closed",
            extra={"root": name, "elements_created": self.elements_created},
        )

    def on_self_closing_tag(
        self,
        name: str,
        attributes: Iterable[Attribute] = (),
        line: Optional[int] = None
    ) -> None:
        """Open and immediately close an element without children."""
        self.on_opening_tag(name, attributes, line)
        self.on_closing_tag(name, line)

    def on_text(self, text: str, line: Optional[int] = None) -> None:
        """Append non-blank text to the element on top of the stack."""
        text = text.strip()
        if not text:
            return
        self._check_open_for_content("text", line)
        if not self._open:
            raise StructureError("text found before the root tag", line)
        self._open[-1].add_child(Text(text))

    def feed(self, token: TagToken) -> None:
        """Apply one token, then the text that follows it."""
        if token.kind is TagKind.OPENING:
            self.on_opening_tag(token.name, token.attributes, token.line)
        elif token.kind is TagKind.CLOSING:
            self.on_closing_tag(token.name, token.line)
        elif token.kind is TagKind.SELF_CLOSING:
            self.on_self_closing_tag(token.name, token.attributes, token.line)
        else:
            self.logger.debug(
                "Ignoring non-element tag",
                extra={"kind": token.kind.name, "tag": token.name, "line": token.line},
            )
        self.on_text(token.trailing_text, token.line)

    def finalize(self) -> Element:
        """Check that the document is complete and return its root.

        Raises:
            StructureError: if tags are still open or no root was ever closed
        """
        if not self._finalized:
            open_tags = ", ".join(f"<{element.name}>" for element in self._open)
            detail = f" (still open: {open_tags})" if open_tags else ""
            raise StructureError(
                f"Must close the root tag to finalize the document{detail}"
            )
        return self.root

    def build(self, tokens: Iterable[TagToken]) -> Element:
        """Feed every token, then finalize."""
        for token in tokens:
            self.feed(token)
        return self.finalize()
