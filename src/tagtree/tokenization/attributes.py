"""Tag classification and attribute parsing.

The attribute section of a tag is split on single spaces and the resulting
words are scanned by a small state machine. Quoted values may span several
words; each word boundary inside a value is restored as one space.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Tuple

from tagtree.shared.config import TokenizationConfig
from tagtree.shared.errors import XMLSyntaxError

Attribute = Tuple[str, str]

QUOTE_CHARACTERS = ("'", '"')


class TagKind(Enum):
    """Kinds of tag, decided by the marker characters inside ``<`` and ``>``."""

    OPENING = auto()                 # <name ...>
    CLOSING = auto()                 # </name>
    SELF_CLOSING = auto()            # <name .../>
    PROCESSING_INSTRUCTION = auto()  # <?name ...?>
    DECLARATION = auto()             # <!name ...>


class AttributeState(Enum):
    """States of the attribute word scanner."""

    SEEKING_NAME = auto()
    SEEKING_EQUALS = auto()
    SEEKING_QUOTE = auto()
    IN_VALUE = auto()


@dataclass(frozen=True)
class ParsedTag:
    """Kind, name and attributes read from the inside of one tag."""

    kind: TagKind
    name: str
    attributes: Tuple[Attribute, ...] = ()


class _AttributeScanner:
    """Feeds attribute words through :class:`AttributeState` transitions."""

    def __init__(self, line: Optional[int]) -> None:
        self.line = line
        self.state = AttributeState.SEEKING_NAME
        self.name = ""
        self.value = ""
        self.quote: Optional[str] = None
        self.attributes: List[Attribute] = []

    def feed(self, word: str) -> None:
        if self.state is AttributeState.SEEKING_NAME:
            if "=" in word:
                name, _, rest = word.partition("=")
                if not name:
                    raise XMLSyntaxError("attribute value without a name", self.line)
                self.name = name
                self.state = AttributeState.SEEKING_QUOTE
                if rest:
                    self._open_value(rest)
            elif word:
                self.name = word
                self.state = AttributeState.SEEKING_EQUALS

        elif self.state is AttributeState.SEEKING_EQUALS:
            if not word:
                return
            if not word.startswith("="):
                raise XMLSyntaxError(
                    f"invalidly formatted attribute '{self.name}': expected '='",
                    self.line,
                )
            self.state = AttributeState.SEEKING_QUOTE
            if len(word) > 1:
                self._open_value(word[1:])

        elif self.state is AttributeState.SEEKING_QUOTE:
            if word:
                self._open_value(word)

        else:
            self._append(" " + word)

    def finish(self) -> Tuple[Attribute, ...]:
        if self.state is not AttributeState.SEEKING_NAME:
            raise XMLSyntaxError("unexpected end of the attribute section", self.line)
        return tuple(self.attributes)

    def _open_value(self, text: str) -> None:
        if text[0] not in QUOTE_CHARACTERS:
            raise XMLSyntaxError(
                f"invalid quoting of attribute '{self.name}'", self.line
            )
        self.quote = text[0]
        self.value = ""
        self.state = AttributeState.IN_VALUE
        self._append(text[1:])

    def _append(self, piece: str) -> None:
        end = piece.find(self.quote)
        if end == -1:
            self.value += piece
            return
        # The closing quote has to end its word
        if end != len(piece) - 1:
            raise XMLSyntaxError(
                f"invalid quoting of attribute '{self.name}'", self.line
            )
        self.attributes.append((self.name, self.value + piece[:-1]))
        self.name = ""
        self.value = ""
        self.quote = None
        self.state = AttributeState.SEEKING_NAME


class AttributeParser:
    """Splits the raw text of a tag into kind, name and attributes.

    Examples:
        >>> parsed = AttributeParser().parse("a attr = 'hello world'/")
        >>> parsed.kind, parsed.name, parsed.attributes
        (<TagKind.SELF_CLOSING: 3>, 'a', (('attr', 'hello world'),))
    """

    def __init__(self, config: Optional[TokenizationConfig] = None) -> None:
        self.config = config or TokenizationConfig()

    def classify(self, raw: str, line: Optional[int] = None) -> Tuple[TagKind, str]:
        """Return the tag kind and the text left after removing its markers."""
        if not raw:
            raise XMLSyntaxError("empty tag", line)

        first, last = raw[0], raw[-1]
        if first == "/":
            return TagKind.CLOSING, raw[1:]
        if first == "!":
            return TagKind.DECLARATION, raw[1:]
        if first == "?":
            if len(raw) < 2 or last != "?":
                raise XMLSyntaxError(
                    "processing instruction must end with '?>'", line
                )
            return TagKind.PROCESSING_INSTRUCTION, raw[1:-1]
        if last == "/":
            return TagKind.SELF_CLOSING, raw[:-1]
        return TagKind.OPENING, raw

    def parse(self, raw: str, line: Optional[int] = None) -> ParsedTag:
        """Parse the text strictly between ``<`` and ``>``.

        Raises:
            XMLSyntaxError: on an empty tag, a missing name or bad attributes
        """
        kind, body = self.classify(raw, line)
        name, separator, remainder = body.partition(" ")
        if not name:
            raise XMLSyntaxError(f"missing tag name in <{raw}>", line)

        if not separator or (
            kind is TagKind.DECLARATION
            and not self.config.parse_declaration_attributes
        ):
            return ParsedTag(kind, name)
        return ParsedTag(kind, name, self.parse_attributes(remainder, line))

    def parse_attributes(
        self, text: str, line: Optional[int] = None
    ) -> Tuple[Attribute, ...]:
        """Parse ``name="value"`` pairs separated by spaces."""
        scanner = _AttributeScanner(line)
        for word in text.split(" "):
            scanner.feed(word)
        return scanner.finish()
