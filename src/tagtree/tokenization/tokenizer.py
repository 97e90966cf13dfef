"""Line-oriented tag tokenizer.

The tokenizer pulls lines from a :class:`~tagtree.character.CharacterSource`
and produces one :class:`TagToken` per tag: its kind, name and attributes,
plus the text that follows it up to the next ``<``. Comments are skipped
entirely. A tag has to close on the line it starts on; only comments may
span lines.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from tagtree.character.reader import CharacterSource
from tagtree.shared.config import TokenizationConfig
from tagtree.shared.errors import XMLSyntaxError

from .attributes import Attribute, AttributeParser, TagKind

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "--"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TagToken:
    """One tag and the text that follows it.

    Attributes:
        kind: Tag kind decided from the marker characters
        name: Tag name
        attributes: Attribute pairs in document order, duplicates kept
        trailing_text: Text up to the next tag, lines trimmed and joined by spaces
        line: 1-based line the tag appears on
        raw: Text between ``<`` and ``>`` as written
    """

    kind: TagKind
    name: str
    attributes: Tuple[Attribute, ...] = ()
    trailing_text: str = ""
    line: int = 1
    raw: str = ""


class TagTokenizer:
    """Pull-based tokenizer turning source lines into :class:`TagToken` objects.

    Call :meth:`advance` until it returns None, or iterate the tokenizer.

    Examples:
        >>> from tagtree.character import LineReader
        >>> tokenizer = TagTokenizer(LineReader('<a x="1">hi</a>'))
        >>> [(token.name, token.trailing_text) for token in tokenizer]
        [('a', 'hi'), ('a', '')]
    """

    def __init__(
        self,
        source: CharacterSource,
        config: Optional[TokenizationConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.source = source
        self.config = config or TokenizationConfig()
        self.correlation_id = correlation_id
        self.attribute_parser = AttributeParser(self.config)

        self._line = ""
        self._line_number = 0
        self._token: Optional[TagToken] = None
        self._at_end = False
        self._source_exhausted = False
        self.tokens_generated = 0

    @property
    def token(self) -> Optional[TagToken]:
        """The token produced by the last :meth:`advance`, None at the end."""
        return self._token

    @property
    def at_end(self) -> bool:
        return self._at_end

    @property
    def line_number(self) -> int:
        return self._line_number

    def advance(self) -> Optional[TagToken]:
        """Move to the next tag token.

        Returns:
            The new token, or None once the input is exhausted

        Raises:
            XMLSyntaxError: on an unclosed tag, a bad comment, bad attributes,
                or text left unterminated at the end of the input
        """
        if self._at_end:
            return None
        self._token = None

        if self._source_exhausted or not self._seek_tag():
            self._at_end = True
            logger.debug(
                "End of input reached",
                extra={
                    "component": "tag_tokenizer",
                    "correlation_id": self.correlation_id,
                    "tokens_generated": self.tokens_generated,
                },
            )
            return None

        tag_line = self._line_number
        end = self._line.find(">")
        if end == -1:
            raise XMLSyntaxError("tag is not closed on the line it starts", tag_line)

        raw = self._line[1:end]
        self._line = self._line[end + 1:]
        parsed = self.attribute_parser.parse(raw, tag_line)
        trailing_text = self._collect_trailing_text(parsed.name)

        self._token = TagToken(
            kind=parsed.kind,
            name=parsed.name,
            attributes=parsed.attributes,
            trailing_text=trailing_text,
            line=tag_line,
            raw=raw,
        )
        self.tokens_generated += 1
        return self._token

    def __iter__(self) -> Iterator[TagToken]:
        token = self.advance()
        while token is not None:
            yield token
            token = self.advance()

    def _read_line(self) -> Optional[str]:
        line = self.source.read_line()
        if line is None:
            self._source_exhausted = True
            return None
        self._line_number += 1
        if (
            self.config.max_line_length is not None
            and len(line) > self.config.max_line_length
        ):
            raise XMLSyntaxError(
                f"line exceeds {self.config.max_line_length} characters",
                self._line_number,
            )
        return line

    def _seek_tag(self) -> bool:
        """Position the current line at the next tag that is not a comment.

        Text in front of the tag is dropped. Returns False at the end of input.
        """
        while True:
            while "<" not in self._line:
                line = self._read_line()
                if line is None:
                    self._line = ""
                    return False
                self._line = line

            self._line = self._line[self._line.index("<"):]
            if not self._line.startswith(COMMENT_OPEN):
                return True
            self._skip_comment()

    def _skip_comment(self) -> None:
        """Drop a comment starting at the beginning of the current line."""
        start_line = self._line_number
        self._line = self._line[len(COMMENT_OPEN):]
        while COMMENT_CLOSE not in self._line:
            line = self._read_line()
            if line is None:
                raise XMLSyntaxError(
                    "unexpected end of input inside a comment", start_line
                )
            self._line = line

        close = self._line.index(COMMENT_CLOSE) + len(COMMENT_CLOSE)
        if not self._line.startswith(">", close):
            raise XMLSyntaxError(
                "'--' inside a comment must be followed by '>'", self._line_number
            )
        self._line = self._line[close + 1:]
        logger.debug(
            "Skipped comment",
            extra={
                "component": "tag_tokenizer",
                "correlation_id": self.correlation_id,
                "start_line": start_line,
                "end_line": self._line_number,
            },
        )

    def _collect_trailing_text(self, tag_name: str) -> str:
        """Gather the text after a tag up to the next ``<``, skipping comments."""
        pieces: List[str] = []
        while True:
            start = self._line.find("<")
            if start == -1:
                pieces.append(self._line.strip())
                line = self._read_line()
                if line is None:
                    self._line = ""
                    text = " ".join(piece for piece in pieces if piece)
                    if text:
                        raise XMLSyntaxError(
                            f"unexpected end of input in text after <{tag_name}>",
                            self._line_number,
                        )
                    return ""
                self._line = line
                continue

            pieces.append(self._line[:start].strip())
            self._line = self._line[start:]
            if not self._line.startswith(COMMENT_OPEN):
                return " ".join(piece for piece in pieces if piece)
            self._skip_comment()
