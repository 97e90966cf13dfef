"""Sequential character, word and line reading over decoded text."""

import string
from typing import Iterator, Optional, Protocol, Union

from tagtree.shared.config import CharacterConfig

from .buffer import TextBuffer

WORD_CHARACTERS = frozenset(string.ascii_letters + string.digits)


class CharacterSource(Protocol):
    """Anything the tokenizer can pull lines from."""

    def read_line(self) -> Optional[str]:
        """Return the next line without its terminator, or None at the end."""
        ...


class LineReader:
    """Reads a text one character, word or line at a time.

    The reader keeps a single position pointer that every read advances; it
    can be moved with :meth:`seek`, :meth:`step_back` and :meth:`reset`.

    Examples:
        >>> reader = LineReader("first\\r\\nsecond")
        >>> reader.read_line()
        'first'
        >>> reader.read_line()
        'second'
        >>> reader.read_line() is None
        True
    """

    def __init__(
        self,
        source: Union[str, TextBuffer],
        config: Optional[CharacterConfig] = None
    ) -> None:
        if isinstance(source, TextBuffer):
            source = source.decode(config)
        self._text = source
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    @property
    def text(self) -> str:
        return self._text

    def reset(self) -> None:
        """Move back to the first character."""
        self._position = 0

    def seek(self, position: int) -> None:
        if position < 0:
            raise ValueError("position must be >= 0")
        self._position = position

    def step_back(self) -> None:
        """Move back one character; no effect at the start."""
        if self._position > 0:
            self._position -= 1

    def read_char(self) -> Optional[str]:
        """Return the next character, or None at the end of the text."""
        if self._position >= len(self._text):
            return None
        char = self._text[self._position]
        self._position += 1
        return char

    def read_word(self) -> Optional[str]:
        """Return the next run of ASCII letters and digits.

        Anything else separates words and is skipped. Returns None when no
        further word exists.
        """
        char = self.read_char()
        while char is not None and char not in WORD_CHARACTERS:
            char = self.read_char()
        if char is None:
            return None

        word = []
        while char is not None and char in WORD_CHARACTERS:
            word.append(char)
            char = self.read_char()
        if char is not None:
            self.step_back()
        return "".join(word)

    def read_line(self) -> Optional[str]:
        """Return the next line without ``\\n``, ``\\r\\n`` or ``\\r``.

        Returns None once the text is exhausted.
        """
        text = self._text
        start = self._position
        if start >= len(text):
            return None

        end = start
        while end < len(text) and text[end] not in "\r\n":
            end += 1
        line = text[start:end]

        if text.startswith("\r\n", end):
            end += 2
        elif end < len(text):
            end += 1
        self._position = end
        return line

    def __iter__(self) -> Iterator[str]:
        line = self.read_line()
        while line is not None:
            yield line
            line = self.read_line()
