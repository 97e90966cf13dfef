"""Growable in-memory byte buffer with file load and save."""

from pathlib import Path
from typing import BinaryIO, Optional, TextIO, Union

from tagtree.shared.config import CharacterConfig
from tagtree.shared.logging import get_logger

from .encoding import EncodingDetector

# Returned by read_at past the end of the buffer
END_OF_BUFFER = -1

logger = get_logger(__name__, component="text_buffer")


class TextBuffer:
    """Bytes held in memory, appended to and read back by position.

    The buffer stores raw bytes; :meth:`decode` turns them into text using
    encoding detection so the same buffer can back line, CSV, config and XML
    readers.
    """

    def __init__(self, data: Union[bytes, bytearray, str] = b"") -> None:
        self._data = bytearray()
        if data:
            self.write(data)

    @classmethod
    def from_stream(cls, stream: Union[BinaryIO, TextIO]) -> "TextBuffer":
        """Read a file object until it is exhausted."""
        return cls(stream.read())

    @classmethod
    def load(
        cls, path: Union[str, Path], max_size: Optional[int] = None
    ) -> "TextBuffer":
        """Load a whole file into a new buffer.

        Raises:
            IsADirectoryError: if ``path`` names a directory
            ValueError: if the file is larger than ``max_size`` bytes
        """
        path = Path(path)
        if path.is_dir():
            raise IsADirectoryError(f"Cannot load a directory into a buffer: {path}")
        size = path.stat().st_size
        if max_size is not None and size > max_size:
            raise ValueError(
                f"File is too large to load: {size} bytes (limit {max_size})"
            )
        logger.debug("Loading file", extra={"path": str(path), "size": size})
        with path.open("rb") as f:
            return cls.from_stream(f)

    def save(self, path: Union[str, Path]) -> None:
        """Write the buffer contents to ``path``, replacing any existing file."""
        path = Path(path)
        path.write_bytes(bytes(self._data))
        logger.debug("Saved buffer", extra={"path": str(path), "size": self.size})

    def write(self, data: Union[int, bytes, bytearray, str]) -> None:
        """Append a single byte value, a byte string, or UTF-8 encoded text."""
        if isinstance(data, int):
            self._data.append(data)
        elif isinstance(data, str):
            self._data.extend(data.encode("utf-8"))
        else:
            self._data.extend(data)

    def read_at(self, index: int) -> int:
        """Return the byte at ``index`` or ``END_OF_BUFFER`` outside the data."""
        if 0 <= index < len(self._data):
            return self._data[index]
        return END_OF_BUFFER

    def clear(self) -> None:
        self._data.clear()

    @property
    def size(self) -> int:
        return len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def getvalue(self) -> bytes:
        return bytes(self._data)

    def decode(self, config: Optional[CharacterConfig] = None) -> str:
        """Decode the buffer using BOM, declaration and UTF-8 detection."""
        return EncodingDetector(config).decode(bytes(self._data))
