"""Parser API for tagtree.

Module-level functions cover the common cases; :class:`XMLParser` keeps a
configuration, per-parse metrics and usage statistics for repeated use.
Unlike a recovering parser, every call either returns a complete tree or
raises :class:`~tagtree.shared.TagTreeError`.
"""

import time
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, TextIO, Union

from tagtree.character import CharacterSource, LineReader, TextBuffer
from tagtree.shared import (
    ParserConfig,
    PerformanceMetrics,
    TagTreeError,
    get_logger,
)
from tagtree.tokenization import TagTokenizer
from tagtree.tree import Element, TreeBuilder

# Type definitions for input data
InputType = Union[
    str, bytes, bytearray, Path, TextBuffer, BinaryIO, TextIO, CharacterSource
]

MS_PER_SECOND = 1000
PREVIEW_LENGTH = 100


class _CountingSource:
    """Wraps a character source and counts the characters it hands out."""

    def __init__(self, source: CharacterSource) -> None:
        self.source = source
        self.characters = 0

    def read_line(self) -> Optional[str]:
        line = self.source.read_line()
        if line is not None:
            self.characters += len(line)
        return line


class XMLParser:
    """Configured parser that can be reused for many documents.

    Attributes:
        config: Complete parser configuration
        correlation_id: Correlation ID attached to every log record
        last_metrics: Metrics of the most recent successful parse

    Examples:
        >>> parser = XMLParser()
        >>> root = parser.parse_string('<a><b x="1">hi</b><c/></a>')
        >>> root.first_tag("b").attribute_value("x")
        '1'
        >>> parser.last_metrics.elements_created
        3
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_parser")
        self.last_metrics: Optional[PerformanceMetrics] = None

        self._parse_count = 0
        self._failed_parses = 0
        self._total_processing_time = 0.0

    def parse(self, input_data: InputType) -> Element:
        """Parse a document from any supported input.

        ``str`` is XML text; use :meth:`parse_file` for a path given as a
        string.

        Raises:
            XMLSyntaxError: on malformed markup
            StructureError: when tags do not form one rooted tree
            ValueError: when the input exceeds ``max_input_size_bytes``
            TypeError: for unsupported input types
        """
        start_time = time.time()
        self.logger.debug(
            "Starting parse",
            extra={"input_type": type(input_data).__name__},
        )

        source = _CountingSource(self._open_source(input_data))
        tokenizer = TagTokenizer(source, self.config.tokenization, self.correlation_id)
        builder = TreeBuilder(self.config.tree, self.correlation_id)

        self._parse_count += 1
        try:
            root = builder.build(tokenizer)
        except TagTreeError as e:
            self._failed_parses += 1
            self.logger.warning(
                "Parse failed",
                extra={"error": str(e), "error_line": e.line},
            )
            raise
        finally:
            processing_time = (time.time() - start_time) * MS_PER_SECOND
            self._total_processing_time += processing_time

        self.last_metrics = PerformanceMetrics(
            processing_time_ms=processing_time,
            characters_processed=source.characters,
            tokens_generated=tokenizer.tokens_generated,
            elements_created=builder.elements_created,
        )
        self.logger.info(
            "Parse completed",
            extra={
                "root": root.name,
                "processing_time_ms": processing_time,
                "tokens_generated": tokenizer.tokens_generated,
                "elements_created": builder.elements_created,
            },
        )
        return root

    def parse_string(self, xml_string: str) -> Element:
        """Parse XML held in a string."""
        self.logger.debug(
            "Parsing string",
            extra={
                "content_length": len(xml_string),
                "preview": (
                    xml_string[:PREVIEW_LENGTH] + "..."
                    if len(xml_string) > PREVIEW_LENGTH else xml_string
                ),
            },
        )
        return self.parse(xml_string)

    def parse_file(self, file_path: Union[str, Path]) -> Element:
        """Parse the XML file at ``file_path``, detecting its encoding."""
        return self.parse(Path(file_path))

    def save_file(self, root: Element, file_path: Union[str, Path]) -> None:
        """Write ``root`` to ``file_path`` using the serialization settings."""
        serialization = self.config.serialization
        save_file(root, file_path, serialization.indent, serialization.encoding)
        self.logger.info("Document saved", extra={"path": str(file_path)})

    def _open_source(self, input_data: InputType) -> CharacterSource:
        limit = self.config.global_.max_input_size_bytes

        if isinstance(input_data, Path):
            buffer = TextBuffer.load(input_data, max_size=limit)
            return LineReader(buffer, self.config.character)
        if isinstance(input_data, str):
            self._check_size(len(input_data.encode("utf-8")), limit)
            return LineReader(input_data)
        if isinstance(input_data, (bytes, bytearray)):
            input_data = TextBuffer(input_data)
        if isinstance(input_data, TextBuffer):
            self._check_size(input_data.size, limit)
            return LineReader(input_data, self.config.character)
        if hasattr(input_data, "read_line"):
            return input_data
        if hasattr(input_data, "read"):
            content = input_data.read()
            if isinstance(content, str):
                return self._open_source(content)
            return self._open_source(TextBuffer(content))
        raise TypeError(f"Unsupported input type: {type(input_data).__name__}")

    @staticmethod
    def _check_size(size: int, limit: Optional[int]) -> None:
        if limit is not None and size > limit:
            raise ValueError(f"Input is too large: {size} bytes (limit {limit})")

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "failed_parses": self._failed_parses,
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._failed_parses = 0
        self._total_processing_time = 0.0


def parse(
    input_data: InputType,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Element:
    """Parse XML from a string, bytes, path, buffer, file object or line source.

    Args:
        input_data: Document to parse; a ``str`` is taken as XML text
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        The root element

    Examples:
        >>> root = parse('<a><b x="1">hi</b><c/></a>')
        >>> [child.name for child in root.elements()]
        ['b', 'c']
        >>> root.first_tag("b").text
        'hi'
    """
    return XMLParser(config, correlation_id).parse(input_data)


def parse_string(
    xml_string: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Element:
    """Parse XML held in a string."""
    return XMLParser(config, correlation_id).parse_string(xml_string)


def parse_file(
    file_path: Union[str, Path],
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Element:
    """Parse an XML file.

    Raises:
        FileNotFoundError: if the file does not exist
        IsADirectoryError: if ``file_path`` is a directory
    """
    return XMLParser(config, correlation_id).parse_file(file_path)


def save_file(
    root: Element,
    file_path: Union[str, Path],
    indent: str = "\t",
    encoding: str = "utf-8"
) -> None:
    """Serialize ``root`` and write it to ``file_path``.

    The file ends with a newline and can be read back with :func:`parse_file`.
    """
    buffer = TextBuffer()
    buffer.write((root.serialize(indent) + "\n").encode(encoding))
    buffer.save(file_path)
