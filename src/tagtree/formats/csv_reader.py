"""Delimiter separated value reading.

:class:`CSVReader` walks a text value by value or row by row; values are
split on a literal delimiter with no quoting rules. :class:`CSVTable` loads
every row into memory for positional and title based lookups.
"""

from typing import Iterator, List, Optional, Union

from tagtree.character import LineReader, TextBuffer

Row = List[str]


class CSVReader:
    """Sequential reader over delimiter separated lines.

    Examples:
        >>> reader = CSVReader("a, b\\n1, 2")
        >>> reader.next_value(), reader.next_value(), reader.next_value()
        ('a', 'b', '1')
        >>> reader.next_row()
        ['2']
        >>> reader.next_row() is None
        True
    """

    def __init__(
        self,
        source: Union[str, TextBuffer, LineReader],
        delimiter: str = ",",
        strip_spaces: bool = True
    ) -> None:
        if not delimiter:
            raise ValueError("delimiter cannot be empty")
        self._reader = source if isinstance(source, LineReader) else LineReader(source)
        self.delimiter = delimiter
        self.strip_spaces = strip_spaces
        self._current: Row = []
        self._pointer = 0

    def _split(self, line: str) -> Row:
        values = line.split(self.delimiter)
        if self.strip_spaces:
            values = [value.strip() for value in values]
        return values

    def advance_line(self) -> bool:
        """Drop what is left of the current row and load the next one.

        Returns False at the end of the text.
        """
        line = self._reader.read_line()
        self._current = [] if line is None else self._split(line)
        self._pointer = 0
        return line is not None

    def next_value(self) -> Optional[str]:
        """Return the next value, moving to the next row when needed."""
        if self._pointer >= len(self._current) and not self.advance_line():
            return None
        value = self._current[self._pointer]
        self._pointer += 1
        return value

    def next_row(self) -> Optional[Row]:
        """Return the rest of the current row, or the next full row."""
        if self._pointer >= len(self._current) and not self.advance_line():
            return None
        row = self._current[self._pointer:]
        self._pointer = len(self._current)
        return row

    def reset(self) -> None:
        """Go back to the first row."""
        self._reader.reset()
        self._current = []
        self._pointer = 0

    def __iter__(self) -> Iterator[Row]:
        row = self.next_row()
        while row is not None:
            yield row
            row = self.next_row()


class CSVTable:
    """All rows of a CSV text, optionally headed by a row of titles.

    Coordinates and row numbers are zero-based and skip the title row.
    Lookups outside the table, or by unknown titles, return None.
    """

    def __init__(self, reader: CSVReader, has_titles: bool = True) -> None:
        self.reader = reader
        self.has_titles = has_titles
        self._data: List[Row] = []
        self.refresh()

    def refresh(self) -> None:
        """Re-read every row from the start of the reader."""
        self.reader.reset()
        self._data = list(self.reader)

    @property
    def titles(self) -> Optional[Row]:
        if not self.has_titles or not self._data:
            return None
        return self._data[0]

    @property
    def rows(self) -> List[Row]:
        """Data rows, without the title row."""
        return self._data[1:] if self.has_titles else list(self._data)

    def __len__(self) -> int:
        return len(self.rows)

    def entry(self, x: int, y: int) -> Optional[str]:
        """Value in column ``x`` of data row ``y``."""
        if x < 0 or y < 0:
            return None
        if self.has_titles:
            y += 1
        if y >= len(self._data) or x >= len(self._data[y]):
            return None
        return self._data[y][x]

    def column(self, title: str) -> Optional[int]:
        """Index of the column called ``title``."""
        titles = self.titles
        if titles is None or title not in titles:
            return None
        return titles.index(title)

    def entry_by_title(self, title: str, row: int) -> Optional[str]:
        column = self.column(title)
        if column is None:
            return None
        return self.entry(column, row)

    def lookup(self, title: str, index_header: str, index: str) -> Optional[str]:
        """Value under ``title`` in the first row whose ``index_header`` is ``index``.

        Examples:
            >>> table = CSVTable(CSVReader("id,name\\n7,seven\\n9,nine"))
            >>> table.lookup("name", "id", "9")
            'nine'
        """
        column = self.column(title)
        index_column = self.column(index_header)
        if column is None or index_column is None:
            return None
        for y in range(len(self)):
            if self.entry(index_column, y) == index:
                return self.entry(column, y)
        return None
