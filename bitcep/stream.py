"""Reading an event stream from comma-separated text."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Iterable

from .textutil import read_lines, tokenize

EVENT_TYPE_TAG = "eventType"

_NUMERIC_CHARS = frozenset("0123456789.")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass
class EventStream:
    """A column-wise event stream.

    ``tags`` are the header names. Each tag's column lives either in
    ``numeric_columns`` or in ``text_columns``; ``numeric_index`` and
    ``text_index`` map a tag position to its column there.
    ``event_column`` is the position of the ``eventType`` tag, if any.
    """

    tags: list[str] = field(default_factory=list)
    text_columns: list[list[str]] = field(default_factory=list)
    numeric_columns: list[list[float]] = field(default_factory=list)
    text_index: dict[int, int] = field(default_factory=dict)
    numeric_index: dict[int, int] = field(default_factory=dict)
    event_column: int | None = None


def is_numeric(text: str) -> bool:
    """True when every character is a decimal digit or a dot."""
    return all(char in _NUMERIC_CHARS for char in text)


def _to_number(text: str, tag: str, row: int) -> float:
    found = _LEADING_INT.match(text)
    if found is None:
        raise ValueError(f"value {text!r} of {tag!r} in data row {row} is not a number")
    return float(int(found.group(1)))


def parse_stream_lines(lines: Iterable[str]) -> EventStream:
    """Parse a header line followed by data rows.

    A column is numeric when its first value is made of digits and dots;
    numeric values keep only their leading integer.
    """
    rows = iter(lines)
    header = next(rows, None)
    if header is None:
        raise ValueError("event stream is empty")
    tags = tokenize(header, ",")

    columns: list[list[str]] | None = None
    for number, line in enumerate(rows, start=1):
        cells = tokenize(line, ",")
        if columns is None:
            columns = [[cell] for cell in cells]
        elif len(cells) != len(columns):
            raise ValueError(
                f"data row {number} has {len(cells)} values, expected {len(columns)}"
            )
        else:
            for column, cell in zip(columns, cells):
                column.append(cell)

    if columns is None:
        raise ValueError("event stream has no data rows")
    if len(columns) != len(tags):
        raise ValueError(f"header names {len(tags)} columns but the data has {len(columns)}")

    stream = EventStream(tags=list(tags))
    for position, (tag, column) in enumerate(zip(tags, columns)):
        if is_numeric(column[0]):
            stream.numeric_index[position] = len(stream.numeric_columns)
            stream.numeric_columns.append(
                [_to_number(cell, tag, row) for row, cell in enumerate(column, start=1)]
            )
        else:
            stream.text_index[position] = len(stream.text_columns)
            stream.text_columns.append(column)

    if EVENT_TYPE_TAG in tags:
        stream.event_column = tags.index(EVENT_TYPE_TAG)
    return stream


def parse_stream_file(path: str | os.PathLike[str]) -> EventStream:
    """Read and parse an event stream file."""
    return parse_stream_lines(read_lines(path))