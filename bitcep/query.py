"""Queries and the reader for the query file format."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, replace
from typing import Iterable, Sequence

from .textutil import read_lines, tokenize

SEPARATOR = "-" * 20

NORMAL = "normal"
NEGATION = "negation"
KLEENE_CLOSURE = "kleeneClosure"
OR = "or"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass
class Pattern:
    """The event sequence of a query: types, their kinds and their variables."""

    event_types: list[str] = field(default_factory=list)
    state_types: list[str] = field(default_factory=list)
    variables: list[str] = field(default_factory=list)

    def add(self, event_type: str, state_type: str, variable: str) -> None:
        self.event_types.append(event_type)
        self.state_types.append(state_type)
        self.variables.append(variable)


@dataclass
class Query:
    """A query built up line by line from a query file."""

    pattern: Pattern = field(default_factory=Pattern)
    selection_strategy: str = ""
    has_partition_attribute: bool = False
    has_more_partition_attribute: bool = False
    partition_attributes: list[str] = field(default_factory=list)
    more_partition_attributes: list[str] = field(default_factory=list)
    predicates: list[list[str]] = field(default_factory=list)
    time_window: int = 0

    def parse_line(self, line: str) -> bool:
        """Apply one query line; return True when the line ends the query."""
        if line.startswith("PATTERN"):
            self._parse_pattern(line)
        elif line.startswith("WHERE"):
            self.selection_strategy = _second_token(line)
        elif line.startswith("AND"):
            self._parse_and(line)
        elif line.startswith("WITHIN"):
            self.time_window = _leading_int(_second_token(line))
        elif line == SEPARATOR:
            return True
        return False

    def _parse_pattern(self, line: str) -> None:
        start = line.find("(") + 1
        length = len(line) - (start + 1)
        sequence = line[start:start + length] if length >= 0 else line[start:]
        for item in tokenize(sequence, ","):
            words = tokenize(item, " ")
            if len(words) < 2:
                raise ValueError(f"pattern element needs a type and a name: {item!r}")
            event_type, variable = words[0], words[1]
            if "+" in event_type:
                self.pattern.add(event_type[:-1], KLEENE_CLOSURE, variable)
            elif "!" in event_type:
                self.pattern.add(event_type[1:], NEGATION, variable)
            elif "|" in event_type:
                self.pattern.add(event_type[1:], OR, variable)
            else:
                self.pattern.add(event_type, NORMAL, variable)

    def _parse_and(self, line: str) -> None:
        argument = _second_token(line)
        if argument.startswith("["):
            name = argument[1:-1]
            if not self.has_partition_attribute:
                self.has_partition_attribute = True
                self.partition_attributes.append(name)
            else:
                self.has_more_partition_attribute = True
                self.more_partition_attributes.append(name)
        else:
            self.predicates.append([line[3:].strip(" ")])

    def _next_query(self) -> Query:
        """A fresh query that keeps every setting except pattern and predicates."""
        return replace(
            self,
            pattern=Pattern(),
            predicates=[],
            partition_attributes=list(self.partition_attributes),
            more_partition_attributes=list(self.more_partition_attributes),
        )


def _second_token(line: str) -> str:
    tokens = tokenize(line, " ")
    if len(tokens) < 2:
        raise ValueError(f"missing argument in query line: {line!r}")
    return tokens[1]


def _leading_int(text: str) -> int:
    found = _LEADING_INT.match(text)
    if found is None:
        raise ValueError(f"not an integer: {text!r}")
    return int(found.group(1))


def parse_query_lines(lines: Iterable[str]) -> list[Query]:
    """Build the queries of a query file; each ends at a separator line.

    Settings other than the pattern and the predicates carry over into the
    next query. Lines after the last separator make no query.
    """
    queries: list[Query] = []
    current = Query()
    for line in lines:
        if current.parse_line(line):
            queries.append(current)
            current = current._next_query()
    return queries


def parse_query_file(path: str | os.PathLike[str]) -> list[Query]:
    """Read and parse a query file."""
    return parse_query_lines(read_lines(path))


def describe_query(query: Query, bit_vectors: Sequence[Sequence[int]], candidate_count: int) -> str:
    """A readable summary of a query and the bit vectors built for it."""
    if len(bit_vectors) < 2:
        raise ValueError("at least two bit vectors are needed")
    lines = [f"Selection strategy: {query.selection_strategy}", "", "Event types and kinds:"]
    for event_type, state_type in zip(query.pattern.event_types, query.pattern.state_types):
        lines.extend([event_type, state_type])
    lines.append("")
    lines.extend(query.partition_attributes)
    lines.extend(query.more_partition_attributes)
    lines.append("Predicates:")
    for predicate in query.predicates:
        lines.extend(predicate)
    lines.extend(
        [
            f"Match units per bit vector: {len(bit_vectors[1])}",
            f"Bit vectors: {len(bit_vectors)}",
            f"Time window: {query.time_window}",
            f"Candidates: {candidate_count}",
        ]
    )
    return "\n".join(lines) + "\n"