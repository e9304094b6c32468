"""Turning an event stream into one bit vector per pattern event type."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .query import Query
from .state import Event, MatchState
from .stream import EventStream
from .textutil import WORD_BITS, tokenize

TIMESTAMP_TAG = "timestamp"
TOP_BIT = 1 << (WORD_BITS - 1)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class Constraint:
    """One predicate of the form ``variable.attribute operator value``."""

    variable: str
    attribute: str
    operator: str
    value: float


@dataclass
class BitVectors:
    """Bit vectors in pattern order and the vector index of each event type.

    Each vector is a list of 64-bit words; bit positions count from the
    most significant bit of the first word, one position per time slice.
    """

    vectors: list[list[int]] = field(default_factory=list)
    event_index: dict[str, int] = field(default_factory=dict)


def _parse_predicate(text: str) -> Constraint:
    words = tokenize(text, " ")
    if len(words) < 3:
        raise ValueError(f"predicate needs an attribute, an operator and a value: {text!r}")
    parts = tokenize(words[0], ".")
    if len(parts) < 2:
        raise ValueError(f"predicate attribute must be variable.attribute: {text!r}")
    found = _LEADING_INT.match(words[2])
    if found is None:
        raise ValueError(f"predicate value is not an integer: {text!r}")
    return Constraint(parts[0], parts[1], words[1], float(int(found.group(1))))


def parse_constraints(query: Query) -> dict[str, list[Constraint]]:
    """Group the query's predicates by variable.

    A predicate joins the first group whose variable starts with the same
    character as the predicate; otherwise it opens a group under its own
    variable.
    """
    groups: dict[str, list[Constraint]] = {}
    for predicate in query.predicates:
        if not predicate or not predicate[0]:
            raise ValueError("empty predicate")
        text = predicate[0]
        constraint = _parse_predicate(text)
        for key, group in groups.items():
            if text[0] == key[0]:
                group.append(constraint)
                break
        else:
            groups[constraint.variable] = [constraint]
    return groups


def _passes(operator: str, actual: float, expected: float) -> bool:
    if operator == ">":
        return actual > expected
    if operator == "<":
        return actual < expected
    return actual == expected


def _numeric_column(stream: EventStream, tag: str) -> list[float]:
    if tag not in stream.tags:
        raise ValueError(f"event stream has no {tag!r} column")
    position = stream.tags.index(tag)
    if position not in stream.numeric_index:
        raise ValueError(f"column {tag!r} is not numeric")
    return stream.numeric_columns[stream.numeric_index[position]]


def _event_type_column(stream: EventStream) -> list[str]:
    position = stream.event_column
    if position is None or position not in stream.text_index:
        raise ValueError("event stream has no text eventType column")
    return stream.text_columns[stream.text_index[position]]


def build_bit_vectors(
    state: MatchState, query: Query, stream: EventStream, time_slice: int
) -> BitVectors:
    """Set one bit per accepted event in the vector of its type.

    A new bit position starts when an event lies at least ``time_slice``
    after the current slice start; a new word starts after 64 positions.
    Events of the pattern's first type are recorded in
    ``state.first_events`` under their bit position.
    """
    pattern = query.pattern
    if not pattern.event_types:
        raise ValueError("query pattern has no event types")

    constraints = parse_constraints(query)
    variables: dict[str, str] = {}
    event_index: dict[str, int] = {}
    for position, (event_type, variable) in enumerate(
        zip(pattern.event_types, pattern.variables)
    ):
        variables.setdefault(event_type, variable)
        event_index.setdefault(event_type, position)

    vectors: list[list[int]] = [[0] for _ in pattern.event_types]
    timestamps = _numeric_column(stream, TIMESTAMP_TAG)
    event_types = _event_type_column(stream)
    attributes = {
        constraint.attribute: _numeric_column(stream, constraint.attribute)
        for group in constraints.values()
        for constraint in group
    }
    first_type = pattern.event_types[0]

    unit = 0
    position = 0
    bit = TOP_BIT
    slice_start = 0.0
    for row, (timestamp, event_type) in enumerate(zip(timestamps, event_types)):
        if timestamp - slice_start >= time_slice:
            if bit == 1:
                unit += 1
                position = 0
                bit = TOP_BIT
                for vector in vectors:
                    vector.append(0)
                slice_start = timestamp
            else:
                bit >>= 1
                position += 1
                slice_start += time_slice

        index = event_index.get(event_type)
        if index is None:
            continue
        group = constraints.get(variables.get(event_type, ""), [])
        if not all(
            _passes(c.operator, attributes[c.attribute][row], c.value) for c in group
        ):
            continue
        vectors[index][unit] |= bit
        if event_type == first_type:
            state.first_events.setdefault(
                unit * WORD_BITS + position, Event(type=event_type, timestamp=timestamp)
            )

    return BitVectors(vectors=vectors, event_index=event_index)