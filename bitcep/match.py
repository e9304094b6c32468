"""Bit-parallel matching of a query pattern over its bit vectors."""

from __future__ import annotations

from typing import Callable, Sequence

from .bitsequence import BitVectors
from .query import NEGATION, Query
from .state import Event, MatchState
from .textutil import WORD_BITS

LANES = 8
TOP_BIT = 1 << (WORD_BITS - 1)

_MASK = (1 << WORD_BITS) - 1
_LOW_BITS = _MASK >> 1
_RESULT_MASK = _LOW_BITS & ~1

Loader = Callable[[int], list[int]]


def scan_step(x: int, y: int, window: int) -> int:
    """Bits of ``x`` nearest above each run started by ``y``, kept inside ``window``."""
    shifted = (y << 1) & _MASK
    difference = ((x | y) - shifted) & _MASK
    return x & ~difference & window & _MASK


def window_mask(y: int, width: int) -> int:
    """``y`` widened towards higher bits so that each set bit covers ``width`` bits."""
    result = y & _MASK
    for shift in range(1, min(width, WORD_BITS)):
        result |= (y << shift) & _MASK
    return result


def negation_window(y: int, z: int, window: int) -> int:
    """Narrow ``window`` using the negated events ``y`` and the current ends ``z``."""
    difference = ((y | z) - ((y << 1) & _MASK)) & _MASK
    inverted = ~difference & _MASK
    borrowed = ((inverted & z) - y) & _MASK
    return ((borrowed ^ y) | borrowed) & window & _MASK


def shifted_mask(word: int, width: int) -> int:
    """A run of low one bits sized by how far ``width`` reaches past the leading zeros.

    The most significant bit of ``word`` is ignored.
    """
    cleared = word & _LOW_BITS
    leading = WORD_BITS - cleared.bit_length()
    reach = (width - min(leading, width & _MASK)) & _MASK
    shift = (reach + 1) & _MASK
    ones = (1 << shift) & _MASK if shift < WORD_BITS else 0
    return (ones - 1) & _MASK


def bit_positions(word_index: int, word: int) -> list[int]:
    """Positions of the set bits of a word, lowest bit first.

    The most significant bit of word ``k`` is position ``64 * k``.
    """
    positions: list[int] = []
    word &= _MASK
    while word:
        lowest = word & -word
        positions.append(word_index * WORD_BITS + (WORD_BITS - lowest.bit_length()))
        word ^= lowest
    return positions


def collect_results(state: MatchState, words: Sequence[int], start_index: int) -> None:
    """Record the matches in ``words``, the first of which is word ``start_index``.

    The top and bottom bit of each word are not results. A position with
    no recorded first event gets an empty one.
    """
    for offset, word in enumerate(words):
        for position in bit_positions(start_index + offset, word & _RESULT_MASK):
            state.results.append(position)
            state.candidates.append(state.first_events.setdefault(position, Event()))


def final_result(state: MatchState, result: Sequence[Sequence[int]]) -> None:
    """Turn the last bit vector of ``result`` into match positions and candidates.

    Candidates are added for every position in ``state.results``, the earlier
    ones included.
    """
    if not result:
        raise ValueError("no result vectors")
    for word_index, word in enumerate(result[-1]):
        state.results.extend(bit_positions(word_index, word))
    state.candidates.extend(
        [state.first_events.setdefault(position, Event()) for position in state.results]
    )


def _truncating_division(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator < 0) == (denominator < 0) else -quotient


def _load(vectors: Sequence[Sequence[int]], index: int, start: int, count: int) -> list[int]:
    chunk = list(vectors[index][start:start + count])
    return chunk + [0] * (count - len(chunk))


def _lanewise(function: Callable[..., int], *lanes: Sequence[int]) -> list[int]:
    return [function(*values) for values in zip(*lanes)]


def _run_chain(
    query: Query,
    index_of: dict[str, int],
    load: Loader,
    ends: list[int],
    window: list[int],
    position: int,
    on_top_bit: Callable[[int], None] | None = None,
) -> list[int]:
    """Walk the pattern backwards from ``position``, narrowing the match ends."""
    types = query.pattern.event_types
    kinds = query.pattern.state_types
    while position >= 0:
        if kinds[position] == NEGATION:
            window = _lanewise(negation_window, load(index_of[types[position]]), ends, window)
            position -= 1
        ends = _lanewise(scan_step, load(index_of[types[position]]), ends, window)
        if not any(ends):
            break
        if on_top_bit is not None and any(word & TOP_BIT for word in ends):
            on_top_bit(position)
            on_top_bit = None
        position -= 1
    return ends


def _match_across_words(
    state: MatchState,
    query: Query,
    index_of: dict[str, int],
    vectors: list[list[int]],
    position: int,
    start: int,
    pre_window: list[int],
) -> None:
    """Continue a match that reached the top bit of a word into the word before."""
    if start == 0:
        load_start = 0
        window = [0] * (LANES - 1) + [pre_window[0]]

        def load(index: int) -> list[int]:
            return _load(vectors, index, 0, LANES - 1) + [0]

    else:
        load_start = start - 1
        window = list(pre_window)

        def load(index: int) -> list[int]:
            return _load(vectors, index, load_start, LANES)

    ends = _run_chain(query, index_of, load, [1] * LANES, window, position)
    collect_results(state, ends, load_start)


def bit_match(state: MatchState, query: Query, bit_vectors: BitVectors, time_slice: int) -> None:
    """Find the matches of ``query`` and record them in ``state``.

    The vectors are read in blocks of eight words; ``bit_vectors`` itself is
    left unchanged.
    """
    pattern = query.pattern
    types = pattern.event_types
    if not types:
        raise ValueError("query pattern has no event types")
    if time_slice == 0:
        raise ValueError("time slice must not be zero")
    if len(types) > 1 and pattern.state_types[0] == NEGATION:
        raise ValueError("a pattern cannot start with a negated event")

    index_of: dict[str, int] = {}
    for event_type in types:
        index = bit_vectors.event_index.get(event_type)
        if index is None or not 0 <= index < len(bit_vectors.vectors):
            raise ValueError(f"no bit vector for event type {event_type!r}")
        index_of[event_type] = index

    width = _truncating_division(query.time_window, time_slice)
    vectors = [list(vector) for vector in bit_vectors.vectors]
    for event_type in reversed(types):
        vector = vectors[index_of[event_type]]
        vector.extend([0] * (LANES - len(vector) % LANES))

    last = index_of[types[-1]]
    for start in range(0, len(vectors[0]), LANES):

        def load(index: int, start: int = start) -> list[int]:
            return _load(vectors, index, start, LANES)

        ends = load(last)
        pre_window = [shifted_mask(word, width) for word in ends]
        window = [window_mask(word, width) for word in ends]

        def across(position: int, start: int = start, pre_window: list[int] = pre_window) -> None:
            _match_across_words(state, query, index_of, vectors, position, start, pre_window)

        ends = _run_chain(query, index_of, load, ends, window, len(types) - 2, across)
        collect_results(state, ends, start)