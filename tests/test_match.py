import pytest

from bitcep.bitsequence import BitVectors, build_bit_vectors
from bitcep.match import (
    bit_match,
    bit_positions,
    collect_results,
    final_result,
    scan_step,
    shifted_mask,
    window_mask,
)
from bitcep.query import SEPARATOR, Query, parse_query_lines
from bitcep.state import Event, MatchState
from bitcep.stream import parse_stream_lines

TOP = 1 << 63
MASK = (1 << 64) - 1


def _query(pattern, window):
    return parse_query_lines([pattern, f"WITHIN {window}", SEPARATOR])[0]


@pytest.mark.parametrize("x", [0, 1, 0b1010, TOP, MASK])
def test_scan_step_without_start_is_empty(x):
    assert scan_step(x, 0, MASK) == 0


def test_scan_step_finds_nearest_higher_bit():
    assert scan_step(0b0110, 0b0001, MASK) == 0b0010


def test_scan_step_respects_window():
    assert scan_step(0b0110, 0b0001, 0) == 0


@pytest.mark.parametrize("y", [1, 0b1001, TOP, 1 << 40])
def test_window_mask_of_width_one_is_identity(y):
    assert window_mask(y, 1) == y


@pytest.mark.parametrize("width", [1, 5, 64, 200])
def test_window_mask_covers_input(width):
    y = 0b100100
    assert window_mask(y, width) & y == y


def test_window_mask_top_bit_cannot_grow():
    assert window_mask(TOP, 10) == TOP


def test_window_mask_small():
    assert window_mask(1, 3) == 0b111


@pytest.mark.parametrize("word", [0, 1, 1 << 30, 1 << 62, 12345])
@pytest.mark.parametrize("width", [0, 1, 3, 70])
def test_shifted_mask_ignores_top_bit_and_is_low_run(word, width):
    mask = shifted_mask(word, width)
    assert shifted_mask(word | TOP, width) == mask
    assert mask & ((mask + 1) & MASK) == 0


def test_bit_positions_top_bit_is_position_zero():
    assert bit_positions(0, TOP) == [0]


@pytest.mark.parametrize("index,word", [(0, 0b1011), (3, TOP | 1), (1, MASK)])
def test_bit_positions_round_trip(index, word):
    positions = bit_positions(index, word)
    assert len(positions) == bin(word).count("1")
    rebuilt = sum(1 << (63 - (p - index * 64)) for p in positions)
    assert rebuilt == word


def test_collect_results_drops_edge_bits():
    state = MatchState()
    collect_results(state, [TOP | 1], 0)
    assert state.results == []
    assert state.candidates == []


def test_collect_results_uses_start_index_and_events():
    event = Event(type="A", timestamp=4.0)
    positions = bit_positions(4, TOP >> 1)
    state = MatchState(first_events={positions[0]: event})
    collect_results(state, [0, TOP >> 1], 3)
    assert state.results == positions
    assert state.candidates == [event]


def test_collect_results_inserts_empty_event_for_unknown_position():
    state = MatchState()
    collect_results(state, [TOP >> 2], 0)
    assert state.candidates == [Event()]
    assert list(state.first_events) == state.results


def _run(window, rows):
    state = MatchState()
    query = _query("PATTERN SEQ(A a, B b)", window)
    stream = parse_stream_lines(["eventType,timestamp", *rows])
    vectors = build_bit_vectors(state, query, stream, 1)
    bit_match(state, query, vectors, 1)
    return state


def test_bit_match_finds_sequence_in_window():
    state = _run(10, ["A,1", "B,2"])
    assert state.candidates == [Event(type="A", timestamp=1.0)]
    assert state.results == list(state.first_events)


def test_bit_match_narrow_window_finds_nothing():
    state = _run(1, ["A,1", "B,2"])
    assert state.results == []
    assert state.candidates == []


def test_bit_match_wrong_order_finds_nothing():
    state = _run(10, ["B,1", "A,2"])
    assert state.results == []


def test_bit_match_drops_top_bit_match_in_first_block():
    state = MatchState()
    query = _query("PATTERN SEQ(A a, B b)", 10)
    vectors = BitVectors(vectors=[[TOP], [TOP >> 1]], event_index={"A": 0, "B": 1})
    bit_match(state, query, vectors, 1)
    assert state.results == []
    assert state.first_events == {}


def test_bit_match_leaves_vectors_unchanged():
    state = MatchState()
    query = _query("PATTERN SEQ(A a, B b)", 10)
    vectors = BitVectors(vectors=[[TOP >> 1], [TOP >> 2]], event_index={"A": 0, "B": 1})
    bit_match(state, query, vectors, 1)
    assert vectors.vectors == [[TOP >> 1], [TOP >> 2]]


def test_bit_match_rejects_zero_time_slice():
    query = _query("PATTERN SEQ(A a, B b)", 10)
    vectors = BitVectors(vectors=[[0], [0]], event_index={"A": 0, "B": 1})
    with pytest.raises(ValueError):
        bit_match(MatchState(), query, vectors, 0)


def test_bit_match_rejects_leading_negation():
    query = _query("PATTERN SEQ(!C c, B b)", 10)
    vectors = BitVectors(vectors=[[0], [0]], event_index={"C": 0, "B": 1})
    with pytest.raises(ValueError):
        bit_match(MatchState(), query, vectors, 1)


def test_bit_match_rejects_empty_pattern():
    with pytest.raises(ValueError):
        bit_match(MatchState(), Query(), BitVectors(), 1)


def test_bit_match_rejects_missing_vector():
    query = _query("PATTERN SEQ(A a, B b)", 10)
    vectors = BitVectors(vectors=[[0]], event_index={"A": 0})
    with pytest.raises(ValueError):
        bit_match(MatchState(), query, vectors, 1)


def test_final_result_uses_last_vector():
    event = Event(type="A", timestamp=1.0)
    state = MatchState(first_events={0: event})
    final_result(state, [[0], [TOP]])
    assert state.results == [0]
    assert state.candidates == [event]


def test_final_result_inserts_empty_events():
    state = MatchState()
    final_result(state, [[TOP >> 1]])
    assert state.candidates == [Event()]
    assert list(state.first_events) == state.results


def test_final_result_rejects_empty():
    with pytest.raises(ValueError):
        final_result(MatchState(), [])