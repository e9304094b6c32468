from bitcep.state import Event, MatchState


def test_event_defaults():
    event = Event()
    assert event.type == ""
    assert event.timestamp == 0.0


def test_event_equality():
    assert Event("A", 5.0) == Event(type="A", timestamp=5.0)
    assert Event("A", 5.0) != Event("B", 5.0)


def test_match_state_starts_empty():
    state = MatchState()
    assert state.candidates == []
    assert state.results == []
    assert state.first_events == {}


def test_match_states_do_not_share_lists():
    first = MatchState()
    second = MatchState()
    first.results.append(3)
    assert second.results == []


def test_reset_results_keeps_candidates_and_events():
    state = MatchState()
    event = Event("A", 1.0)
    state.results.extend([1, 2, 3])
    state.candidates.append(event)
    state.first_events[1] = event
    state.reset_results()
    assert state.results == []
    assert state.candidates == [event]
    assert state.first_events == {1: event}