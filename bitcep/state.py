"""Events and the shared state that matching fills in."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Event:
    """One event taken from the stream."""

    type: str = ""
    timestamp: float = 0.0


@dataclass
class MatchState:
    """Results gathered while queries run.

    ``first_events`` maps a bit position to the event of the pattern's
    first type seen there; ``results`` holds the bit positions of matches
    and ``candidates`` the events found at those positions.
    """

    candidates: list[Event] = field(default_factory=list)
    results: list[int] = field(default_factory=list)
    first_events: dict[int, Event] = field(default_factory=dict)

    def reset_results(self) -> None:
        """Forget the match positions of the last query."""
        self.results = []