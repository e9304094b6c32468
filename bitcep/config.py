"""The run configuration file and the result file."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

from .state import MatchState
from .textutil import read_lines

CONFIG_NAME = "config.txt"
CONFIG_LINES = 5

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class ConfigError(ValueError):
    """The configuration file does not have the expected form."""


@dataclass(frozen=True)
class Config:
    """Settings read from ``config.txt``.

    Paths are the configuration directory with the configured text
    appended as it stands.
    """

    repeat: int
    time_slice: int
    query_path: str
    data_path: str
    output_path: str


def _leading_int(text: str) -> int:
    found = _LEADING_INT.match(text)
    if found is None:
        raise ConfigError(f"not an integer: {text!r}")
    return int(found.group(1))


def load_config(directory: str | os.PathLike[str] | None = None) -> Config:
    """Read ``config.txt`` from ``directory``, by default the working directory.

    The file holds five lines: query file, data file, number of runs, time
    slice and result file.
    """
    base = os.getcwd() if directory is None else os.fspath(directory)
    lines = read_lines(base + "/" + CONFIG_NAME)
    if len(lines) != CONFIG_LINES:
        raise ConfigError("Not the expected input")
    query, data, repeat, time_slice, output = lines
    return Config(
        repeat=_leading_int(repeat),
        time_slice=_leading_int(time_slice),
        query_path=base + query,
        data_path=base + data,
        output_path=base + output,
    )


def write_output(state: MatchState, path: str | os.PathLike[str]) -> None:
    """Write one line per candidate event."""
    with open(path, "w", encoding="utf-8") as handle:
        for event in state.candidates:
            handle.write(f"timestamp: {event.timestamp:g} event type {event.type}\n")