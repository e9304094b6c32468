"""Command line entry: run every configured query over the event stream."""

from __future__ import annotations

import argparse
import sys
import time
from typing import TextIO

from .bitsequence import build_bit_vectors
from .config import Config, ConfigError, load_config, write_output
from .match import bit_match
from .query import parse_query_file
from .state import MatchState
from .stream import parse_stream_file

RULE = "-" * 68
STARS = "*" * 33


def run(state: MatchState, config: Config, out: TextIO) -> None:
    """Run every query ``config.repeat`` times, reporting counts and timings to ``out``."""
    for _ in range(config.repeat):
        total_time = 0.0
        total_results = 0
        queries = parse_query_file(config.query_path)
        stream = parse_stream_file(config.data_path)
        for number, query in enumerate(queries, start=1):
            started = time.perf_counter_ns()
            vectors = build_bit_vectors(state, query, stream, config.time_slice)
            bit_match(state, query, vectors, config.time_slice)
            elapsed = (time.perf_counter_ns() - started) / 1_000_000

            total_time += elapsed
            total_results += len(state.results)

            print(RULE, file=out)
            print(f"The following is the matching result of Query {number} : ", file=out)
            print(file=out)
            print(f"The number of match: {len(state.first_events)}", file=out)
            print(f"The number of match result: {len(state.results)}", file=out)
            print(f"The total running time of Query {number} : {elapsed:g}", file=out)
            print(RULE, file=out)
            print(file=out)

            state.reset_results()
        print(STARS, file=out)
        print(f"The total running time for all queries: {total_time:g}", file=out)
        print(f"The total matching result number for all queries: {total_results}", file=out)


def main(argv: list[str] | None = None) -> int:
    """Read ``config.txt``, run the queries and write the result file."""
    parser = argparse.ArgumentParser(
        prog="bitcep", description="Match event patterns over a stream using bit vectors."
    )
    parser.add_argument(
        "directory",
        nargs="?",
        default=None,
        help="directory holding config.txt (default: the working directory)",
    )
    args = parser.parse_args(argv)

    state = MatchState()
    try:
        config = load_config(args.directory)
        run(state, config, sys.stdout)
        write_output(state, config.output_path)
    except ConfigError as error:
        print(error)
        return 100
    except OSError as error:
        print(f"open file failed: {error}", file=sys.stderr)
        return 0
    except ValueError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())