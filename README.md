# bitcep

`bitcep` finds sequence patterns in event streams. Each event type in a pattern becomes a bit vector, with one bit per time slice. The matcher combines the vectors with 64-bit word arithmetic, eight words at a time, to find where the whole pattern occurs.

## Installation

```
pip install .
```

The package uses only the standard library. To run the tests:

```
pip install .[test]
pytest
```

## Running

```
bitcep [DIRECTORY]
```

The command reads `config.txt` from `DIRECTORY`. If no directory is given, it uses the working directory. The file must have exactly five lines:

1. the query file
2. the event data file
3. how many times to repeat the whole run
4. the length of one time slice
5. the result file

Each path is made by appending the line's text to the directory as it stands, so write the paths with a leading `/`, for example `/queries.txt`. When a file name does not end in `t`, its last character is dropped before the file is opened. This lets a line that ends in a stray carriage return still name a `.txt` file.

For every query the command prints:

- the number of recorded first-type events
- the number of match results
- the running time in milliseconds

After each run it prints the totals. At the end it writes every matched event to the result file, one line each:

```
timestamp: 12 event type A
```

Exit status:

- A `config.txt` that does not have five lines prints `Not the expected input` and exits with status 100.
- A file that cannot be opened reports the error and exits with status 0.
- Malformed input exits with status 1.

## Query file

A query file holds one or more queries. A line of exactly twenty dashes ends each query. Lines after the last separator make no query.

```
PATTERN SEQ(A a, !B b, C c)
WHERE skip-till-next-match
AND a.price > 10
WITHIN 20
--------------------
```

In `PATTERN`, each comma-separated element is an event type followed by a variable name. The type may carry a marker:

| Marker | Position | Kind |
|--------|----------|------|
| `!` | before the type | `negation` |
| `\|` | before the type | `or` |
| `+` | after the type | `kleeneClosure` |
| none | | `normal` |

Each `AND` line is one of two things:

- a partition attribute in brackets, such as `[id]`;
- a predicate of the form `var.attribute op value`, where `op` is `>`, `<`, or anything else for equality, and `value` is an integer.

`WITHIN` sets the time window. The window in slices is the window divided by the time slice, rounded towards zero.

The selection strategy, the time window and the partition attributes carry over into the next query. The pattern and the predicates do not.

## Data file

The data file is comma-separated. Its first line names the columns. Two columns are required:

- a numeric `timestamp` column
- a text `eventType` column

A column counts as numeric when its first value holds only digits and dots. Numeric values keep only their leading integer.

## Library use

```python
from bitcep.query import parse_query_file
from bitcep.stream import parse_stream_file
from bitcep.state import MatchState
from bitcep.bitsequence import build_bit_vectors
from bitcep.match import bit_match
from bitcep.config import write_output

queries = parse_query_file("queries.txt")
stream = parse_stream_file("data.txt")
state = MatchState()
for query in queries:
    vectors = build_bit_vectors(state, query, stream, time_slice=1)
    bit_match(state, query, vectors, time_slice=1)
    print(len(state.results))
    state.reset_results()
write_output(state, "result.txt")
```

### Modules

- **`bitcep.textutil`**
  - `tokenize`
  - `read_lines`
  - `format_bits`, which renders a 64-bit word in binary
- **`bitcep.state`**
  - `Event`
  - `MatchState`, which holds `candidates`, `results` and `first_events`
- **`bitcep.query`**
  - `Query` and `Pattern`
  - `parse_query_lines` and `parse_query_file`
  - `describe_query`, which gives a readable summary
- **`bitcep.stream`**
  - `EventStream`
  - `is_numeric`
  - `parse_stream_lines` and `parse_stream_file`
- **`bitcep.bitsequence`**
  - `Constraint` and `BitVectors`
  - `parse_constraints`
  - `build_bit_vectors`
- **`bitcep.match`**
  - `bit_match`
  - `final_result`
  - the word operations `scan_step`, `window_mask`, `negation_window`, `shifted_mask`, `bit_positions` and `collect_results`
- **`bitcep.config`**
  - `Config`
  - `load_config`
  - `write_output`
  - `ConfigError`
- **`bitcep.cli`**
  - `run`
  - `main`

## Limits

- Only negation changes how the matcher treats an element. `or` and `kleeneClosure` elements are parsed and kept with their kinds, but they are matched like `normal` ones.
- A pattern cannot start with a negated element.
- Partition attributes and the selection strategy are recorded but have no effect on matching.
- A predicate joins the first group of predicates whose variable starts with the same character as the predicate.