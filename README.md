# tpcbench

`tpcbench` is a library for benchmarking SQL databases. It runs query
workloads from a set of worker threads over any DB-API connection,
records every query's latency in a histogram and prints the statistics
as plain text, a table or JSON.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Running your own queries

`RawSQLWorkloader` (in `tpcbench.rawsql`) runs the queries of a
`RawSQLConfig` round-robin: each call of `run` executes the next query on
the worker's connection. Worker threads start at different queries,
because a worker's position begins at its thread index.

Connections come from a `Database` (in `tpcbench.workload`), which wraps
a function that takes no arguments and returns a new DB-API connection.
Each worker thread opens its own connection. Before each query the
connection is checked with `SELECT 1`; if that fails, the worker waits
`refresh_wait` seconds and reconnects.

```python
import sqlite3
import threading

from tpcbench.rawsql import RawSQLConfig, RawSQLWorkloader
from tpcbench.runner import RunOptions, execute_workload
from tpcbench.workload import Database

db = Database(lambda: sqlite3.connect("bench.db"))
config = RawSQLConfig(
    db_name="bench",
    queries={"count": "SELECT COUNT(*) FROM sqlite_master"},
    query_names=["count"],
    output_style="table",
)
workloader = RawSQLWorkloader(db, config)

execute_workload(workloader, 4, "run", RunOptions(total_count=400, output_interval=5.0))
workloader.output_stats(True)
```

Other `RawSQLConfig` settings:

- `exec_explain_analyze` prefixes every query with `explain analyze` and
  writes the resulting rows as a table to standard error;
- `enable_plan_replayer` and `plan_replayer_config` collect a plan
  replayer dump before each query (see below).

The raw SQL workload only runs queries; `prepare`, `check_prepare`,
`cleanup` and `check` raise `RuntimeError`.

## Driving a workload

`tpcbench.runner` drives anything that implements the `Workloader`
interface from `tpcbench.workload`:

- `execute_workload(workloader, threads, action, options, stop)` starts
  `threads` workers and prints the current interval's statistics every
  `output_interval` seconds. A failure during `prepare` is raised as
  `RuntimeError` once all workers are done; after a successful `prepare`
  the data is checked with `check_prepare`. Other failures are printed.
- `execute(...)` is one worker's share. For `prepare`, `cleanup` and
  `check` it calls that phase once; for any other action it calls `run`
  `total_count // threads` times, or until `stop` (a `threading.Event`)
  is set when that share is not positive.
- `RunOptions` holds `total_count`, `drop_data` (clean up before
  `prepare`), `ignore_error`, `silence`, `output_interval` and
  `no_check`.

## CH-benCHmark queries

The 22 analytical queries of the CH-benCHmark are available by name from
`tpcbench.ch.queries`:

```python
from tpcbench.ch.queries import get_query, query_names

names = query_names()   # ["q1", ..., "q22"]
sql = get_query("q6")
```

Each query text starts with the marker `PLACEHOLDER` (`/*PLACEHOLDER*/`),
which can be replaced by a statement prefix. `get_query` raises
`KeyError` for an unknown name.

## Measurement

`tpcbench.measurement` provides:

- `Histogram(min_latency, max_latency, sig_figs)`: a high-dynamic-range
  histogram. Latencies are given in seconds or as `timedelta`; values
  outside the range are clamped, while the raw sum is kept exactly.
  `get_info()` returns a `HistInfo` with count, sum, average and the
  p50, p90, p95, p99, p99.9 and maximum latencies in milliseconds;
  `summary()` returns the same figures as strings.
- `Measurement`: a current-interval and a whole-run histogram per
  operation. `measure(op, latency, error)` records into `op`, or into
  `op_ERR` when an error is given; both are created together.
  `output(summary_report, output_style, output_func)` hands either set
  to a reporting function. During warm-up (`enable_warm_up(True)`)
  measurements are dropped.

`tpcbench.output` renders rows with `render_string`, `render_table`,
`render_json` or `render` for an `OutputStyle` (`plain`, `table`,
`json`), and turns an executed cursor into a text table with
`render_explain_analyze`.

## Plan replayer dumps

`PlanReplayerRunner` (in `tpcbench.replayer`) runs a
`plan replayer dump explain ...` statement, fetches the dump it names
from `http://<host>:<status_port>/plan_replayer/dump/<token>` and stores
it as one entry of a zip archive. `prepare()` creates the archive,
defaulting to the current directory and a name built from the workload
name and the time; `finish()` closes it. The HTTP fetch can be replaced
by passing a `fetch` function.

## Other pieces

`BufAllocator` (in `tpcbench.bufalloc`) hands out writable chunks of a
shared byte buffer, for workers that build many small values.

## What is not included

- There is no command-line program; workloads are run from Python.
- There is no CH-benCHmark workload that runs the queries, and no code
  that creates its tables or loads data: only the query texts are
  provided.
- There are no row sinks for writing generated data to CSV files or
  batched inserts; the `tpcbench.sink` package is empty.
- No database driver is bundled; pass a connection function for the
  DB-API driver of your database.