"""A workload that runs user-supplied SQL queries in turn."""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, TextIO

from .measurement import Histogram, Measurement
from .output import (
    OutputStyle,
    float_to_two_string,
    render_explain_analyze,
    render_json,
    render_string,
    render_table,
)
from .replayer import PlanReplayerConfig, PlanReplayerRunner
from .workload import Database, TpcState, Workloader


@dataclass
class RawSQLConfig:
    """Settings of the raw SQL workload."""

    db_name: str = ""
    queries: Dict[str, str] = field(default_factory=dict)
    query_names: List[str] = field(default_factory=list)
    exec_explain_analyze: bool = False
    refresh_wait: float = 0.0
    output_style: str = OutputStyle.PLAIN.value
    enable_plan_replayer: bool = False
    plan_replayer_config: PlanReplayerConfig = field(default_factory=PlanReplayerConfig)


class RawSQLState(TpcState):
    """Thread state plus the index of the next query to run."""

    def __init__(self, db: Optional[Database], query_idx: int = 0) -> None:
        super().__init__(db)
        self.query_idx = query_idx


def output_measurement(
    output_style: str,
    prefix: str,
    histograms: Dict[str, Histogram],
    out: Optional[TextIO] = None,
) -> None:
    """Print the average latency, in seconds, of every non-empty query."""
    lines = [
        [prefix, op.upper(), float_to_two_string(hist.get_info().avg / 1000) + "s"]
        for op, hist in sorted(histograms.items())
        if not hist.empty()
    ]
    headers = ["Prefix", "Operation", "Avg(s)"]
    if output_style == OutputStyle.PLAIN.value:
        render_string("%s%s: %s\n", None, lines, out)
    elif output_style == OutputStyle.TABLE.value:
        render_table(headers, lines, out)
    elif output_style == OutputStyle.JSON.value:
        render_json(headers, lines, out)


class RawSQLWorkloader(Workloader):
    """Runs the configured queries round-robin, one per call of ``run``."""

    def __init__(self, db: Optional[Database], config: RawSQLConfig) -> None:
        self.db = db
        self.config = config
        self.measurement = Measurement(0.0001, 20 * 60.0, 3)
        self.plan_replayer_runner: Optional[PlanReplayerRunner] = None

    def name(self) -> str:
        return "rawsql"

    def init_thread(self, thread_id: int) -> RawSQLState:
        return RawSQLState(self.db, thread_id)

    def cleanup_thread(self, state: RawSQLState, thread_id: int) -> None:
        state.close()

    def _unsupported(self, action: str) -> None:
        raise RuntimeError(f"the rawsql workload does not support {action}")

    def prepare(self, state: RawSQLState, thread_id: int) -> None:
        self._unsupported("prepare")

    def check_prepare(self, state: RawSQLState, thread_id: int) -> None:
        self._unsupported("check_prepare")

    def cleanup(self, state: RawSQLState, thread_id: int) -> None:
        self._unsupported("cleanup")

    def check(self, state: RawSQLState, thread_id: int) -> None:
        self._unsupported("check")

    def run(self, state: RawSQLState, thread_id: int) -> None:
        try:
            self._run_once(state)
        finally:
            state.query_idx += 1

    def _run_once(self, state: RawSQLState) -> None:
        try:
            state.ping()
        except Exception:
            time.sleep(self.config.refresh_wait)
            state.refresh_conn()

        names = self.config.query_names
        query_name = names[state.query_idx % len(names)]
        query = self.config.queries[query_name]

        if self.config.enable_plan_replayer:
            self._dump_plan_replayer(state, query, query_name)

        if self.config.exec_explain_analyze:
            query = "explain analyze\n" + query

        cursor = state.conn.cursor()
        try:
            start = time.perf_counter()
            try:
                cursor.execute(query)
            except Exception as err:
                self.measurement.measure(query_name, time.perf_counter() - start, err)
                raise RuntimeError(f"execute query {query_name} failed {err}") from err
            self.measurement.measure(query_name, time.perf_counter() - start)

            if self.config.exec_explain_analyze:
                table = render_explain_analyze(cursor)
                sys.stderr.write(
                    f"explain analyze result of query {query_name}:\n{table}\n"
                )
        finally:
            cursor.close()

    def _dump_plan_replayer(self, state: RawSQLState, query: str, query_name: str) -> None:
        if self.plan_replayer_runner is None:
            raise RuntimeError("plan replayer dump has not been prepared")
        self.plan_replayer_runner.dump(
            state.conn, "plan replayer dump explain " + query, query_name
        )

    def output_stats(self, summary_report: bool) -> None:
        self.measurement.output(summary_report, self.config.output_style, output_measurement)

    def db_name(self) -> str:
        return self.config.db_name

    def is_plan_replayer_dump_enabled(self) -> bool:
        return self.config.enable_plan_replayer

    def prepare_plan_replayer_dump(self) -> None:
        self.config.plan_replayer_config.workload_name = self.name()
        if self.plan_replayer_runner is None:
            self.plan_replayer_runner = PlanReplayerRunner(self.config.plan_replayer_config)
        self.plan_replayer_runner.prepare()

    def finish_plan_replayer_dump(self) -> None:
        if self.plan_replayer_runner is None:
            raise RuntimeError("plan replayer dump has not been prepared")
        self.plan_replayer_runner.finish()