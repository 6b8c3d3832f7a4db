import threading
import time

import pytest

from tpcbench.runner import RunOptions, check_prepare, execute, execute_workload
from tpcbench.workload import Workloader


class FakeWorkloader(Workloader):
    def __init__(self, name="fake", run_error=None, prepare_error=None,
                 check_error=None, plan_replayer=False, run_delay=0.0, stop_after_run=None):
        self._name = name
        self.run_error = run_error
        self.prepare_error = prepare_error
        self.check_error = check_error
        self.plan_replayer = plan_replayer
        self.run_delay = run_delay
        self.stop_after_run = stop_after_run
        self.calls = []
        self._lock = threading.Lock()

    def _record(self, *call):
        with self._lock:
            self.calls.append(call)

    def count(self, kind):
        return sum(1 for call in self.calls if call[0] == kind)

    def name(self):
        return self._name

    def init_thread(self, thread_id):
        self._record("init_thread", thread_id)
        return {"index": thread_id}

    def cleanup_thread(self, state, thread_id):
        self._record("cleanup_thread", thread_id)

    def prepare(self, state, thread_id):
        self._record("prepare", thread_id)
        if self.prepare_error:
            raise self.prepare_error

    def check_prepare(self, state, thread_id):
        self._record("check_prepare", thread_id)
        if self.check_error:
            raise self.check_error

    def run(self, state, thread_id):
        self._record("run", thread_id)
        if self.run_delay:
            time.sleep(self.run_delay)
        if self.stop_after_run is not None:
            self.stop_after_run.set()
        if self.run_error:
            raise self.run_error

    def cleanup(self, state, thread_id):
        self._record("cleanup", thread_id)

    def check(self, state, thread_id):
        self._record("check", thread_id)

    def output_stats(self, summary_report):
        self._record("output_stats", summary_report)

    def db_name(self):
        return "test"

    def is_plan_replayer_dump_enabled(self):
        return self.plan_replayer

    def prepare_plan_replayer_dump(self):
        self._record("prepare_dump")

    def finish_plan_replayer_dump(self):
        self._record("finish_dump")


def test_execute_prepare_with_drop_data():
    w = FakeWorkloader()
    execute(w, "prepare", 1, 0, RunOptions(drop_data=True))
    assert w.calls == [("init_thread", 0), ("cleanup", 0), ("prepare", 0), ("cleanup_thread", 0)]


def test_execute_prepare_without_drop_data():
    w = FakeWorkloader()
    execute(w, "prepare", 1, 0, RunOptions())
    assert [call[0] for call in w.calls] == ["init_thread", "prepare", "cleanup_thread"]


def test_execute_cleanup_and_check():
    w = FakeWorkloader()
    execute(w, "cleanup", 1, 2)
    execute(w, "check", 1, 2)
    assert ("cleanup", 2) in w.calls
    assert ("check", 2) in w.calls
    assert w.count("run") == 0


def test_execute_run_splits_count_between_threads():
    w = FakeWorkloader()
    execute(w, "run", 2, 1, RunOptions(total_count=6))
    assert w.count("run") == 3
    assert w.calls[-1] == ("cleanup_thread", 1)


def test_execute_raises_run_error(capsys):
    w = FakeWorkloader(run_error=ValueError("boom"))
    with pytest.raises(ValueError, match="boom"):
        execute(w, "run", 1, 0, RunOptions(total_count=4))
    assert w.count("run") == 1
    assert "execute run failed, err boom" in capsys.readouterr().out
    assert w.calls[-1] == ("cleanup_thread", 0)


def test_execute_ignores_errors():
    w = FakeWorkloader(run_error=ValueError("boom"))
    execute(w, "run", 1, 0, RunOptions(total_count=4, ignore_error=True))
    assert w.count("run") == 4


def test_execute_silence_hides_errors(capsys):
    w = FakeWorkloader(run_error=ValueError("boom"))
    execute(w, "run", 1, 0, RunOptions(total_count=2, ignore_error=True, silence=True))
    assert capsys.readouterr().out == ""
    assert w.count("run") == 2


def test_execute_stops_when_stop_is_set():
    stop = threading.Event()
    w = FakeWorkloader(stop_after_run=stop)
    execute(w, "run", 1, 0, RunOptions(total_count=0), stop)
    assert w.count("run") == 1


def test_execute_plan_replayer_dump_wraps_run():
    w = FakeWorkloader(plan_replayer=True, run_error=ValueError("boom"))
    with pytest.raises(ValueError):
        execute(w, "run", 1, 0, RunOptions(total_count=1))
    kinds = [call[0] for call in w.calls]
    assert kinds == ["init_thread", "prepare_dump", "run", "finish_dump", "cleanup_thread"]


def test_check_prepare_skips_csv(capsys):
    w = FakeWorkloader(name="tpcc-csv")
    check_prepare(w, 2)
    assert "Skip preparing checking" in capsys.readouterr().out
    assert w.calls == []


def test_check_prepare_skips_tpcc_no_check():
    w = FakeWorkloader(name="tpcc")
    check_prepare(w, 2, RunOptions(no_check=True))
    assert w.calls == []


def test_check_prepare_runs_every_thread(capsys):
    w = FakeWorkloader(check_error=ValueError("mismatch"))
    check_prepare(w, 3)
    assert sorted(c[1] for c in w.calls if c[0] == "check_prepare") == [0, 1, 2]
    assert w.count("cleanup_thread") == 3
    assert "check prepare failed, err mismatch" in capsys.readouterr().out


def test_execute_workload_prepare_checks_afterwards():
    w = FakeWorkloader()
    execute_workload(w, 2, "prepare", RunOptions())
    assert w.count("prepare") == 2
    assert w.count("check_prepare") == 2
    last_prepare = max(i for i, c in enumerate(w.calls) if c[0] == "prepare")
    first_check = min(i for i, c in enumerate(w.calls) if c[0] == "check_prepare")
    assert last_prepare < first_check


def test_execute_workload_prepare_failure_is_fatal():
    w = FakeWorkloader(prepare_error=ValueError("disk full"))
    with pytest.raises(RuntimeError, match="a fatal occurred when preparing data: disk full"):
        execute_workload(w, 2, "prepare", RunOptions())
    assert w.count("check_prepare") == 0


def test_execute_workload_run_reports_failures(capsys):
    w = FakeWorkloader(run_error=ValueError("boom"))
    execute_workload(w, 2, "run", RunOptions(total_count=2, silence=True))
    assert w.count("run") == 2
    assert capsys.readouterr().out.count("execute run failed, err boom") == 2


def test_execute_workload_outputs_periodically():
    w = FakeWorkloader(run_delay=0.02)
    execute_workload(w, 1, "run", RunOptions(total_count=5, output_interval=0.005))
    assert w.count("run") == 5
    assert w.count("output_stats") >= 1
    assert all(c[1] is False for c in w.calls if c[0] == "output_stats")