"""Drive a workload's phases from a set of worker threads."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from .workload import Workloader

_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class RunOptions:
    """How workers run: counts, error handling and reporting interval in seconds."""

    total_count: int = 0
    drop_data: bool = False
    ignore_error: bool = False
    silence: bool = False
    output_interval: float = 10.0
    no_check: bool = False


def _now() -> str:
    return time.strftime(_TIME_FORMAT)


def _run_threads(target: Callable[[int], None], count: int) -> None:
    workers = [threading.Thread(target=target, args=(index,)) for index in range(count)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()


def check_prepare(
    workloader: Workloader,
    threads: int,
    options: Optional[RunOptions] = None,
    stop: Optional[threading.Event] = None,
) -> None:
    """Check the prepared data from ``threads`` workers, reporting failures.

    Nothing is checked once ``stop`` is set.
    """
    options = options or RunOptions()
    if workloader.name() == "tpcc-csv":
        print("Skip preparing checking. Please load CSV data into database and check later.")
        return
    if workloader.name() == "tpcc" and options.no_check:
        return
    if stop is not None and stop.is_set():
        return

    def worker(index: int) -> None:
        state = workloader.init_thread(index)
        try:
            workloader.check_prepare(state, index)
        except Exception as err:
            print(f"check prepare failed, err {err}")
        finally:
            workloader.cleanup_thread(state, index)

    _run_threads(worker, threads)


def execute(
    workloader: Workloader,
    action: str,
    threads: int,
    index: int,
    options: Optional[RunOptions] = None,
    stop: Optional[threading.Event] = None,
) -> None:
    """Run one worker's share of ``action``; raises the first unignored error.

    For ``run`` each worker runs ``total_count // threads`` units, or runs
    until ``stop`` is set when that share is not positive.
    """
    options = options or RunOptions()
    stop = stop if stop is not None else threading.Event()
    count = options.total_count // threads

    state = workloader.init_thread(index)
    try:
        if action == "prepare":
            if options.drop_data:
                workloader.cleanup(state, index)
            workloader.prepare(state, index)
            return
        if action == "cleanup":
            workloader.cleanup(state, index)
            return
        if action == "check":
            workloader.check(state, index)
            return

        dump_enabled = workloader.is_plan_replayer_dump_enabled()
        if dump_enabled:
            workloader.prepare_plan_replayer_dump()
        try:
            _run_loop(workloader, state, action, index, count, options, stop)
        finally:
            if dump_enabled:
                try:
                    workloader.finish_plan_replayer_dump()
                except Exception as err:
                    print(f"[{_now()}] dump plan replayer failed, err{err}")
    finally:
        workloader.cleanup_thread(state, index)


def _run_loop(workloader, state, action, index, count, options, stop) -> None:
    done = 0
    while count <= 0 or done < count:
        done += 1
        error: Optional[Exception] = None
        try:
            workloader.run(state, index)
        except Exception as err:
            error = err
        if stop.is_set():
            return
        if error is not None:
            if not options.silence:
                print(f"[{_now()}] execute {action} failed, err {error}")
            if not options.ignore_error:
                raise error


def execute_workload(
    workloader: Workloader,
    threads: int,
    action: str,
    options: Optional[RunOptions] = None,
    stop: Optional[threading.Event] = None,
) -> None:
    """Run ``action`` on ``threads`` workers while printing periodic statistics.

    A failure during ``prepare`` is fatal and raised once all workers are
    done; other failures are reported. After ``prepare`` the data is checked.
    """
    options = options or RunOptions()
    stop = stop if stop is not None else threading.Event()
    finished = threading.Event()

    def report() -> None:
        while not finished.wait(options.output_interval):
            if stop.is_set():
                return
            workloader.output_stats(False)

    reporter = threading.Thread(target=report, daemon=True)
    reporter.start()

    prepare_errors: List[BaseException] = []
    errors_lock = threading.Lock()

    def worker(index: int) -> None:
        try:
            execute(workloader, action, threads, index, options, stop)
        except Exception as err:
            if action == "prepare":
                with errors_lock:
                    prepare_errors.append(err)
                return
            print(f"execute {action} failed, err {err}")

    try:
        _run_threads(worker, threads)
        if prepare_errors:
            err = prepare_errors[0]
            raise RuntimeError(f"a fatal occurred when preparing data: {err}") from err
        if action == "prepare":
            check_prepare(workloader, threads, options, stop)
    finally:
        finished.set()
        reporter.join()