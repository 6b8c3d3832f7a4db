"""Per-thread database state and the interface every workload implements."""

from __future__ import annotations

import random
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from .bufalloc import BufAllocator


class Database:
    """A source of DB-API connections.

    ``connect`` is called with no arguments and must return a new connection.
    """

    def __init__(self, connect: Callable[[], Any]) -> None:
        self._connect = connect

    def connect(self) -> Any:
        """Open a new connection."""
        return self._connect()


class TpcState:
    """State owned by one worker thread: a connection, a random source and a buffer."""

    def __init__(self, db: Optional[Database]) -> None:
        self.db = db
        self.conn: Any = db.connect() if db is not None else None
        self.rng = random.Random(time.time_ns())
        self.buf = BufAllocator()

    def ping(self) -> None:
        """Check that the connection still works; raises if it does not."""
        if self.conn is None:
            raise RuntimeError("no database connection")
        cursor = self.conn.cursor()
        try:
            cursor.execute("SELECT 1")
            cursor.fetchall()
        finally:
            cursor.close()

    def refresh_conn(self) -> None:
        """Close the current connection and open a new one."""
        if self.db is None:
            raise RuntimeError("no database to connect to")
        self._close_conn()
        self.conn = self.db.connect()

    def _close_conn(self) -> None:
        if self.conn is not None:
            try:
                self.conn.close()
            except Exception:
                pass

    def close(self) -> None:
        """Close the connection."""
        self._close_conn()
        self.conn = None


class Workloader(ABC):
    """A workload that worker threads drive through its phases."""

    @abstractmethod
    def name(self) -> str:
        """The workload's name."""

    @abstractmethod
    def init_thread(self, thread_id: int) -> Any:
        """Create the state for one worker thread."""

    @abstractmethod
    def cleanup_thread(self, state: Any, thread_id: int) -> None:
        """Release the state of one worker thread."""

    @abstractmethod
    def prepare(self, state: Any, thread_id: int) -> None:
        """Load the workload's data."""

    @abstractmethod
    def check_prepare(self, state: Any, thread_id: int) -> None:
        """Verify the loaded data."""

    @abstractmethod
    def run(self, state: Any, thread_id: int) -> None:
        """Run one unit of work."""

    @abstractmethod
    def cleanup(self, state: Any, thread_id: int) -> None:
        """Remove the workload's data."""

    @abstractmethod
    def check(self, state: Any, thread_id: int) -> None:
        """Check data consistency."""

    @abstractmethod
    def output_stats(self, summary_report: bool) -> None:
        """Print statistics for the current interval or the whole run."""

    @abstractmethod
    def db_name(self) -> str:
        """The name of the database under test."""

    @abstractmethod
    def is_plan_replayer_dump_enabled(self) -> bool:
        """Whether plan replayer dumps are taken before queries."""

    @abstractmethod
    def prepare_plan_replayer_dump(self) -> None:
        """Open the plan replayer archive."""

    @abstractmethod
    def finish_plan_replayer_dump(self) -> None:
        """Close the plan replayer archive."""