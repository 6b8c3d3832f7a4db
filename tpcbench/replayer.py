"""Collect plan replayer dumps from the database's status port into a zip archive."""

from __future__ import annotations

import base64
import os
import threading
import time
import urllib.request
import zipfile
from dataclasses import dataclass
from typing import Any, Callable, Optional

_TIME_FORMAT = "%Y-%m-%d-%H:%M:%S"


def _http_get(url: str) -> bytes:
    with urllib.request.urlopen(url) as response:
        return response.read()


@dataclass
class PlanReplayerConfig:
    """Where to fetch dumps from and where to store them."""

    host: str = ""
    status_port: int = 0
    workload_name: str = ""
    plan_replayer_dir: str = ""
    plan_replayer_file_name: str = ""


class PlanReplayerRunner:
    """Fetches plan replayer dumps and stores each one as an entry of one zip file.

    ``fetch`` takes a URL and returns the body; it defaults to an HTTP GET.
    """

    def __init__(
        self,
        config: PlanReplayerConfig,
        fetch: Optional[Callable[[str], bytes]] = None,
    ) -> None:
        self.config = config
        self._fetch = fetch or _http_get
        self._lock = threading.Lock()
        self._zip: Optional[zipfile.ZipFile] = None

    @property
    def archive_path(self) -> str:
        """Path of the zip archive the dumps go into."""
        return os.path.join(
            self.config.plan_replayer_dir, f"{self.config.plan_replayer_file_name}.zip"
        )

    def prepare(self) -> None:
        """Fill in default directory and file name, then create the archive."""
        if not self.config.plan_replayer_dir:
            self.config.plan_replayer_dir = os.getcwd()
        if not self.config.plan_replayer_file_name:
            self.config.plan_replayer_file_name = "plan_replayer_{}_{}".format(
                self.config.workload_name, time.strftime(_TIME_FORMAT)
            )
        self._zip = zipfile.ZipFile(self.archive_path, "w")

    def finish(self) -> None:
        """Close the archive."""
        with self._lock:
            if self._zip is None:
                raise RuntimeError("plan replayer archive is not open")
            self._zip.close()
            self._zip = None

    def dump(self, conn: Any, query: str, query_name: str) -> None:
        """Run a dump statement, fetch the dump it names and store it."""
        token = ""
        try:
            cursor = conn.cursor()
            try:
                cursor.execute(query)
                for row in cursor.fetchall():
                    token = row[0]
            finally:
                cursor.close()
        except Exception as err:
            raise RuntimeError(f"execute query {query} failed {err}") from err

        url = "http://{}:{}/plan_replayer/dump/{}".format(
            self.config.host, self.config.status_port, token
        )
        try:
            data = self._fetch(url)
        except Exception as err:
            raise RuntimeError(
                f"get plan replayer for query {query_name} failed {err}"
            ) from err

        try:
            self.write_entry(data, query_name)
        except Exception as err:
            raise RuntimeError(
                f"dump plan replayer for {query_name} failed {err}"
            ) from err

    def write_entry(self, data: bytes, query_name: str) -> str:
        """Store ``data`` under a unique entry name and return that name."""
        key = base64.urlsafe_b64encode(os.urandom(16)).decode("ascii")
        entry = f"{query_name}_{time.strftime(_TIME_FORMAT)}_{key}.zip"
        with self._lock:
            if self._zip is None:
                raise RuntimeError("plan replayer archive is not open")
            self._zip.writestr(entry, data)
        return entry