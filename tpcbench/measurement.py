"""Latency histograms and per-operation measurement."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Dict, List, Optional, Union

from .output import float_to_one_string, int_to_string

Latency = Union[float, int, timedelta]

DEFAULT_SIG_FIGS = 1
DEFAULT_MIN_LATENCY = 0.001
DEFAULT_MAX_LATENCY = 16.0


def _to_nanos(latency: Latency) -> int:
    if isinstance(latency, timedelta):
        return (
            latency.days * 86_400_000_000_000
            + latency.seconds * 1_000_000_000
            + latency.microseconds * 1_000
        )
    return int(round(latency * 1e9))


@dataclass(frozen=True)
class HistInfo:
    """A snapshot of a histogram; latencies in milliseconds, elapsed in seconds."""

    elapsed: float
    sum: float
    count: int
    ops: float
    avg: float
    p50: float
    p90: float
    p95: float
    p99: float
    p999: float
    max: float


class Histogram:
    """A high-dynamic-range latency histogram.

    Latencies are given in seconds (or as ``timedelta``) and stored with
    ``sig_figs`` significant decimal digits of precision. Values outside the
    trackable range are clamped, while the raw sum is kept exactly.
    """

    def __init__(self, min_latency: Latency, max_latency: Latency, sig_figs: int) -> None:
        if not 1 <= sig_figs <= 5:
            raise ValueError("sig_figs must be in [1, 5]")
        lowest = _to_nanos(min_latency)
        highest = _to_nanos(max_latency)
        if highest < 2 * max(lowest, 1):
            raise ValueError("max_latency must be at least twice min_latency")
        self.lowest_trackable = lowest
        self.highest_trackable = highest
        self.sig_figs = sig_figs

        largest_single_unit = 2 * 10 ** sig_figs
        sub_count_mag = (largest_single_unit - 1).bit_length()
        self._sub_half_mag = max(sub_count_mag, 1) - 1
        self._sub_count = 1 << (self._sub_half_mag + 1)
        self._sub_half_count = self._sub_count // 2
        self._unit_mag = max(max(lowest, 1).bit_length() - 1, 0)
        self._sub_mask = (self._sub_count - 1) << self._unit_mag

        smallest_untrackable = self._sub_count << self._unit_mag
        buckets = 1
        while smallest_untrackable < highest:
            smallest_untrackable <<= 1
            buckets += 1
        self._counts = [0] * ((buckets + 1) * self._sub_half_count)

        self._lock = threading.Lock()
        self._total = 0
        self._sum = 0
        self._start = time.monotonic()

    def _bucket_index(self, v: int) -> int:
        return (v | self._sub_mask).bit_length() - self._unit_mag - (self._sub_half_mag + 1)

    def _sub_bucket_index(self, v: int, bucket: int) -> int:
        return v >> (bucket + self._unit_mag)

    def _counts_index(self, v: int) -> int:
        bucket = self._bucket_index(v)
        sub = self._sub_bucket_index(v, bucket)
        return ((bucket + 1) << self._sub_half_mag) + sub - self._sub_half_count

    def _value_at_index(self, index: int) -> int:
        bucket = (index >> self._sub_half_mag) - 1
        sub = (index & (self._sub_half_count - 1)) + self._sub_half_count
        if bucket < 0:
            sub -= self._sub_half_count
            bucket = 0
        return sub << (bucket + self._unit_mag)

    def _range_size(self, v: int) -> int:
        bucket = self._bucket_index(v)
        sub = self._sub_bucket_index(v, bucket)
        if sub >= self._sub_count:
            bucket += 1
        return 1 << (self._unit_mag + bucket)

    def _lowest_equivalent(self, v: int) -> int:
        bucket = self._bucket_index(v)
        return self._sub_bucket_index(v, bucket) << (bucket + self._unit_mag)

    def _highest_equivalent(self, v: int) -> int:
        return self._lowest_equivalent(v) + self._range_size(v) - 1

    def _median_equivalent(self, v: int) -> int:
        return self._lowest_equivalent(v) + (self._range_size(v) >> 1)

    def measure(self, latency: Latency) -> None:
        """Record one latency."""
        raw = _to_nanos(latency)
        value = min(max(raw, self.lowest_trackable), self.highest_trackable)
        index = self._counts_index(value)
        if not 0 <= index < len(self._counts):
            raise ValueError(f"recording value error: {value} is out of range")
        with self._lock:
            self._counts[index] += 1
            self._total += 1
            self._sum += raw

    def empty(self) -> bool:
        """Whether nothing has been recorded."""
        with self._lock:
            return self._total == 0

    def _quantile(self, quantile: float) -> int:
        if self._total == 0:
            return 0
        quantile = min(quantile, 100.0)
        wanted = int(quantile / 100 * self._total + 0.5)
        running = 0
        for index, count in enumerate(self._counts):
            running += count
            if running >= wanted:
                return self._highest_equivalent(self._value_at_index(index))
            if running >= self._total:
                break
        return 0

    def value_at_quantile(self, quantile: float) -> int:
        """Return the recorded value, in nanoseconds, at a percentile (0-100)."""
        with self._lock:
            return self._quantile(quantile)

    def _mean(self) -> float:
        if self._total == 0:
            return 0.0
        total = sum(
            count * self._median_equivalent(self._value_at_index(index))
            for index, count in enumerate(self._counts)
            if count
        )
        return total / self._total

    def get_info(self) -> HistInfo:
        """Take a snapshot of the recorded latencies."""
        with self._lock:
            elapsed = time.monotonic() - self._start
            count = self._total
            return HistInfo(
                elapsed=elapsed,
                sum=self._sum / 1e6,
                count=count,
                ops=count / elapsed if elapsed > 0 else 0.0,
                avg=int(self._mean()) / 1e6,
                p50=self._quantile(50) / 1e6,
                p90=self._quantile(90) / 1e6,
                p95=self._quantile(95) / 1e6,
                p99=self._quantile(99) / 1e6,
                p999=self._quantile(99.9) / 1e6,
                max=self._quantile(100) / 1e6,
            )

    def summary(self) -> List[str]:
        """Elapsed, count, ops per minute, sum, avg and percentiles as strings."""
        info = self.get_info()
        return [
            float_to_one_string(info.elapsed),
            int_to_string(info.count),
            float_to_one_string(info.ops * 60),
            float_to_one_string(info.sum),
            float_to_one_string(info.avg),
            float_to_one_string(info.p50),
            float_to_one_string(info.p90),
            float_to_one_string(info.p95),
            float_to_one_string(info.p99),
            float_to_one_string(info.p999),
            float_to_one_string(info.max),
        ]


OutputFunc = Callable[[str, str, Dict[str, Histogram]], None]


class Measurement:
    """Per-operation histograms for the current interval and the whole run."""

    def __init__(
        self,
        min_latency: Latency = DEFAULT_MIN_LATENCY,
        max_latency: Latency = DEFAULT_MAX_LATENCY,
        sig_figs: int = DEFAULT_SIG_FIGS,
    ) -> None:
        self.min_latency = min_latency
        self.max_latency = max_latency
        self.sig_figs = sig_figs
        self.current_histograms: Dict[str, Histogram] = {}
        self.summary_histograms: Dict[str, Histogram] = {}
        self._lock = threading.RLock()
        self._warm_up = threading.Event()

    def _new_histogram(self) -> Histogram:
        return Histogram(self.min_latency, self.max_latency, self.sig_figs)

    def _get_hist(self, op: str, error: Optional[BaseException], current: bool) -> Histogram:
        paired = f"{op}_ERR"
        if error is not None:
            op, paired = paired, op
        with self._lock:
            histograms = self.current_histograms if current else self.summary_histograms
            hist = histograms.get(op)
            if hist is None:
                # Create the op and its paired error entry together so rates stay consistent.
                hist = histograms[op] = self._new_histogram()
                histograms.setdefault(paired, self._new_histogram())
            return hist

    def measure(self, op: str, latency: Latency, error: Optional[BaseException] = None) -> None:
        """Record a latency for ``op``, or for ``op_ERR`` when ``error`` is set."""
        if not self.is_warm_up_finished():
            return
        self._get_hist(op, error, True).measure(latency)
        self._get_hist(op, error, False).measure(latency)

    def take_current(self) -> Dict[str, Histogram]:
        """Return the current interval's histograms and start a fresh interval."""
        with self._lock:
            taken, self.current_histograms = self.current_histograms, {}
            return taken

    def op_names(self) -> List[str]:
        """Names of all operations seen during the run."""
        with self._lock:
            return list(self.summary_histograms)

    def output(self, summary_report: bool, output_style: str, output_func: OutputFunc) -> None:
        """Pass either the whole-run or the current-interval histograms to ``output_func``."""
        if summary_report:
            with self._lock:
                output_func(output_style, "[Summary] ", dict(self.summary_histograms))
            return
        current = self.take_current()
        output_func(output_style, "[Current] ", current)

    def enable_warm_up(self, enabled: bool) -> None:
        """Switch warm-up on or off; measurements are dropped during warm-up."""
        if enabled:
            self._warm_up.set()
        else:
            self._warm_up.clear()

    def is_warm_up_finished(self) -> bool:
        """Whether measurements are being recorded."""
        return not self._warm_up.is_set()