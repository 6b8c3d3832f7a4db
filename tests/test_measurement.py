import random
from datetime import timedelta

import pytest

from tpcbench.measurement import Histogram, Measurement


def test_hist_from_source_case():
    rng = random.Random(7)
    h = Histogram(0.001, 20 * 60, 1)
    values_ms = [rng.randrange(15020) for _ in range(10000)]
    for ms in values_ms:
        h.measure(ms / 1000)
    h.measure(9 * 60)
    h.measure(8 * 60)

    summary = h.summary()
    assert len(summary) == 11
    assert summary[1] == "10002"

    info = h.get_info()
    assert info.count == 10002
    assert info.p50 <= info.p90 <= info.p95 <= info.p99 <= info.p999 <= info.max
    assert 9 * 60 * 1000 <= info.max <= 9 * 60 * 1000 * 1.07
    assert info.sum == pytest.approx(sum(values_ms) + 17 * 60 * 1000)


def test_quantile_precision_with_three_sig_figs():
    h = Histogram(0.0001, 20 * 60, 3)
    h.measure(0.123456)
    target = 123_456_000
    for q in (0, 50, 100):
        assert abs(h.value_at_quantile(q) - target) <= target * 0.001


def test_empty_histogram():
    h = Histogram(0.001, 16, 1)
    assert h.empty()
    assert h.value_at_quantile(50) == 0
    assert h.get_info().count == 0
    h.measure(0.002)
    assert not h.empty()


def test_values_are_clamped_but_sum_is_raw():
    h = Histogram(0.001, 1.0, 2)
    h.measure(5.0)
    h.measure(0.0)
    info = h.get_info()
    assert info.sum == pytest.approx(5000.0)
    assert h.value_at_quantile(100) >= 1_000_000_000 * 0.99
    assert h.value_at_quantile(100) <= 1_000_000_000 * 1.01
    assert h.value_at_quantile(0) >= 1_000_000 * 0.5


def test_timedelta_latency():
    h = Histogram(0.001, 16, 3)
    h.measure(timedelta(milliseconds=250))
    assert h.get_info().sum == pytest.approx(250.0)


def test_invalid_sig_figs():
    with pytest.raises(ValueError):
        Histogram(0.001, 16, 0)
    with pytest.raises(ValueError):
        Histogram(0.001, 16, 6)


def test_measurement_creates_paired_histograms():
    m = Measurement()
    m.measure("NEW_ORDER", 0.01)
    assert set(m.summary_histograms) == {"NEW_ORDER", "NEW_ORDER_ERR"}
    assert set(m.current_histograms) == {"NEW_ORDER", "NEW_ORDER_ERR"}
    assert not m.summary_histograms["NEW_ORDER"].empty()
    assert m.summary_histograms["NEW_ORDER_ERR"].empty()


def test_measurement_error_goes_to_err_histogram():
    m = Measurement()
    m.measure("q1", 0.01, RuntimeError("boom"))
    assert m.summary_histograms["q1"].empty()
    assert m.summary_histograms["q1_ERR"].get_info().count == 1
    assert sorted(m.op_names()) == ["q1", "q1_ERR"]


def test_warm_up_drops_measurements():
    m = Measurement()
    m.enable_warm_up(True)
    assert not m.is_warm_up_finished()
    m.measure("q1", 0.01)
    assert m.summary_histograms == {}
    m.enable_warm_up(False)
    assert m.is_warm_up_finished()
    m.measure("q1", 0.01)
    assert m.summary_histograms["q1"].get_info().count == 1


def test_take_current_resets_interval_only():
    m = Measurement()
    m.measure("q1", 0.01)
    taken = m.take_current()
    assert taken["q1"].get_info().count == 1
    assert m.current_histograms == {}
    assert m.summary_histograms["q1"].get_info().count == 1


def test_output_prefixes():
    m = Measurement(min_latency=0.0001, max_latency=1200, sig_figs=3)
    m.measure("q1", 0.01)
    m.measure("q1", 0.02)
    calls = []

    def collect(style, prefix, histograms):
        calls.append((style, prefix, {k: v.get_info().count for k, v in histograms.items()}))

    m.output(False, "plain", collect)
    assert m.current_histograms == {}
    assert m.summary_histograms["q1"].get_info().count == 2

    m.output(True, "json", collect)
    assert sorted(m.op_names()) == ["q1", "q1_ERR"]

    m.output(False, "plain", collect)
    assert m.current_histograms == {}

    assert calls[0] == ("plain", "[Current] ", {"q1": 2, "q1_ERR": 0})
    assert calls[1] == ("json", "[Summary] ", {"q1": 2, "q1_ERR": 0})
    assert calls[2] == ("plain", "[Current] ", {})