import pytest

from tpcbench.ch.queries import PLACEHOLDER, QUERIES, get_query, query_names


def test_query_names_are_q1_to_q22_in_order():
    names = query_names()
    assert names == [f"q{i}" for i in range(1, 23)]


def test_query_names_returns_a_fresh_list():
    names = query_names()
    names.append("extra")
    assert "extra" not in query_names()


@pytest.mark.parametrize("name", [f"q{i}" for i in range(1, 23)])
def test_every_query_starts_with_placeholder(name):
    query = get_query(name)
    assert query.lstrip("\n").startswith(PLACEHOLDER)
    assert query.count(PLACEHOLDER) == 1


@pytest.mark.parametrize("name", [f"q{i}" for i in range(1, 23)])
def test_every_query_is_a_select(name):
    assert "select" in get_query(name).lower()


def test_get_query_matches_mapping():
    assert all(get_query(name) == QUERIES[name] for name in query_names())


def test_queries_are_distinct():
    texts = [get_query(name) for name in query_names()]
    assert len(set(texts)) == len(texts)


def test_q15_uses_revenue_view():
    assert "revenue1" in get_query("q15")


def test_q1_reads_order_line():
    query = get_query("q1")
    assert "order_line" in query
    assert "ol_delivery_d > '2007-01-02 00:00:00.000000'" in query


def test_unknown_query_raises_key_error():
    with pytest.raises(KeyError):
        get_query("q23")


def test_mapping_is_read_only():
    original = get_query("q1")
    with pytest.raises(TypeError):
        QUERIES["q1"] = "select 1"  # type: ignore[index]
    assert get_query("q1") == original
    assert "select 1" not in [get_query(name) for name in query_names()]