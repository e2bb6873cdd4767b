"""Unit tests for views.filters and views.tags."""

from datetime import datetime, timezone

import pytest
from signal_desk.core.types import ClosedTrade, Signal
from signal_desk.views.filters import filter_records, sort_closed_trades, sort_signals
from signal_desk.views.tags import extract_tags, note_tags


def _sig(ticker, created=None, **kw):
    return Signal(ticker=ticker, created_at=created, **kw)


def _day(d):
    return datetime(2024, 1, d, tzinfo=timezone.utc)


def test_extract_tags_sorted_unique():
    records = [_sig("A", notes="growth, tech"), _sig("B", notes="tech, value"), _sig("C")]
    assert extract_tags(records) == ["growth", "tech", "value"]


def test_note_tags_drops_empties_and_keeps_case():
    assert note_tags(" Tech , ,Growth,") == ["Tech", "Growth"]
    assert note_tags(None) == []


def test_filter_empty_query_is_noop():
    records = [_sig("B"), _sig("A")]
    out = filter_records(records, "", "")
    assert out == records
    assert out is not records


def test_filter_query_matches_ticker_name_notes():
    records = [
        _sig("AAPL", name="Apple"),
        _sig("MSFT", name="Microsoft"),
        _sig("XYZ", notes="apple supplier"),
    ]
    assert [r.ticker for r in filter_records(records, "  APP ")] == ["AAPL", "XYZ"]


def test_filter_tag_exact_case_insensitive():
    records = [
        _sig("A", notes="Tech, growth"),
        _sig("B", notes="biotech"),
        _sig("C"),
    ]
    assert [r.ticker for r in filter_records(records, tag="tech")] == ["A"]
    assert filter_records(records, tag="TECH")[0].ticker == "A"


def test_sort_newest_undated_last_stable():
    records = [_sig("U1"), _sig("A", _day(1)), _sig("B", _day(3)), _sig("U2"), _sig("C", _day(3))]
    assert [r.ticker for r in sort_signals(records, "newest")] == ["B", "C", "A", "U1", "U2"]


def test_sort_oldest_is_reverse_of_newest():
    records = [_sig("U1"), _sig("A", _day(1)), _sig("B", _day(3)), _sig("U2"), _sig("C", _day(2))]
    newest = sort_signals(records, "newest")
    oldest = sort_signals(records, "oldest")
    assert oldest == list(reversed(newest))
    assert [r.ticker for r in oldest[:2]] == ["U2", "U1"]


def test_sort_price_and_confidence_missing_as_zero():
    records = [
        _sig("A", buy_price=5.0, confidence_score=80),
        _sig("B"),
        _sig("C", buy_price=-1.0, confidence_score=90),
    ]
    assert [r.ticker for r in sort_signals(records, "price_desc")] == ["A", "B", "C"]
    assert [r.ticker for r in sort_signals(records, "price_asc")] == ["C", "B", "A"]
    assert [r.ticker for r in sort_signals(records, "confidence_desc")] == ["C", "A", "B"]


def test_sort_name_falls_back_to_ticker():
    records = [_sig("ZZZ", name="alpha"), _sig("BBB"), _sig("AAA", name="Charlie")]
    assert [r.ticker for r in sort_signals(records, "name_az")] == ["ZZZ", "BBB", "AAA"]


def test_sort_does_not_mutate_input():
    records = [_sig("A", _day(1)), _sig("B", _day(2))]
    snapshot = list(records)
    sort_signals(records, "newest")
    assert records == snapshot


def test_sort_closed_trades():
    trades = [
        ClosedTrade(ticker="A", profit=10.0),
        ClosedTrade(ticker="B"),
        ClosedTrade(ticker="C", profit=-5.0, name="Beta"),
    ]
    assert [t.ticker for t in sort_closed_trades(trades, "profit_desc")] == ["A", "B", "C"]
    assert [t.ticker for t in sort_closed_trades(trades, "profit_asc")] == ["C", "B", "A"]
    assert [t.ticker for t in sort_closed_trades(trades, "value_az")] == ["A", "B", "C"]
    assert [t.ticker for t in sort_closed_trades(trades, "value_za")] == ["C", "B", "A"]


def test_sort_unknown_key():
    with pytest.raises(ValueError):
        sort_signals([], "random")
    with pytest.raises(ValueError):
        sort_closed_trades([], "newest")


def test_sort_newest_mixes_naive_and_aware_timestamps():
    records = [
        _sig("NAIVE", datetime(2024, 1, 2)),
        _sig("AWARE", _day(1)),
        _sig("LATER", datetime(2024, 1, 3, tzinfo=timezone.utc)),
    ]
    assert [r.ticker for r in sort_signals(records, "newest")] == ["LATER", "NAIVE", "AWARE"]
    assert [r.ticker for r in sort_signals(records, "oldest")] == ["AWARE", "NAIVE", "LATER"]


def test_sort_name_ignores_case():
    records = [_sig("B", name="beta"), _sig("A", name="Alpha"), _sig("C", name="charlie")]
    assert [r.ticker for r in sort_signals(records, "name_az")] == ["A", "B", "C"]
