"""Unit tests for persistence.gateway and core.schema."""

import copy
import json
from datetime import datetime, timezone

import requests
from signal_desk.core.errors import MalformedImport
from signal_desk.core.schema import record_from_dict, record_to_dict
from signal_desk.core.types import ClosedTrade, Collection, Signal
from signal_desk.persistence import gateway
from signal_desk.persistence.gateway import (
    export_collection,
    import_collection,
    load_collection,
    write_collection,
)
from signal_desk.store.record_store import RecordStore

RAW_SIGNALS = [
    {
        "ticker": "aapl",
        "exchange": "NASDAQ",
        "name": "Apple",
        "buy_price": "180.5",
        "buy_amount": 10,
        "type": "sell",
        "created_at": "2024-05-01T10:00:00.000Z",
        "notes": "growth, tech",
        "sector": "IT",
    },
    {"ticker": "MSFT", "buy_price": "", "created_at": "whenever"},
]


def _store():
    store = RecordStore()
    store.add_signal(Signal(ticker="AAPL", buy_price=1.0, buy_amount=2.0, notes="a"))
    store.add_closed_trade(ClosedTrade(ticker="TSLA", close_price=3.0, profit=4.0))
    return store


def test_record_from_dict_coerces_fields():
    s = record_from_dict(RAW_SIGNALS[0])
    assert isinstance(s, Signal)
    assert s.ticker == "AAPL"
    assert s.buy_price == 180.5
    assert s.action == "sell"
    assert s.created_at == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)
    assert s.extra == {"type": "sell", "sector": "IT"}
    m = record_from_dict(RAW_SIGNALS[1])
    assert m.buy_price is None
    assert m.created_at is None
    assert m.action == "buy"


def test_record_to_dict_omits_empty_closing_fields_on_signals():
    out = record_to_dict(record_from_dict(RAW_SIGNALS[0]))
    assert "close_price" not in out
    assert out["created_at"] == "2024-05-01T10:00:00.000Z"
    assert out["sector"] == "IT"
    closed = record_to_dict(ClosedTrade(ticker="X"))
    assert closed["close_price"] is None


def test_load_collection_from_file(tmp_path):
    path = tmp_path / "signals.json"
    path.write_text(json.dumps(RAW_SIGNALS), encoding="utf-8")
    records = load_collection(path)
    assert [r.ticker for r in records] == ["AAPL", "MSFT"]
    closed = load_collection(path, closed=True)
    assert all(isinstance(r, ClosedTrade) for r in closed)


def test_load_collection_failures_return_empty(tmp_path):
    assert load_collection(tmp_path / "missing.json") == []
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    assert load_collection(bad) == []
    obj = tmp_path / "obj.json"
    obj.write_text('{"ticker": "AAPL"}', encoding="utf-8")
    assert load_collection(obj) == []


class _Resp:
    def __init__(self, status_code, text):
        self.status_code = status_code
        self.text = text


def test_load_collection_from_url(monkeypatch):
    calls = []

    def fake_get(url, timeout=None, headers=None):
        calls.append(url)
        return _Resp(200, json.dumps(RAW_SIGNALS[:1]))

    monkeypatch.setattr(gateway.requests, "get", fake_get)
    records = load_collection("https://example.com/signals.json")
    assert calls == ["https://example.com/signals.json"]
    assert records[0].ticker == "AAPL"


def test_load_collection_url_errors(monkeypatch):
    monkeypatch.setattr(gateway.requests, "get", lambda *a, **k: _Resp(404, "nope"))
    assert load_collection("https://example.com/signals.json") == []

    def boom(*a, **k):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(gateway.requests, "get", boom)
    assert load_collection("http://example.com/signals.json") == []


def test_import_non_array_leaves_store_unchanged():
    store = _store()
    signals_before = copy.deepcopy(store.signals)
    closed_before = copy.deepcopy(store.closed_trades)
    signals_ref = store.signals
    for text in ('{"ticker": "X"}', "not json", "42"):
        r = import_collection(store, Collection.SIGNALS, text)
        assert r.ok is False
        assert isinstance(r.error, MalformedImport)
    assert store.signals is signals_ref
    assert store.signals == signals_before
    assert store.closed_trades == closed_before


def test_import_replaces_whole_collection():
    store = _store()
    r = import_collection(store, "closed", json.dumps([{"ticker": "NVDA", "profit": 5}]))
    assert r.ok is True
    assert r.value == 1
    assert [t.ticker for t in store.closed_trades] == ["NVDA"]
    assert isinstance(store.closed_trades[0], ClosedTrade)
    assert [s.ticker for s in store.signals] == ["AAPL"]


def test_export_import_round_trip():
    source = RecordStore()
    import_collection(source, Collection.SIGNALS, json.dumps(RAW_SIGNALS))
    exported = export_collection(source.signals)
    assert exported.startswith("[\n  {")
    target = RecordStore()
    assert import_collection(target, Collection.SIGNALS, exported).ok
    assert target.signals == source.signals
    assert json.loads(export_collection(target.signals)) == json.loads(exported)


def test_write_collection(tmp_path):
    store = _store()
    path = tmp_path / "out" / "closed_trades.json"
    r = write_collection(path, store.closed_trades)
    assert r.ok is True
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data[0]["ticker"] == "TSLA"
    assert data[0]["profit"] == 4.0


def test_round_trip_of_records_added_through_store():
    source = RecordStore()
    assert source.add_signal(Signal(ticker="NVDA", buy_price=900.0, buy_amount=2.0, notes="ai")).ok
    assert source.signals[0].created_at.microsecond % 1000 == 0
    target = RecordStore()
    assert import_collection(target, Collection.SIGNALS, export_collection(source.signals)).ok
    assert target.signals == source.signals
