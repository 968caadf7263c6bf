"""Tests for the bounded analysis store."""
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from contractshield.errors import NotFound
from contractshield.services.analysis_store import AnalysisRecord, AnalysisStore


_BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _record(n: int) -> AnalysisRecord:
    return AnalysisRecord(
        created_at=_BASE_TIME + timedelta(seconds=n),
        source_label=f"contract-{n}.pdf",
        analysis={"score": n % 101},
    )


def test_put_and_get_round_trip():
    store = AnalysisStore(capacity=20)
    record = _record(1)

    store.put(record)

    assert store.get(record.id) is record
    assert store.get(record.id).analysis == {"score": 1}


def test_get_unknown_id_raises_not_found():
    store = AnalysisStore()

    with pytest.raises(NotFound):
        store.get("missing")


def test_twenty_first_insert_evicts_first():
    store = AnalysisStore(capacity=20)
    records = [_record(n) for n in range(21)]
    for record in records:
        store.put(record)

    recent_ids = [r.id for r in store.list_recent(20)]

    assert len(store) == 20
    assert records[0].id not in recent_ids
    assert recent_ids == [r.id for r in reversed(records[1:])]
    with pytest.raises(NotFound):
        store.get(records[0].id)


def test_reads_do_not_change_eviction_order():
    store = AnalysisStore(capacity=2)
    first, second, third = _record(1), _record(2), _record(3)
    store.put(first)
    store.put(second)

    store.get(first.id)
    store.put(third)

    assert first.id not in store
    assert second.id in store


def test_list_recent_sorts_newest_first_and_truncates():
    store = AnalysisStore()
    for n in (3, 1, 2):
        store.put(_record(n))

    recent = store.list_recent(2)

    assert [r.source_label for r in recent] == ["contract-3.pdf", "contract-2.pdf"]
    assert store.list_recent(0) == []


def test_records_are_immutable_and_ids_unique():
    a = AnalysisRecord(analysis={"score": 1})
    b = AnalysisRecord(analysis={"score": 1})

    assert a.id != b.id
    assert a.source_label == "text"
    with pytest.raises(ValidationError):
        a.source_label = "other"


def test_duplicate_id_rejected():
    store = AnalysisStore()
    record = _record(1)
    store.put(record)

    with pytest.raises(ValueError):
        store.put(record)


def test_to_dict_uses_client_field_names():
    record = _record(5)

    payload = record.to_dict()

    assert payload["id"] == record.id
    assert payload["sourceLabel"] == "contract-5.pdf"
    assert payload["createdAt"].startswith("2025-01-01T00:00:05")
    assert payload["analysis"] == {"score": 5}


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        AnalysisStore(capacity=0)
