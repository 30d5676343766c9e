# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: test_supabase_stores.py
# -----------------------------------------------------------------------------
from datetime import timedelta

import pytest

from embedding.NoteEmbedding import NoteEmbedding, TrendScores
from fakes import NOW, FakeSupabaseClient, FakeVectorIndex
from recommendation.RecommendationRecord import RecommendationRecord
from store.SupabaseNoteStore import SupabaseNoteStore
from store.SupabaseRecommendationStore import SupabaseRecommendationStore


def _note_row(note_id, days_ago, member_id="member-1", **structured):
    ts = (NOW - timedelta(days=days_ago)).isoformat()
    payload = {"summary": f"summary {note_id}", "activityType": "Cooking"}
    payload.update(structured)
    return {"id": note_id, "member_id": member_id, "session_date": ts, "created_at": ts,
            "structured_json": payload}


def _note_store(rows=None, index=None):
    client = FakeSupabaseClient({"notes": rows or []})
    index = index or FakeVectorIndex(dimension=3)
    return SupabaseNoteStore(client=client, embedding_index=index), client, index


def _embedding(note_id="n1"):
    return NoteEmbedding(
        note_id=note_id,
        member_id="member-1",
        vector=[0.1, 0.2, 0.3],
        trend_scores=TrendScores(mood=2, prompt=1, participation=3),
        created_at=NOW,
        session_timestamp=NOW - timedelta(days=1),
        activity_type="Cooking",
        mood="happy",
        participation="high",
        summary="Made soup",
    )


# -----------------------------------------------------------------------------
# Notes
# -----------------------------------------------------------------------------
def test_list_notes_filters_member_and_window():
    rows = [
        _note_row("recent", 2),
        _note_row("old", 40),
        _note_row("other", 1, member_id="member-2"),
    ]
    store, _, _ = _note_store(rows)

    notes = store.list_notes("member-1", NOW - timedelta(days=21))

    assert [n.note_id for n in notes] == ["recent"]
    assert notes[0].activity_type == "Cooking"


def test_list_notes_orders_by_session_date():
    store, _, _ = _note_store([_note_row("b", 1), _note_row("a", 5), _note_row("c", 3)])

    notes = store.list_notes("member-1", NOW - timedelta(days=21))

    assert [n.note_id for n in notes] == ["a", "c", "b"]


def test_list_notes_skips_malformed_rows():
    bad = {"id": "bad", "member_id": "member-1", "session_date": "not a date", "structured_json": {}}
    store, _, _ = _note_store([_note_row("good", 1), bad])

    notes = store.list_notes("member-1", NOW - timedelta(days=21))

    assert [n.note_id for n in notes] == ["good"]


def test_list_notes_propagates_client_errors():
    store, client, _ = _note_store()
    client.fail_tables.add("notes")
    with pytest.raises(RuntimeError):
        store.list_notes("member-1", NOW - timedelta(days=21))


def test_embedding_cache_round_trip():
    store, _, index = _note_store()

    assert store.put_cached_embedding(_embedding()) is True
    cached = store.get_cached_embedding("n1")

    assert index.items["n1"]["document"] == "Made soup"
    assert cached.vector == [0.1, 0.2, 0.3]
    assert cached.trend_scores == TrendScores(mood=2.0, prompt=1.0, participation=3.0)
    assert cached.session_timestamp == NOW - timedelta(days=1)
    assert cached.activity_type == "Cooking"


def test_cache_miss_returns_none():
    store, _, _ = _note_store()
    assert store.get_cached_embedding("missing") is None


def test_cached_entry_without_scores_is_a_miss():
    store, _, index = _note_store()
    index.add("n1", [0.1, 0.2, 0.3], {"note_id": "n1", "member_id": "member-1"})

    assert store.get_cached_embedding("n1") is None


def test_cache_write_failure_returns_false():
    index = FakeVectorIndex(dimension=3)
    index.fail_upsert = True
    store, _, _ = _note_store(index=index)

    assert store.put_cached_embedding(_embedding()) is False


def test_note_store_connection_check():
    store, client, _ = _note_store()
    assert store.test_connection() is True
    client.fail_tables.add("notes")
    assert store.test_connection() is False


# -----------------------------------------------------------------------------
# Recommendations
# -----------------------------------------------------------------------------
def test_recommendation_insert_and_list_round_trip():
    client = FakeSupabaseClient()
    store = SupabaseRecommendationStore(client=client)
    record = RecommendationRecord(
        member_id="member-1",
        note_id=None,
        session_date="2026-02-10T10:00:00+00:00",
        programs=[{"id": "cook", "name": "Cooking Basics", "similarity": 0.8}],
        keywords=["adaptive:21d"],
    )

    record_id = store.insert(record)
    fetched = store.list_records("member-1")

    assert len(fetched) == 1
    assert fetched[0].id == record_id
    assert fetched[0].note_id is None
    assert fetched[0].programs == record.programs
    assert fetched[0].keywords == ["adaptive:21d"]
    assert fetched[0].created_at


def test_recommendation_insert_without_returned_id_raises():
    client = FakeSupabaseClient()
    client.empty_insert = True
    with pytest.raises(RuntimeError):
        SupabaseRecommendationStore(client=client).insert(
            RecommendationRecord(member_id="m", session_date="2026-02-10", programs=[])
        )


def test_record_from_row_tolerates_loose_json():
    record = RecommendationRecord.from_row(
        {"id": 7, "member_id": "m", "session_date": "2026-02-10", "programs": [{"id": "a"}, "junk"],
         "keywords": None}
    )
    assert record.id == "7"
    assert record.programs == [{"id": "a"}]
    assert record.keywords == []
