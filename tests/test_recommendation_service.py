# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: test_recommendation_service.py
# -----------------------------------------------------------------------------
import json

import pytest

from fakes import (
    FakeChat,
    FakeEmbedder,
    FakeSupabaseClient,
    FakeVectorIndex,
    InMemoryNoteStore,
    fixed_clock,
    make_note,
    program_metadata,
    unit,
)
from recommendation.RecommendationRecord import RecommendationRecord
from services.HistoryAggregator import HistoryAggregator
from services.KeywordExtractor import KeywordExtractor
from services.NoteVectorizer import NoteVectorizer
from services.ProgramMatcher import ProgramMatcher
from services.RecommendationComposer import FALLBACK_RATIONALE, RecommendationComposer
from services.RecommendationService import (
    NOT_ENOUGH_HISTORY,
    SAVE_WARNING,
    RecommendationService,
    flatten_programs,
    focus_areas,
)
from store.SupabaseRecommendationStore import SupabaseRecommendationStore


class Harness:
    def __init__(self, notes=None, chat_answers=None, chat_error=None):
        self.embedder = FakeEmbedder(
            dimension=4,
            mapping={"cook": unit(4, 0), "social": unit(4, 1), "garden": unit(4, 2)},
        )
        self.note_store = InMemoryNoteStore(notes or [])

        self.index = FakeVectorIndex()
        self.index.add("cook", unit(4, 0), program_metadata("Cooking Basics", category="Daily Living"),
                       document="cooking kitchen meal preparation")
        self.index.add("social", unit(4, 1), program_metadata("Social Club", category="Social"),
                       document="social group communication")
        self.index.add("garden", unit(4, 2), program_metadata("Garden Crew", category="Outdoors"),
                       document="garden plants outdoors")

        self.supabase = FakeSupabaseClient()
        self.rec_store = SupabaseRecommendationStore(client=self.supabase)
        self.chat = FakeChat(answers=chat_answers or [], error=chat_error)

        self.service = RecommendationService(
            aggregator=HistoryAggregator(
                note_store=self.note_store,
                vectorizer=NoteVectorizer(embedder=self.embedder),
                clock=fixed_clock,
            ),
            matcher=ProgramMatcher(index=self.index, embedder=self.embedder),
            keyword_extractor=KeywordExtractor(chat_client=self.chat),
            composer=RecommendationComposer(recommendation_store=self.rec_store, chat_client=self.chat),
            recommendation_store=self.rec_store,
        )

    @property
    def saved_rows(self):
        return self.supabase.tables.get("program_recommendations", [])


# -----------------------------------------------------------------------------
# Adaptive
# -----------------------------------------------------------------------------
def test_adaptive_recommendations_end_to_end():
    notes = [
        make_note("n1", 6, summary="cook pasta", activity="Cooking", mood="calm", participation="low"),
        make_note("n2", 4, summary="cook rice", activity="Cooking", mood="calm", participation="low"),
        make_note("n3", 2, summary="social lunch", activity="Social", mood="happy", participation="high"),
        make_note("n4", 1, summary="cook soup", activity="Cooking", mood="happy", participation="high"),
    ]
    h = Harness(notes, chat_answers=["Focus on Cooking Basics next."])

    out = h.service.get_adaptive_recommendations("member-1", window_days=21, top_k=2)

    assert [p["id"] for p in out["recommendations"]] == ["cook", "social"]
    assert out["recommendations"][0]["similarity"] == pytest.approx(0.9487, abs=1e-3)
    assert out["trend"]["direction"] == "improving"
    assert out["focus_areas"] == ["Daily Living", "Social"]
    assert out["rationale"] == "Focus on Cooking Basics next."
    assert out["notes_considered"] == 4
    assert out["notes_skipped"] == 0
    assert out["partial"] is False
    assert out["window_days"] == 21
    assert out["error"] is None

    assert len(h.saved_rows) == 1
    assert h.saved_rows[0]["keywords"] == ["adaptive:21d"]
    assert h.saved_rows[0]["note_id"] is None


def test_adaptive_without_notes_short_circuits():
    h = Harness([])

    out = h.service.get_adaptive_recommendations("member-1")

    assert out["recommendations"] == []
    assert out["rationale"] == NOT_ENOUGH_HISTORY
    assert out["trend"]["direction"] == "stable"
    assert out["notes_considered"] == 0
    assert h.index.query_calls == []
    assert h.chat.calls == []
    assert h.saved_rows == []


def test_adaptive_counts_skipped_notes():
    notes = [make_note("good", 2, summary="cook"), make_note("bad", 1, summary="")]
    h = Harness(notes, chat_answers=["ok"])

    out = h.service.get_adaptive_recommendations("member-1", top_k=1)

    assert out["notes_considered"] == 1
    assert out["notes_skipped"] == 1
    assert [p["id"] for p in out["recommendations"]] == ["cook"]


def test_adaptive_index_failure_is_reported():
    h = Harness([make_note("n1", 1, summary="cook")], chat_answers=["ok"])
    h.index.fail_query = True

    out = h.service.get_adaptive_recommendations("member-1")

    assert out["recommendations"] == []
    assert "index unavailable" in out["error"]
    assert h.saved_rows == []


def test_adaptive_rationale_falls_back_when_chat_fails():
    h = Harness([make_note("n1", 1, summary="cook")], chat_error=RuntimeError("down"))

    out = h.service.get_adaptive_recommendations("member-1")

    assert out["rationale"] == FALLBACK_RATIONALE
    assert out["recommendations"]


def test_adaptive_save_failure_surfaces_warning():
    h = Harness([make_note("n1", 1, summary="cook")], chat_answers=["ok"])
    h.supabase.fail_tables.add("program_recommendations")

    out = h.service.get_adaptive_recommendations("member-1")

    assert out["recommendations"]
    assert out["warning"] == SAVE_WARNING
    assert "unavailable" in out["save_error"]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"member_id": ""},
        {"member_id": "  "},
        {"member_id": "m", "window_days": 0},
        {"member_id": "m", "top_k": 0},
    ],
)
def test_adaptive_rejects_bad_input(kwargs):
    h = Harness([])
    with pytest.raises(ValueError):
        h.service.get_adaptive_recommendations(**kwargs)
    assert h.index.query_calls == []


# -----------------------------------------------------------------------------
# Note-level
# -----------------------------------------------------------------------------
def test_note_suggestions_with_member_are_persisted():
    h = Harness(chat_answers=[json.dumps({"keywords": ["cooking", "kitchen"]})])

    out = h.service.get_note_level_suggestions(
        "Practiced cooking in the kitchen.",
        summary_text="Cooking went well",
        member_id="member-1",
        note_id="note-1",
        session_date="2026-02-10T10:00:00+00:00",
    )

    assert out["keywords"] == ["cooking", "kitchen"]
    assert out["programs"][0]["id"] == "cook"
    assert out["recommendation_id"] == h.saved_rows[0]["id"]
    assert out["error"] is None
    assert h.saved_rows[0]["note_id"] == "note-1"
    assert h.saved_rows[0]["keywords"] == ["cooking", "kitchen"]
    assert "Summary: Cooking went well" in h.chat.calls[0]["user_text"]
    # search of 15 candidates -> 2 x 15 requested from the index
    assert h.index.query_calls[0]["top_k"] == 30


def test_note_suggestions_without_member_are_not_persisted():
    h = Harness(chat_answers=[json.dumps({"keywords": ["social", "group"]})])

    out = h.service.get_note_level_suggestions("Social group lunch")

    assert out["programs"][0]["id"] == "social"
    assert out["recommendation_id"] is None
    assert h.saved_rows == []


def test_note_suggestions_return_at_most_ten():
    h = Harness(chat_answers=[json.dumps({"keywords": ["cooking"]})])
    for i in range(20):
        h.index.add(f"extra{i}", unit(4, 3), program_metadata(f"Extra {i}"))

    out = h.service.get_note_level_suggestions("cooking")

    assert len(out["programs"]) == 10


def test_note_suggestions_index_failure_reports_error():
    h = Harness(chat_answers=[json.dumps({"keywords": ["cooking"]})])
    h.index.fail_query = True

    out = h.service.get_note_level_suggestions("cooking", member_id="member-1")

    assert out["programs"] == []
    assert "index unavailable" in out["error"]
    assert h.saved_rows == []


def test_note_suggestions_save_failure_keeps_programs():
    h = Harness(chat_answers=[json.dumps({"keywords": ["cooking"]})])
    h.supabase.fail_tables.add("program_recommendations")

    out = h.service.get_note_level_suggestions("cooking", member_id="member-1")

    assert out["programs"]
    assert out["recommendation_id"] is None
    assert out["warning"] == SAVE_WARNING


def test_note_suggestions_reject_empty_text():
    with pytest.raises(ValueError):
        Harness().service.get_note_level_suggestions("   ")


# -----------------------------------------------------------------------------
# Stored
# -----------------------------------------------------------------------------
def _seed(h: Harness):
    h.rec_store.insert(RecommendationRecord(
        member_id="member-1", note_id="note-1", session_date="2026-02-01T10:00:00+00:00",
        programs=[{"id": "cook", "name": "Cooking Basics", "similarity": 0.7}], keywords=["cooking"],
    ))
    h.rec_store.insert(RecommendationRecord(
        member_id="member-1", note_id="note-2", session_date="2026-02-05T10:00:00+00:00",
        programs=[{"id": "cook", "name": "Cooking Basics", "similarity": 0.9},
                  {"id": "social", "name": "Social Club", "similarity": 0.6}],
        keywords=["cooking", "social"],
    ))
    h.rec_store.insert(RecommendationRecord(
        member_id="member-2", session_date="2026-02-05T10:00:00+00:00",
        programs=[{"id": "garden", "name": "Garden Crew"}],
    ))


def test_stored_recommendations_newest_first_and_flattened():
    h = Harness()
    _seed(h)

    out = h.service.get_stored_recommendations("member-1")

    assert out["count"] == 2
    assert [r["note_id"] for r in out["records"]] == ["note-2", "note-1"]
    assert [(p["id"], p["similarity"]) for p in out["flattened_programs"]] == [("cook", 0.9), ("social", 0.6)]
    assert out["error"] is None


def test_stored_recommendations_filters():
    h = Harness()
    _seed(h)

    by_note = h.service.get_stored_recommendations("member-1", note_id="note-1")
    by_range = h.service.get_stored_recommendations(
        "member-1", start_date="2026-02-01T10:00:00+00:00", end_date="2026-02-01T10:00:00+00:00"
    )
    limited = h.service.get_stored_recommendations("member-1", limit=1)

    assert [r["note_id"] for r in by_note["records"]] == ["note-1"]
    assert [r["note_id"] for r in by_range["records"]] == ["note-1"]
    assert [r["note_id"] for r in limited["records"]] == ["note-2"]


def test_stored_recommendations_read_failure_returns_error():
    h = Harness()
    h.supabase.fail_tables.add("program_recommendations")

    out = h.service.get_stored_recommendations("member-1")

    assert out["records"] == []
    assert out["count"] == 0
    assert "unavailable" in out["error"]


@pytest.mark.parametrize("member_id, limit", [("", 10), ("member-1", 0)])
def test_stored_recommendations_reject_bad_input(member_id, limit):
    with pytest.raises(ValueError):
        Harness().service.get_stored_recommendations(member_id, limit=limit)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def test_flatten_programs_first_occurrence_wins():
    records = [
        RecommendationRecord(member_id="m", session_date="d2", programs=[{"id": "a", "v": 2}, {"id": "b"}]),
        RecommendationRecord(member_id="m", session_date="d1", programs=[{"id": "a", "v": 1}, {"name": "no id"}]),
    ]
    assert flatten_programs(records) == [{"id": "a", "v": 2}, {"id": "b"}]


def test_focus_areas_are_distinct_and_capped():
    snaps = [{"category": c} for c in ["A", "B", "A", "C", "D", "E", "F", None]]
    assert focus_areas(snaps) == ["A", "B", "C", "D", "E"]
