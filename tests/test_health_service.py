# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: test_health_service.py
# -----------------------------------------------------------------------------
from fakes import FakeChat, FakeEmbedder, FakeSupabaseClient, FakeVectorIndex, InMemoryNoteStore
from services.HealthService import HealthService
from store.SupabaseRecommendationStore import SupabaseRecommendationStore


class BrokenIndex(FakeVectorIndex):
    def test_connection(self):
        raise RuntimeError("chroma unreachable")

    def describe_stats(self):
        raise RuntimeError("chroma unreachable")


def _service(index=None, embedder=None, chat=None):
    return HealthService(
        program_index=index or FakeVectorIndex(dimension=4),
        note_store=InMemoryNoteStore(),
        recommendation_store=SupabaseRecommendationStore(client=FakeSupabaseClient()),
        embedder=embedder,
        chat_client=chat,
    )


def test_all_checks_pass():
    out = _service().check()

    assert out["status"] == "ok"
    assert out["results"] == {"program_index": True, "note_store": True, "recommendation_store": True}
    assert out["index"] == {"dimension": 4, "count": 0}


def test_live_model_checks_only_when_requested():
    embedder = FakeEmbedder(dimension=4)
    chat = FakeChat(error=RuntimeError("quota"))
    svc = _service(embedder=embedder, chat=chat)

    assert "embedding" not in svc.check()["results"]
    assert embedder.calls == []

    out = svc.check(run_live_models=True)
    assert out["results"]["embedding"] is True
    assert out["results"]["chat"] is False
    assert out["status"] == "error"


def test_raising_check_counts_as_failure():
    out = _service(index=BrokenIndex()).check()

    assert out["results"]["program_index"] is False
    assert out["index"] == {"dimension": None, "count": None}
    assert out["summary"]["failed"] == 1
