# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: HealthService.py
# -----------------------------------------------------------------------------
import logging
from typing import Any, Callable, Dict, Optional

from chat.OpenAIChat import OpenAIChat
from embedding.EmbeddingProvider import EmbeddingProvider
from store.NoteStore import NoteStore
from store.RecommendationStore import RecommendationStore
from utility.logging_utils import get_class_logger
from vectorstore.VectorIndex import VectorIndex


class HealthService:
    """
    Connectivity checks for the collaborators the recommendation engine
    depends on. Model checks (embedding + chat) cost tokens, so they only
    run when asked for.
    """

    def __init__(
        self,
        *,
        program_index: VectorIndex,
        note_store: NoteStore,
        recommendation_store: RecommendationStore,
        embedder: Optional[EmbeddingProvider] = None,
        chat_client: Optional[OpenAIChat] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.program_index = program_index
        self.note_store = note_store
        self.recommendation_store = recommendation_store
        self.embedder = embedder
        self.chat_client = chat_client
        self.logger = logger or get_class_logger(self.__class__)

    def check(self, run_live_models: bool = False) -> Dict[str, Any]:
        self.logger.info("Starting health checks (run_live_models=%s)", run_live_models)

        results: Dict[str, bool] = {
            "program_index": self._run("program_index", self.program_index.test_connection),
            "note_store": self._run("note_store", self.note_store.test_connection),
            "recommendation_store": self._run("recommendation_store", self.recommendation_store.test_connection),
        }

        if run_live_models:
            if self.embedder is not None:
                results["embedding"] = self._run("embedding", self._check_embedding)
            if self.chat_client is not None:
                results["chat"] = self._run("chat", self.chat_client.healthcheck)

        index: Dict[str, Optional[int]] = {"dimension": None, "count": None}
        try:
            stats = self.program_index.describe_stats()
            index = {"dimension": stats.dimension, "count": stats.count}
        except Exception as e:
            self.logger.warning("Program index stats unavailable: %s", e)

        total = len(results)
        passed = sum(1 for ok in results.values() if ok)
        self.logger.info("Health summary: %d total, %d passed, %d failed", total, passed, total - passed)

        return {
            "status": "ok" if passed == total else "error",
            "results": results,
            "summary": {"total": total, "passed": passed, "failed": total - passed},
            "index": index,
        }

    def _check_embedding(self) -> bool:
        vector = self.embedder.embed("healthcheck")
        return len(vector) == self.embedder.dimension

    def _run(self, name: str, fn: Callable[[], bool]) -> bool:
        try:
            ok = bool(fn())
        except Exception as e:
            self.logger.exception("%s check raised an exception: %s", name, e)
            return False

        if ok:
            self.logger.info("%s: PASS", name)
        else:
            self.logger.error("%s: FAIL", name)
        return ok
