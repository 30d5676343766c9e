# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-02-10
# Description: AppContainer.py
# -----------------------------------------------------------------------------
from typing import Optional

import settings
from chat.OpenAIChat import OpenAIChat
from config.Config import Config
from embedding.OpenAIEmbedder import OpenAIEmbedder
from services.HealthService import HealthService
from services.HistoryAggregator import HistoryAggregator
from services.KeywordExtractor import KeywordExtractor
from services.NoteVectorizer import NoteVectorizer
from services.ProgramMatcher import ProgramMatcher
from services.RecommendationComposer import RecommendationComposer
from services.RecommendationService import RecommendationService
from store.SupabaseClient import create_supabase_client
from store.SupabaseNoteStore import SupabaseNoteStore
from store.SupabaseRecommendationStore import SupabaseRecommendationStore
from utility.logging_utils import get_class_logger
from vectorstore.ChromaVectorIndex import ChromaVectorIndex


class AppContainer:
    """
    Owns heavy object instantiation and application wiring.
    Built once on first use (see api.dependencies.get_container).
    """

    def __init__(self, cfg: Optional[Config] = None) -> None:
        self.logger = get_class_logger(self.__class__)

        # Configuration
        self.cfg = cfg or Config.from_env()
        self.logger.info("Building AppContainer: %s", self.cfg.summary())

        # Core infrastructure
        self.embedder = OpenAIEmbedder(cfg=self.cfg, dimension=settings.EMBEDDING_DIMENSION)
        self.openai_chat = OpenAIChat(cfg=self.cfg)

        self.program_index = ChromaVectorIndex(
            cfg=self.cfg,
            collection_name=settings.PROGRAM_COLLECTION,
            dimension=settings.EMBEDDING_DIMENSION,
        )
        self.note_embedding_index = ChromaVectorIndex(
            cfg=self.cfg,
            collection_name=settings.NOTE_EMBEDDING_COLLECTION,
            dimension=settings.EMBEDDING_DIMENSION,
            client=self.program_index.client,
        )

        # Supabase-backed stores
        self.supabase = create_supabase_client(self.cfg)
        self.note_store = SupabaseNoteStore(
            client=self.supabase,
            embedding_index=self.note_embedding_index,
        )
        self.recommendation_store = SupabaseRecommendationStore(client=self.supabase)

        # Recommendation pipeline
        self.vectorizer = NoteVectorizer(embedder=self.embedder)
        self.aggregator = HistoryAggregator(note_store=self.note_store, vectorizer=self.vectorizer)
        self.matcher = ProgramMatcher(index=self.program_index, embedder=self.embedder)
        self.keyword_extractor = KeywordExtractor(chat_client=self.openai_chat)
        self.composer = RecommendationComposer(
            recommendation_store=self.recommendation_store,
            chat_client=self.openai_chat,
        )

        self.recommendation_service = RecommendationService(
            aggregator=self.aggregator,
            matcher=self.matcher,
            keyword_extractor=self.keyword_extractor,
            composer=self.composer,
            recommendation_store=self.recommendation_store,
        )

        self.health_service = HealthService(
            program_index=self.program_index,
            note_store=self.note_store,
            recommendation_store=self.recommendation_store,
            embedder=self.embedder,
            chat_client=self.openai_chat,
        )
