# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: SupabaseNoteStore
# -----------------------------------------------------------------------------
import logging
from datetime import datetime
from typing import Any, List, Optional

import settings
from embedding.NoteEmbedding import NoteEmbedding
from note.StructuredNote import StructuredNote
from store.NoteStore import NoteStore
from utility.logging_utils import get_class_logger
from vectorstore.VectorIndex import VectorIndex


class SupabaseNoteStore(NoteStore):
    """
    Notes come from the Supabase `notes` table; note embeddings are cached
    in a separate vector collection keyed by note id.
    """

    NOTE_COLUMNS = "id, member_id, session_date, structured_json, created_at"

    def __init__(
        self,
        *,
        client: Any,
        embedding_index: VectorIndex,
        table: str = settings.NOTES_TABLE,
        logger: logging.Logger | None = None,
    ) -> None:
        self.client = client
        self.embedding_index = embedding_index
        self.table = table
        self.logger = logger or get_class_logger(self.__class__)

    def test_connection(self) -> bool:
        try:
            self.client.table(self.table).select("id").limit(1).execute()
            return True
        except Exception as e:
            self.logger.error("Supabase notes table '%s' unreachable: %s", self.table, e)
            return False

    def list_notes(self, member_id: str, since: datetime) -> List[StructuredNote]:
        res = (
            self.client.table(self.table)
            .select(self.NOTE_COLUMNS)
            .eq("member_id", member_id)
            .gte("session_date", since.isoformat())
            .order("session_date")
            .execute()
        )

        notes: List[StructuredNote] = []
        for row in res.data or []:
            try:
                notes.append(StructuredNote.from_row(row))
            except (ValueError, TypeError) as e:
                self.logger.warning("Skipping malformed note row id=%s: %s", row.get("id"), e)

        self.logger.info(
            "Fetched %d notes for member '%s' since %s",
            len(notes),
            member_id,
            since.date(),
        )
        return notes

    def get_cached_embedding(self, note_id: str) -> Optional[NoteEmbedding]:
        rows = self.embedding_index.fetch([note_id])
        if not rows or not rows[0].vector:
            return None
        try:
            return NoteEmbedding.from_index(rows[0].id, rows[0].vector, rows[0].metadata)
        except ValueError as e:
            self.logger.warning("Ignoring unusable cached embedding: %s", e)
            return None

    def put_cached_embedding(self, embedding: NoteEmbedding) -> bool:
        try:
            self.embedding_index.upsert(
                embedding.note_id,
                embedding.vector,
                embedding.to_metadata(),
                document=embedding.summary or None,
            )
            return True
        except Exception as e:
            self.logger.warning("Failed to cache embedding for note %s: %s", embedding.note_id, e)
            return False
