# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: SupabaseRecommendationStore
# -----------------------------------------------------------------------------
import logging
from typing import Any, List, Optional

import settings
from recommendation.RecommendationRecord import RecommendationRecord
from store.RecommendationStore import RecommendationStore
from utility.logging_utils import get_class_logger


class SupabaseRecommendationStore(RecommendationStore):
    """
    program_recommendations table:
      id uuid pk, member_id uuid, note_id uuid null, session_date timestamptz,
      programs jsonb, keywords text[], created_at timestamptz default now()
    """

    def __init__(
        self,
        *,
        client: Any,
        table: str = settings.RECOMMENDATIONS_TABLE,
        logger: logging.Logger | None = None,
    ) -> None:
        self.client = client
        self.table = table
        self.logger = logger or get_class_logger(self.__class__)

    def test_connection(self) -> bool:
        try:
            self.client.table(self.table).select("id").limit(1).execute()
            return True
        except Exception as e:
            self.logger.error("Supabase table '%s' unreachable: %s", self.table, e)
            return False

    def insert(self, record: RecommendationRecord) -> str:
        self.logger.info(
            "Saving recommendations member=%s note=%s programs=%d keywords=%d",
            record.member_id,
            record.note_id or "null",
            len(record.programs),
            len(record.keywords),
        )
        res = self.client.table(self.table).insert([record.to_row()]).execute()

        rows = res.data or []
        if not rows or not rows[0].get("id"):
            raise RuntimeError("No data returned from database insert")

        record_id = str(rows[0]["id"])
        self.logger.info("Saved recommendation record %s", record_id)
        return record_id

    def list_records(
            self,
            member_id: str,
            *,
            note_id: Optional[str] = None,
            start_date: Optional[str] = None,
            end_date: Optional[str] = None,
            limit: int = settings.STORED_LIMIT,
    ) -> List[RecommendationRecord]:
        query = (
            self.client.table(self.table)
            .select("*")
            .eq("member_id", member_id)
        )
        if note_id:
            query = query.eq("note_id", note_id)
        if start_date:
            query = query.gte("session_date", start_date)
        if end_date:
            query = query.lte("session_date", end_date)

        res = query.order("created_at", desc=True).limit(int(limit)).execute()

        records = [RecommendationRecord.from_row(row) for row in res.data or []]
        self.logger.info(
            "Fetched %d recommendation records (member=%s note=%s start=%s end=%s limit=%d)",
            len(records),
            member_id,
            note_id or "none",
            start_date or "none",
            end_date or "none",
            limit,
        )
        return records
