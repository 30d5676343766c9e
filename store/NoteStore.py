# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: NoteStore
# -----------------------------------------------------------------------------
from datetime import datetime
from typing import List, Optional, Protocol, runtime_checkable

from embedding.NoteEmbedding import NoteEmbedding
from note.StructuredNote import StructuredNote


@runtime_checkable
class NoteStore(Protocol):
    def test_connection(self) -> bool:
        ...

    def list_notes(self, member_id: str, since: datetime) -> List[StructuredNote]:
        """Notes for a member with session timestamp >= since, oldest first."""
        ...

    def get_cached_embedding(self, note_id: str) -> Optional[NoteEmbedding]:
        ...

    def put_cached_embedding(self, embedding: NoteEmbedding) -> bool:
        """Best-effort write; returns False instead of raising on failure."""
        ...
