# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-16
# Updated: 2026-02-04
# Description: ChromaVectorIndex
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import chromadb

import settings
from config.Config import Config
from utility.logging_utils import get_class_logger
from vectorstore.VectorIndex import IndexCandidate, IndexStats, VectorIndex


def _first(rows: Any) -> List[Any]:
    """Chroma query results are list-of-lists (one list per query vector)."""
    if rows is None or len(rows) == 0:
        return []
    head = rows[0]
    return list(head) if head is not None else []


def _as_list(rows: Any) -> List[Any]:
    return [] if rows is None else list(rows)


def _sanitize_metadata(metadata: Dict[str, Any]) -> Dict[str, Any]:
    """Chroma only accepts str/int/float/bool metadata values."""
    clean: Dict[str, Any] = {}
    for key, value in (metadata or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            clean[key] = ", ".join(str(v) for v in value)
        elif isinstance(value, (str, int, float, bool)):
            clean[key] = value
        else:
            clean[key] = str(value)
    return clean


@dataclass
class ChromaVectorIndex(VectorIndex):
    """
    Chroma collection wrapper. Collections are created in cosine space, and
    query() reports similarity = 1 - cosine distance (range [-1, 1]).
    """
    cfg: Optional[Config] = None
    collection_name: str = settings.PROGRAM_COLLECTION
    dimension: int = settings.EMBEDDING_DIMENSION
    client: Any = None
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

        if self.client is None:
            if self.cfg is None:
                raise ValueError("ChromaVectorIndex needs either cfg or an explicit client")
            self.logger.info(
                "Initialising Chroma Cloud client "
                f"(tenant={self.cfg.chroma_tenant}, database={self.cfg.chroma_database})"
            )
            self.client = chromadb.CloudClient(
                tenant=self.cfg.chroma_tenant,
                database=self.cfg.chroma_database,
                api_key=self.cfg.chroma_api_key,
            )

        self.collection = self.client.get_or_create_collection(
            name=self.collection_name,
            metadata={"hnsw:space": "cosine"},
        )
        self.logger.info("Chroma collection ready: '%s'", self.collection_name)

    def test_connection(self) -> bool:
        """
        Simple health check: can we talk to Chroma and our collection?
        """
        try:
            _ = self.collection.count()
            return True
        except Exception as e:
            self.logger.error("Chroma connection failed: %s", e)
            return False

    def upsert(
            self,
            item_id: str,
            vector: Sequence[float],
            metadata: Dict[str, Any],
            document: Optional[str] = None,
    ) -> None:
        vec = vector.tolist() if hasattr(vector, "tolist") else [float(v) for v in vector]
        if len(vec) != self.dimension:
            raise ValueError(
                f"Vector for '{item_id}' has dimension {len(vec)}, expected {self.dimension}"
            )

        kwargs: Dict[str, Any] = {
            "ids": [item_id],
            "embeddings": [vec],
            "metadatas": [_sanitize_metadata(metadata)],
        }
        if document:
            kwargs["documents"] = [document]

        self.collection.upsert(**kwargs)
        self.logger.debug("Upserted '%s' into Chroma collection '%s'", item_id, self.collection_name)

    def query(
            self,
            vector: Sequence[float],
            top_k: int = 10,
            where: Dict[str, Any] | None = None,
    ) -> List[IndexCandidate]:
        vec = vector.tolist() if hasattr(vector, "tolist") else [float(v) for v in vector]

        query_kwargs: Dict[str, Any] = {
            "query_embeddings": [vec],
            "n_results": int(top_k),
            "include": ["documents", "metadatas", "distances"],
        }
        if where:
            self.logger.debug("Applying metadata filter (where=%s)", where)
            query_kwargs["where"] = where

        self.logger.info(
            "Querying Chroma collection '%s' (n_results=%d, where=%s)",
            self.collection_name,
            top_k,
            where,
        )

        try:
            res = self.collection.query(**query_kwargs)
        except Exception as e:
            self.logger.error("Error during Chroma query: %s", e, exc_info=True)
            raise

        ids = _first(res.get("ids"))
        metas = _first(res.get("metadatas"))
        docs = _first(res.get("documents"))
        dists = _first(res.get("distances"))

        out: List[IndexCandidate] = []
        for i, item_id in enumerate(ids):
            dist = dists[i] if i < len(dists) else None
            out.append(IndexCandidate(
                id=str(item_id),
                score=(1.0 - float(dist)) if dist is not None else None,
                metadata=dict(metas[i] or {}) if i < len(metas) else {},
                document=docs[i] if i < len(docs) else None,
            ))

        self.logger.info(
            "Chroma search complete: returned %d results (requested %d)",
            len(out),
            top_k,
        )
        return out

    def fetch(self, ids: Sequence[str]) -> List[IndexCandidate]:
        if not ids:
            return []
        res = self.collection.get(ids=list(ids), include=["embeddings", "metadatas", "documents"])
        return self._rows_from_get(res, with_vectors=True)

    def scan_documents(
            self,
            terms: Sequence[str] | None = None,
            limit: int = 30,
    ) -> List[IndexCandidate]:
        """
        Non-semantic scan: rows whose document contains any of `terms`
        (case-sensitive substring, Chroma's $contains). No terms = first
        `limit` rows of the collection.
        """
        get_kwargs: Dict[str, Any] = {
            "limit": int(limit),
            "include": ["metadatas", "documents"],
        }
        clauses = [{"$contains": t} for t in (terms or []) if t]
        if len(clauses) == 1:
            get_kwargs["where_document"] = clauses[0]
        elif clauses:
            get_kwargs["where_document"] = {"$or": clauses}

        self.logger.debug("Scanning Chroma collection '%s' (terms=%d, limit=%d)", self.collection_name, len(clauses), limit)
        res = self.collection.get(**get_kwargs)
        return self._rows_from_get(res, with_vectors=False)

    def describe_stats(self) -> IndexStats:
        count = int(self.collection.count())
        dimension = self.dimension
        if count:
            peek = self.collection.peek(limit=1)
            embeddings = _as_list(peek.get("embeddings"))
            if embeddings:
                dimension = len(embeddings[0])
        return IndexStats(dimension=dimension, count=count)

    @staticmethod
    def _rows_from_get(res: Dict[str, Any], *, with_vectors: bool) -> List[IndexCandidate]:
        ids = _as_list(res.get("ids"))
        metas = _as_list(res.get("metadatas"))
        docs = _as_list(res.get("documents"))
        vecs = _as_list(res.get("embeddings")) if with_vectors else []

        out: List[IndexCandidate] = []
        for i, item_id in enumerate(ids):
            vec = None
            if i < len(vecs) and vecs[i] is not None:
                vec = [float(v) for v in vecs[i]]
            out.append(IndexCandidate(
                id=str(item_id),
                metadata=dict(metas[i] or {}) if i < len(metas) else {},
                vector=vec,
                document=docs[i] if i < len(docs) else None,
            ))
        return out
