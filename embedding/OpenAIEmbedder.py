# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-14
# Updated: 2026-02-03
# Description: OpenAIEmbedder
# -----------------------------------------------------------------------------
import time
from typing import Any, List, Optional, Sequence

import numpy as np
from openai import OpenAI

import settings
from config.Config import Config
from utility.logging_utils import get_class_logger


class OpenAIEmbedder:
    """
    Embedding provider backed by the OpenAI embeddings API.

    The output dimension is pinned (`dimensions=` on every request) so note
    vectors always line up with the program catalog index.
    """

    def __init__(
            self,
            cfg: Optional[Config] = None,
            *,
            dimension: int = settings.EMBEDDING_DIMENSION,
            batch_size: int = settings.EMBEDDING_BATCH_SIZE,
            normalize: bool = True,
            max_retries: int = 3,
            request_timeout: Optional[float] = settings.EMBEDDING_REQUEST_TIMEOUT_SECONDS,
            client: Any = None,
            model: Optional[str] = None,
            logger=None,
    ):
        self.cfg = cfg
        self._dimension = int(dimension)
        self.batch_size = max(1, int(batch_size))
        self.normalize = normalize
        self.max_retries = max(1, int(max_retries))
        self.request_timeout = request_timeout or None
        self.logger = logger or get_class_logger(self.__class__)

        if client is not None:
            self.client = client
        else:
            if cfg is None:
                raise ValueError("OpenAIEmbedder needs either cfg or an explicit client")
            self.client = OpenAI(api_key=cfg.openai_api_key, base_url=cfg.openai_base_url)

        self.model = model or (cfg.openai_embed_model if cfg else None) or "text-embedding-3-small"
        self.logger.info("OpenAI Embedder initialised (model=%s, dimension=%d)", self.model, self._dimension)

    @property
    def dimension(self) -> int:
        return self._dimension

    def _embed_batch(self, texts: List[str]) -> np.ndarray:
        delay = 0.8
        for attempt in range(1, self.max_retries + 1):
            try:
                resp = self.client.embeddings.create(
                    model=self.model,
                    input=texts,
                    dimensions=self._dimension,
                    timeout=self.request_timeout,
                )
                arr = np.asarray([d.embedding for d in resp.data], dtype=np.float32)

                if arr.shape != (len(texts), self._dimension):
                    raise ValueError(
                        f"Embedding response shape {arr.shape} does not match "
                        f"({len(texts)}, {self._dimension})"
                    )

                # Normalize vectors (cosine-friendly)
                if self.normalize:
                    norms = np.linalg.norm(arr, axis=1, keepdims=True) + 1e-12
                    arr = arr / norms
                return arr

            except ValueError:
                raise
            except Exception as e:
                self.logger.warning(f"Embedding batch failed (attempt {attempt}/{self.max_retries}): {e}")
                if attempt == self.max_retries:
                    raise
                time.sleep(delay)
                delay *= 1.7  # backoff

        # Unreachable and include for type checkers
        return np.empty((0, self._dimension), dtype=np.float32)

    def embed(self, text: str) -> List[float]:
        cleaned = (text or "").strip()
        if not cleaned:
            raise ValueError("Cannot embed empty text")
        return self._embed_batch([cleaned])[0].astype(float).tolist()

    def embed_batch(self, texts: Sequence[str]) -> List[List[float]]:
        """
        Embed many texts in batches of `batch_size`. Any failing batch raises;
        callers that want per-item isolation should call embed() per item.
        """
        items = [(t or "").strip() for t in texts]
        if any(not t for t in items):
            raise ValueError("Cannot embed empty text")

        total = len(items)
        self.logger.info(f"Embedding {total} texts (batch={self.batch_size})")
        out: List[List[float]] = []
        for i in range(0, total, self.batch_size):
            batch = items[i:i + self.batch_size]
            arr = self._embed_batch(batch)
            out.extend(row.astype(float).tolist() for row in arr)

        self.logger.info(f"Completed embeddings for {len(out)} texts.")
        return out
