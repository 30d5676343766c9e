# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-09
# Updated: 2026-02-02
# Description: settings.py
# -----------------------------------------------------------------------------
import os


def _env(name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be an int, got {v!r}") from e


def _env_float(name: str, default: float) -> float:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return float(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be a float, got {v!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    v = _env(name, "")
    if v == "":
        return default
    v = v.lower()
    if v in ("1", "true", "t", "yes", "y", "on"):
        return True
    if v in ("0", "false", "f", "no", "n", "off"):
        return False
    raise RuntimeError(f"Env var {name} must be a boolean, got {v!r}")


# -----------------------------------------------------------------------------
# Embeddings
# -----------------------------------------------------------------------------
# Pinned output dimension; the program catalog index is built at this size.
EMBEDDING_DIMENSION = _env_int("NC_EMBEDDING_DIMENSION", 512)
EMBEDDING_BATCH_SIZE = _env_int("NC_EMBEDDING_BATCH_SIZE", 64)

# Per-request ceiling for embedding calls (seconds)
EMBEDDING_REQUEST_TIMEOUT_SECONDS = _env_float("NC_EMBEDDING_REQUEST_TIMEOUT_SECONDS", 30.0)

# Keyword suggestions query the index by an embedded keyword string when true,
# otherwise they go straight to the keyword-overlap fallback.
USE_EMBEDDINGS = _env_bool("NC_USE_EMBEDDINGS", True)


# -----------------------------------------------------------------------------
# Vector storage (Chroma collection names)
# -----------------------------------------------------------------------------
PROGRAM_COLLECTION = _env("NC_PROGRAM_COLLECTION", "programs")
NOTE_EMBEDDING_COLLECTION = _env("NC_NOTE_EMBEDDING_COLLECTION", "note_embeddings")


# -----------------------------------------------------------------------------
# Supabase tables
# -----------------------------------------------------------------------------
NOTES_TABLE = _env("NC_NOTES_TABLE", "notes")
RECOMMENDATIONS_TABLE = _env("NC_RECOMMENDATIONS_TABLE", "program_recommendations")


# -----------------------------------------------------------------------------
# Recommendation defaults
# -----------------------------------------------------------------------------
DEFAULT_WINDOW_DAYS = _env_int("NC_DEFAULT_WINDOW_DAYS", 21)
DEFAULT_TOP_K = _env_int("NC_DEFAULT_TOP_K", 10)
SUGGEST_SEARCH_TOP_K = _env_int("NC_SUGGEST_SEARCH_TOP_K", 15)
SUGGEST_TOP_K = _env_int("NC_SUGGEST_TOP_K", 10)
STORED_LIMIT = _env_int("NC_STORED_LIMIT", 50)

# 0 disables the aggregation deadline
AGGREGATION_TIMEOUT_SECONDS = _env_float("NC_AGGREGATION_TIMEOUT_SECONDS", 0.0)

# Rationale generation
RATIONALE_TEMPERATURE = _env_float("NC_RATIONALE_TEMPERATURE", 0.7)
RATIONALE_MAX_TOKENS = _env_int("NC_RATIONALE_MAX_TOKENS", 200)


# -----------------------------------------------------------------------------
# Sanity checks (tunable)
# -----------------------------------------------------------------------------
if EMBEDDING_DIMENSION <= 0:
    raise RuntimeError("EMBEDDING_DIMENSION must be positive")

if not PROGRAM_COLLECTION or not NOTE_EMBEDDING_COLLECTION:
    raise RuntimeError("Chroma collection names resolved to empty value")
