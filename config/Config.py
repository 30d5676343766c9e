# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-08
# Updated: 2026-02-02
# Description: Config
# -----------------------------------------------------------------------------

import os
from dataclasses import dataclass
from dotenv import load_dotenv, find_dotenv

# Load .env once globally
load_dotenv(find_dotenv(usecwd=True), override=True)


@dataclass(frozen=True)
class Config:
    # OpenAI (embeddings, rationale and keyword extraction)
    openai_api_key: str
    openai_base_url: str
    openai_chat_model: str
    openai_embed_model: str

    # Chroma Vector Database (program catalog + note embedding cache)
    chroma_api_key: str
    chroma_tenant: str
    chroma_database: str

    # Supabase (notes + stored recommendations)
    supabase_url: str
    supabase_service_role_key: str

    # ---- Single source of truth: field_name -> ENV VAR NAME ----
    ENV_VARS = {
        # OpenAI
        "openai_api_key": "OPENAI_API_KEY",
        "openai_base_url": "OPENAI_BASE_URL",      # e.g. https://api.openai.com/v1
        "openai_chat_model": "OPENAI_CHAT_MODEL",  # e.g. gpt-4o-mini
        "openai_embed_model": "OPENAI_EMBED_MODEL",  # e.g. text-embedding-3-small

        # Chroma
        "chroma_api_key": "CHROMA_API_KEY",
        "chroma_tenant": "CHROMA_TENANT",
        "chroma_database": "CHROMA_DATABASE",

        # Supabase
        "supabase_url": "SUPABASE_URL",
        "supabase_service_role_key": "SUPABASE_SERVICE_ROLE_KEY",
    }

    # Applied when the env var is unset; everything else is required
    DEFAULTS = {
        "openai_base_url": "https://api.openai.com/v1",
        "openai_chat_model": "gpt-4o-mini",
        "openai_embed_model": "text-embedding-3-small",
    }

    # Convenient *groups* for use in tests / health checks
    OPENAI_ENV_VARS = (
        "OPENAI_API_KEY",
    )

    CHROMA_ENV_VARS = (
        "CHROMA_API_KEY",
        "CHROMA_TENANT",
        "CHROMA_DATABASE",
    )

    SUPABASE_ENV_VARS = (
        "SUPABASE_URL",
        "SUPABASE_SERVICE_ROLE_KEY",
    )

    @staticmethod
    def from_env() -> "Config":
        """Build Config object from environment variables."""
        kwargs = {
            field_name: os.getenv(env_name, "") or Config.DEFAULTS.get(field_name, "")
            for field_name, env_name in Config.ENV_VARS.items()
        }
        return Config(**kwargs)

    def __post_init__(self):
        """
        Fail fast if any required config is missing.
        """
        missing_fields = [k for k, v in self.__dict__.items() if not v]

        if missing_fields:
            missing_env_vars = [self.ENV_VARS[f] for f in missing_fields]
            raise ValueError(f"Missing required environment variables: {missing_env_vars}")

    def summary(self) -> dict:
        """Return a safe, non-sensitive summary for logging."""
        return {
            "openai_base_url": self.openai_base_url,
            "openai_chat_model": self.openai_chat_model,
            "openai_embed_model": self.openai_embed_model,
            "chroma_tenant": self.chroma_tenant,
            "chroma_database": self.chroma_database,
            "supabase_url": self.supabase_url,
        }
