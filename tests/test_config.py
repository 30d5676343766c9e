# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: test_config.py
# -----------------------------------------------------------------------------
import pytest

from config.Config import Config

REQUIRED = {
    "OPENAI_API_KEY": "sk-test",
    "CHROMA_API_KEY": "ck-test",
    "CHROMA_TENANT": "tenant",
    "CHROMA_DATABASE": "db",
    "SUPABASE_URL": "https://example.supabase.co",
    "SUPABASE_SERVICE_ROLE_KEY": "service-role",
}


@pytest.fixture()
def env(monkeypatch):
    for name in Config.ENV_VARS.values():
        monkeypatch.delenv(name, raising=False)
    for name, value in REQUIRED.items():
        monkeypatch.setenv(name, value)
    return monkeypatch


def test_from_env_applies_defaults(env):
    cfg = Config.from_env()

    assert cfg.openai_api_key == "sk-test"
    assert cfg.openai_base_url == "https://api.openai.com/v1"
    assert cfg.openai_chat_model == "gpt-4o-mini"
    assert cfg.openai_embed_model == "text-embedding-3-small"
    assert cfg.supabase_url == "https://example.supabase.co"


def test_env_overrides_defaults(env):
    env.setenv("OPENAI_CHAT_MODEL", "gpt-4.1-mini")
    assert Config.from_env().openai_chat_model == "gpt-4.1-mini"


def test_missing_required_env_vars_fail_fast(env):
    env.delenv("SUPABASE_URL")
    env.delenv("CHROMA_TENANT")

    with pytest.raises(ValueError) as exc:
        Config.from_env()

    assert "SUPABASE_URL" in str(exc.value)
    assert "CHROMA_TENANT" in str(exc.value)


def test_summary_hides_secrets(env):
    summary = Config.from_env().summary()

    assert "sk-test" not in str(summary)
    assert "service-role" not in str(summary)
    assert summary["chroma_tenant"] == "tenant"
