# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: SupabaseClient
# -----------------------------------------------------------------------------
from supabase import Client, create_client

from config.Config import Config


def create_supabase_client(cfg: Config) -> Client:
    """Server-side client; the service role key bypasses RLS."""
    return create_client(cfg.supabase_url, cfg.supabase_service_role_key)
