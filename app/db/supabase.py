from supabase import create_client, Client

from app.config import Config


def create_supabase_client(config: Config) -> Client:
    """Build the single Supabase client used for resume storage."""
    return create_client(config.storage.url, config.storage.service_key)
