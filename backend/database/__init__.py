"""Database package."""
from .supabase_client import init_supabase, get_supabase_client

__all__ = ["init_supabase", "get_supabase_client"]
