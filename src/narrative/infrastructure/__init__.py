"""
Infrastructure - External service clients.
"""

from .supabase_client import get_supabase_client, set_supabase_client

__all__ = ["get_supabase_client", "set_supabase_client"]
