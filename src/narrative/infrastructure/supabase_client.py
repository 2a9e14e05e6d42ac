# src/narrative/infrastructure/supabase_client.py
"""
Supabase Client

Provides the shared Supabase client used by the repository adapters.

Usage:
    from .supabase_client import get_supabase_client

    client = get_supabase_client()
    result = client.table("more_less_markers").select("*").eq("is_active", True).execute()
"""

import logging
from typing import Optional

from ..config import get_config

logger = logging.getLogger(__name__)

# Singleton client
_supabase_client = None


def get_supabase_client():
    """
    Get the Supabase client singleton.

    Returns:
        Supabase client or None if not configured
    """
    global _supabase_client

    if _supabase_client is not None:
        return _supabase_client

    config = get_config()
    supabase_url = config.supabase_url
    supabase_key = config.supabase_key

    if not supabase_url or not supabase_key:
        logger.warning("⚠️ Supabase not configured (missing SUPABASE_URL or SUPABASE_KEY)")
        return None

    try:
        from supabase import create_client

        _supabase_client = create_client(supabase_url, supabase_key)
        logger.info(f"✅ Connected to Supabase: {supabase_url}")
        return _supabase_client
    except Exception as e:
        logger.error(f"❌ Failed to connect to Supabase: {e}")
        return None


def set_supabase_client(client: Optional[object]) -> None:
    """Replace (or clear, with None) the singleton. Used by tests and host apps."""
    global _supabase_client
    _supabase_client = client
