# src/narrative/repositories/base.py
"""
Base Repository - Shared plumbing for adapters

Ports (abstract interfaces) live next to their adapters in each
``*_repository.py`` module. This module holds what the Supabase adapters share:
lazy client lookup and running the blocking supabase-py query builder off the
event loop so that independent fetches can be awaited concurrently.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

from ..infrastructure.supabase_client import get_supabase_client

logger = logging.getLogger(__name__)


class DataUnavailableError(Exception):
    """A read against the data store failed or the store is not configured."""


class SupabaseRepository:
    """
    Base for Supabase adapters.

    Reads raise ``DataUnavailableError`` so that fan-out callers can degrade
    per source. Writes return ``None``/``False`` on failure and log the cause.
    """

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = get_supabase_client()
        return self._client

    async def _select(
        self,
        build_query: Callable[[Any], Any],
        description: str,
    ) -> List[Dict[str, Any]]:
        """Run a read query built from the client. Returns rows."""
        client = self.client
        if client is None:
            raise DataUnavailableError(f"{description}: Supabase not configured")
        try:
            result = await asyncio.to_thread(lambda: build_query(client).execute())
        except Exception as e:
            raise DataUnavailableError(f"{description}: {e}") from e
        return result.data or []

    async def _write(
        self,
        build_query: Callable[[Any], Any],
        description: str,
    ) -> Optional[List[Dict[str, Any]]]:
        """Run a write query. Returns affected rows, or None on failure."""
        client = self.client
        if client is None:
            logger.warning(f"⚠️ {description} skipped: Supabase not configured")
            return None
        try:
            result = await asyncio.to_thread(lambda: build_query(client).execute())
            return result.data or []
        except Exception as e:
            logger.error(f"❌ {description} failed: {e}")
            return None
