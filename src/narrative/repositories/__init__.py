# src/narrative/repositories/__init__.py
"""
Repository Layer - Ports and Adapters Pattern

This module provides a clean abstraction over data access, allowing:
- Switching between the Supabase and in-memory backends
- Consistent interface across all data sources
- Better testability with in-memory repositories

Usage:
    from narrative.repositories import get_marker_repository

    markers_repo = get_marker_repository()
    markers = await markers_repo.fetch_markers(client_email="client@example.com")
"""

from typing import Dict, Optional

from ..config import get_config
from .alignment_repository import (
    AlignmentRepository,
    InMemoryAlignmentRepository,
    SnapshotRecord,
    SupabaseAlignmentRepository,
)
from .base import DataUnavailableError, SupabaseRepository
from .content_repository import (
    CONTENT_SOURCES,
    ContentRepository,
    InMemoryContentRepository,
    SupabaseContentRepository,
)
from .engagement_repository import (
    EngagementRepository,
    InMemoryEngagementRepository,
    SupabaseEngagementRepository,
)
from .marker_repository import (
    InMemoryMarkerRepository,
    MarkerRepository,
    SupabaseMarkerRepository,
)
from .visibility_repository import (
    InMemoryVisibilityRepository,
    SupabaseVisibilityRepository,
    VisibilityRepository,
)

_BACKENDS = ("supabase", "memory")

# Override from config; None means "use config.backend"
_DEFAULT_BACKEND: Optional[str] = None

# In-memory repositories are process-wide so state survives between requests
_memory_instances: Dict[str, object] = {}


def _backend(backend: Optional[str]) -> str:
    return backend or _DEFAULT_BACKEND or get_config().backend


def _memory(name: str, factory):
    if name not in _memory_instances:
        _memory_instances[name] = factory()
    return _memory_instances[name]


def get_alignment_repository(backend: str = None) -> AlignmentRepository:
    """Get alignment repository for the specified backend."""
    if _backend(backend) == "memory":
        return _memory("alignment", InMemoryAlignmentRepository)
    return SupabaseAlignmentRepository()


def get_marker_repository(backend: str = None) -> MarkerRepository:
    """Get marker repository for the specified backend."""
    if _backend(backend) == "memory":
        return _memory("markers", InMemoryMarkerRepository)
    return SupabaseMarkerRepository()


def get_engagement_repository(backend: str = None) -> EngagementRepository:
    """Get engagement repository for the specified backend."""
    if _backend(backend) == "memory":
        return _memory("engagements", InMemoryEngagementRepository)
    return SupabaseEngagementRepository()


def get_visibility_repository(backend: str = None) -> VisibilityRepository:
    """Get visibility-edge repository for the specified backend."""
    if _backend(backend) == "memory":
        return _memory("visibility", InMemoryVisibilityRepository)
    return SupabaseVisibilityRepository()


def get_content_repository(backend: str = None) -> ContentRepository:
    """Get shareable-content repository for the specified backend."""
    if _backend(backend) == "memory":
        return _memory("content", InMemoryContentRepository)
    return SupabaseContentRepository()


def set_default_backend(backend: Optional[str]):
    """Set the default backend for all repositories (None reverts to config)."""
    global _DEFAULT_BACKEND
    if backend is not None and backend not in _BACKENDS:
        raise ValueError(f"Invalid backend: {backend}. Use 'supabase' or 'memory'")
    _DEFAULT_BACKEND = backend


def reset_memory_repositories():
    """Drop all in-memory state."""
    _memory_instances.clear()


__all__ = [
    # Base
    "DataUnavailableError",
    "SupabaseRepository",
    # Alignment
    "AlignmentRepository",
    "SupabaseAlignmentRepository",
    "InMemoryAlignmentRepository",
    "SnapshotRecord",
    "get_alignment_repository",
    # Markers
    "MarkerRepository",
    "SupabaseMarkerRepository",
    "InMemoryMarkerRepository",
    "get_marker_repository",
    # Engagements
    "EngagementRepository",
    "SupabaseEngagementRepository",
    "InMemoryEngagementRepository",
    "get_engagement_repository",
    # Visibility
    "VisibilityRepository",
    "SupabaseVisibilityRepository",
    "InMemoryVisibilityRepository",
    "get_visibility_repository",
    # Content
    "CONTENT_SOURCES",
    "ContentRepository",
    "SupabaseContentRepository",
    "InMemoryContentRepository",
    "get_content_repository",
    # Config
    "set_default_backend",
    "reset_memory_repositories",
]
