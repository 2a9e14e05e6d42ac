"""
Services - Cross-domain facades
"""

from .narrative_engine import NarrativeEngine, ProgressOverview, build_overview, evaluate

__all__ = [
    "NarrativeEngine",
    "ProgressOverview",
    "build_overview",
    "evaluate",
]
