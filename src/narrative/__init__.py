"""
Narrative Progress Engine

Deterministic progress algorithms for a coaching practice: competency zones,
predictability score, growth edge, more/less markers, the 12-week engagement
lifecycle, and the peer circle feed.
"""

__version__ = "0.1.0"
