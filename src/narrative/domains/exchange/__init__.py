"""
Exchange Domain - Peer circle and shared feed

This domain handles:
- Circle resolution from directed visibility edges
- Connection summaries (mutual / one-directional)
- Feed aggregation across content kinds
- Viewer-scoped feed sessions
"""
