# src/narrative/domains/exchange/constants.py
"""
Exchange Domain Constants
"""

from ...core.models import ContentKind

# Kinds are fetched concurrently but merged in this order; on an id collision
# the earlier kind keeps the item.
FEED_KINDS = (
    ContentKind.PRIORITY,
    ContentKind.PROOF,
    ContentKind.SHARE,
    ContentKind.PREDICTION,
)
