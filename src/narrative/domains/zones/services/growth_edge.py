# src/narrative/domains/zones/services/growth_edge.py
"""
Growth Edge Selector

Picks the weakest (growth edge) and strongest dimension of a zone breakdown.

Ties go to whichever dimension comes first in the canonical FIRES order
(feelings, influence, resilience, ethics, strengths). Both walks iterate
FIRES_ORDER explicitly, so the result never depends on mapping order.
"""

from typing import Tuple

from ....core.models import FIRES_ORDER, FiresElement, Zone, ZoneBreakdown
from ..constants import (
    DEFAULT_48H_QUESTION,
    FIRES_FOCUS_PHRASES,
    QUESTION_BANK,
    ZONE_ACTIONS,
)


def lowest(breakdown: ZoneBreakdown) -> Tuple[FiresElement, Zone]:
    best_element = FIRES_ORDER[0]
    best_zone = breakdown.get(best_element)
    for element in FIRES_ORDER[1:]:
        zone = breakdown.get(element)
        if zone < best_zone:
            best_element, best_zone = element, zone
    return best_element, best_zone


def highest(breakdown: ZoneBreakdown) -> Tuple[FiresElement, Zone]:
    best_element = FIRES_ORDER[0]
    best_zone = breakdown.get(best_element)
    for element in FIRES_ORDER[1:]:
        zone = breakdown.get(element)
        if zone > best_zone:
            best_element, best_zone = element, zone
    return best_element, best_zone


def question_for(element: FiresElement, zone: Zone) -> str:
    """The 48-hour question for a dimension at a given zone."""
    return QUESTION_BANK.get(element, {}).get(zone, DEFAULT_48H_QUESTION)


def growth_opportunity_text(element: FiresElement, zone: Zone) -> str:
    return f"{ZONE_ACTIONS[zone]} {FIRES_FOCUS_PHRASES[element]} to increase your chances of success."
