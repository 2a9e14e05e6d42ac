"""
Markers Domain - More/less behavioural trackers

This domain handles:
- Marker creation with a baseline history entry
- Score updates and percent complete
- Soft retirement
"""
