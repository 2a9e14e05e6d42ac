"""
Domains - One package per engine component group.

- zones: zone classification, predictability score, growth edge
- markers: more/less progress markers
- engagements: 12-week engagement lifecycle
- exchange: circle resolution and feed aggregation
"""
