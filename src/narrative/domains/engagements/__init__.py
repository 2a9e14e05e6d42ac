"""
Engagements Domain - 12-week coaching lifecycle

This domain handles:
- Starting an engagement
- Week advancement and derived phase
- Pause / resume and completion
"""
