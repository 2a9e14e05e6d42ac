"""
Zones Domain - Alignment classification and predictability

This domain handles:
- Rating -> zone classification per FIRES dimension
- Predictability score
- Growth edge / strength selection and the 48-hour question
"""
