"""
API - Shared request models and response envelopes.
"""
