# tests/unit/__init__.py
"""
Unit tests for the Narrative Progress Engine.

Pure algorithms, services over in-memory repositories, and the Supabase
adapters against the mock client.
"""
