# tests/integration/__init__.py
"""
Integration tests for the Narrative Progress Engine.

Exercise the HTTP routers end to end on the memory backend.
"""
