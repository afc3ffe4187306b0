"""
Integration tests.

These tests exercise the facade against a live Redis server and are skipped
unless USE_REAL_REDIS is set.
"""
