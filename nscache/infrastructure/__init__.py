"""
Infrastructure Layer

Cache facade and backend implementations.
"""
