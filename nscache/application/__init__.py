"""
Application Layer

Helpers that connect request handling to the cache facade.
"""

from .request_toggles import check_request_triggered_bypass, check_request_triggered_flush

__all__ = [
    "check_request_triggered_bypass",
    "check_request_triggered_flush",
]
