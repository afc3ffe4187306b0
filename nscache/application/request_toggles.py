"""
Request-Triggered Cache Toggles

Caller-side helpers that turn inbound request parameters into explicit
facade calls, so the facade itself never inspects requests.

``params`` is any mapping of request parameters: a plain dict, Starlette's
``request.query_params`` or Django's ``request.GET``. Only the presence of
the parameter matters, not its value.

Usage:
    check_request_triggered_bypass(cache, request.query_params, "nocache")
    check_request_triggered_flush(cache, request.query_params, "flushcache")

Warning: the flush helper empties the whole backend, every namespace and
any sessions stored there included. Expose the parameter name only to
trusted callers.
"""

from collections.abc import Mapping
from typing import Any

from nscache.core.logging.logger import get_logger
from nscache.infrastructure.cache.facade import CacheFacade

logger = get_logger(__name__)


def check_request_triggered_bypass(
    cache: CacheFacade, params: Mapping[str, Any], param_name: str
) -> bool:
    """
    Enable bypass when ``param_name`` is present in the request parameters.

    Returns:
        True if bypass was enabled
    """
    if param_name not in params:
        return False

    logger.info("Request triggered cache bypass", param=param_name)
    cache.set_bypass(True)
    return True


def check_request_triggered_flush(
    cache: CacheFacade, params: Mapping[str, Any], param_name: str, delay: int = 0
) -> bool:
    """
    Flush the backend when ``param_name`` is present in the request parameters.

    Returns:
        True if a flush was issued
    """
    if param_name not in params:
        return False

    logger.warning("Request triggered cache flush", param=param_name, delay=delay)
    cache.flush(delay)
    return True
