"""Timing decorator for load, migration and sampling hot paths."""

import time
from functools import wraps
from typing import Any, Callable

from common.log_utils import is_debug_enabled, log_info


def timed(func: Callable) -> Callable:
    """Log how long ``func`` took when DEBUG_TIMING (or LOG_LEVEL=DEBUG) is on.

    Output:
        [12:34:56.789] [TIMING] PersistenceStore.load took 0.004s
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if not is_debug_enabled("timing"):
            return func(*args, **kwargs)

        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed = time.perf_counter() - start
            func_name = func.__name__
            if args and hasattr(args[0].__class__, func.__name__):
                func_name = f"{args[0].__class__.__name__}.{func.__name__}"
            log_info(f"{func_name} took {elapsed:.3f}s", "TIMING")

    return wrapper
