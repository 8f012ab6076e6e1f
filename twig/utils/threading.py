"""Threading utilities for sizing the untracked-file copy pool."""

import os
import sys
from typing import Optional


def is_free_threading_enabled() -> bool:
    """Detect if Python is running with free-threading enabled.

    Returns:
        True if running on Python 3.13+ with GIL disabled (free-threading mode)
        False if running with GIL enabled or Python < 3.13
    """
    try:
        # sys._is_gil_enabled() returns False when GIL is disabled
        return hasattr(sys, "_is_gil_enabled") and not sys._is_gil_enabled()
    except Exception:
        return False


def get_optimal_worker_count(user_specified: Optional[int] = None, jobs: Optional[int] = None) -> int:
    """Calculate optimal worker count based on threading mode and CPU count.

    Args:
        user_specified: User-specified worker count, if provided
        jobs: Number of independent jobs; the pool never grows past it

    Returns:
        Optimal number of workers for parallel copying
    """
    if user_specified is not None and user_specified > 0:
        workers = user_specified
    else:
        cpu_count = os.cpu_count() or 1
        if is_free_threading_enabled():
            workers = min(64, cpu_count * 2)
        else:
            # Copying is I/O bound, CPU_count + 4 is a good heuristic
            workers = min(32, cpu_count + 4)

    if jobs is not None:
        workers = max(1, min(workers, jobs))
    return workers
