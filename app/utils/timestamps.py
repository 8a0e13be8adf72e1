"""
Epoch-millisecond timestamps, the unit lessons and history rows are stored in.
"""
import time


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)
