# groupchat/domain/timestamps.py
import time


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds, the unit stored records use."""
    return time.time_ns() // 1_000_000
