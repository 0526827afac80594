import time

def clamp(value, min_val, max_val):
    """Clamps a value to the range [min_val, max_val]."""
    return max(min_val, min(value, max_val))

def monotonic_millis() -> float:
    """Milliseconds from a monotonic clock; only differences are meaningful."""
    return time.monotonic() * 1000.0
