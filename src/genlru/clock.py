"""Default time source for entry expiry."""

from __future__ import annotations

import time


def monotonic_ms() -> float:
    # Monotonic so expiry isn't affected by system clock changes.
    return time.monotonic() * 1000.0
