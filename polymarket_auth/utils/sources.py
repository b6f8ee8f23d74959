"""
Ambient inputs (wall clock and secure randomness).

Signers never read these as hidden globals: they take a Clock and a
RandomBytes callable, defaulting to the system sources below, so tests
can inject deterministic fakes.
"""

import secrets
import time
from typing import Callable

Clock = Callable[[], int]
RandomBytes = Callable[[int], bytes]


def system_clock() -> int:
    """Current unix time in whole seconds."""
    return int(time.time())


def system_random_bytes(n: int) -> bytes:
    """n bytes from the OS CSPRNG."""
    return secrets.token_bytes(n)
