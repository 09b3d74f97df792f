"""
Monotonic 56-bit tokens for tagging outgoing messages (e.g. ClOrdID).

Tokens are seeded from the wall clock in microseconds, so a fresh process
continues above the values of a previous run unless the clock went back.
"""

import threading
import time

UINT56_MASK = 0x00FFFFFFFFFFFFFF
UINT64_MASK = 0xFFFFFFFFFFFFFFFF


def _unix_micro():
    return time.time_ns() // 1000


class AtomicUInt64:
    """A 64-bit cell with load and compare-and-swap.

    The lock only guards the single compare-and-swap step; callers build
    their own retry loops on top of it.
    """

    def __init__(self, value=0):
        self._value = value & UINT64_MASK
        self._lock = threading.Lock()

    def load(self) -> int:
        return self._value

    def compare_and_swap(self, expected: int, new: int) -> bool:
        with self._lock:
            if self._value != expected:
                return False
            self._value = new & UINT64_MASK
            return True


class TokenGenerator:

    def __init__(self, seed=None, clock=None):
        self._clock = clock or _unix_micro
        self._last_token = AtomicUInt64(self._clock() if seed is None else seed)

    def last(self) -> int:
        return self._last_token.load() & UINT56_MASK

    def next(self) -> int:
        """Return a token strictly greater than any previously returned one."""
        token = self._clock() & UINT64_MASK

        while True:
            last = self._last_token.load()
            if token <= last:
                token = last + 1

            if self._last_token.compare_and_swap(last, token):
                return token & UINT56_MASK

    def next_str(self) -> str:
        return str(self.next())
