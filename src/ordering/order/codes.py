"""Human-readable order codes: ``ORD-<millisecond stamp>-<5 char token>``.

Within one process the stamp strictly increases, even when many orders are
placed in the same millisecond or the wall clock steps backwards, so codes
never repeat locally. Across processes the random token makes a clash
unlikely, and the unique index on ``orderCode`` turns one into a
``DuplicateOrderCodeError``.
"""

import random
import string
import threading
import time

from shared.config import get_settings

TOKEN_ALPHABET = string.digits + string.ascii_uppercase
TOKEN_LENGTH = 5


class OrderCodeGenerator:
    def __init__(self, prefix="ORD", clock=time.time, rng=None):
        self.prefix = prefix
        self._clock = clock
        self._rng = rng or random.SystemRandom()
        self._lock = threading.Lock()
        self._last_stamp = 0

    def _next_stamp(self) -> int:
        now = int(self._clock() * 1000)
        with self._lock:
            self._last_stamp = max(now, self._last_stamp + 1)
            return self._last_stamp

    def _token(self) -> str:
        return "".join(self._rng.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))

    def __call__(self) -> str:
        return f"{self.prefix}-{self._next_stamp()}-{self._token()}"


_generator = None
_generator_lock = threading.Lock()


def generate_order_code() -> str:
    global _generator
    if _generator is None:
        with _generator_lock:
            if _generator is None:
                _generator = OrderCodeGenerator(prefix=get_settings().ORDER_CODE_PREFIX)
    return _generator()
