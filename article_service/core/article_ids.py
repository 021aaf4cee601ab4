"""Article Identifiers — time-ordered, globally unique ids.

Invariants:
    - Ids are 26 chars of Crockford base32: 48-bit millisecond timestamp + 80 random bits
    - Lexicographic order of ids follows creation order
    - Strictly increasing within a process, even when the clock stalls or steps back
    - Random component makes ids unique across processes

Design Decisions:
    - Same-millisecond ids increment the random component instead of drawing a new one
    - Lock guards generator state; ids may be minted from worker threads
"""

import secrets
import threading
import time
from typing import Callable

from article_service.core.domain_types import ArticleId

CROCKFORD_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
ID_LENGTH = 26
_RANDOM_BITS = 80
_RANDOM_LIMIT = 1 << _RANDOM_BITS


def encode_crockford(value: int, length: int = ID_LENGTH) -> str:
    """Encode a non-negative int as fixed-width Crockford base32."""
    chars = []
    for _ in range(length):
        chars.append(CROCKFORD_ALPHABET[value & 0x1F])
        value >>= 5
    return "".join(reversed(chars))


def timestamp_ms(article_id: str) -> int:
    """Millisecond timestamp embedded in an id."""
    value = 0
    for char in article_id[:10]:
        value = (value << 5) | CROCKFORD_ALPHABET.index(char)
    return value


class MonotonicIdGenerator:
    """Mints sortable article ids."""

    def __init__(
        self,
        clock_ms: Callable[[], int] | None = None,
        random_bits: Callable[[int], int] = secrets.randbits,
    ):
        self._clock_ms = clock_ms or (lambda: time.time_ns() // 1_000_000)
        self._random_bits = random_bits
        self._lock = threading.Lock()
        self._last_ms = -1
        self._last_random = 0

    def new_id(self) -> ArticleId:
        with self._lock:
            now = self._clock_ms()
            if now > self._last_ms:
                ms, rand = now, self._random_bits(_RANDOM_BITS)
            else:
                ms, rand = self._last_ms, self._last_random + 1
                if rand >= _RANDOM_LIMIT:
                    # random space exhausted: borrow the next millisecond
                    ms, rand = ms + 1, self._random_bits(_RANDOM_BITS)
            self._last_ms, self._last_random = ms, rand
        return ArticleId(encode_crockford((ms << _RANDOM_BITS) | rand))


_default_generator = MonotonicIdGenerator()


def new_article_id() -> ArticleId:
    """Mint an id from the process-wide generator."""
    return _default_generator.new_id()
