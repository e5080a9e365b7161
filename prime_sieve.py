# prime_sieve.py
"""
Segmented Prime Sieve — incremental, unbounded Sieve of Eratosthenes.

The number line is sieved in fixed-size batches [offset, offset + width).
Batch 0 is sieved from scratch; every later batch is sieved in place with the
primes already found, so nothing is ever re-sieved from zero. Memory is one
marker array of `width` booleans plus the PrimeStore of primes found so far.

Usage:
    sieve = SegmentedSieve()
    sieve.is_prime(1299709)          # -> True
    [sieve.next_prime() for _ in range(5)]   # -> [2, 3, 5, 7, 11]

Notes
-----
- A batch k+1 is only correct if every prime <= sqrt(its last value) is
  already known. Known primes are exactly the primes below the new offset, so
  the check is isqrt(upper - 1) < offset. Any width >= 2 satisfies it; the
  constructor rejects smaller widths and every batch re-checks before sieving.
- How far ahead to sieve is decided with the instance's own width, never the
  module default.
- The domain is unsigned 64-bit: [0, U64_MAX]. The last batch is truncated at
  U64_MAX and advancing past it raises SieveRangeError.
"""

from __future__ import annotations

import logging
import os
from math import isqrt
from typing import Iterator, List, Optional, Tuple

import numpy as np

from prime_store import PrimeStore, PrimeStoreView

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


# === CONFIG ===
DEFAULT_BATCH_WIDTH = 65_536        # numbers per batch
MIN_BATCH_WIDTH = 2                 # width 1 would report 1 as prime in batch 1
U64_MAX = 2 ** 64 - 1               # domain ceiling
BATCH_WIDTH_ENV = "PRIME_SIEVE_BATCH_WIDTH"


# ------------------------- Errors -------------------------

class SieveError(Exception):
    """Base class for sieve failures."""


class SieveConfigError(SieveError, ValueError):
    """Batch width unusable, or the sieving headroom invariant does not hold."""


class SieveRangeError(SieveError, OverflowError):
    """Value or batch outside the unsigned 64-bit domain."""


def resolve_batch_width(width: Optional[int] = None) -> int:
    """
    Pick the batch width:
      - explicit width -> validated and returned
      - None -> $PRIME_SIEVE_BATCH_WIDTH if set, else DEFAULT_BATCH_WIDTH
    """
    if width is None:
        raw = os.getenv(BATCH_WIDTH_ENV)
        if raw is None or not raw.strip():
            return DEFAULT_BATCH_WIDTH
        try:
            width = int(raw.strip().replace("_", ""))
        except ValueError as exc:
            raise SieveConfigError(f"{BATCH_WIDTH_ENV}={raw!r} is not an integer") from exc
    if isinstance(width, bool) or not isinstance(width, int):
        raise SieveConfigError(f"batch width must be an int, got {type(width).__name__}")
    if width < MIN_BATCH_WIDTH:
        raise SieveConfigError(f"batch width must be >= {MIN_BATCH_WIDTH}, got {width}")
    return width


def has_sieving_headroom(offset: int, upper: int) -> bool:
    """
    True if the primes below `offset` suffice to sieve [offset, upper):
    every composite there must have a prime factor < offset.
    """
    return isqrt(upper - 1) < offset


def _check_domain(n: int) -> None:
    if n < 0 or n > U64_MAX:
        raise SieveRangeError(f"{n} is outside [0, {U64_MAX}]")


# ------------------------- Batch bookkeeping -------------------------

class BatchTracker:
    """Current batch index over a fixed width; offset is derived, never stored."""

    __slots__ = ("_index", "_width")

    def __init__(self, width: int):
        self._index = 0
        self._width = width

    def advance(self) -> int:
        self._index += 1
        return self._index

    @property
    def index(self) -> int:
        return self._index

    @property
    def width(self) -> int:
        return self._width

    @property
    def offset(self) -> int:
        return self._index * self._width

    @property
    def upper(self) -> int:
        """Exclusive upper bound of the current batch."""
        return (self._index + 1) * self._width

    def __repr__(self) -> str:
        return f"BatchTracker(index={self._index}, width={self._width}, offset={self.offset})"


# ------------------------- Sieve engine -------------------------

class SegmentedSieve:
    """
    Incremental segmented Sieve of Eratosthenes.

    Batch 0 is sieved by the constructor. is_prime(n) sieves forward only as far
    as n needs; next_prime() and iteration extend one batch at a time.
    Not thread-safe: one caller at a time may drive the engine, while any number
    of readers may hold shared_handle() views.
    """

    def __init__(self, width: Optional[int] = None):
        self._tracker = BatchTracker(resolve_batch_width(width))
        self._store = PrimeStore()
        self._markers: np.ndarray = np.empty(0, dtype=bool)
        self._sequence: Optional[PrimeSequence] = None
        self.initialize(self._tracker.width)

    def initialize(self, width: int) -> List[int]:
        """Allocate the marker array and sieve batch 0 = [0, width) from scratch."""
        if self._markers.size or self._tracker.index:
            raise SieveConfigError("batch 0 is already sieved; build a new SegmentedSieve instead")
        if width != self._tracker.width:
            raise SieveConfigError(f"width {width} does not match the configured width {self._tracker.width}")
        span = min(width, U64_MAX + 1)
        m = np.ones(width, dtype=bool)
        m[:2] = False
        for i in range(2, isqrt(span - 1) + 1):
            if m[i]:
                m[i * i:span:i] = False
        found = np.flatnonzero(m[:span]).tolist()
        self._store.record(found)
        self._markers = m
        logger.debug("batch 0 [0, %d): %d primes (width=%d)", span, len(found), width)
        return found

    def compute_next_batch(self) -> List[int]:
        """
        Advance one batch and sieve it with every known prime that can matter.
        Returns the primes found in the new batch.
        """
        width = self._tracker.width
        offset = (self._tracker.index + 1) * width
        if offset > U64_MAX:
            raise SieveRangeError(f"next batch would start at {offset}, past {U64_MAX}")
        span = min(width, U64_MAX - offset + 1)
        upper = offset + span
        if not has_sieving_headroom(offset, upper):
            raise SieveConfigError(
                f"width {width} too small: primes up to {isqrt(upper - 1)} "
                f"are needed for [{offset}, {upper}) but only those below {offset} are known"
            )
        self._tracker.advance()

        m = self._markers
        m.fill(True)
        for p in self._store.primes_up_to(isqrt(upper - 1)):
            start = -(-offset // p) * p     # ceil(offset / p) * p
            m[start - offset:span:p] = False

        found = [offset + i for i in np.flatnonzero(m[:span]).tolist()]
        self._store.record(found)
        logger.debug("batch %d [%d, %d): %d primes",
                     self._tracker.index, offset, upper, len(found))
        return found

    def ensure_sieved_through(self, n: int) -> None:
        """Sieve forward until n lies inside an already-sieved batch."""
        _check_domain(n)
        while n >= self._tracker.upper:
            self.compute_next_batch()

    def is_prime(self, n: int) -> bool:
        self.ensure_sieved_through(n)
        return self._store.contains(n)

    def next_prime(self) -> int:
        """Next prime from this sieve's own default sequence (2, 3, 5, ...)."""
        if self._sequence is None:
            self._sequence = PrimeSequence(self)
        return self._sequence.next_prime()

    def primes(self) -> "PrimeSequence":
        """A fresh, independent cursor starting at 2."""
        return PrimeSequence(self)

    def primes_up_to(self, n: int) -> Iterator[int]:
        """Yield primes <= n (inclusive), in order."""
        if n < 2:
            return
        self.ensure_sieved_through(n)
        for p in self._store.primes_up_to(n):
            yield p

    def shared_handle(self) -> PrimeStoreView:
        """Live read-only view of the primes found so far."""
        return self._store.shared_handle()

    @property
    def primes_found(self) -> Tuple[int, ...]:
        return self._store.ordered_view()

    @property
    def store(self) -> PrimeStore:
        return self._store

    @property
    def width(self) -> int:
        return self._tracker.width

    @property
    def batch_index(self) -> int:
        return self._tracker.index

    @property
    def sieved_through(self) -> int:
        """Largest value whose primality is already decided."""
        return min(self._tracker.upper, U64_MAX + 1) - 1

    def __contains__(self, n: int) -> bool:
        return self.is_prime(n)

    def __iter__(self) -> "PrimeSequence":
        return PrimeSequence(self)

    def __repr__(self) -> str:
        return (f"SegmentedSieve(width={self.width}, batch={self.batch_index}, "
                f"primes={len(self._store)})")


# ------------------------- Lazy sequence -------------------------

class PrimeSequence:
    """
    Unbounded, ascending cursor over the primes of a SegmentedSieve.

    Each instance starts at 2 and keeps its own position. A step is O(1) while
    the store already holds the next prime; otherwise it blocks while the sieve
    computes one or more whole batches (`width` candidates each).
    """

    def __init__(self, sieve: SegmentedSieve):
        self._sieve = sieve
        self._primes = sieve.shared_handle()
        self._cursor = 0

    @property
    def position(self) -> int:
        """Count of primes handed out so far."""
        return self._cursor

    def next_prime(self) -> int:
        while self._cursor >= len(self._primes):
            self._sieve.compute_next_batch()
        p = self._primes[self._cursor]
        self._cursor += 1
        return p

    def __iter__(self) -> "PrimeSequence":
        return self

    def __next__(self) -> int:
        try:
            return self.next_prime()
        except SieveRangeError as exc:
            # only reachable once the 64-bit domain is exhausted
            raise StopIteration from exc
