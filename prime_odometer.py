# prime_odometer.py
"""
Prime Odometer — trial-division reference generator.

Advances a counter n -> n+1 and decides each candidate by trial division with
the primes discovered so far, up to isqrt(n). No batches, no marker array:
slower than SegmentedSieve, but simple enough to serve as its oracle.
"""

from __future__ import annotations

from bisect import bisect_left
from math import isqrt
from typing import Iterator, List, Tuple


class PrimeOdometer:
    """
    Minimal Prime Odometer: ordered primes plus a membership test.
    P holds every prime < n, ascending.
    """

    def __init__(self):
        self.n: int = 2            # next candidate
        self.P: List[int] = []     # discovered primes

    def _divisible(self, m: int) -> bool:
        bound = isqrt(m)
        for p in self.P:
            if p > bound:
                break
            if m % p == 0:
                return True
        return False

    def tick(self) -> Tuple[int, bool]:
        """Decide the current candidate, then advance. Returns (m, is_prime)."""
        m = self.n
        is_prime = not self._divisible(m)
        if is_prime:
            self.P.append(m)
        self.n = m + 1
        return (m, is_prime)

    def next_prime(self) -> int:
        while True:
            m, is_prime = self.tick()
            if is_prime:
                return m

    def has_prime(self, p: int) -> bool:
        """True if p is prime and the odometer has already passed it."""
        if p >= self.n:
            return False
        i = bisect_left(self.P, p)
        return i < len(self.P) and self.P[i] == p

    def primes_up_to(self, N: int) -> Iterator[int]:
        """Yield every prime <= N (inclusive), including ones already passed."""
        for p in self.P:
            if p > N:
                return
            yield p
        while self.n <= N:
            m, is_prime = self.tick()
            if is_prime:
                yield m
