# prime_store.py
"""
Prime Store — ordered record of discovered primes plus a membership set.

The ordered list and the set always hold the same values: both are updated
inside one critical section, so a reader never sees a prime in one view and
not the other. A PrimeStoreView is a live, read-only handle over the same
store; primes recorded later show up through a handle obtained earlier.
"""

from __future__ import annotations

import threading
from bisect import bisect_right
from collections.abc import Sequence
from typing import Iterable, Iterator, List, Optional, Set, Tuple


class PrimeStore:
    """Append-only, strictly increasing list of primes with O(1) membership."""

    def __init__(self):
        self._ordered: List[int] = []
        self._members: Set[int] = set()
        self._lock = threading.Lock()

    def record(self, values: Iterable[int]) -> int:
        """
        Append a batch of newly discovered primes (ascending) to both views.
        Returns the number of primes recorded.
        """
        batch = list(values)
        if not batch:
            return 0
        for a, b in zip(batch, batch[1:]):
            if b <= a:
                raise ValueError(f"primes must be recorded in ascending order: {b} after {a}")
        with self._lock:
            if self._ordered and batch[0] <= self._ordered[-1]:
                raise ValueError(
                    f"primes must be recorded in ascending order: {batch[0]} after {self._ordered[-1]}"
                )
            self._ordered.extend(batch)
            self._members.update(batch)
        return len(batch)

    def contains(self, n: int) -> bool:
        """True only if n was already recorded; unsieved primes read as False."""
        with self._lock:
            return n in self._members

    def ordered_view(self) -> Tuple[int, ...]:
        """Snapshot of every prime recorded so far, ascending."""
        with self._lock:
            return tuple(self._ordered)

    def primes_up_to(self, limit: int) -> List[int]:
        """Recorded primes p <= limit, ascending (a copy)."""
        with self._lock:
            return self._ordered[:bisect_right(self._ordered, limit)]

    def shared_handle(self) -> "PrimeStoreView":
        return PrimeStoreView(self)

    @property
    def largest(self) -> Optional[int]:
        with self._lock:
            return self._ordered[-1] if self._ordered else None

    def _get(self, index):
        with self._lock:
            return self._ordered[index]

    def __contains__(self, n: int) -> bool:
        return self.contains(n)

    def __len__(self) -> int:
        with self._lock:
            return len(self._ordered)

    def __iter__(self) -> Iterator[int]:
        # walk by position so primes appended mid-iteration are still reached
        i = 0
        while True:
            try:
                yield self._get(i)
            except IndexError:
                return
            i += 1

    def __repr__(self) -> str:
        return f"PrimeStore(count={len(self)}, largest={self.largest})"


class PrimeStoreView(Sequence):
    """
    Read-only handle sharing a PrimeStore with its owner.
    Length, indexing and membership always reflect the store's current state.
    """

    __slots__ = ("_store",)

    def __init__(self, store: PrimeStore):
        self._store = store

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._store.ordered_view()[index]
        return self._store._get(index)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, n) -> bool:
        return self._store.contains(n)

    def __iter__(self) -> Iterator[int]:
        return iter(self._store)

    @property
    def largest(self) -> Optional[int]:
        return self._store.largest

    def snapshot(self) -> Tuple[int, ...]:
        return self._store.ordered_view()

    def __repr__(self) -> str:
        return f"PrimeStoreView(count={len(self)}, largest={self.largest})"
