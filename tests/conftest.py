from math import isqrt

import pytest


def simple_sieve(limit):
    """Plain Sieve of Eratosthenes up to limit (inclusive)."""
    if limit < 2:
        return []
    sieve = bytearray(b"\x01") * (limit + 1)
    sieve[0:2] = b"\x00\x00"
    for p in range(2, isqrt(limit) + 1):
        if sieve[p]:
            start = p * p
            sieve[start:limit + 1:p] = b"\x00" * (((limit - start) // p) + 1)
    return [i for i, ok in enumerate(sieve) if ok]


@pytest.fixture(scope="session")
def reference_primes():
    # covers the 10,000th prime (104729) and 1299709
    return simple_sieve(1_300_000)


@pytest.fixture(scope="session")
def reference_set(reference_primes):
    return set(reference_primes)


@pytest.fixture
def jump_to_last_batch():
    """Move a sieve's tracker onto the batch that holds U64_MAX."""
    from prime_sieve import U64_MAX

    def jump(sieve):
        sieve._tracker._index = U64_MAX // sieve.width
        return sieve

    return jump
