"""
Randomness sources for proof generation.

Every prover in this package takes an explicit ``rng`` argument instead of
reaching for a global generator. Production code passes nothing and gets
:class:`SystemRandomSource` (the OS CSPRNG via :mod:`secrets`); tests pass a
:class:`DeterministicRandomSource` so proofs and contributions are
reproducible byte-for-byte.

Public API
----------
- RandomSource (Protocol): random_bytes(n) -> bytes
- SystemRandomSource
- DeterministicRandomSource(seed)
- resolve(rng) -> RandomSource
- randbelow(rng, n) -> int
- random_permutation(rng, n) -> list[int]
"""

from __future__ import annotations

import hashlib
import secrets
from typing import List, Optional, Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    def random_bytes(self, n: int) -> bytes:
        """Return `n` uniformly random bytes."""
        ...


class SystemRandomSource:
    """Cryptographically secure source backed by the operating system."""

    def random_bytes(self, n: int) -> bytes:
        if n < 0:
            raise ValueError("n must be >= 0")
        return secrets.token_bytes(n)


class DeterministicRandomSource:
    """
    Reproducible byte stream: SHAKE-256(seed || u64_le(counter)) per request.

    NOT secure for real games; it exists so tests can pin down transcripts.
    """

    def __init__(self, seed: bytes | str | int) -> None:
        if isinstance(seed, int):
            seed = seed.to_bytes(8, "little", signed=False)
        elif isinstance(seed, str):
            seed = seed.encode("utf-8")
        self._seed = bytes(seed)
        self._counter = 0

    def random_bytes(self, n: int) -> bytes:
        if n < 0:
            raise ValueError("n must be >= 0")
        block = hashlib.shake_256(self._seed + self._counter.to_bytes(8, "little")).digest(n)
        self._counter += 1
        return block


_SYSTEM = SystemRandomSource()


def resolve(rng: Optional[RandomSource]) -> RandomSource:
    """Return `rng`, or the process-wide system source when None."""
    return _SYSTEM if rng is None else rng


def randbelow(rng: RandomSource, n: int) -> int:
    """Uniform integer in [0, n) by rejection sampling."""
    if n <= 0:
        raise ValueError("n must be > 0")
    nbytes = (n.bit_length() + 7) // 8 or 1
    excess = nbytes * 8 - n.bit_length()
    while True:
        v = int.from_bytes(rng.random_bytes(nbytes), "big") >> excess
        if v < n:
            return v


def random_permutation(rng: RandomSource, n: int) -> List[int]:
    """Fisher-Yates shuffle of range(n)."""
    perm = list(range(n))
    for i in range(n - 1, 0, -1):
        j = randbelow(rng, i + 1)
        perm[i], perm[j] = perm[j], perm[i]
    return perm


__all__ = [
    "RandomSource",
    "SystemRandomSource",
    "DeterministicRandomSource",
    "resolve",
    "randbelow",
    "random_permutation",
]
