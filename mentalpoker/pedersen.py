"""
Pedersen vector commitments.

A context is an ordered tuple of independent bases ``[B0, B1, ..., Bn]``:

    commit(r, v) = r·B0 + Σ v[i]·B[i+1]

``v`` is zero-padded up to the context capacity ``n``. The map is a group
homomorphism in ``(r, v)``, which the arguments rely on to combine
commitments (``y·Cmt(a) + Cmt(b) = Cmt(y·a + b)``). No randomness is drawn
here; callers supply the blinding scalar.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .group import Element, Scalar, msm
from .rng import RandomSource
from .wire import Reader, WireCodec, Writer

__all__ = ["PedersenContext"]


@dataclass(frozen=True, slots=True)
class PedersenContext(WireCodec):
    bases: Tuple[Element, ...]

    def __post_init__(self) -> None:
        if len(self.bases) < 2:
            raise ValueError("Pedersen context needs a blinding base and at least one message base")
        object.__setattr__(self, "bases", tuple(self.bases))

    @property
    def capacity(self) -> int:
        """Maximum vector length this context can commit to."""
        return len(self.bases) - 1

    def commit(self, r: Scalar, vec: Sequence[Scalar]) -> Element:
        if len(vec) > self.capacity:
            raise ValueError(f"vector of length {len(vec)} exceeds commitment capacity {self.capacity}")
        # zero padding contributes nothing, so only the used bases are scaled
        return msm(self.bases[: len(vec) + 1], [r, *vec])

    @classmethod
    def random(cls, n: int, rng: Optional[RandomSource] = None) -> "PedersenContext":
        """Fresh context with `n` message bases."""
        return cls(tuple(Element.random(rng) for _ in range(n + 1)))

    @classmethod
    def from_seed(cls, n: int, seed: bytes) -> "PedersenContext":
        """Deterministic, nothing-up-my-sleeve bases: hash_to_G1(sha3(seed) || index)."""
        root = hashlib.sha3_256(seed).digest()
        return cls(
            tuple(Element.hash_to_element(root + i.to_bytes(4, "little")) for i in range(n + 1))
        )

    def write(self, w: Writer) -> None:
        w.vec(self.bases, lambda w_, e: e.write(w_))

    @classmethod
    def read(cls, r: Reader) -> "PedersenContext":
        return cls(tuple(r.vec(Element.read, "PedersenContext.bases")))
