"""
Proof of knowledge of a discrete logarithm.

Statement: ``public = x·base``.

1. append base, public
2. k ← random, T = k·base, append T
3. c = H(transcript)
4. s = k + c·x

The verifier accepts when ``s·base == T + c·public``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..group import Element, Scalar
from ..rng import RandomSource
from ..transcript import Transcript
from ..wire import Reader, WireCodec, Writer

logger = logging.getLogger(__name__)

__all__ = ["DLogProof", "prove"]


@dataclass(frozen=True, slots=True)
class DLogProof(WireCodec):
    t: Element
    s: Scalar

    def write(self, w: Writer) -> None:
        self.t.write(w)
        self.s.write(w)

    @classmethod
    def read(cls, r: Reader) -> "DLogProof":
        return cls(Element.read(r), Scalar.read(r))


def prove(
    trx: Transcript,
    base: Element,
    public: Element,
    witness: Scalar,
    *,
    rng: Optional[RandomSource] = None,
) -> DLogProof:
    trx.append_element(base)
    trx.append_element(public)
    k = Scalar.random(rng)
    t = base.scale(k)
    trx.append_element(t)
    c = trx.hash_to_scalar()
    logger.debug("dlog proof generated (transcript %d bytes)", len(trx))
    return DLogProof(t, k + c * witness)
