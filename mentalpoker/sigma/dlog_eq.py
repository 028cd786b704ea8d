"""
Proof that two discrete logarithms are equal.

Statement: ``p1 = x·b1`` and ``p2 = x·b2`` for the same ``x``. Used to bind a
partial decryption (``p2``) to a previously published key share (``p1``).
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

__all__ = ["DLogEqProof", "prove"]


@dataclass(frozen=True, slots=True)
class DLogEqProof(WireCodec):
    t1: Element
    t2: Element
    s: Scalar

    def write(self, w: Writer) -> None:
        self.t1.write(w)
        self.t2.write(w)
        self.s.write(w)

    @classmethod
    def read(cls, r: Reader) -> "DLogEqProof":
        return cls(Element.read(r), Element.read(r), Scalar.read(r))


def prove(
    trx: Transcript,
    b1: Element,
    p1: Element,
    b2: Element,
    p2: Element,
    witness: Scalar,
    *,
    rng: Optional[RandomSource] = None,
) -> DLogEqProof:
    for e in (b1, p1, b2, p2):
        trx.append_element(e)
    k = Scalar.random(rng)
    t1 = b1.scale(k)
    t2 = b2.scale(k)
    trx.append_element(t1)
    trx.append_element(t2)
    c = trx.hash_to_scalar()
    logger.debug("dlog-eq proof generated (transcript %d bytes)", len(trx))
    return DLogEqProof(t1, t2, k + c * witness)
