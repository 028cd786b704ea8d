"""
Single-value product argument.

Given ``vec_a_cmt = Cmt(r; a)`` with ``len(a) = n >= 2`` and a public scalar
``target``, prove ``Π a[i] == target`` without opening ``a``. Only the
prover's commitments are absorbed; the caller binds the statement through
the transcript it hands in.

Prover (one Fiat-Shamir round)::

    c[i]  = a[0]·...·a[i]                      running products, c[n-1] = target
    d     ← random vector, r_d ← random
    δ     = [d[0], random..., 0]               δ[0] = d[0], δ[n-1] = 0
    s1, sx ← random

    vec_d_cmt       = Cmt(r_d; d)
    cmt_delta_small = Cmt(s1; [-δ[i]·d[i+1]]                        for i < n-1)
    cmt_delta_big   = Cmt(sx; [δ[i+1] - a[i+1]·δ[i] - c[i]·d[i+1]] for i < n-1)

    transcript ← vec_d_cmt, cmt_delta_small, cmt_delta_big
    x = H(transcript)

    a_tilde = x·a + d        b_tilde = x·c + δ
    r_tilde = x·r + r_d      s_tilde = x·sx + s1

Verifier::

    Cmt(r_tilde; a_tilde)                                   == x·vec_a_cmt + vec_d_cmt
    Cmt(s_tilde; [x·b_tilde[i+1] - b_tilde[i]·a_tilde[i+1]]) == x·cmt_delta_big + cmt_delta_small
    b_tilde[0]   == a_tilde[0]
    b_tilde[n-1] == x·target
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..group import Element, Scalar
from ..pedersen import PedersenContext
from ..rng import RandomSource
from ..transcript import Transcript
from ..wire import Reader, WireCodec, Writer

logger = logging.getLogger(__name__)

__all__ = ["ProductProof", "prove", "running_products"]


@dataclass(frozen=True, slots=True)
class ProductProof(WireCodec):
    vec_d_cmt: Element
    cmt_delta_small: Element
    cmt_delta_big: Element
    a_tilde: Tuple[Scalar, ...]
    b_tilde: Tuple[Scalar, ...]
    r_tilde: Scalar
    s_tilde: Scalar

    def __post_init__(self) -> None:
        object.__setattr__(self, "a_tilde", tuple(self.a_tilde))
        object.__setattr__(self, "b_tilde", tuple(self.b_tilde))
        if len(self.a_tilde) != len(self.b_tilde):
            raise ValueError("a_tilde and b_tilde must have equal length")

    def write(self, w: Writer) -> None:
        self.vec_d_cmt.write(w)
        self.cmt_delta_small.write(w)
        self.cmt_delta_big.write(w)
        w.vec(self.a_tilde, lambda w_, s: s.write(w_))
        w.vec(self.b_tilde, lambda w_, s: s.write(w_))
        self.r_tilde.write(w)
        self.s_tilde.write(w)

    @classmethod
    def read(cls, r: Reader) -> "ProductProof":
        return cls(
            vec_d_cmt=Element.read(r),
            cmt_delta_small=Element.read(r),
            cmt_delta_big=Element.read(r),
            a_tilde=tuple(r.vec(Scalar.read, "ProductProof.a_tilde")),
            b_tilde=tuple(r.vec(Scalar.read, "ProductProof.b_tilde")),
            r_tilde=Scalar.read(r),
            s_tilde=Scalar.read(r),
        )


def running_products(vec: Sequence[Scalar]) -> List[Scalar]:
    out: List[Scalar] = []
    acc = Scalar.one()
    for v in vec:
        acc = acc * v
        out.append(acc)
    return out


def prove(
    ctx: PedersenContext,
    trx: Transcript,
    vec_a_cmt: Element,
    target: Scalar,
    vec_a: Sequence[Scalar],
    r: Scalar,
    *,
    rng: Optional[RandomSource] = None,
) -> ProductProof:
    n = len(vec_a)
    if n < 2:
        raise ValueError("product argument needs a vector of length >= 2")
    if n > ctx.capacity:
        raise ValueError(f"vector of length {n} exceeds commitment capacity {ctx.capacity}")
    vec_c = running_products(vec_a)
    if vec_c[-1] != target:
        raise ValueError("product of the committed vector does not equal the target")

    vec_d = [Scalar.random(rng) for _ in range(n)]
    r_d = Scalar.random(rng)
    delta = [vec_d[0]] + [Scalar.random(rng) for _ in range(n - 2)] + [Scalar.zero()]
    s_1 = Scalar.random(rng)
    s_x = Scalar.random(rng)

    vec_d_cmt = ctx.commit(r_d, vec_d)
    small = [-(delta[i] * vec_d[i + 1]) for i in range(n - 1)]
    big = [
        delta[i + 1] - vec_a[i + 1] * delta[i] - vec_c[i] * vec_d[i + 1]
        for i in range(n - 1)
    ]
    cmt_delta_small = ctx.commit(s_1, small)
    cmt_delta_big = ctx.commit(s_x, big)

    trx.append_element(vec_d_cmt)
    trx.append_element(cmt_delta_small)
    trx.append_element(cmt_delta_big)
    x = trx.hash_to_scalar()

    a_tilde = tuple(x * a + d for a, d in zip(vec_a, vec_d))
    b_tilde = tuple(x * c + dl for c, dl in zip(vec_c, delta))
    logger.debug("product argument generated for n=%d", n)
    return ProductProof(
        vec_d_cmt=vec_d_cmt,
        cmt_delta_small=cmt_delta_small,
        cmt_delta_big=cmt_delta_big,
        a_tilde=a_tilde,
        b_tilde=b_tilde,
        r_tilde=x * r + r_d,
        s_tilde=x * s_x + s_1,
    )
