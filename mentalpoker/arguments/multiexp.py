"""
Multi-exponentiation argument.

Statement: public ciphertexts ``C[0..n)``, a public ``target``, the
encryption key ``ek`` and ``vec_a_cmt = Cmt(s; a)``. The prover knows
``a``, ``s`` and ``rho`` with::

    target = Σ a[i]·C[i] + Enc(ek, rho; identity)

This is the Bayer-Groth multi-exponentiation argument specialised to a
single row. Its two-step recursion has a boundary at index 0 (fresh random
exponents and blinders) and at index 1 (the statement itself: β_1 = 0,
Cmt(β_1) = identity, E_1 = target). The index-1 terms are known to the
verifier and are therefore not transmitted. As in the product argument,
only the prover's commitments are absorbed into the transcript.

Prover::

    a0 ← random vector, r0, β0, sβ0, τ0 ← random
    cmt_a0    = Cmt(r0; a0)
    cmt_beta0 = Cmt(sβ0; [β0])
    e0        = Enc(ek, τ0; β0·base) + Σ a0[i]·C[i]

    transcript ← cmt_a0, cmt_beta0, e0
    x = H(transcript)

    a_open = a0 + x·a    r_open = r0 + x·s    tau_open = τ0 + x·rho
    beta_open = β0       s_beta_open = sβ0

Verifier::

    Cmt(r_open; a_open)                                  == cmt_a0 + x·vec_a_cmt
    Cmt(s_beta_open; [beta_open])                        == cmt_beta0
    Enc(ek, tau_open; beta_open·base) + Σ a_open[i]·C[i] == e0 + x·target
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ..elgamal import Ciphertext, EncKey, enc, weighted_sum
from ..group import Element, Scalar
from ..pedersen import PedersenContext
from ..rng import RandomSource
from ..transcript import Transcript
from ..wire import Reader, WireCodec, Writer

logger = logging.getLogger(__name__)

__all__ = ["MultiExpProof", "prove"]


@dataclass(frozen=True, slots=True)
class MultiExpProof(WireCodec):
    cmt_a0: Element
    cmt_beta0: Element
    e0: Ciphertext
    a_open: Tuple[Scalar, ...]
    r_open: Scalar
    beta_open: Scalar
    s_beta_open: Scalar
    tau_open: Scalar

    def __post_init__(self) -> None:
        object.__setattr__(self, "a_open", tuple(self.a_open))

    def write(self, w: Writer) -> None:
        self.cmt_a0.write(w)
        self.cmt_beta0.write(w)
        self.e0.write(w)
        w.vec(self.a_open, lambda w_, s: s.write(w_))
        self.r_open.write(w)
        self.beta_open.write(w)
        self.s_beta_open.write(w)
        self.tau_open.write(w)

    @classmethod
    def read(cls, r: Reader) -> "MultiExpProof":
        return cls(
            cmt_a0=Element.read(r),
            cmt_beta0=Element.read(r),
            e0=Ciphertext.read(r),
            a_open=tuple(r.vec(Scalar.read, "MultiExpProof.a_open")),
            r_open=Scalar.read(r),
            beta_open=Scalar.read(r),
            s_beta_open=Scalar.read(r),
            tau_open=Scalar.read(r),
        )


def prove(
    ek: EncKey,
    ctx: PedersenContext,
    trx: Transcript,
    ciphertexts: Sequence[Ciphertext],
    target: Ciphertext,
    vec_a_cmt: Element,
    vec_a: Sequence[Scalar],
    s: Scalar,
    rho: Scalar,
    *,
    rng: Optional[RandomSource] = None,
) -> MultiExpProof:
    n = len(vec_a)
    if n == 0 or n != len(ciphertexts):
        raise ValueError(
            f"multi-exp argument needs matching non-empty inputs: {len(ciphertexts)} ciphertexts, {n} exponents"
        )
    if n > ctx.capacity:
        raise ValueError(f"vector of length {n} exceeds commitment capacity {ctx.capacity}")

    vec_a0 = [Scalar.random(rng) for _ in range(n)]
    r_0 = Scalar.random(rng)
    beta_0 = Scalar.random(rng)
    s_beta_0 = Scalar.random(rng)
    tau_0 = Scalar.random(rng)

    cmt_a0 = ctx.commit(r_0, vec_a0)
    cmt_beta0 = ctx.commit(s_beta_0, [beta_0])
    e0 = enc(ek, tau_0, ek.enc_base.scale(beta_0)) + weighted_sum(ciphertexts, vec_a0)

    trx.append_element(cmt_a0)
    trx.append_element(cmt_beta0)
    trx.append_message(e0)
    x = trx.hash_to_scalar()

    logger.debug("multi-exp argument generated for n=%d", n)
    return MultiExpProof(
        cmt_a0=cmt_a0,
        cmt_beta0=cmt_beta0,
        e0=e0,
        a_open=tuple(a0 + x * a for a0, a in zip(vec_a0, vec_a)),
        r_open=r_0 + x * s,
        beta_open=beta_0,
        s_beta_open=s_beta_0,
        tau_open=tau_0 + x * rho,
    )
