"""
Verifiable shuffle of ElGamal ciphertexts (Bayer-Groth 2012 composition).

Shuffle relation::

    shuffled[i] = rerandomize(ek, original[π(i)], ρ[i])

Proof generation, in transcript order (the statement is not absorbed;
the caller binds it through the transcript it passes in, e.g. a session
domain, address and round):

1. ``a[i] = π(i) + 1``; append ``vec_a_cmt = Cmt(r; a)``; challenge ``x``.
2. ``b[i] = x^π(i)`` over the powers ``x^0 .. x^(n-1)``; append
   ``vec_b_cmt = Cmt(s; b)``; challenge ``y``.
3. Append ``b"NUDGE"``; challenge ``z``.
4. Product argument, on a *cloned* transcript, over the committed vector
   ``d - z`` where ``d = y·a + b`` (blinding ``t = y·r + s``; commitment
   ``y·vec_a_cmt + vec_b_cmt + Cmt(0; [-z]*n)``) against the public target
   ``Π_i (y·(i+1) + x^i - z)``. This pins ``(a, b)`` to one permutation.
5. Multi-exp argument, on the *main* transcript: the shuffled ciphertexts
   combined by ``b`` equal ``Σ x^i·original[i]`` rerandomized by
   ``-Σ ρ[i]·b[i]``.

Both sub-arguments use the same ``vec_b_cmt``, so a single permutation has
to explain the product identity and the ciphertext identity at once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..constants import SHUFFLE_NUDGE
from ..elgamal import Ciphertext, EncKey, rerandomize, weighted_sum
from ..group import Element, Scalar, inner_product
from ..pedersen import PedersenContext
from ..rng import RandomSource, random_permutation, resolve
from ..transcript import Transcript
from ..wire import Reader, WireCodec, Writer
from . import multiexp, product
from .multiexp import MultiExpProof
from .product import ProductProof

logger = logging.getLogger(__name__)

__all__ = [
    "ShuffleProof",
    "ShuffleChallenges",
    "powers",
    "product_target",
    "prove",
    "shuffle",
]


@dataclass(frozen=True, slots=True)
class ShuffleProof(WireCodec):
    vec_a_cmt: Element
    vec_b_cmt: Element
    multiexp_proof: MultiExpProof
    product_proof: ProductProof

    def write(self, w: Writer) -> None:
        self.vec_a_cmt.write(w)
        self.vec_b_cmt.write(w)
        self.multiexp_proof.write(w)
        self.product_proof.write(w)

    @classmethod
    def read(cls, r: Reader) -> "ShuffleProof":
        return cls(
            vec_a_cmt=Element.read(r),
            vec_b_cmt=Element.read(r),
            multiexp_proof=MultiExpProof.read(r),
            product_proof=ProductProof.read(r),
        )


@dataclass(frozen=True, slots=True)
class ShuffleChallenges:
    x: Scalar
    y: Scalar
    z: Scalar


def powers(x: Scalar, n: int) -> List[Scalar]:
    """[x^0, x^1, ..., x^(n-1)]"""
    out: List[Scalar] = []
    acc = Scalar.one()
    for _ in range(n):
        out.append(acc)
        acc = acc * x
    return out


def product_target(ch: ShuffleChallenges, n: int) -> Scalar:
    """Π_{i<n} (y·(i+1) + x^i - z): the product an honest permutation yields."""
    acc = Scalar.one()
    for i, xi in enumerate(powers(ch.x, n)):
        acc = acc * (ch.y * (i + 1) + xi - ch.z)
    return acc


def _check_inputs(
    ctx: PedersenContext,
    original: Sequence[Ciphertext],
    shuffled: Sequence[Ciphertext],
    permutation: Sequence[int],
    rhos: Sequence[Scalar],
) -> int:
    n = len(original)
    if n < 2:
        raise ValueError("shuffle needs at least 2 ciphertexts")
    if not (len(shuffled) == len(permutation) == len(rhos) == n):
        raise ValueError("original, shuffled, permutation and rhos must have equal length")
    if sorted(permutation) != list(range(n)):
        raise ValueError("permutation must be a rearrangement of range(n)")
    if n > ctx.capacity:
        raise ValueError(f"deck of {n} cards exceeds commitment capacity {ctx.capacity}")
    return n


def prove(
    ek: EncKey,
    ctx: PedersenContext,
    trx: Transcript,
    original: Sequence[Ciphertext],
    shuffled: Sequence[Ciphertext],
    permutation: Sequence[int],
    rhos: Sequence[Scalar],
    *,
    rng: Optional[RandomSource] = None,
) -> ShuffleProof:
    n = _check_inputs(ctx, original, shuffled, permutation, rhos)

    vec_a = [Scalar(p + 1) for p in permutation]
    r = Scalar.random(rng)
    vec_a_cmt = ctx.commit(r, vec_a)
    trx.append_element(vec_a_cmt)
    x = trx.hash_to_scalar()

    x_powers = powers(x, n)
    vec_b = [x_powers[p] for p in permutation]
    s = Scalar.random(rng)
    vec_b_cmt = ctx.commit(s, vec_b)
    trx.append_element(vec_b_cmt)
    y = trx.hash_to_scalar()
    trx.append(SHUFFLE_NUDGE)
    z = trx.hash_to_scalar()
    ch = ShuffleChallenges(x, y, z)

    vec_neg_z_cmt = ctx.commit(Scalar.zero(), [-z] * n)
    vec_d_cmt = vec_a_cmt.scale(y) + vec_b_cmt
    t = y * r + s
    shifted = [y * a + b - z for a, b in zip(vec_a, vec_b)]

    product_proof = product.prove(
        ctx,
        trx.clone(),
        vec_d_cmt + vec_neg_z_cmt,
        product_target(ch, n),
        shifted,
        t,
        rng=rng,
    )

    rho = inner_product(rhos, vec_b)
    multiexp_proof = multiexp.prove(
        ek,
        ctx,
        trx,
        shuffled,
        weighted_sum(original, x_powers),
        vec_b_cmt,
        vec_b,
        s,
        -rho,
        rng=rng,
    )
    logger.debug("shuffle proof generated for %d ciphertexts", n)
    return ShuffleProof(vec_a_cmt, vec_b_cmt, multiexp_proof, product_proof)


def shuffle(
    ek: EncKey,
    ctx: PedersenContext,
    trx: Transcript,
    deck: Sequence[Ciphertext],
    *,
    rng: Optional[RandomSource] = None,
) -> Tuple[List[Ciphertext], ShuffleProof]:
    """Pick a secret permutation and rerandomizers, apply them and prove it."""
    rng = resolve(rng)
    n = len(deck)
    permutation = random_permutation(rng, n)
    rhos = [Scalar.random(rng) for _ in range(n)]
    shuffled = [rerandomize(ek, deck[p], rho) for p, rho in zip(permutation, rhos)]
    proof = prove(ek, ctx, trx, deck, shuffled, permutation, rhos, rng=rng)
    return shuffled, proof
