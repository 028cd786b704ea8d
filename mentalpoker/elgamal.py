"""
ElGamal encryption over G1.

Keys and ciphertexts carry their encryption base explicitly, matching the
wire format of the on-chain programs:

    EncKey     = (enc_base, public_point)      public_point = x·enc_base
    DecKey     = (enc_base, private_scalar)
    Ciphertext = (enc_base, c0, c1)            c0 = r·enc_base, c1 = m + r·public_point

Ciphertexts are additively homomorphic: component-wise addition adds
plaintexts and randomizers, scaling multiplies both. ``weighted_sum`` is the
multi-ciphertext linear combination every argument builds on. Mixing bases
is a caller error and raises ``ValueError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .group import Element, Scalar
from .rng import RandomSource
from .wire import Reader, WireCodec, Writer

__all__ = [
    "EncKey",
    "DecKey",
    "Ciphertext",
    "keygen",
    "enc",
    "dec",
    "rerandomize",
    "weighted_sum",
]


def _same_base(a: Element, b: Element) -> None:
    if a != b:
        raise ValueError("ElGamal operands use different encryption bases")


@dataclass(frozen=True, slots=True)
class EncKey(WireCodec):
    enc_base: Element
    public_point: Element

    def write(self, w: Writer) -> None:
        self.enc_base.write(w)
        self.public_point.write(w)

    @classmethod
    def read(cls, r: Reader) -> "EncKey":
        return cls(Element.read(r), Element.read(r))


@dataclass(frozen=True, slots=True)
class DecKey(WireCodec):
    enc_base: Element
    private_scalar: Scalar

    def encryption_key(self) -> EncKey:
        return EncKey(self.enc_base, self.enc_base.scale(self.private_scalar))

    def write(self, w: Writer) -> None:
        self.enc_base.write(w)
        self.private_scalar.write(w)

    @classmethod
    def read(cls, r: Reader) -> "DecKey":
        return cls(Element.read(r), Scalar.read(r))


@dataclass(frozen=True, slots=True)
class Ciphertext(WireCodec):
    enc_base: Element
    c0: Element
    c1: Element

    @classmethod
    def zero(cls, enc_base: Element) -> "Ciphertext":
        """Trivial encryption of the identity with randomizer 0."""
        return cls(enc_base, Element.identity(), Element.identity())

    def __add__(self, other: "Ciphertext") -> "Ciphertext":
        if not isinstance(other, Ciphertext):
            return NotImplemented
        _same_base(self.enc_base, other.enc_base)
        return Ciphertext(self.enc_base, self.c0 + other.c0, self.c1 + other.c1)

    def __sub__(self, other: "Ciphertext") -> "Ciphertext":
        if not isinstance(other, Ciphertext):
            return NotImplemented
        _same_base(self.enc_base, other.enc_base)
        return Ciphertext(self.enc_base, self.c0 - other.c0, self.c1 - other.c1)

    def scale(self, s: Scalar) -> "Ciphertext":
        return Ciphertext(self.enc_base, self.c0.scale(s), self.c1.scale(s))

    def write(self, w: Writer) -> None:
        self.enc_base.write(w)
        self.c0.write(w)
        self.c1.write(w)

    @classmethod
    def read(cls, r: Reader) -> "Ciphertext":
        return cls(Element.read(r), Element.read(r), Element.read(r))


def keygen(enc_base: Element, rng: Optional[RandomSource] = None) -> Tuple[DecKey, EncKey]:
    dk = DecKey(enc_base, Scalar.random(rng))
    return dk, dk.encryption_key()


def enc(ek: EncKey, randomizer: Scalar, ptxt: Element) -> Ciphertext:
    return Ciphertext(
        ek.enc_base,
        ek.enc_base.scale(randomizer),
        ptxt + ek.public_point.scale(randomizer),
    )


def dec(dk: DecKey, ciph: Ciphertext) -> Element:
    _same_base(dk.enc_base, ciph.enc_base)
    return ciph.c1 - ciph.c0.scale(dk.private_scalar)


def rerandomize(ek: EncKey, ciph: Ciphertext, rho: Scalar) -> Ciphertext:
    """Add a fresh encryption of the identity; the plaintext is unchanged."""
    return ciph + enc(ek, rho, Element.identity())


def weighted_sum(ciphs: Sequence[Ciphertext], scalars: Sequence[Scalar]) -> Ciphertext:
    """Σ scalars[i]·ciphs[i]. All ciphertexts must share one encryption base."""
    if not ciphs:
        raise ValueError("weighted_sum needs at least one ciphertext")
    if len(ciphs) != len(scalars):
        raise ValueError(f"weighted_sum length mismatch: {len(ciphs)} vs {len(scalars)}")
    acc = Ciphertext.zero(ciphs[0].enc_base)
    for c, s in zip(ciphs, scalars):
        acc = acc + c.scale(s)
    return acc
