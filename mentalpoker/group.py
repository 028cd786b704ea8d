# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
mentalpoker.group
=================

Scalars and points of the BLS12-381 G1 prime-order subgroup.

- Backend: ``py_ecc.optimized_bls12_381`` (projective coordinates).
- Encodings: 48-byte ZCash-compressed points, 32-byte little-endian scalars,
  each behind a uleb128 length prefix.

Public API
----------
- Scalar: zero(), one(), from_int(), random(rng), from_hash_mod_q(bytes),
  + - * unary-, inverse(), ** int
- Element: identity(), generator(), random(rng), hash_to_element(msg),
  + - unary-, scale(s), s * P, to_compressed(), from_compressed()
- msm(bases, scalars)

Notes
-----
- All decodes validate: canonical scalar (< Q), valid compression flags,
  on-curve, and (unless disabled in config) subgroup membership.
- Equality of elements is group equality; hashing goes through the
  compressed form so equal points hash equally regardless of projective
  representation.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from py_ecc.bls.hash_to_curve import hash_to_G1
from py_ecc.bls.point_compression import compress_G1, decompress_G1
from py_ecc.optimized_bls12_381 import (
    G1 as _G1,
    Z1 as _Z1,
    add as _add,
    b as _B,
    eq as _eq,
    is_inf as _is_inf,
    is_on_curve as _is_on_curve,
    multiply as _multiply,
    neg as _neg,
)

from .constants import CURVE_ORDER, ELEMENT_BYTES, HASH_TO_G1_DST, SCALAR_BYTES
from .errors import MalformedEncoding
from .rng import RandomSource, resolve
from .wire import Reader, WireCodec, Writer

Q = CURVE_ORDER

# Treat py_ecc points as opaque tuples.
Point = Any

__all__ = ["Q", "Scalar", "Element", "msm", "inner_product"]


# -------------------------
# Scalars
# -------------------------


@dataclass(frozen=True, slots=True)
class Scalar(WireCodec):
    """An element of Z_Q, always stored reduced."""

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise TypeError("Scalar value must be an int")
        if not 0 <= self.value < Q:
            raise ValueError("Scalar value out of range [0, Q)")

    # --- constructors ---

    @classmethod
    def zero(cls) -> "Scalar":
        return cls(0)

    @classmethod
    def one(cls) -> "Scalar":
        return cls(1)

    @classmethod
    def from_int(cls, v: int) -> "Scalar":
        """Reduce any Python int (negative included) mod Q."""
        return cls(v % Q)

    @classmethod
    def random(cls, rng: Optional[RandomSource] = None) -> "Scalar":
        """64 random bytes read little-endian and reduced mod Q (bias < 2^-128)."""
        raw = resolve(rng).random_bytes(64)
        return cls(int.from_bytes(raw, "little") % Q)

    @classmethod
    def from_hash_mod_q(cls, digest: bytes) -> "Scalar":
        """Interpret `digest` as a big-endian integer and reduce mod Q."""
        return cls(int.from_bytes(digest, "big") % Q)

    # --- arithmetic ---

    @staticmethod
    def _v(other: Any) -> Optional[int]:
        if isinstance(other, Scalar):
            return other.value
        if isinstance(other, int) and not isinstance(other, bool):
            return other
        return None

    def __add__(self, other: Any) -> "Scalar":
        o = self._v(other)
        if o is None:
            return NotImplemented
        return Scalar((self.value + o) % Q)

    __radd__ = __add__

    def __sub__(self, other: Any) -> "Scalar":
        o = self._v(other)
        if o is None:
            return NotImplemented
        return Scalar((self.value - o) % Q)

    def __rsub__(self, other: Any) -> "Scalar":
        o = self._v(other)
        if o is None:
            return NotImplemented
        return Scalar((o - self.value) % Q)

    def __mul__(self, other: Any) -> "Scalar":
        o = self._v(other)
        if o is None:
            return NotImplemented
        return Scalar((self.value * o) % Q)

    __rmul__ = __mul__

    def __neg__(self) -> "Scalar":
        return Scalar((-self.value) % Q)

    def __pow__(self, e: int) -> "Scalar":
        if e < 0:
            return self.inverse() ** (-e)
        return Scalar(pow(self.value, e, Q))

    def neg(self) -> "Scalar":
        return -self

    def inverse(self) -> "Scalar":
        if self.value == 0:
            raise ValueError("zero has no inverse mod Q")
        return Scalar(pow(self.value, Q - 2, Q))

    def is_zero(self) -> bool:
        return self.value == 0

    # --- wire ---

    def to_bytes(self) -> bytes:
        """Raw 32-byte little-endian form (no length prefix)."""
        return self.value.to_bytes(SCALAR_BYTES, "little")

    def write(self, w: Writer) -> None:
        w.bytes(self.to_bytes())

    @classmethod
    def read(cls, r: Reader) -> "Scalar":
        raw = r.fixed_bytes(SCALAR_BYTES, "Scalar")
        v = int.from_bytes(raw, "little")
        if v >= Q:
            raise r.fail("Scalar", "non-canonical encoding (value >= Q)")
        return cls(v)

    def __repr__(self) -> str:
        return f"Scalar(0x{self.value:064x})"


# -------------------------
# Group elements
# -------------------------


@dataclass(frozen=True, slots=True, eq=False)
class Element(WireCodec):
    """A point of the G1 prime-order subgroup (py_ecc projective triple)."""

    point: Point

    # --- constructors ---

    @classmethod
    def identity(cls) -> "Element":
        return cls(_Z1)

    @classmethod
    def generator(cls) -> "Element":
        return cls(_G1)

    @classmethod
    def hash_to_element(cls, msg: bytes, dst: bytes = HASH_TO_G1_DST) -> "Element":
        """Hash arbitrary bytes onto G1 (RFC 9380 SSWU, random-oracle variant)."""
        return cls(hash_to_G1(msg, dst, hashlib.sha256))

    @classmethod
    def random(cls, rng: Optional[RandomSource] = None) -> "Element":
        """A uniformly random point with unknown discrete log."""
        return cls.hash_to_element(resolve(rng).random_bytes(32))

    # --- arithmetic ---

    def __add__(self, other: "Element") -> "Element":
        if not isinstance(other, Element):
            return NotImplemented
        return Element(_add(self.point, other.point))

    def __sub__(self, other: "Element") -> "Element":
        if not isinstance(other, Element):
            return NotImplemented
        return Element(_add(self.point, _neg(other.point)))

    def __neg__(self) -> "Element":
        return Element(_neg(self.point))

    def scale(self, s: Scalar) -> "Element":
        if s.value == 0 or _is_inf(self.point):
            return Element.identity()
        return Element(_multiply(self.point, s.value))

    def __rmul__(self, s: Any) -> "Element":
        if isinstance(s, Scalar):
            return self.scale(s)
        return NotImplemented

    def is_identity(self) -> bool:
        return bool(_is_inf(self.point))

    # --- equality ---

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Element):
            return NotImplemented
        return bool(_eq(self.point, other.point))

    def __hash__(self) -> int:
        return hash(self.to_compressed())

    # --- wire ---

    def to_compressed(self) -> bytes:
        """48-byte ZCash-style compressed form."""
        return int(compress_G1(self.point)).to_bytes(ELEMENT_BYTES, "big")

    @classmethod
    def from_compressed(cls, data: bytes, *, check_subgroup: bool = True) -> "Element":
        """Parse a compressed point; raises ValueError when it is not a valid G1 subgroup point."""
        if len(data) != ELEMENT_BYTES:
            raise ValueError(f"compressed G1 point must be {ELEMENT_BYTES} bytes")
        pt = decompress_G1(int.from_bytes(data, "big"))
        if not _is_inf(pt):
            if not _is_on_curve(pt, _B):
                raise ValueError("point is not on the curve")
            if check_subgroup and not _is_inf(_multiply(pt, Q)):
                raise ValueError("point is not in the prime-order subgroup")
        return cls(pt)

    def write(self, w: Writer) -> None:
        w.bytes(self.to_compressed())

    @classmethod
    def read(cls, r: Reader) -> "Element":
        start = r.offset
        raw = r.fixed_bytes(ELEMENT_BYTES, "Element")
        try:
            return cls.from_compressed(raw, check_subgroup=r.check_subgroup)
        except ValueError as e:
            raise MalformedEncoding("Element", str(e), start) from e

    def __repr__(self) -> str:
        return f"Element({self.to_compressed().hex()})"


def msm(bases: Sequence[Element], scalars: Sequence[Scalar]) -> Element:
    """Naive multi-scalar multiplication Σ scalars[i]·bases[i]."""
    if len(bases) != len(scalars):
        raise ValueError(f"msm length mismatch: {len(bases)} bases, {len(scalars)} scalars")
    acc = Element.identity()
    for base, s in zip(bases, scalars):
        acc = acc + base.scale(s)
    return acc


def inner_product(a: Iterable[Scalar], b: Iterable[Scalar]) -> Scalar:
    """Σ a[i]·b[i] over Z_Q (strict: lengths must match)."""
    acc = 0
    for x, y in zip(a, b, strict=True):
        acc += x.value * y.value
    return Scalar(acc % Q)
