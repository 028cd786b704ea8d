# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
mentalpoker.transcript
======================

Fiat-Shamir transcript: an append-only byte buffer whose SHA3-512 digest,
read big-endian and reduced mod Q, yields each challenge.

Conventions
-----------
* Elements, scalars and ciphertexts are appended in their wire form
  (length prefixes included), so the transcript bytes are exactly what an
  external verifier would rebuild from the encoded proof.
* :meth:`Transcript.hash_to_scalar` does **not** reset or absorb its own
  output. Provers append the next commitment before asking for the next
  challenge; the order of appends is part of each protocol's definition.
* :meth:`Transcript.clone` forks the history so two sub-proofs can share a
  prefix without contaminating each other's challenges.
"""

from __future__ import annotations

import hashlib
from typing import TYPE_CHECKING

from .group import Element, Scalar
from .wire import WireCodec

if TYPE_CHECKING:  # pragma: no cover
    from .sessions.common import Address

__all__ = ["Transcript"]


class Transcript:
    __slots__ = ("_buf",)

    def __init__(self, domain: bytes = b"") -> None:
        self._buf = bytearray(domain)

    @classmethod
    def for_session(cls, domain: bytes, addr: "Address") -> "Transcript":
        """Transcript seeded with a protocol domain tag and the session address."""
        t = cls(domain)
        t.append(addr.to_bytes())
        return t

    def append(self, data: bytes) -> None:
        self._buf += data

    def append_element(self, e: Element) -> None:
        self._buf += e.encode()

    def append_scalar(self, s: Scalar) -> None:
        self._buf += s.encode()

    def append_u64(self, v: int) -> None:
        self._buf += v.to_bytes(8, "little")

    def append_message(self, obj: WireCodec) -> None:
        """Append any wire-encodable structure (ciphertexts, keys, ...)."""
        self._buf += obj.encode()

    def hash_to_scalar(self) -> Scalar:
        digest = hashlib.sha3_512(self._buf).digest()
        return Scalar.from_hash_mod_q(digest)

    def clone(self) -> "Transcript":
        t = Transcript()
        t._buf = bytearray(self._buf)
        return t

    def to_bytes(self) -> bytes:
        return bytes(self._buf)

    def __len__(self) -> int:
        return len(self._buf)
