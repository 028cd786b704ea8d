# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
mentalpoker.constants
=====================

Fixed sizes, state codes and domain tags shared across the package.

Domain tags seed every session transcript so that a proof produced for one
protocol (or one session address) can never be replayed as a proof for
another.
"""

from __future__ import annotations

from typing import Final

# --- Group / wire sizes -------------------------------------------------------

#: Order of the BLS12-381 G1 subgroup (scalar field modulus).
CURVE_ORDER: Final[int] = 0x73EDA753299D7D483339D80809A1D80553BDA402FFFE5BFEFFFFFFFF00000001

ELEMENT_BYTES: Final[int] = 48
SCALAR_BYTES: Final[int] = 32
ADDRESS_BYTES: Final[int] = 32

#: Hard ceiling on any uleb128 length prefix (BCS encodes lengths as u32).
ULEB128_MAX: Final[int] = 0xFFFFFFFF

#: Default limit on decoded vector lengths; see MentalPokerConfig.max_vector_len.
DEFAULT_MAX_VECTOR_LEN: Final[int] = 1 << 16

# --- Transcript domains --------------------------------------------------------

DOMAIN_DKG: Final[bytes] = b"mentalpoker/dkg/v1"
DOMAIN_THRESHOLD_SCALAR_MUL: Final[bytes] = b"mentalpoker/threshold-scalar-mul/v1"
DOMAIN_REENCRYPTION: Final[bytes] = b"mentalpoker/reencryption/v1"
DOMAIN_SHUFFLE: Final[bytes] = b"mentalpoker/shuffle/v1"

#: Separates the `y` and `z` challenges of the shuffle argument.
SHUFFLE_NUDGE: Final[bytes] = b"NUDGE"

#: DST used when hashing arbitrary bytes onto G1.
HASH_TO_G1_DST: Final[bytes] = b"MENTALPOKER-V01-CS01-with-BLS12381G1_XMD:SHA-256_SSWU_RO_"

# --- Secret store stages -------------------------------------------------------

STAGE_DKG: Final[str] = "dkg"
STAGE_REENCRYPTION: Final[str] = "reencryption"

__all__ = [
    "CURVE_ORDER",
    "ELEMENT_BYTES",
    "SCALAR_BYTES",
    "ADDRESS_BYTES",
    "ULEB128_MAX",
    "DEFAULT_MAX_VECTOR_LEN",
    "DOMAIN_DKG",
    "DOMAIN_THRESHOLD_SCALAR_MUL",
    "DOMAIN_REENCRYPTION",
    "DOMAIN_SHUFFLE",
    "SHUFFLE_NUDGE",
    "HASH_TO_G1_DST",
    "STAGE_DKG",
    "STAGE_REENCRYPTION",
]
