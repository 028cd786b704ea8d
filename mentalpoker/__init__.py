"""
Mental poker cryptographic core.

Dealer-free card games over BLS12-381 G1:
- distributed key generation,
- Bayer-Groth verifiable shuffles of an ElGamal-encrypted deck,
- threshold scalar multiplication and re-encryption for private dealing.

Sessions are decoded from ledger snapshots, contributions are generated
locally and encoded for submission. Only light, stable exports are surfaced
here; see the subpackages for the full API.
"""

from __future__ import annotations

from .errors import (
    InvalidSessionState,
    MalformedEncoding,
    MentalPokerError,
    MissingLocalSecret,
    NotAContributor,
    SessionClosed,
    SessionNotSucceeded,
)
from .group import Element, Scalar
from .transcript import Transcript
from .version import __version__

__all__ = [
    "__version__",
    "Element",
    "Scalar",
    "Transcript",
    "MentalPokerError",
    "MalformedEncoding",
    "InvalidSessionState",
    "SessionClosed",
    "SessionNotSucceeded",
    "NotAContributor",
    "MissingLocalSecret",
]
