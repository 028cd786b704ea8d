"""
Bayer-Groth style zero-knowledge arguments.

- :mod:`.product`: a committed vector multiplies out to a public scalar
- :mod:`.multiexp`: a ciphertext is a committed-exponent combination of others
- :mod:`.shuffle`: the two composed into a verifiable shuffle (BG12)
"""

from __future__ import annotations

from .multiexp import MultiExpProof
from .product import ProductProof
from .shuffle import ShuffleProof

__all__ = ["ProductProof", "MultiExpProof", "ShuffleProof"]
