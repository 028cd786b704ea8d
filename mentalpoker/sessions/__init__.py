"""
Session snapshots and contribution generation.

Each protocol is one immutable snapshot class with an explicit numeric
``state``. Snapshots are decoded from ledger bytes; ``generate_contribution``
is a pure function of the snapshot plus local secrets and randomness. State
transitions are applied by the ledger, never here.
"""

from __future__ import annotations

from .common import Address
from .deckgen import DeckGenSession
from .dkg import DKGSession, SecretShare, SharedSecretPublicInfo
from .reencryption import RecipientPrivateState, ReencryptionSession, VerifiableReencryption
from .shuffle import ShuffleSession, VerifiableShuffle
from .threshold_scalar_mul import ThresholdScalarMulSession

__all__ = [
    "Address",
    "DKGSession",
    "SecretShare",
    "SharedSecretPublicInfo",
    "ThresholdScalarMulSession",
    "ReencryptionSession",
    "RecipientPrivateState",
    "VerifiableReencryption",
    "ShuffleSession",
    "VerifiableShuffle",
    "DeckGenSession",
]
