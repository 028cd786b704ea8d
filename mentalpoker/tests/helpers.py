"""Shared scenario builders for the session tests."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from mentalpoker.group import Element, Scalar
from mentalpoker.rng import RandomSource
from mentalpoker.sessions.common import Address
from mentalpoker.sessions.dkg import DKGSession, SecretShare
from mentalpoker.store import SecretStore
from mentalpoker.tests.reference import fold_dkg


def completed_dkg(
    addr: Address,
    base: Element,
    players: Sequence[Address],
    rng: RandomSource,
    stores: Optional[Sequence[SecretStore]] = None,
) -> Tuple[DKGSession, List[SecretShare]]:
    """Run a DKG to success; return the final snapshot and every player's share."""
    session = DKGSession.new(addr, base, list(players), deadline=1_000)
    shares = []
    for i, me in enumerate(players):
        store = stores[i] if stores is not None else None
        share, contribution = session.generate_contribution(me, rng=rng, store=store)
        session = fold_dkg(session, me, contribution)
        shares.append(share)
    return session, shares


def joint_secret(shares: Sequence[SecretShare]) -> Scalar:
    acc = Scalar.zero()
    for s in shares:
        acc = acc + s.private_scalar
    return acc
