"""
Distributed key generation (one round, additive shares).

States: ``IN_PROGRESS -> {SUCCEEDED, TIMED_OUT}`` (terminal, ledger-driven).

Each expected contributor samples ``x_i``, publishes ``P_i = x_i·base_point``
with a DLog proof of knowledge and keeps ``x_i`` locally. Once every
contribution is in, the ledger sets ``agg_public_point = Σ P_i``; the joint
secret ``Σ x_i`` is never reconstructed. On timeout the ledger lists the
indices of the missing contributors in ``culprits``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..constants import DOMAIN_DKG, STAGE_DKG
from ..elgamal import EncKey
from ..errors import NotAContributor, SessionNotSucceeded
from ..group import Element, Scalar
from ..rng import RandomSource
from ..sigma import dlog
from ..sigma.dlog import DLogProof
from ..store import SecretStore
from ..transcript import Transcript
from ..wire import Reader, WireCodec, Writer
from .common import (
    Address,
    check_contributors,
    index_of,
    read_u64_vec,
    require_open,
    write_u64_vec,
)

logger = logging.getLogger(__name__)

STATE_IN_PROGRESS = 0
STATE_SUCCEEDED = 1
STATE_TIMED_OUT = 2

_STATES = (STATE_IN_PROGRESS, STATE_SUCCEEDED, STATE_TIMED_OUT)

__all__ = [
    "STATE_IN_PROGRESS",
    "STATE_SUCCEEDED",
    "STATE_TIMED_OUT",
    "SecretShare",
    "VerifiableContribution",
    "SharedSecretPublicInfo",
    "DKGSession",
]


@dataclass(frozen=True, slots=True)
class SecretShare(WireCodec):
    """A contributor's private scalar. Never leaves the local machine."""

    private_scalar: Scalar

    def public_point(self, base: Element) -> Element:
        return base.scale(self.private_scalar)

    def write(self, w: Writer) -> None:
        self.private_scalar.write(w)

    @classmethod
    def read(cls, r: Reader) -> "SecretShare":
        return cls(Scalar.read(r))

    def __repr__(self) -> str:
        return "SecretShare(<redacted>)"


@dataclass(frozen=True, slots=True)
class VerifiableContribution(WireCodec):
    public_point: Element
    proof: Optional[DLogProof]

    def write(self, w: Writer) -> None:
        self.public_point.write(w)
        w.option(self.proof, lambda w_, p: p.write(w_))

    @classmethod
    def read(cls, r: Reader) -> "VerifiableContribution":
        return cls(Element.read(r), r.option(DLogProof.read, "VerifiableContribution.proof"))


@dataclass(frozen=True, slots=True)
class SharedSecretPublicInfo(WireCodec):
    """Public outcome of a DKG: the joint key and each contributor's key share."""

    session_addr: Address
    agg_ek: EncKey
    ek_shares: Tuple[EncKey, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "ek_shares", tuple(self.ek_shares))

    def write(self, w: Writer) -> None:
        self.session_addr.write(w)
        self.agg_ek.write(w)
        w.vec(self.ek_shares, lambda w_, ek: ek.write(w_))

    @classmethod
    def read(cls, r: Reader) -> "SharedSecretPublicInfo":
        return cls(
            session_addr=Address.read(r),
            agg_ek=EncKey.read(r),
            ek_shares=tuple(r.vec(EncKey.read, "SharedSecretPublicInfo.ek_shares")),
        )


@dataclass(frozen=True, slots=True)
class DKGSession(WireCodec):
    addr: Address
    base_point: Element
    expected_contributors: Tuple[Address, ...]
    deadline: int
    state: int
    contributions: Tuple[Optional[VerifiableContribution], ...]
    contribution_still_needed: int
    agg_public_point: Element
    culprits: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        for name in ("expected_contributors", "contributions", "culprits"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        check_contributors(self.expected_contributors, "dkg")
        if len(self.contributions) != len(self.expected_contributors):
            raise ValueError("dkg: one contribution slot per expected contributor is required")
        if self.state not in _STATES:
            raise ValueError(f"dkg: unknown state {self.state}")
        if any(i >= len(self.expected_contributors) for i in self.culprits):
            raise ValueError("dkg: culprit index out of range")

    @classmethod
    def new(cls, addr: Address, base_point: Element, contributors: List[Address], deadline: int) -> "DKGSession":
        """Fresh IN_PROGRESS snapshot (what the ledger creates when a game starts)."""
        return cls(
            addr=addr,
            base_point=base_point,
            expected_contributors=tuple(contributors),
            deadline=deadline,
            state=STATE_IN_PROGRESS,
            contributions=(None,) * len(contributors),
            contribution_still_needed=len(contributors),
            agg_public_point=Element.identity(),
        )

    # --- accessors ---

    def succeeded(self) -> bool:
        return self.state == STATE_SUCCEEDED

    def failed(self) -> bool:
        return self.state == STATE_TIMED_OUT

    def missing_contributors(self) -> List[Address]:
        return [a for a, c in zip(self.expected_contributors, self.contributions) if c is None]

    def proof_transcript(self) -> Transcript:
        return Transcript.for_session(DOMAIN_DKG, self.addr)

    def get_shared_secret_public_info(self) -> SharedSecretPublicInfo:
        if not self.succeeded():
            raise SessionNotSucceeded("dkg", self.state, "shared secret is only defined after success")
        shares = []
        for c in self.contributions:
            if c is None:
                raise SessionNotSucceeded("dkg", self.state, "succeeded snapshot is missing a contribution")
            shares.append(EncKey(self.base_point, c.public_point))
        return SharedSecretPublicInfo(
            session_addr=self.addr,
            agg_ek=EncKey(self.base_point, self.agg_public_point),
            ek_shares=tuple(shares),
        )

    # --- contribution ---

    def generate_contribution(
        self,
        me: Optional[Address] = None,
        *,
        rng: Optional[RandomSource] = None,
        store: Optional[SecretStore] = None,
        now_s: Optional[int] = None,
    ) -> Tuple[SecretShare, VerifiableContribution]:
        """
        Sample a secret share and prove knowledge of it.

        When `store` is given the share is persisted under
        ``(session address, "dkg")``, replacing any earlier attempt; the
        threshold scalar-mul stage reads it back from there.
        """
        require_open("dkg", self.state, STATE_IN_PROGRESS, self.deadline, now_s)
        if me is not None and index_of(self.expected_contributors, me) is None:
            raise NotAContributor("dkg", me.to_hex())

        x = Scalar.random(rng)
        public_point = self.base_point.scale(x)
        proof = dlog.prove(self.proof_transcript(), self.base_point, public_point, x, rng=rng)
        if store is not None:
            store.put(self.addr.to_hex(), STAGE_DKG, x)
        logger.debug("dkg contribution generated for session %s", self.addr)
        return SecretShare(x), VerifiableContribution(public_point, proof)

    # --- wire ---

    def write(self, w: Writer) -> None:
        self.addr.write(w)
        self.base_point.write(w)
        w.vec(self.expected_contributors, lambda w_, a: a.write(w_))
        w.u64(self.deadline)
        w.u64(self.state)
        w.vec(self.contributions, lambda w_, c: w_.option(c, lambda w2, v: v.write(w2)))
        w.u64(self.contribution_still_needed)
        self.agg_public_point.write(w)
        write_u64_vec(w, self.culprits)

    @classmethod
    def read(cls, r: Reader) -> "DKGSession":
        return cls(
            addr=Address.read(r),
            base_point=Element.read(r),
            expected_contributors=tuple(r.vec(Address.read, "DKGSession.expected_contributors")),
            deadline=r.u64("DKGSession.deadline"),
            state=r.u64("DKGSession.state"),
            contributions=tuple(
                r.vec(
                    lambda r_: r_.option(VerifiableContribution.read, "DKGSession.contribution"),
                    "DKGSession.contributions",
                )
            ),
            contribution_still_needed=r.u64("DKGSession.contribution_still_needed"),
            agg_public_point=Element.read(r),
            culprits=tuple(read_u64_vec(r, "DKGSession.culprits")),
        )
