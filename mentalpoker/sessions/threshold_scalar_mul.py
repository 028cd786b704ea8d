"""
Threshold scalar multiplication: ``result = S·to_be_scaled`` where the
secret ``S = Σ x_i`` is additively shared by the DKG contributors.

States: ``ACCEPTING -> {SUCCEEDED, FAILED}`` (ledger-driven).

Contributor ``i`` publishes ``payload_i = x_i·to_be_scaled`` together with a
DLog-Eq proof that the same ``x_i`` produced its DKG key share
``ek_shares[i].public_point``. The ledger sums the payloads once all are in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..constants import DOMAIN_THRESHOLD_SCALAR_MUL, STAGE_DKG
from ..errors import SecretMismatch, SessionNotSucceeded
from ..group import Element
from ..rng import RandomSource
from ..sigma import dlog_eq
from ..sigma.dlog_eq import DLogEqProof
from ..store import SecretStore
from ..transcript import Transcript
from ..wire import Reader, WireCodec, Writer
from .common import Address, check_contributors, read_u64_vec, require_contributor, require_open, write_u64_vec
from .dkg import SecretShare, SharedSecretPublicInfo

logger = logging.getLogger(__name__)

STATE_ACCEPTING = 0
STATE_SUCCEEDED = 1
STATE_FAILED = 2

_STATES = (STATE_ACCEPTING, STATE_SUCCEEDED, STATE_FAILED)

__all__ = [
    "STATE_ACCEPTING",
    "STATE_SUCCEEDED",
    "STATE_FAILED",
    "VerifiableContribution",
    "ThresholdScalarMulSession",
]


@dataclass(frozen=True, slots=True)
class VerifiableContribution(WireCodec):
    payload: Element
    proof: Optional[DLogEqProof]

    def write(self, w: Writer) -> None:
        self.payload.write(w)
        w.option(self.proof, lambda w_, p: p.write(w_))

    @classmethod
    def read(cls, r: Reader) -> "VerifiableContribution":
        return cls(Element.read(r), r.option(DLogEqProof.read, "VerifiableContribution.proof"))


@dataclass(frozen=True, slots=True)
class ThresholdScalarMulSession(WireCodec):
    addr: Address
    to_be_scaled: Element
    secret_info: SharedSecretPublicInfo
    allowed_contributors: Tuple[Address, ...]
    deadline: int
    state: int
    contributions: Tuple[Optional[VerifiableContribution], ...]
    culprits: Tuple[int, ...] = ()
    result: Optional[Element] = None

    def __post_init__(self) -> None:
        for name in ("allowed_contributors", "contributions", "culprits"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        check_contributors(self.allowed_contributors, "threshold_scalar_mul")
        n = len(self.allowed_contributors)
        if len(self.contributions) != n:
            raise ValueError("threshold_scalar_mul: one contribution slot per contributor is required")
        if len(self.secret_info.ek_shares) != n:
            raise ValueError("threshold_scalar_mul: one key share per contributor is required")
        if self.state not in _STATES:
            raise ValueError(f"threshold_scalar_mul: unknown state {self.state}")
        if any(i >= n for i in self.culprits):
            raise ValueError("threshold_scalar_mul: culprit index out of range")

    @classmethod
    def new(
        cls,
        addr: Address,
        to_be_scaled: Element,
        secret_info: SharedSecretPublicInfo,
        contributors: Tuple[Address, ...],
        deadline: int,
    ) -> "ThresholdScalarMulSession":
        return cls(
            addr=addr,
            to_be_scaled=to_be_scaled,
            secret_info=secret_info,
            allowed_contributors=tuple(contributors),
            deadline=deadline,
            state=STATE_ACCEPTING,
            contributions=(None,) * len(contributors),
        )

    # --- accessors ---

    def succeeded(self) -> bool:
        return self.state == STATE_SUCCEEDED

    def failed(self) -> bool:
        return self.state == STATE_FAILED

    def get_result(self) -> Element:
        if not self.succeeded() or self.result is None:
            raise SessionNotSucceeded("threshold_scalar_mul", self.state, "result not available")
        return self.result

    def proof_transcript(self) -> Transcript:
        return Transcript.for_session(DOMAIN_THRESHOLD_SCALAR_MUL, self.addr)

    # --- contribution ---

    def generate_contribution(
        self,
        me: Address,
        secret_share: Optional[SecretShare] = None,
        *,
        rng: Optional[RandomSource] = None,
        store: Optional[SecretStore] = None,
        now_s: Optional[int] = None,
    ) -> VerifiableContribution:
        """
        Partially scale ``to_be_scaled`` by this party's DKG share.

        The share is taken from `secret_share`, or else loaded from `store`
        under the DKG session address (MissingLocalSecret when absent).
        """
        require_open("threshold_scalar_mul", self.state, STATE_ACCEPTING, self.deadline, now_s)
        idx = require_contributor(self.allowed_contributors, me, "threshold_scalar_mul")
        if secret_share is None:
            if store is None:
                raise ValueError("either secret_share or store must be given")
            secret_share = SecretShare(store.get(self.secret_info.session_addr.to_hex(), STAGE_DKG))

        ek_share = self.secret_info.ek_shares[idx]
        x = secret_share.private_scalar
        if secret_share.public_point(ek_share.enc_base) != ek_share.public_point:
            raise SecretMismatch("threshold_scalar_mul", idx)

        payload = self.to_be_scaled.scale(x)
        proof = dlog_eq.prove(
            self.proof_transcript(),
            ek_share.enc_base,
            ek_share.public_point,
            self.to_be_scaled,
            payload,
            x,
            rng=rng,
        )
        logger.debug("threshold scalar-mul contribution generated for session %s index %d", self.addr, idx)
        return VerifiableContribution(payload, proof)

    # --- wire ---

    def write(self, w: Writer) -> None:
        self.addr.write(w)
        self.to_be_scaled.write(w)
        self.secret_info.write(w)
        w.vec(self.allowed_contributors, lambda w_, a: a.write(w_))
        w.u64(self.deadline)
        w.u64(self.state)
        w.vec(self.contributions, lambda w_, c: w_.option(c, lambda w2, v: v.write(w2)))
        write_u64_vec(w, self.culprits)
        w.option(self.result, lambda w_, e: e.write(w_))

    @classmethod
    def read(cls, r: Reader) -> "ThresholdScalarMulSession":
        return cls(
            addr=Address.read(r),
            to_be_scaled=Element.read(r),
            secret_info=SharedSecretPublicInfo.read(r),
            allowed_contributors=tuple(r.vec(Address.read, "ThresholdScalarMulSession.allowed_contributors")),
            deadline=r.u64("ThresholdScalarMulSession.deadline"),
            state=r.u64("ThresholdScalarMulSession.state"),
            contributions=tuple(
                r.vec(
                    lambda r_: r_.option(VerifiableContribution.read, "ThresholdScalarMulSession.contribution"),
                    "ThresholdScalarMulSession.contributions",
                )
            ),
            culprits=tuple(read_u64_vec(r, "ThresholdScalarMulSession.culprits")),
            result=r.option(Element.read, "ThresholdScalarMulSession.result"),
        )
