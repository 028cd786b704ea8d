"""
Re-encryption based private dealing of a single card.

States: ``ACCEPTING_REENC -> SCALAR_MUL_IN_PROGRESS -> {SUCCEEDED, FAILED}``.

1. The deal target picks ``t, u`` and publishes::

       th = t·base    tsh = t·agg_pub    rth = card.c0 + th    urth = u·rth

   with DLogEq(base, th, agg_pub, tsh; t) and DLog(rth, urth; u) on one
   transcript. ``u`` is the recipient's private state and must be kept:
   without it the card cannot be opened.
2. The ledger records ``reenc = (base, rth, card.c1 + tsh + urth)`` and runs
   a threshold scalar-mul session on ``rth``, yielding ``srth = S·rth``.
3. Only the recipient can then compute
   ``plaintext = reenc.c1 - (srth + u·reenc.c0)``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..constants import DOMAIN_REENCRYPTION, STAGE_REENCRYPTION
from ..elgamal import Ciphertext
from ..errors import InvalidSessionState, NotAContributor, SessionNotSucceeded
from ..group import Element, Scalar
from ..rng import RandomSource
from ..sigma import dlog, dlog_eq
from ..sigma.dlog import DLogProof
from ..sigma.dlog_eq import DLogEqProof
from ..store import SecretStore
from ..transcript import Transcript
from ..wire import Reader, WireCodec, Writer
from .common import Address, check_contributors, read_u64_vec, require_open, write_u64_vec
from .dkg import SecretShare, SharedSecretPublicInfo
from .threshold_scalar_mul import ThresholdScalarMulSession, VerifiableContribution

logger = logging.getLogger(__name__)

STATE_ACCEPTING_REENC = 1
STATE_SCALAR_MUL_IN_PROGRESS = 2
STATE_SUCCEEDED = 3
STATE_FAILED = 4

_STATES = (STATE_ACCEPTING_REENC, STATE_SCALAR_MUL_IN_PROGRESS, STATE_SUCCEEDED, STATE_FAILED)

__all__ = [
    "STATE_ACCEPTING_REENC",
    "STATE_SCALAR_MUL_IN_PROGRESS",
    "STATE_SUCCEEDED",
    "STATE_FAILED",
    "RecipientPrivateState",
    "VerifiableReencryption",
    "ReencryptionSession",
]


@dataclass(frozen=True, slots=True)
class RecipientPrivateState(WireCodec):
    u: Scalar

    def write(self, w: Writer) -> None:
        self.u.write(w)

    @classmethod
    def read(cls, r: Reader) -> "RecipientPrivateState":
        return cls(Scalar.read(r))

    def __repr__(self) -> str:
        return "RecipientPrivateState(<redacted>)"


@dataclass(frozen=True, slots=True)
class VerifiableReencryption(WireCodec):
    th: Element
    tsh: Element
    urth: Element
    proof_t: Optional[DLogEqProof]
    proof_u: Optional[DLogProof]

    def write(self, w: Writer) -> None:
        self.th.write(w)
        self.tsh.write(w)
        self.urth.write(w)
        w.option(self.proof_t, lambda w_, p: p.write(w_))
        w.option(self.proof_u, lambda w_, p: p.write(w_))

    @classmethod
    def read(cls, r: Reader) -> "VerifiableReencryption":
        return cls(
            th=Element.read(r),
            tsh=Element.read(r),
            urth=Element.read(r),
            proof_t=r.option(DLogEqProof.read, "VerifiableReencryption.proof_t"),
            proof_u=r.option(DLogProof.read, "VerifiableReencryption.proof_u"),
        )


@dataclass(frozen=True, slots=True)
class ReencryptionSession(WireCodec):
    addr: Address
    card: Ciphertext
    deal_target: Address
    scalar_mul_party: Tuple[Address, ...]
    secret_info: SharedSecretPublicInfo
    scalar_mul_deadline: int
    state: int
    deadline: int
    reenc: Optional[Ciphertext] = None
    thresh_scalar_mul_session: Optional[ThresholdScalarMulSession] = None
    culprits: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "scalar_mul_party", tuple(self.scalar_mul_party))
        object.__setattr__(self, "culprits", tuple(self.culprits))
        check_contributors(self.scalar_mul_party, "reencryption")
        if self.state not in _STATES:
            raise ValueError(f"reencryption: unknown state {self.state}")

    @classmethod
    def new(
        cls,
        addr: Address,
        card: Ciphertext,
        deal_target: Address,
        scalar_mul_party: Tuple[Address, ...],
        secret_info: SharedSecretPublicInfo,
        deadline: int,
        scalar_mul_deadline: int,
    ) -> "ReencryptionSession":
        return cls(
            addr=addr,
            card=card,
            deal_target=deal_target,
            scalar_mul_party=tuple(scalar_mul_party),
            secret_info=secret_info,
            scalar_mul_deadline=scalar_mul_deadline,
            state=STATE_ACCEPTING_REENC,
            deadline=deadline,
        )

    # --- accessors ---

    def succeeded(self) -> bool:
        return self.state == STATE_SUCCEEDED

    def failed(self) -> bool:
        return self.state == STATE_FAILED

    def proof_transcript(self) -> Transcript:
        return Transcript.for_session(DOMAIN_REENCRYPTION, self.addr)

    # --- step 1: re-encryption by the deal target ---

    def reencrypt(
        self,
        me: Address,
        *,
        rng: Optional[RandomSource] = None,
        store: Optional[SecretStore] = None,
        now_s: Optional[int] = None,
    ) -> Tuple[RecipientPrivateState, VerifiableReencryption]:
        """
        Blind the card towards `me` (the deal target).

        When `store` is given, ``u`` is persisted under
        ``(session address, "reencryption")`` for :meth:`reveal_from_store`.
        """
        require_open("reencryption", self.state, STATE_ACCEPTING_REENC, self.deadline, now_s)
        if me != self.deal_target:
            raise NotAContributor("reencryption", me.to_hex())

        agg_ek = self.secret_info.agg_ek
        enc_base = agg_ek.enc_base
        t = Scalar.random(rng)
        u = Scalar.random(rng)
        th = enc_base.scale(t)
        tsh = agg_ek.public_point.scale(t)
        rth = self.card.c0 + th
        urth = rth.scale(u)

        trx = self.proof_transcript()
        proof_t = dlog_eq.prove(trx, enc_base, th, agg_ek.public_point, tsh, t, rng=rng)
        proof_u = dlog.prove(trx, rth, urth, u, rng=rng)
        if store is not None:
            store.put(self.addr.to_hex(), STAGE_REENCRYPTION, u)
        logger.debug("re-encryption generated for session %s", self.addr)
        return RecipientPrivateState(u), VerifiableReencryption(th, tsh, urth, proof_t, proof_u)

    # --- step 2: partial decryption by the scalar-mul party ---

    def generate_scalar_mul_contribution(
        self,
        me: Address,
        secret_share: Optional[SecretShare] = None,
        *,
        rng: Optional[RandomSource] = None,
        store: Optional[SecretStore] = None,
        now_s: Optional[int] = None,
    ) -> VerifiableContribution:
        if self.state != STATE_SCALAR_MUL_IN_PROGRESS or self.thresh_scalar_mul_session is None:
            raise InvalidSessionState("reencryption", self.state, "no threshold scalar-mul in progress")
        return self.thresh_scalar_mul_session.generate_contribution(
            me, secret_share, rng=rng, store=store, now_s=now_s
        )

    # --- step 3: reveal ---

    def reveal(self, private_state: RecipientPrivateState) -> Element:
        if not self.succeeded():
            raise SessionNotSucceeded("reencryption", self.state, "card not yet dealt")
        if self.reenc is None or self.thresh_scalar_mul_session is None:
            raise SessionNotSucceeded("reencryption", self.state, "succeeded snapshot lacks reenc data")
        srth = self.thresh_scalar_mul_session.get_result()
        blinder = srth + self.reenc.c0.scale(private_state.u)
        return self.reenc.c1 - blinder

    def reveal_from_store(self, store: SecretStore) -> Element:
        u = store.get(self.addr.to_hex(), STAGE_REENCRYPTION)
        return self.reveal(RecipientPrivateState(u))

    # --- wire ---

    def write(self, w: Writer) -> None:
        self.addr.write(w)
        self.card.write(w)
        self.deal_target.write(w)
        w.vec(self.scalar_mul_party, lambda w_, a: a.write(w_))
        self.secret_info.write(w)
        w.u64(self.scalar_mul_deadline)
        w.u64(self.state)
        w.u64(self.deadline)
        w.option(self.reenc, lambda w_, c: c.write(w_))
        w.option(self.thresh_scalar_mul_session, lambda w_, s: s.write(w_))
        write_u64_vec(w, self.culprits)

    @classmethod
    def read(cls, r: Reader) -> "ReencryptionSession":
        return cls(
            addr=Address.read(r),
            card=Ciphertext.read(r),
            deal_target=Address.read(r),
            scalar_mul_party=tuple(r.vec(Address.read, "ReencryptionSession.scalar_mul_party")),
            secret_info=SharedSecretPublicInfo.read(r),
            scalar_mul_deadline=r.u64("ReencryptionSession.scalar_mul_deadline"),
            state=r.u64("ReencryptionSession.state"),
            deadline=r.u64("ReencryptionSession.deadline"),
            reenc=r.option(Ciphertext.read, "ReencryptionSession.reenc"),
            thresh_scalar_mul_session=r.option(
                ThresholdScalarMulSession.read, "ReencryptionSession.thresh_scalar_mul_session"
            ),
            culprits=tuple(read_u64_vec(r, "ReencryptionSession.culprits")),
        )
