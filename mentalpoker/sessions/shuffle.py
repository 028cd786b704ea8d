"""
Sequential verifiable shuffle of the encrypted deck.

States: ``ACCEPTING_CONTRIBUTION -> {SUCCEEDED, FAILED}`` (ledger-driven).

Contributors take turns in ``allowed_contributors`` order; round ``i`` has
its own deadline ``deadlines[i]``. Each round permutes and rerandomizes the
current deck and attaches a BG12 shuffle proof. If a contributor misses its
deadline or submits a bad proof the ledger fails the session and records
that contributor's index as ``culprit``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..arguments import shuffle as bg12
from ..arguments.shuffle import ShuffleProof
from ..constants import DOMAIN_SHUFFLE
from ..elgamal import Ciphertext, EncKey
from ..errors import NotYourTurn, SessionNotSucceeded
from ..pedersen import PedersenContext
from ..rng import RandomSource
from ..transcript import Transcript
from ..wire import Reader, WireCodec, Writer
from .common import Address, check_contributors, read_u64_vec, require_contributor, require_open, write_u64_vec

logger = logging.getLogger(__name__)

STATE_ACCEPTING_CONTRIBUTION = 0
STATE_SUCCEEDED = 1
STATE_FAILED = 2

_STATES = (STATE_ACCEPTING_CONTRIBUTION, STATE_SUCCEEDED, STATE_FAILED)

__all__ = [
    "STATE_ACCEPTING_CONTRIBUTION",
    "STATE_SUCCEEDED",
    "STATE_FAILED",
    "VerifiableShuffle",
    "ShuffleSession",
]


@dataclass(frozen=True, slots=True)
class VerifiableShuffle(WireCodec):
    new_ciphertexts: Tuple[Ciphertext, ...]
    proof: Optional[ShuffleProof]

    def __post_init__(self) -> None:
        object.__setattr__(self, "new_ciphertexts", tuple(self.new_ciphertexts))

    def write(self, w: Writer) -> None:
        w.vec(self.new_ciphertexts, lambda w_, c: c.write(w_))
        w.option(self.proof, lambda w_, p: p.write(w_))

    @classmethod
    def read(cls, r: Reader) -> "VerifiableShuffle":
        return cls(
            new_ciphertexts=tuple(r.vec(Ciphertext.read, "VerifiableShuffle.new_ciphertexts")),
            proof=r.option(ShuffleProof.read, "VerifiableShuffle.proof"),
        )


@dataclass(frozen=True, slots=True)
class ShuffleSession(WireCodec):
    addr: Address
    enc_key: EncKey
    pedersen_ctxt: PedersenContext
    deck: Tuple[Ciphertext, ...]
    allowed_contributors: Tuple[Address, ...]
    num_contributions_expected: int
    deadlines: Tuple[int, ...]
    state: int
    expected_contributor_idx: int
    contributions: Tuple[VerifiableShuffle, ...] = ()
    culprit: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("deck", "allowed_contributors", "deadlines", "contributions"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        check_contributors(self.allowed_contributors, "shuffle")
        n = len(self.allowed_contributors)
        if self.num_contributions_expected != n or len(self.deadlines) != n:
            raise ValueError("shuffle: one round (and one deadline) per contributor is required")
        if len(self.contributions) > n:
            raise ValueError("shuffle: more contributions than rounds")
        if not 2 <= len(self.deck) <= self.pedersen_ctxt.capacity:
            raise ValueError(
                f"shuffle: deck size {len(self.deck)} outside [2, {self.pedersen_ctxt.capacity}]"
            )
        if self.state not in _STATES:
            raise ValueError(f"shuffle: unknown state {self.state}")
        if self.culprit is not None and self.culprit >= n:
            raise ValueError("shuffle: culprit index out of range")

    @classmethod
    def new(
        cls,
        addr: Address,
        enc_key: EncKey,
        pedersen_ctxt: PedersenContext,
        deck: List[Ciphertext],
        contributors: List[Address],
        deadlines: List[int],
    ) -> "ShuffleSession":
        return cls(
            addr=addr,
            enc_key=enc_key,
            pedersen_ctxt=pedersen_ctxt,
            deck=tuple(deck),
            allowed_contributors=tuple(contributors),
            num_contributions_expected=len(contributors),
            deadlines=tuple(deadlines),
            state=STATE_ACCEPTING_CONTRIBUTION,
            expected_contributor_idx=0,
        )

    # --- accessors ---

    def succeeded(self) -> bool:
        return self.state == STATE_SUCCEEDED

    def failed(self) -> bool:
        return self.state == STATE_FAILED

    def current_deck(self) -> Tuple[Ciphertext, ...]:
        """Output of the latest accepted round, or the initial deck."""
        if self.contributions:
            return self.contributions[-1].new_ciphertexts
        return self.deck

    def final_deck(self) -> Tuple[Ciphertext, ...]:
        if not self.succeeded():
            raise SessionNotSucceeded("shuffle", self.state, "deck is still being shuffled")
        return self.current_deck()

    def proof_transcript(self, round_idx: int) -> Transcript:
        t = Transcript.for_session(DOMAIN_SHUFFLE, self.addr)
        t.append_u64(round_idx)
        return t

    # --- contribution ---

    def generate_contribution(
        self,
        me: Address,
        *,
        rng: Optional[RandomSource] = None,
        now_s: Optional[int] = None,
    ) -> VerifiableShuffle:
        idx = self.expected_contributor_idx
        deadline = self.deadlines[idx] if idx < len(self.deadlines) else None
        require_open("shuffle", self.state, STATE_ACCEPTING_CONTRIBUTION, deadline, now_s)
        my_idx = require_contributor(self.allowed_contributors, me, "shuffle")
        if my_idx != idx:
            raise NotYourTurn("shuffle", self.state, f"expecting contributor {idx}, caller is contributor {my_idx}")

        shuffled, proof = bg12.shuffle(
            self.enc_key,
            self.pedersen_ctxt,
            self.proof_transcript(idx),
            self.current_deck(),
            rng=rng,
        )
        logger.debug("shuffle contribution generated for session %s round %d", self.addr, idx)
        return VerifiableShuffle(tuple(shuffled), proof)

    # --- wire ---

    def write(self, w: Writer) -> None:
        self.addr.write(w)
        self.enc_key.write(w)
        self.pedersen_ctxt.write(w)
        w.vec(self.deck, lambda w_, c: c.write(w_))
        w.vec(self.allowed_contributors, lambda w_, a: a.write(w_))
        w.u64(self.num_contributions_expected)
        write_u64_vec(w, self.deadlines)
        w.u64(self.state)
        w.u64(self.expected_contributor_idx)
        w.vec(self.contributions, lambda w_, c: c.write(w_))
        w.option(self.culprit, lambda w_, i: w_.u64(i))

    @classmethod
    def read(cls, r: Reader) -> "ShuffleSession":
        return cls(
            addr=Address.read(r),
            enc_key=EncKey.read(r),
            pedersen_ctxt=PedersenContext.read(r),
            deck=tuple(r.vec(Ciphertext.read, "ShuffleSession.deck")),
            allowed_contributors=tuple(r.vec(Address.read, "ShuffleSession.allowed_contributors")),
            num_contributions_expected=r.u64("ShuffleSession.num_contributions_expected"),
            deadlines=tuple(read_u64_vec(r, "ShuffleSession.deadlines")),
            state=r.u64("ShuffleSession.state"),
            expected_contributor_idx=r.u64("ShuffleSession.expected_contributor_idx"),
            contributions=tuple(r.vec(VerifiableShuffle.read, "ShuffleSession.contributions")),
            culprit=r.option(lambda r_: r_.u64("ShuffleSession.culprit"), "ShuffleSession.culprit"),
        )
