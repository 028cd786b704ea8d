"""
Deck generation: the encrypted starting deck and the shuffle that follows.

Card ``i`` is represented by a random group element ``card_reprs[i]``. The
initial deck encrypts each representation under the aggregated DKG key with
randomizer 0, so anyone can check it; the nested shuffle session then hides
the order. After a reveal, :meth:`DeckGenSession.card_index` maps a
decrypted point back to its card.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..elgamal import Ciphertext, EncKey, enc
from ..errors import InvalidSessionState
from ..group import Element, Scalar
from ..rng import RandomSource
from ..wire import Reader, WireCodec, Writer
from .common import Address, check_contributors
from .shuffle import ShuffleSession, VerifiableShuffle

__all__ = ["generate_card_reprs", "initial_deck", "DeckGenSession"]


def generate_card_reprs(n: int, rng: Optional[RandomSource] = None) -> List[Element]:
    """`n` distinct random points with unknown discrete logs."""
    reprs: List[Element] = []
    seen = set()
    while len(reprs) < n:
        e = Element.random(rng)
        if e in seen:
            continue
        seen.add(e)
        reprs.append(e)
    return reprs


def initial_deck(ek: EncKey, card_reprs: Sequence[Element]) -> List[Ciphertext]:
    """Publicly checkable encryption of every card with randomizer 0."""
    zero = Scalar.zero()
    return [enc(ek, zero, m) for m in card_reprs]


@dataclass(frozen=True, slots=True)
class DeckGenSession(WireCodec):
    agg_ek: EncKey
    allowed_contributors: Tuple[Address, ...]
    card_reprs: Tuple[Element, ...]
    initial_ciphertexts: Tuple[Ciphertext, ...]
    shuffle: Optional[ShuffleSession] = None

    def __post_init__(self) -> None:
        for name in ("allowed_contributors", "card_reprs", "initial_ciphertexts"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        check_contributors(self.allowed_contributors, "deckgen")
        if len(self.card_reprs) != len(self.initial_ciphertexts):
            raise ValueError("deckgen: one initial ciphertext per card is required")
        if len(set(self.card_reprs)) != len(self.card_reprs):
            raise ValueError("deckgen: card representations must be distinct")

    def card_index(self, plaintext: Element) -> Optional[int]:
        for i, m in enumerate(self.card_reprs):
            if m == plaintext:
                return i
        return None

    def _require_shuffle(self) -> ShuffleSession:
        if self.shuffle is None:
            raise InvalidSessionState("deckgen", 0, "shuffle has not been opened")
        return self.shuffle

    def generate_contribution(
        self,
        me: Address,
        *,
        rng: Optional[RandomSource] = None,
        now_s: Optional[int] = None,
    ) -> VerifiableShuffle:
        return self._require_shuffle().generate_contribution(me, rng=rng, now_s=now_s)

    def final_deck(self) -> Tuple[Ciphertext, ...]:
        return self._require_shuffle().final_deck()

    def write(self, w: Writer) -> None:
        self.agg_ek.write(w)
        w.vec(self.allowed_contributors, lambda w_, a: a.write(w_))
        w.vec(self.card_reprs, lambda w_, e: e.write(w_))
        w.vec(self.initial_ciphertexts, lambda w_, c: c.write(w_))
        w.option(self.shuffle, lambda w_, s: s.write(w_))

    @classmethod
    def read(cls, r: Reader) -> "DeckGenSession":
        return cls(
            agg_ek=EncKey.read(r),
            allowed_contributors=tuple(r.vec(Address.read, "DeckGenSession.allowed_contributors")),
            card_reprs=tuple(r.vec(Element.read, "DeckGenSession.card_reprs")),
            initial_ciphertexts=tuple(r.vec(Ciphertext.read, "DeckGenSession.initial_ciphertexts")),
            shuffle=r.option(ShuffleSession.read, "DeckGenSession.shuffle"),
        )
