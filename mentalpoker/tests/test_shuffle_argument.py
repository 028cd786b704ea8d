import dataclasses
from collections import Counter

import pytest

from mentalpoker.arguments import shuffle as bg12
from mentalpoker.arguments.shuffle import ShuffleChallenges, ShuffleProof, powers, product_target
from mentalpoker.elgamal import dec, enc, keygen, rerandomize
from mentalpoker.group import Element, Scalar
from mentalpoker.pedersen import PedersenContext
from mentalpoker.tests.reference import verify_shuffle
from mentalpoker.transcript import Transcript


def _deck(rng, ek, n):
    return [enc(ek, Scalar.random(rng), Element.random(rng)) for _ in range(n)]


@pytest.mark.parametrize("n", [5, 12])
def test_shuffle_proof_verifies_and_preserves_cards(rng, pedersen_ctx, enc_base, n):
    dk, ek = keygen(enc_base, rng)
    deck = _deck(rng, ek, n)
    shuffled, proof = bg12.shuffle(ek, pedersen_ctx, Transcript(b"s"), deck, rng=rng)

    assert len(shuffled) == n
    assert verify_shuffle(ek, pedersen_ctx, Transcript(b"s"), deck, shuffled, proof)
    before = Counter(dec(dk, c) for c in deck)
    after = Counter(dec(dk, c) for c in shuffled)
    assert before == after
    assert ShuffleProof.from_bytes(proof.encode()) == proof


def test_explicit_permutation(rng, pedersen_ctx, enc_base):
    dk, ek = keygen(enc_base, rng)
    deck = _deck(rng, ek, 4)
    perm = [2, 0, 3, 1]
    rhos = [Scalar.random(rng) for _ in perm]
    shuffled = [rerandomize(ek, deck[p], rho) for p, rho in zip(perm, rhos)]
    proof = bg12.prove(ek, pedersen_ctx, Transcript(), deck, shuffled, perm, rhos, rng=rng)
    assert verify_shuffle(ek, pedersen_ctx, Transcript(), deck, shuffled, proof)
    assert [dec(dk, c) for c in shuffled] == [dec(dk, deck[p]) for p in perm]


def test_substituted_card_fails(rng, pedersen_ctx, enc_base):
    _, ek = keygen(enc_base, rng)
    deck = _deck(rng, ek, 4)
    shuffled, proof = bg12.shuffle(ek, pedersen_ctx, Transcript(), deck, rng=rng)
    cheat = list(shuffled)
    cheat[1] = enc(ek, Scalar.random(rng), Element.random(rng))
    assert not verify_shuffle(ek, pedersen_ctx, Transcript(), deck, cheat, proof)


def test_tampered_proof_fails(rng, pedersen_ctx, enc_base):
    _, ek = keygen(enc_base, rng)
    deck = _deck(rng, ek, 4)
    shuffled, proof = bg12.shuffle(ek, pedersen_ctx, Transcript(), deck, rng=rng)
    forged = dataclasses.replace(proof, vec_b_cmt=proof.vec_b_cmt + Element.generator())
    assert not verify_shuffle(ek, pedersen_ctx, Transcript(), deck, shuffled, forged)
    assert not verify_shuffle(ek, pedersen_ctx, Transcript(b"elsewhere"), deck, shuffled, proof)


def test_input_checks(rng, pedersen_ctx, enc_base):
    _, ek = keygen(enc_base, rng)
    deck = _deck(rng, ek, 3)
    rhos = [Scalar.zero()] * 3
    with pytest.raises(ValueError):
        bg12.prove(ek, pedersen_ctx, Transcript(), deck, deck, [0, 0, 1], rhos)
    with pytest.raises(ValueError):
        bg12.prove(ek, pedersen_ctx, Transcript(), deck[:1], deck[:1], [0], rhos[:1])
    with pytest.raises(ValueError):
        bg12.prove(ek, pedersen_ctx, Transcript(), deck, deck[:2], [0, 1, 2], rhos)


def test_powers_start_at_one():
    assert powers(Scalar(3), 4) == [Scalar(1), Scalar(3), Scalar(9), Scalar(27)]


def test_challenges_come_from_commitments_only(rng, pedersen_ctx, enc_base):
    _, ek = keygen(enc_base, rng)
    deck = _deck(rng, ek, 4)
    shuffled, proof = bg12.shuffle(ek, pedersen_ctx, Transcript(b"round"), deck, rng=rng)

    # rebuild the main transcript by hand: prefix, vec_a_cmt, vec_b_cmt, nudge, multi-exp commitments
    trx = Transcript(b"round")
    trx.append_element(proof.vec_a_cmt)
    x = trx.hash_to_scalar()
    trx.append_element(proof.vec_b_cmt)
    y = trx.hash_to_scalar()
    trx.append(b"NUDGE")
    z = trx.hash_to_scalar()

    pp = proof.product_proof
    branch = trx.clone()
    branch.append_element(pp.vec_d_cmt)
    branch.append_element(pp.cmt_delta_small)
    branch.append_element(pp.cmt_delta_big)
    x_p = branch.hash_to_scalar()
    assert pp.b_tilde[-1] == x_p * product_target(ShuffleChallenges(x, y, z), 4)

    me = proof.multiexp_proof
    trx.append_element(me.cmt_a0)
    trx.append_element(me.cmt_beta0)
    trx.append_message(me.e0)
    x_me = trx.hash_to_scalar()

    assert pedersen_ctx.commit(me.r_open, me.a_open) == me.cmt_a0 + proof.vec_b_cmt.scale(x_me)


def test_full_deck(rng, enc_base):
    ctx = PedersenContext.from_seed(52, b"mentalpoker-tests/full-deck")
    dk, ek = keygen(enc_base, rng)
    deck = _deck(rng, ek, 52)
    shuffled, proof = bg12.shuffle(ek, ctx, Transcript(b"deck"), deck, rng=rng)
    assert verify_shuffle(ek, ctx, Transcript(b"deck"), deck, shuffled, proof)
    assert Counter(dec(dk, c) for c in deck) == Counter(dec(dk, c) for c in shuffled)
