import dataclasses

from mentalpoker.group import Element, Scalar
from mentalpoker.sigma import dlog, dlog_eq
from mentalpoker.sigma.dlog import DLogProof
from mentalpoker.sigma.dlog_eq import DLogEqProof
from mentalpoker.tests.reference import verify_dlog, verify_dlog_eq
from mentalpoker.transcript import Transcript


def _trx() -> Transcript:
    return Transcript(b"sigma-tests")


def test_dlog_proof_verifies(rng):
    base = Element.random(rng)
    x = Scalar.random(rng)
    proof = dlog.prove(_trx(), base, base.scale(x), x, rng=rng)
    assert verify_dlog(_trx(), base, base.scale(x), proof)
    assert DLogProof.from_bytes(proof.encode()) == proof


def test_dlog_proof_rejects_wrong_statement_and_forged_response(rng):
    base = Element.random(rng)
    x = Scalar.random(rng)
    public = base.scale(x)
    proof = dlog.prove(_trx(), base, public, x, rng=rng)
    assert not verify_dlog(_trx(), base, public + base, proof)
    forged = dataclasses.replace(proof, s=proof.s + 1)
    assert not verify_dlog(_trx(), base, public, forged)
    # a different transcript prefix yields a different challenge
    assert not verify_dlog(Transcript(b"other"), base, public, proof)


def test_dlog_proof_with_wrong_witness_fails(rng):
    base = Element.random(rng)
    x = Scalar.random(rng)
    proof = dlog.prove(_trx(), base, base.scale(x), x + 1, rng=rng)
    assert not verify_dlog(_trx(), base, base.scale(x), proof)


def test_dlog_eq_proof_verifies(rng):
    b1, b2 = Element.random(rng), Element.random(rng)
    x = Scalar.random(rng)
    p1, p2 = b1.scale(x), b2.scale(x)
    proof = dlog_eq.prove(_trx(), b1, p1, b2, p2, x, rng=rng)
    assert verify_dlog_eq(_trx(), b1, p1, b2, p2, proof)
    assert DLogEqProof.from_bytes(proof.encode()) == proof


def test_dlog_eq_rejects_unequal_logs(rng):
    b1, b2 = Element.random(rng), Element.random(rng)
    x = Scalar.random(rng)
    p1, p2 = b1.scale(x), b2.scale(x + 1)
    proof = dlog_eq.prove(_trx(), b1, p1, b2, p2, x, rng=rng)
    assert not verify_dlog_eq(_trx(), b1, p1, b2, p2, proof)


def test_proofs_are_reproducible_with_a_seeded_source():
    from mentalpoker.rng import DeterministicRandomSource

    base = Element.generator()
    x = Scalar(12345)
    p1 = dlog.prove(_trx(), base, base.scale(x), x, rng=DeterministicRandomSource(1))
    p2 = dlog.prove(_trx(), base, base.scale(x), x, rng=DeterministicRandomSource(1))
    assert p1.encode() == p2.encode()
