import pytest

from mentalpoker.errors import MissingLocalSecret, NotAContributor, SecretMismatch, SessionClosed, SessionNotSucceeded
from mentalpoker.group import Element, Scalar
from mentalpoker.sessions.common import Address
from mentalpoker.sessions.dkg import SecretShare
from mentalpoker.sessions.threshold_scalar_mul import ThresholdScalarMulSession, VerifiableContribution
from mentalpoker.store.memory import MemorySecretStore
from mentalpoker.tests.helpers import completed_dkg, joint_secret
from mentalpoker.tests.reference import fold_threshold, verify_dlog_eq

TSM_ADDR = Address.from_hex("0x75")


def _tsm(rng, enc_base, addresses, session_addr, stores=None):
    dkg_session, shares = completed_dkg(session_addr, enc_base, addresses, rng, stores)
    info = dkg_session.get_shared_secret_public_info()
    point = Element.random(rng)
    session = ThresholdScalarMulSession.new(TSM_ADDR, point, info, tuple(addresses), deadline=500)
    return session, shares, point


def test_result_is_joint_secret_times_point(rng, enc_base, addresses, session_addr):
    session, shares, point = _tsm(rng, enc_base, addresses, session_addr)
    with pytest.raises(SessionNotSucceeded):
        session.get_result()
    for me, share in zip(addresses, shares):
        contribution = session.generate_contribution(me, share, rng=rng)
        session = fold_threshold(session, me, contribution)
    assert session.succeeded()
    assert session.get_result() == point.scale(joint_secret(shares))
    assert ThresholdScalarMulSession.from_bytes(session.encode()) == session


def test_contribution_proof_links_to_key_share(rng, enc_base, addresses, session_addr):
    session, shares, point = _tsm(rng, enc_base, addresses, session_addr)
    contribution = session.generate_contribution(addresses[1], shares[1], rng=rng)
    ek_share = session.secret_info.ek_shares[1]
    assert contribution.payload == point.scale(shares[1].private_scalar)
    assert verify_dlog_eq(
        session.proof_transcript(), ek_share.enc_base, ek_share.public_point, point, contribution.payload, contribution.proof
    )
    # checked against someone else's key share it fails
    other = session.secret_info.ek_shares[0]
    assert not verify_dlog_eq(
        session.proof_transcript(), other.enc_base, other.public_point, point, contribution.payload, contribution.proof
    )
    assert VerifiableContribution.from_bytes(contribution.encode()) == contribution


def test_share_loaded_from_store(rng, enc_base, addresses, session_addr):
    stores = [MemorySecretStore() for _ in addresses]
    session, shares, point = _tsm(rng, enc_base, addresses, session_addr, stores)
    contribution = session.generate_contribution(addresses[2], rng=rng, store=stores[2])
    assert contribution.payload == point.scale(shares[2].private_scalar)


def test_missing_secret(rng, enc_base, addresses, session_addr):
    session, _, _ = _tsm(rng, enc_base, addresses, session_addr)
    with pytest.raises(MissingLocalSecret):
        session.generate_contribution(addresses[0], rng=rng, store=MemorySecretStore())
    with pytest.raises(ValueError):
        session.generate_contribution(addresses[0], rng=rng)


def test_mismatched_share(rng, enc_base, addresses, session_addr):
    session, shares, _ = _tsm(rng, enc_base, addresses, session_addr)
    with pytest.raises(SecretMismatch) as ei:
        session.generate_contribution(addresses[0], shares[1], rng=rng)
    assert ei.value.index == 0
    with pytest.raises(SecretMismatch):
        session.generate_contribution(addresses[0], SecretShare(Scalar(5)), rng=rng)


def test_guards(rng, enc_base, addresses, session_addr):
    session, shares, _ = _tsm(rng, enc_base, addresses, session_addr)
    with pytest.raises(NotAContributor):
        session.generate_contribution(Address.from_hex("0xbad"), shares[0], rng=rng)
    with pytest.raises(SessionClosed):
        session.generate_contribution(addresses[0], shares[0], rng=rng, now_s=500)


def test_share_count_must_match_contributors(rng, enc_base, addresses, session_addr):
    session, _, point = _tsm(rng, enc_base, addresses, session_addr)
    with pytest.raises(ValueError):
        ThresholdScalarMulSession.new(TSM_ADDR, point, session.secret_info, tuple(addresses[:2]), deadline=1)
