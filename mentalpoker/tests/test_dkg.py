import pytest

from mentalpoker.elgamal import DecKey, dec, enc
from mentalpoker.errors import MalformedEncoding, NotAContributor, SessionClosed, SessionNotSucceeded
from mentalpoker.group import Element, Scalar
from mentalpoker.sessions import dkg
from mentalpoker.sessions.dkg import DKGSession, SharedSecretPublicInfo, VerifiableContribution
from mentalpoker.store.memory import MemorySecretStore
from mentalpoker.tests.helpers import completed_dkg, joint_secret
from mentalpoker.tests.reference import fold_dkg, timeout_dkg, verify_dlog


def test_three_party_dkg_aggregates_shares(rng, enc_base, addresses, session_addr):
    session, shares = completed_dkg(session_addr, enc_base, addresses, rng)
    assert session.succeeded()
    assert session.contribution_still_needed == 0
    assert session.missing_contributors() == []

    info = session.get_shared_secret_public_info()
    assert info.session_addr == session_addr
    assert info.agg_ek.public_point == enc_base.scale(joint_secret(shares))
    for share, ek in zip(shares, info.ek_shares):
        assert ek.public_point == share.public_point(enc_base)

    # the joint key opens what the aggregated key encrypts
    m = Element.random(rng)
    c = enc(info.agg_ek, Scalar.random(rng), m)
    assert dec(DecKey(enc_base, joint_secret(shares)), c) == m


def test_contribution_proof_is_bound_to_the_session(rng, enc_base, addresses, session_addr):
    session = DKGSession.new(session_addr, enc_base, addresses, deadline=100)
    _, contribution = session.generate_contribution(addresses[0], rng=rng)
    assert verify_dlog(session.proof_transcript(), enc_base, contribution.public_point, contribution.proof)
    other = DKGSession.new(addresses[2], enc_base, addresses, deadline=100)
    assert not verify_dlog(other.proof_transcript(), enc_base, contribution.public_point, contribution.proof)


def test_share_is_persisted(rng, enc_base, addresses, session_addr):
    store = MemorySecretStore()
    session = DKGSession.new(session_addr, enc_base, addresses, deadline=100)
    share, _ = session.generate_contribution(addresses[1], rng=rng, store=store)
    assert store.get(session_addr.to_hex(), "dkg") == share.private_scalar
    assert "redacted" in repr(share)


def test_timeout_lists_missing_contributors(rng, enc_base, addresses, session_addr):
    session = DKGSession.new(session_addr, enc_base, addresses, deadline=100)
    _, contribution = session.generate_contribution(addresses[1], rng=rng)
    session = fold_dkg(session, addresses[1], contribution)
    assert session.missing_contributors() == [addresses[0], addresses[2]]

    session = timeout_dkg(session)
    assert session.failed()
    assert session.culprits == (0, 2)
    with pytest.raises(SessionNotSucceeded):
        session.get_shared_secret_public_info()
    with pytest.raises(SessionClosed):
        session.generate_contribution(addresses[0], rng=rng)


def test_deadline_and_membership_guards(rng, enc_base, addresses, session_addr):
    session = DKGSession.new(session_addr, enc_base, addresses[:2], deadline=100)
    with pytest.raises(SessionClosed):
        session.generate_contribution(addresses[0], rng=rng, now_s=100)
    with pytest.raises(NotAContributor):
        session.generate_contribution(addresses[2], rng=rng)
    # unknown caller identity is allowed; the ledger checks the sender
    share, _ = session.generate_contribution(rng=rng, now_s=99)
    assert not share.private_scalar.is_zero()


def test_shared_info_unavailable_while_in_progress(enc_base, addresses, session_addr):
    session = DKGSession.new(session_addr, enc_base, addresses, deadline=100)
    with pytest.raises(SessionNotSucceeded):
        session.get_shared_secret_public_info()


def test_contributor_list_validation(enc_base, addresses, session_addr):
    with pytest.raises(ValueError):
        DKGSession.new(session_addr, enc_base, [], deadline=1)
    with pytest.raises(ValueError):
        DKGSession.new(session_addr, enc_base, [addresses[0], addresses[0]], deadline=1)


def test_snapshot_encoding(rng, enc_base, addresses, session_addr):
    session, _ = completed_dkg(session_addr, enc_base, addresses, rng)
    decoded = DKGSession.from_bytes(session.encode())
    assert decoded == session
    assert decoded.state == dkg.STATE_SUCCEEDED

    info = session.get_shared_secret_public_info()
    assert SharedSecretPublicInfo.from_bytes(info.encode()) == info

    partial = DKGSession.new(session_addr, enc_base, addresses, deadline=5)
    assert DKGSession.from_bytes(partial.encode()).contributions == (None, None, None)

    contribution = session.contributions[0]
    assert isinstance(contribution, VerifiableContribution)
    assert VerifiableContribution.from_bytes(contribution.encode()) == contribution


def test_zero_contributor_snapshot_is_malformed(enc_base, addresses, session_addr):
    # hand-build the bytes a DKGSession with an empty contributor list would have
    template = DKGSession.new(session_addr, enc_base, addresses[:1], deadline=5)
    data = bytearray(template.encode())
    # addr(32) + base_point(49) is followed by the contributor vector
    start = 32 + 49
    data[start:start + 1 + 32] = b"\x00"
    slots = start + 1 + 8 + 8
    data[slots:slots + 2] = b"\x00"
    with pytest.raises(MalformedEncoding):
        DKGSession.from_bytes(bytes(data))
