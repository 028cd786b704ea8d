import pytest

from mentalpoker.errors import MalformedEncoding
from mentalpoker.group import Q, Element, Scalar, inner_product, msm
from mentalpoker.rng import DeterministicRandomSource

# Vectors cross-checked against the on-chain implementation.
ELEMENT_HEX = "85ba9eae97029dee22680d4506d85d87146dbcc0b7b797d71500489eb23e0b399b5d8af1925f8871a7c2dc9f65a87209"
SCALAR_LE_HEX = "e57e6c4d3f6c645d69549f0c62aebfb77ebbcf29d2a8f0cd597d4ecd8ed56458"
PRODUCT_HEX = "ac39b219f3915eb90a4917931abbd5cf57709473bbc57f2169a311de51b397b882c29a1ba8fbf581ca12c388d69eecec"


def test_scale_matches_reference_vector():
    e = Element.from_compressed(bytes.fromhex(ELEMENT_HEX))
    s = Scalar(int.from_bytes(bytes.fromhex(SCALAR_LE_HEX), "little"))
    assert e.scale(s).to_compressed().hex() == PRODUCT_HEX


def test_from_hash_mod_q_reference_vector():
    s = Scalar.from_hash_mod_q(b"\xff" * 64)
    assert s.to_bytes().hex() == "6c9cf2f390e999c9235c9287cbed6c2b8f3954729614d30511ff599fd9d94807"
    assert s.value == int.from_bytes(b"\xff" * 64, "big") % Q


def test_scalar_arithmetic_reduces_mod_q():
    a = Scalar(Q - 1)
    b = Scalar(2)
    assert (a + b).value == 1
    assert (b - a).value == 3
    assert (-Scalar.zero()).value == 0
    assert (a * a).value == 1
    assert (b * b.inverse()) == Scalar.one()
    assert b ** 3 == Scalar(8)
    assert Scalar.from_int(-1) == a


def test_scalar_rejects_out_of_range():
    with pytest.raises(ValueError):
        Scalar(Q)
    with pytest.raises(ValueError):
        Scalar(-1)
    with pytest.raises(ValueError):
        Scalar.zero().inverse()


def test_element_group_laws():
    rng = DeterministicRandomSource(1)
    g = Element.generator()
    a, b = Scalar.random(rng), Scalar.random(rng)
    assert g.scale(a) + g.scale(b) == g.scale(a + b)
    assert g.scale(a) - g.scale(a) == Element.identity()
    assert (-g) + g == Element.identity()
    assert a * g == g.scale(a)
    assert g.scale(Scalar.zero()).is_identity()
    assert Element.identity().scale(a).is_identity()


def test_element_hash_is_representation_independent():
    g = Element.generator()
    two_g = g + g
    also = g.scale(Scalar(2))
    assert two_g == also
    assert hash(two_g) == hash(also)
    assert len({two_g, also}) == 1


def test_random_elements_differ():
    rng = DeterministicRandomSource(2)
    assert Element.random(rng) != Element.random(rng)


def test_msm_and_inner_product():
    rng = DeterministicRandomSource(3)
    bases = [Element.random(rng) for _ in range(3)]
    scalars = [Scalar.random(rng) for _ in range(3)]
    expected = bases[0].scale(scalars[0]) + bases[1].scale(scalars[1]) + bases[2].scale(scalars[2])
    assert msm(bases, scalars) == expected
    assert msm([], []) == Element.identity()
    with pytest.raises(ValueError):
        msm(bases, scalars[:2])
    assert inner_product([Scalar(2), Scalar(3)], [Scalar(5), Scalar(7)]) == Scalar(31)


def test_element_and_scalar_encodings_are_fixed_width():
    rng = DeterministicRandomSource(4)
    e = Element.random(rng)
    s = Scalar.random(rng)
    assert len(e.encode()) == 1 + 48
    assert len(s.encode()) == 1 + 32
    assert Element.from_bytes(e.encode()) == e
    assert Scalar.from_bytes(s.encode()) == s
    assert Element.from_bytes(Element.identity().encode()).is_identity()


def test_non_canonical_scalar_rejected():
    data = bytes([32]) + Q.to_bytes(32, "little")
    with pytest.raises(MalformedEncoding):
        Scalar.from_bytes(data)


def test_invalid_points_rejected():
    # Compression flag cleared.
    bad = bytearray(bytes.fromhex(ELEMENT_HEX))
    bad[0] &= 0x7F
    with pytest.raises(MalformedEncoding):
        Element.from_bytes(bytes([48]) + bytes(bad))
    # Wrong length prefix.
    with pytest.raises(MalformedEncoding):
        Element.from_bytes(bytes([47]) + bytes.fromhex(ELEMENT_HEX)[:47])
    # x coordinate above the field modulus.
    with pytest.raises(MalformedEncoding):
        Element.from_bytes(bytes([48, 0x9F]) + b"\xff" * 47)


def test_empty_input_is_malformed():
    with pytest.raises(MalformedEncoding):
        Element.decode(b"")
    with pytest.raises(MalformedEncoding):
        Scalar.decode(b"")
