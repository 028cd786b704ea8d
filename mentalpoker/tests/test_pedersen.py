import pytest

from mentalpoker.group import Scalar
from mentalpoker.pedersen import PedersenContext


def test_commit_is_homomorphic(rng, pedersen_ctx):
    v1 = [Scalar.random(rng) for _ in range(4)]
    v2 = [Scalar.random(rng) for _ in range(4)]
    r1, r2 = Scalar.random(rng), Scalar.random(rng)
    lhs = pedersen_ctx.commit(r1, v1) + pedersen_ctx.commit(r2, v2)
    rhs = pedersen_ctx.commit(r1 + r2, [a + b for a, b in zip(v1, v2)])
    assert lhs == rhs


def test_commit_zero_pads(rng, pedersen_ctx):
    v = [Scalar.random(rng) for _ in range(3)]
    r = Scalar.random(rng)
    padded = v + [Scalar.zero()] * (pedersen_ctx.capacity - 3)
    assert pedersen_ctx.commit(r, v) == pedersen_ctx.commit(r, padded)


def test_commit_rejects_oversized_vector(pedersen_ctx):
    with pytest.raises(ValueError):
        pedersen_ctx.commit(Scalar.zero(), [Scalar.one()] * (pedersen_ctx.capacity + 1))


def test_context_shapes(rng):
    ctx = PedersenContext.random(3, rng)
    assert ctx.capacity == 3
    assert len(ctx.bases) == 4
    assert PedersenContext.from_bytes(ctx.encode()) == ctx
    assert PedersenContext.from_seed(2, b"x") == PedersenContext.from_seed(2, b"x")
    with pytest.raises(ValueError):
        PedersenContext((ctx.bases[0],))
