import pytest

from mentalpoker.group import Element
from mentalpoker.pedersen import PedersenContext
from mentalpoker.rng import DeterministicRandomSource
from mentalpoker.sessions.common import Address


@pytest.fixture
def rng():
    """Fresh reproducible randomness per test."""
    return DeterministicRandomSource(b"mentalpoker-tests")


@pytest.fixture(scope="session")
def pedersen_ctx():
    """Shared commitment context; capacity covers every deck size used in tests."""
    return PedersenContext.from_seed(16, b"mentalpoker-tests/pedersen")


@pytest.fixture(scope="session")
def enc_base():
    return Element.generator()


@pytest.fixture
def addresses():
    """Three distinct player addresses (0x...a1, 0x...a2, 0x...a3)."""
    return [Address.from_hex(f"0xa{i}") for i in (1, 2, 3)]


@pytest.fixture
def session_addr():
    return Address.from_hex("0x5e55")
