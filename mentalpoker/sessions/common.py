"""
Pieces shared by every session snapshot: addresses, contributor lookup and
the state/deadline guards each ``generate_contribution`` runs first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..constants import ADDRESS_BYTES
from ..errors import NotAContributor, SessionClosed
from ..wire import Reader, WireCodec, Writer

__all__ = [
    "Address",
    "check_contributors",
    "index_of",
    "require_contributor",
    "require_open",
    "write_u64_vec",
    "read_u64_vec",
]


@dataclass(frozen=True, slots=True)
class Address(WireCodec):
    """Opaque 32-byte account/session identifier (raw on the wire, no length prefix)."""

    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, (bytes, bytearray)):
            raise TypeError("Address expects bytes")
        if len(self.raw) != ADDRESS_BYTES:
            raise ValueError(f"Address must be {ADDRESS_BYTES} bytes, got {len(self.raw)}")
        object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def from_hex(cls, s: str) -> "Address":
        """Accepts '0x'-prefixed or bare hex; short forms are left-padded ('0x1' -> 0x00..01)."""
        s = s[2:] if s.startswith(("0x", "0X")) else s
        if len(s) > 2 * ADDRESS_BYTES:
            raise ValueError("address hex too long")
        return cls(bytes.fromhex(s.rjust(2 * ADDRESS_BYTES, "0")))

    def to_bytes(self) -> bytes:
        return self.raw

    def to_hex(self) -> str:
        return "0x" + self.raw.hex()

    def write(self, w: Writer) -> None:
        w.raw(self.raw)

    @classmethod
    def read(cls, r: Reader) -> "Address":
        return cls(r.raw(ADDRESS_BYTES, "Address"))

    def __str__(self) -> str:
        return self.to_hex()


def check_contributors(contributors: Sequence[Address], what: str) -> None:
    if not contributors:
        raise ValueError(f"{what}: contributor list must not be empty")
    if len(set(contributors)) != len(contributors):
        raise ValueError(f"{what}: contributor list contains duplicates")


def index_of(contributors: Sequence[Address], me: Address) -> Optional[int]:
    for i, addr in enumerate(contributors):
        if addr == me:
            return i
    return None


def require_contributor(contributors: Sequence[Address], me: Address, session: str) -> int:
    idx = index_of(contributors, me)
    if idx is None:
        raise NotAContributor(session, me.to_hex())
    return idx


def require_open(
    session: str,
    state: int,
    accepting_state: int,
    deadline: Optional[int] = None,
    now_s: Optional[int] = None,
) -> None:
    """
    Raise SessionClosed unless the snapshot is in `accepting_state` and, when
    the caller knows the current ledger time, the deadline has not passed.
    """
    if state != accepting_state:
        raise SessionClosed(session, state, "not accepting contributions")
    if deadline is not None and now_s is not None and now_s >= deadline:
        raise SessionClosed(session, state, f"deadline {deadline} passed (now {now_s})")


def write_u64_vec(w: Writer, values: Sequence[int]) -> None:
    w.vec(values, lambda w_, v: w_.u64(v))


def read_u64_vec(r: Reader, what: str) -> List[int]:
    return r.vec(lambda r_: r_.u64(what), what)
