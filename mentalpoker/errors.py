"""
Mental poker core errors.

This module defines a small, typed hierarchy of exceptions raised by the
protocol engine (decode → generate contribution → reveal). Callers can catch
the base `MentalPokerError` to handle every protocol-level failure, or catch
the concrete subclasses for more granular control.

None of these are retried internally. They are raised at the point of
detection and carry enough context to be logged by the orchestration layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class MentalPokerError(Exception):
    """Base class for all mental poker core errors."""
    pass


@dataclass(eq=False)
class MalformedEncoding(MentalPokerError, ValueError):
    """
    Raised when decoding receives truncated or otherwise invalid bytes.

    Always recoverable: the caller rejects the input.

    Attributes:
        what: Name of the structure (or field) being decoded.
        reason: Short explanation (e.g., 'truncated', 'not-on-curve', 'trailing-bytes').
        offset: Byte offset at which decoding failed, when known.
    """
    what: str
    reason: str
    offset: Optional[int] = None

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        at = f" at offset {self.offset}" if self.offset is not None else ""
        return f"MalformedEncoding: {self.what}{at}: {self.reason}"


@dataclass(eq=False)
class InvalidSessionState(MentalPokerError):
    """
    Raised when an operation is invoked while the session is not in the
    state the operation requires.

    Attributes:
        session: Session kind (e.g., 'dkg', 'shuffle').
        state: Numeric state code carried by the snapshot.
        reason: Optional human-readable explanation.
    """
    session: str
    state: int
    reason: Optional[str] = None

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        base = f"{type(self).__name__}: session={self.session} state={self.state}"
        return f"{base} reason={self.reason}" if self.reason else base


class SessionClosed(InvalidSessionState):
    """The session no longer accepts contributions (terminal state or deadline passed)."""


class SessionNotSucceeded(InvalidSessionState):
    """A result accessor was called before the session reached its success state."""


class NotYourTurn(InvalidSessionState):
    """A sequential session expects a different contributor for the current round."""


@dataclass(eq=False)
class NotAContributor(MentalPokerError):
    """
    Raised when the caller's address is absent from the session's contributor list.

    Attributes:
        session: Session kind.
        address_hex: Hex form of the rejected address.
    """
    session: str
    address_hex: str

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"NotAContributor: session={self.session} address={self.address_hex}"


@dataclass(eq=False)
class MissingLocalSecret(MentalPokerError):
    """
    Raised when a later protocol stage needs a secret that was never stored
    locally (or was lost). The dependent card or key share cannot be recovered.

    Attributes:
        session_id: Session identifier the secret was stored under.
        stage: Protocol stage name (see mentalpoker.constants.STAGE_*).
    """
    session_id: str
    stage: str

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"MissingLocalSecret: session={self.session_id} stage={self.stage}"


@dataclass(eq=False)
class SecretMismatch(MentalPokerError):
    """
    Raised when a supplied secret share does not reproduce the public key share
    recorded for the caller, so any proof built from it would be rejected.

    Attributes:
        session: Session kind.
        index: Contributor index whose key share did not match.
    """
    session: str
    index: int

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"SecretMismatch: session={self.session} contributor_index={self.index}"


__all__ = [
    "MentalPokerError",
    "MalformedEncoding",
    "InvalidSessionState",
    "SessionClosed",
    "SessionNotSucceeded",
    "NotYourTurn",
    "NotAContributor",
    "MissingLocalSecret",
    "SecretMismatch",
]
