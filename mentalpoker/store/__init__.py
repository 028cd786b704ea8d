"""
mentalpoker.store
=================

Local secret storage. Scalars that must outlive the call that produced them
(DKG secret shares, re-encryption blinders) are written once per
``(session_id, stage)`` and read back by a later protocol stage, possibly
after a process restart.

Backends:
- :class:`~mentalpoker.store.memory.MemorySecretStore` (``memory://``)
- :class:`~mentalpoker.store.sqlite.SQLiteSecretStore` (``sqlite:///path``)

Writing again under the same key replaces the earlier secret; only the
latest generation attempt is usable afterwards.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, runtime_checkable

from ..group import Scalar

if TYPE_CHECKING:  # pragma: no cover
    from ..config import MentalPokerConfig


@runtime_checkable
class SecretStore(Protocol):
    """Scoped key-value store for local secret scalars."""

    def put(self, session_id: str, stage: str, secret: Scalar) -> None:
        """Insert or replace the secret for (session_id, stage)."""
        ...

    def get(self, session_id: str, stage: str) -> Scalar:
        """Return the secret, or raise MissingLocalSecret."""
        ...

    def find(self, session_id: str, stage: str) -> Optional[Scalar]:
        """Return the secret, or None if missing."""
        ...

    def delete(self, session_id: str, stage: str) -> None:
        """Remove the secret if present (no-op if absent)."""
        ...


def open_store(cfg: Optional["MentalPokerConfig"] = None) -> SecretStore:
    """Instantiate the backend named by ``cfg.store.uri`` (defaults to config.DEFAULT)."""
    from .. import config as _config
    from .memory import MemorySecretStore
    from .sqlite import SQLiteSecretStore

    cfg = cfg or _config.DEFAULT
    cfg.store.validate()
    if cfg.store.scheme == "memory":
        return MemorySecretStore()
    return SQLiteSecretStore(cfg.store.path, timeout_s=cfg.store.sqlite_timeout_s)


__all__ = ["SecretStore", "open_store"]
