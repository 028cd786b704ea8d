"""
Stored secret records.

Each secret is persisted as a canonical CBOR map (deterministic key order,
via ``cbor2``) so the same record always yields identical bytes::

    {"created_at": uint, "secret": bstr(32, little-endian scalar),
     "session_id": tstr, "stage": tstr, "v": 1}
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from io import BytesIO
from typing import Any, Dict

import cbor2

from ..constants import SCALAR_BYTES
from ..group import Scalar

RECORD_VERSION = 1

__all__ = ["SecretRecord", "RECORD_VERSION"]


@dataclass(frozen=True)
class SecretRecord:
    session_id: str
    stage: str
    secret: Scalar
    created_at: int = field(default_factory=lambda: int(time.time()))

    def to_cbor(self) -> bytes:
        obj: Dict[str, Any] = {
            "v": RECORD_VERSION,
            "session_id": self.session_id,
            "stage": self.stage,
            "secret": self.secret.to_bytes(),
            "created_at": self.created_at,
        }
        bio = BytesIO()
        cbor2.CBOREncoder(bio, canonical=True).encode(obj)
        return bio.getvalue()

    @classmethod
    def from_cbor(cls, data: bytes) -> "SecretRecord":
        try:
            obj = cbor2.loads(data)
        except cbor2.CBORDecodeError as e:
            raise ValueError(f"corrupt secret record: {e}") from e
        if not isinstance(obj, dict) or obj.get("v") != RECORD_VERSION:
            raise ValueError("unsupported secret record version")
        raw = obj.get("secret")
        if not isinstance(raw, bytes) or len(raw) != SCALAR_BYTES:
            raise ValueError("secret record holds a malformed scalar")
        session_id = obj.get("session_id")
        stage = obj.get("stage")
        created_at = obj.get("created_at")
        if not isinstance(session_id, str) or not isinstance(stage, str) or not isinstance(created_at, int):
            raise ValueError("corrupt secret record: missing or mistyped field")
        return cls(
            session_id=session_id,
            stage=stage,
            secret=Scalar(int.from_bytes(raw, "little")),
            created_at=created_at,
        )
