"""In-process secret store. Contents vanish with the process; meant for tests and REPL use."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from ..errors import MissingLocalSecret
from ..group import Scalar
from .records import SecretRecord

logger = logging.getLogger(__name__)

__all__ = ["MemorySecretStore"]


class MemorySecretStore:
    def __init__(self) -> None:
        self._records: Dict[Tuple[str, str], bytes] = {}

    def put(self, session_id: str, stage: str, secret: Scalar) -> None:
        key = (session_id, stage)
        if key in self._records:
            logger.warning("replacing stored secret for session=%s stage=%s", session_id, stage)
        self._records[key] = SecretRecord(session_id, stage, secret).to_cbor()
        logger.info("stored secret for session=%s stage=%s", session_id, stage)

    def find(self, session_id: str, stage: str) -> Optional[Scalar]:
        raw = self._records.get((session_id, stage))
        return None if raw is None else SecretRecord.from_cbor(raw).secret

    def get(self, session_id: str, stage: str) -> Scalar:
        secret = self.find(session_id, stage)
        if secret is None:
            raise MissingLocalSecret(session_id, stage)
        return secret

    def delete(self, session_id: str, stage: str) -> None:
        self._records.pop((session_id, stage), None)

    def __len__(self) -> int:
        return len(self._records)
