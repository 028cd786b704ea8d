"""
Sigma protocols (Fiat-Shamir, non-interactive).

- :mod:`.dlog`: knowledge of x with P = x·B
- :mod:`.dlog_eq`: the same x behind P1 = x·B1 and P2 = x·B2
"""

from __future__ import annotations

from . import dlog, dlog_eq
from .dlog import DLogProof
from .dlog_eq import DLogEqProof

__all__ = ["dlog", "dlog_eq", "DLogProof", "DLogEqProof"]
