"""
mentalpoker.tests
-----------------
Test package initializer for the mental poker core.

Notes:
- Tests use DeterministicRandomSource so transcripts are reproducible.
- `reference.py` plays the external verifier and the ledger: it checks the
  proofs the core produces and folds contributions into new snapshots.
"""

from __future__ import annotations

__all__: tuple[str, ...] = ()
