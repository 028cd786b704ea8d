"""
Mental poker core configuration.

This file defines typed configuration objects for:
- Wire decoding limits (maximum vector length, subgroup checks)
- The local secret store backend URI

It provides:
- Dataclass-based configs with validation
- Loading from environment variables (prefix configurable)
- Loading from a JSON or YAML file
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field
from typing import Any, Dict

import yaml

from .constants import DEFAULT_MAX_VECTOR_LEN, ULEB128_MAX

# -------------------------
# Sub-configs
# -------------------------

_STORE_SCHEMES = ("memory", "sqlite")


@dataclass
class StoreConfig:
    """
    Where local secrets (DKG shares, re-encryption blinders) are persisted.

    URIs:
      - memory://             process-local dict (lost on exit; tests/REPL)
      - sqlite:///path/to.db  durable SQLite file (survives restarts)

    sqlite_timeout_s: busy timeout handed to sqlite3.connect
    """

    uri: str = "memory://"
    sqlite_timeout_s: float = 30.0

    @property
    def scheme(self) -> str:
        return self.uri.split("://", 1)[0]

    @property
    def path(self) -> str:
        """Filesystem path for sqlite URIs ('sqlite:///a/b.db' -> '/a/b.db')."""
        rest = self.uri.split("://", 1)[1]
        return rest

    def validate(self) -> None:
        if "://" not in self.uri:
            raise ValueError("store uri must be a URI (e.g., memory:// or sqlite:///path)")
        if self.scheme not in _STORE_SCHEMES:
            raise ValueError(f"Unsupported store scheme: {self.scheme!r}")
        if self.scheme == "sqlite" and not self.path:
            raise ValueError("sqlite store uri needs a path (sqlite:///path/to.db)")
        if self.sqlite_timeout_s <= 0:
            raise ValueError("sqlite_timeout_s must be > 0")


# -------------------------
# Top-level config
# -------------------------


@dataclass
class MentalPokerConfig:
    """
    Decoding:
      - max_vector_len: upper bound accepted for any uleb128-prefixed vector;
        guards against hostile snapshots announcing huge lengths
      - check_subgroup: verify decoded points lie in the prime-order subgroup

    Store: nested sub-config
    """

    max_vector_len: int = DEFAULT_MAX_VECTOR_LEN
    check_subgroup: bool = True

    store: StoreConfig = field(default_factory=StoreConfig)

    def validate(self) -> None:
        if self.max_vector_len <= 0:
            raise ValueError("max_vector_len must be > 0")
        if self.max_vector_len > ULEB128_MAX:
            raise ValueError("max_vector_len must fit in a u32")
        self.store.validate()

    # -------------------------
    # Serialization helpers
    # -------------------------

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    # -------------------------
    # Loaders
    # -------------------------

    @staticmethod
    def from_env(prefix: str = "MENTALPOKER_") -> "MentalPokerConfig":
        """
        Load configuration from environment variables. All variables are optional.

        Supported keys:
          - MENTALPOKER_MAX_VECTOR_LEN=65536
          - MENTALPOKER_CHECK_SUBGROUP=true
          - MENTALPOKER_STORE_URI=sqlite:///var/lib/mentalpoker/secrets.db
          - MENTALPOKER_STORE_SQLITE_TIMEOUT_S=30
        """

        def _get(name: str, cast: Any, default: Any) -> Any:
            key = prefix + name
            raw = os.getenv(key)
            if raw is None:
                return default
            try:
                if cast is bool:
                    return raw.lower() in {"1", "true", "yes", "on"}
                return cast(raw)
            except ValueError as e:
                raise ValueError(f"Invalid value for {key}: {raw!r}") from e

        cfg = MentalPokerConfig(
            max_vector_len=_get("MAX_VECTOR_LEN", int, DEFAULT_MAX_VECTOR_LEN),
            check_subgroup=_get("CHECK_SUBGROUP", bool, True),
            store=StoreConfig(
                uri=_get("STORE_URI", str, "memory://"),
                sqlite_timeout_s=_get("STORE_SQLITE_TIMEOUT_S", float, 30.0),
            ),
        )
        cfg.validate()
        return cfg

    @staticmethod
    def from_file(path: str) -> "MentalPokerConfig":
        """
        Load configuration from a JSON or YAML file. Keys mirror the dataclass
        structure. Example (YAML):

            max_vector_len: 4096
            check_subgroup: true
            store:
              uri: "sqlite:///var/lib/mentalpoker/secrets.db"
              sqlite_timeout_s: 10
        """
        text = _read_text(path)
        data = _parse_json_or_yaml(text, path)

        def _pop(d: Dict[str, Any], key: str, default: Any) -> Any:
            return d.pop(key, default) if isinstance(d, dict) else default

        store_d = _pop(data, "store", {}) or {}

        cfg = MentalPokerConfig(
            max_vector_len=_pop(data, "max_vector_len", DEFAULT_MAX_VECTOR_LEN),
            check_subgroup=_pop(data, "check_subgroup", True),
            store=StoreConfig(
                uri=_pop(store_d, "uri", "memory://"),
                sqlite_timeout_s=_pop(store_d, "sqlite_timeout_s", 30.0),
            ),
        )
        cfg.validate()
        return cfg


# -------------------------
# Utilities
# -------------------------


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _parse_json_or_yaml(text: str, path_hint: str) -> Dict[str, Any]:
    # First try JSON
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as e:
            raise ValueError(
                f"Failed to parse {path_hint!r} as JSON or YAML: {e}"
            ) from e
    if not isinstance(data, dict):
        raise ValueError(f"{path_hint!r} must contain a mapping at the top level")
    return data


# A handy default instance for quick use in REPL/tests.
DEFAULT: MentalPokerConfig = MentalPokerConfig()


__all__ = [
    "StoreConfig",
    "MentalPokerConfig",
    "DEFAULT",
]
