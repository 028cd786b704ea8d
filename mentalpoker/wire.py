# Copyright (c) Animica.
# SPDX-License-Identifier: MIT
"""
mentalpoker.wire
================

Canonical byte encoding shared by every structure in the package.

The layout is BCS-like (the format the on-chain programs consume):

* ``u8`` / ``bool`` (0 or 1) / ``u64`` little-endian fixed width.
* ``uleb128`` for vector and byte-string lengths. Encodings must be minimal
  and fit in a u32.
* ``option<T>``: one presence byte (0 = absent, 1 = present) followed by T.
* ``vector<T>``: uleb128 length followed by the items.

Structures mix in :class:`WireCodec` and implement ``write(w)`` and
``read(r)``. The mixin supplies ``encode``, ``decode`` (returns the value and
the number of bytes consumed), strict ``from_bytes`` and hex helpers.

Any decode failure (short input, bad flag, over-long vector, or a value
rejected by the structure's own constructor) surfaces as
:class:`~mentalpoker.errors.MalformedEncoding`.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple, Type, TypeVar

from . import config as _config
from .constants import ULEB128_MAX
from .errors import MalformedEncoding

T = TypeVar("T")
C = TypeVar("C", bound="WireCodec")

__all__ = ["Writer", "Reader", "WireCodec", "uleb128"]

_U64_MAX = (1 << 64) - 1


def uleb128(n: int) -> bytes:
    """Minimal unsigned LEB128 encoding of `n` (must fit in a u32)."""
    if n < 0 or n > ULEB128_MAX:
        raise ValueError("uleb128 value out of u32 range")
    out = bytearray()
    while True:
        byte = n & 0x7F
        n >>= 7
        if n:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


class Writer:
    """Append-only encoder."""

    __slots__ = ("_buf",)

    def __init__(self) -> None:
        self._buf = bytearray()

    def u8(self, v: int) -> None:
        if not 0 <= v <= 0xFF:
            raise ValueError("u8 out of range")
        self._buf.append(v)

    def bool(self, v: bool) -> None:
        self._buf.append(1 if v else 0)

    def u64(self, v: int) -> None:
        if not 0 <= v <= _U64_MAX:
            raise ValueError("u64 out of range")
        self._buf += v.to_bytes(8, "little")

    def uleb128(self, v: int) -> None:
        self._buf += uleb128(v)

    def raw(self, data: bytes) -> None:
        self._buf += data

    def bytes(self, data: bytes) -> None:
        """Length-prefixed byte string."""
        self.uleb128(len(data))
        self._buf += data

    def option(self, value: Optional[T], write_item: Callable[["Writer", T], None]) -> None:
        if value is None:
            self._buf.append(0)
        else:
            self._buf.append(1)
            write_item(self, value)

    def vec(self, items: "List[T] | Tuple[T, ...]", write_item: Callable[["Writer", T], None]) -> None:
        self.uleb128(len(items))
        for item in items:
            write_item(self, item)

    def getvalue(self) -> bytes:
        return bytes(self._buf)


class Reader:
    """
    Cursor over an immutable buffer.

    ``max_vec_len`` and ``check_subgroup`` default to the values in
    :data:`mentalpoker.config.DEFAULT`.
    """

    __slots__ = ("_data", "_pos", "max_vec_len", "check_subgroup")

    def __init__(
        self,
        data: bytes,
        *,
        max_vec_len: Optional[int] = None,
        check_subgroup: Optional[bool] = None,
    ) -> None:
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError("Reader expects a bytes-like object")
        self._data = bytes(data)
        self._pos = 0
        cfg = _config.DEFAULT
        self.max_vec_len = cfg.max_vector_len if max_vec_len is None else max_vec_len
        self.check_subgroup = cfg.check_subgroup if check_subgroup is None else check_subgroup

    @property
    def offset(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def fail(self, what: str, reason: str) -> MalformedEncoding:
        return MalformedEncoding(what, reason, self._pos)

    def raw(self, n: int, what: str = "bytes") -> bytes:
        if n < 0 or self._pos + n > len(self._data):
            raise self.fail(what, f"truncated: need {n} bytes, have {self.remaining}")
        out = self._data[self._pos : self._pos + n]
        self._pos += n
        return out

    def u8(self, what: str = "u8") -> int:
        return self.raw(1, what)[0]

    def bool(self, what: str = "bool") -> bool:
        v = self.u8(what)
        if v > 1:
            raise self.fail(what, f"invalid bool byte {v}")
        return v == 1

    def u64(self, what: str = "u64") -> int:
        return int.from_bytes(self.raw(8, what), "little")

    def uleb128(self, what: str = "uleb128") -> int:
        value = 0
        shift = 0
        start = self._pos
        while True:
            byte = self.u8(what)
            value |= (byte & 0x7F) << shift
            if not byte & 0x80:
                break
            shift += 7
            if shift > 28:
                self._pos = start
                raise self.fail(what, "uleb128 longer than 5 bytes")
        if value > ULEB128_MAX:
            self._pos = start
            raise self.fail(what, "uleb128 exceeds u32")
        if self._pos - start > 1 and byte == 0:
            self._pos = start
            raise self.fail(what, "non-canonical uleb128")
        return value

    def bytes(self, what: str = "bytes") -> bytes:
        n = self.uleb128(what)
        return self.raw(n, what)

    def fixed_bytes(self, size: int, what: str) -> bytes:
        """Length-prefixed byte string whose length must equal `size`."""
        start = self._pos
        n = self.uleb128(what)
        if n != size:
            self._pos = start
            raise self.fail(what, f"expected {size} bytes, length prefix says {n}")
        return self.raw(n, what)

    def option(self, read_item: Callable[["Reader"], T], what: str = "option") -> Optional[T]:
        flag = self.u8(what)
        if flag == 0:
            return None
        if flag != 1:
            raise self.fail(what, f"invalid option tag {flag}")
        return read_item(self)

    def vec(self, read_item: Callable[["Reader"], T], what: str = "vector") -> List[T]:
        n = self.uleb128(what)
        if n > self.max_vec_len:
            raise self.fail(what, f"length {n} exceeds limit {self.max_vec_len}")
        return [read_item(self) for _ in range(n)]


class WireCodec:
    """
    Mixin giving a structure canonical ``encode``/``decode``.

    Subclasses implement:
      - ``write(self, w: Writer) -> None``
      - ``read(cls, r: Reader) -> Self`` (classmethod)
    """

    __slots__ = ()

    def write(self, w: Writer) -> None:  # pragma: no cover - abstract
        raise NotImplementedError

    @classmethod
    def read(cls: Type[C], r: Reader) -> C:  # pragma: no cover - abstract
        raise NotImplementedError

    @classmethod
    def read_checked(cls: Type[C], r: Reader) -> C:
        """`read`, with constructor-level ValueErrors reported as MalformedEncoding."""
        start = r.offset
        try:
            return cls.read(r)
        except MalformedEncoding:
            raise
        except ValueError as e:
            raise MalformedEncoding(cls.__name__, str(e), start) from e

    def encode(self) -> bytes:
        w = Writer()
        self.write(w)
        return w.getvalue()

    @classmethod
    def decode(cls: Type[C], data: bytes, *, reader: Optional[Reader] = None) -> Tuple[C, int]:
        """Decode one value from the front of `data`; return (value, bytes consumed)."""
        r = reader if reader is not None else Reader(data)
        start = r.offset
        value = cls.read_checked(r)
        return value, r.offset - start

    @classmethod
    def from_bytes(cls: Type[C], data: bytes) -> C:
        """Decode exactly one value; trailing bytes are an error."""
        r = Reader(data)
        value = cls.read_checked(r)
        if r.remaining:
            raise MalformedEncoding(cls.__name__, f"{r.remaining} trailing bytes", r.offset)
        return value

    def to_hex(self) -> str:
        return self.encode().hex()

    @classmethod
    def from_hex(cls: Type[C], s: str) -> C:
        s = s[2:] if s.startswith(("0x", "0X")) else s
        try:
            data = bytes.fromhex(s)
        except ValueError as e:
            raise MalformedEncoding(cls.__name__, "invalid hex", None) from e
        return cls.from_bytes(data)
