from __future__ import annotations

import struct
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Protocol as TypingProtocol, Tuple

from .errors import DecodeError, EncodeError
from .types import DATE, FIELD_TO_STRUCT, MAX_TEXT_BYTES, TEXT

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


class ByteSource(TypingProtocol):
    """Anything that can hand back exactly n bytes (or raise)."""
    def read_exact(self, n: int) -> bytes: ...


# ---------------- dates ----------------

def date_to_epoch_ms(d: date) -> int:
    dt = datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
    return (dt - _EPOCH) // _ONE_MS


def epoch_ms_to_date(ms: int) -> date:
    try:
        return (_EPOCH + timedelta(milliseconds=int(ms))).date()
    except OverflowError:
        raise DecodeError(f"epoch-ms value out of range: {ms}") from None


# ---------------- modified UTF-8 ----------------

def encode_modified_utf8(text: str) -> bytes:
    """
    Encode text the way java.io.DataOutput.writeUTF does (without the length).

    Works on UTF-16 code units: U+0000 becomes C0 80 and characters outside
    the BMP become two 3-byte surrogate sequences.
    """
    units = text.encode("utf-16-be", "surrogatepass")
    out = bytearray()
    for i in range(0, len(units), 2):
        c = (units[i] << 8) | units[i + 1]
        if 0x0001 <= c <= 0x007F:
            out.append(c)
        elif c <= 0x07FF:
            out.append(0xC0 | (c >> 6))
            out.append(0x80 | (c & 0x3F))
        else:
            out.append(0xE0 | (c >> 12))
            out.append(0x80 | ((c >> 6) & 0x3F))
            out.append(0x80 | (c & 0x3F))
    return bytes(out)


def decode_modified_utf8(data: bytes) -> str:
    units: list[int] = []
    i = 0
    n = len(data)
    while i < n:
        b = data[i]
        if b < 0x80:
            units.append(b)
            i += 1
        elif (b & 0xE0) == 0xC0:
            if i + 1 >= n or (data[i + 1] & 0xC0) != 0x80:
                raise DecodeError(f"malformed 2-byte sequence at offset {i}")
            units.append(((b & 0x1F) << 6) | (data[i + 1] & 0x3F))
            i += 2
        elif (b & 0xF0) == 0xE0:
            if i + 2 >= n or (data[i + 1] & 0xC0) != 0x80 or (data[i + 2] & 0xC0) != 0x80:
                raise DecodeError(f"malformed 3-byte sequence at offset {i}")
            units.append(((b & 0x0F) << 12) | ((data[i + 1] & 0x3F) << 6) | (data[i + 2] & 0x3F))
            i += 3
        else:
            raise DecodeError(f"invalid lead byte 0x{b:02X} at offset {i}")

    raw = b"".join(u.to_bytes(2, "big") for u in units)
    return raw.decode("utf-16-be", "surrogatepass")


# ---------------- writer / reader ----------------

class WireWriter:
    """Accumulates fields in call order."""

    def __init__(self) -> None:
        self._parts: list[bytes] = []

    def _pack(self, ftype: str, value: Any) -> "WireWriter":
        fmt = ">" + FIELD_TO_STRUCT[ftype]
        try:
            self._parts.append(struct.pack(fmt, value))
        except struct.error as e:
            raise EncodeError(f"cannot encode {value!r} as {ftype}: {e}") from None
        return self

    def write_bool(self, value: bool) -> "WireWriter":
        return self._pack("bool", bool(value))

    def write_int32(self, value: int) -> "WireWriter":
        return self._pack("int32", value)

    def write_int64(self, value: int) -> "WireWriter":
        return self._pack("int64", value)

    def write_float64(self, value: float) -> "WireWriter":
        return self._pack("float64", float(value))

    def write_date(self, value: date) -> "WireWriter":
        return self.write_int64(date_to_epoch_ms(value))

    def write_text(self, value: str) -> "WireWriter":
        body = encode_modified_utf8(value)
        if len(body) > MAX_TEXT_BYTES:
            raise EncodeError(f"text too long: {len(body)} bytes > {MAX_TEXT_BYTES}")
        self._parts.append(struct.pack(">H", len(body)))
        self._parts.append(body)
        return self

    def write_field(self, ftype: str, value: Any) -> "WireWriter":
        if ftype == TEXT:
            return self.write_text(value)
        if ftype == DATE:
            return self.write_date(value)
        if ftype not in FIELD_TO_STRUCT:
            raise EncodeError(f"unknown field type '{ftype}'")
        return self._pack(ftype, value)

    def getvalue(self) -> bytes:
        return b"".join(self._parts)


class WireReader:
    """Pulls fields off a ByteSource in the order the caller asks for them."""

    def __init__(self, source: ByteSource):
        self._source = source

    def _unpack(self, ftype: str) -> Any:
        fmt = ">" + FIELD_TO_STRUCT[ftype]
        raw = self._source.read_exact(struct.calcsize(fmt))
        return struct.unpack(fmt, raw)[0]

    def read_bool(self) -> bool:
        return bool(self._unpack("bool"))

    def read_int32(self) -> int:
        return self._unpack("int32")

    def read_int64(self) -> int:
        return self._unpack("int64")

    def read_float64(self) -> float:
        return self._unpack("float64")

    def read_date(self) -> date:
        return epoch_ms_to_date(self.read_int64())

    def read_text(self) -> str:
        (length,) = struct.unpack(">H", self._source.read_exact(2))
        return decode_modified_utf8(self._source.read_exact(length)) if length else ""

    def read_field(self, ftype: str) -> Any:
        if ftype == TEXT:
            return self.read_text()
        if ftype == DATE:
            return self.read_date()
        if ftype not in FIELD_TO_STRUCT:
            raise DecodeError(f"unknown field type '{ftype}'")
        return self._unpack(ftype)

    def read_fields(self, fields: Iterable[Tuple[str, str]]) -> Dict[str, Any]:
        return {name: self.read_field(ftype) for name, ftype in fields}


class BufferSource:
    """In-memory ByteSource; running out of data is a DecodeError."""

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def read_exact(self, n: int) -> bytes:
        if self._pos + n > len(self._data):
            raise DecodeError(f"unexpected end of data: need {n}, have {self.remaining}")
        out = self._data[self._pos: self._pos + n]
        self._pos += n
        return out
