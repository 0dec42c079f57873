from __future__ import annotations

from .blocks import Block
from .constants import (
    BLOCK_SIZE,
    CHECKSUM_OFFSET,
    DEFAULT_ENCODING,
    GID_LEN,
    GID_OFFSET,
    LINKNAME_LEN,
    LINKNAME_OFFSET,
    MAGIC_LEN,
    MAGIC_OFFSET,
    MODE_LEN,
    MODE_OFFSET,
    MTIME_LEN,
    MTIME_OFFSET,
    NAME_LEN,
    NAME_OFFSET,
    REGTYPE,
    AREGTYPE,
    SIZE_LEN,
    SIZE_OFFSET,
    TYPEFLAG_OFFSET,
    UID_LEN,
    UID_OFFSET,
    USTAR_MAGIC,
)
from .errors import InvalidOctalDigitError, InvalidTextError


_ZERO = ord("0")
_SEVEN = ord("7")


def parse_octal(field: bytes, name: str, strict: bool = True) -> int:
    """Decode an ASCII octal field, most-significant digit first.

    In strict mode every byte must be a digit. Otherwise leading spaces and
    trailing NUL/space terminators are tolerated, as written by most tar
    implementations for the mode/uid/gid/mtime fields.
    """
    start = 0
    end = len(field)
    if not strict:
        while start < end and field[start] == 0x20:
            start += 1
        while end > start and field[end - 1] in (0x00, 0x20):
            end -= 1
    acc = 0
    for pos in range(start, end):
        b = field[pos]
        if b < _ZERO or b > _SEVEN:
            raise InvalidOctalDigitError(name, pos, b)
        acc = acc * 8 + (b - _ZERO)
    return acc


def _cstring(field: bytes) -> bytes:
    nul = field.find(b"\x00")
    return field if nul < 0 else field[:nul]


def _decode(raw: bytes, field: str, encoding: str) -> str:
    try:
        return raw.decode(encoding)
    except UnicodeDecodeError as exc:
        raise InvalidTextError(field, encoding, exc.reason) from exc


class Header:
    """Read-only view over one header block."""

    __slots__ = ("block",)

    def __init__(self, block: Block):
        self.block = block

    @classmethod
    def from_block(cls, block: Block) -> "Header":
        return cls(block)

    def __repr__(self) -> str:
        if self.is_null():
            return "Header(<null>)"
        return f"Header(name={_cstring(self._field(NAME_OFFSET, NAME_LEN))!r})"

    def _field(self, offset: int, length: int) -> bytes:
        return self.block[offset : offset + length]

    # Probes

    def has_magic(self) -> bool:
        return self.magic() == USTAR_MAGIC

    def is_null(self) -> bool:
        return self.block[CHECKSUM_OFFSET] == 0

    def is_zero_block(self) -> bool:
        return self.block.count(0) == BLOCK_SIZE

    # Fields

    def magic(self) -> bytes:
        return self._field(MAGIC_OFFSET, MAGIC_LEN)

    def name(self, encoding: str = DEFAULT_ENCODING) -> str:
        return _decode(_cstring(self._field(NAME_OFFSET, NAME_LEN)), "name", encoding)

    def size(self) -> int:
        # Last byte of the 12-byte field is the terminator and is ignored.
        return parse_octal(self._field(SIZE_OFFSET, SIZE_LEN - 1), "size")

    def mode(self) -> int:
        return parse_octal(self._field(MODE_OFFSET, MODE_LEN), "mode", strict=False)

    def uid(self) -> int:
        return parse_octal(self._field(UID_OFFSET, UID_LEN), "uid", strict=False)

    def gid(self) -> int:
        return parse_octal(self._field(GID_OFFSET, GID_LEN), "gid", strict=False)

    def mtime(self) -> int:
        return parse_octal(self._field(MTIME_OFFSET, MTIME_LEN), "mtime", strict=False)

    def typeflag(self) -> str:
        flag = chr(self.block[TYPEFLAG_OFFSET])
        return REGTYPE if flag == AREGTYPE else flag

    def linkname(self, encoding: str = DEFAULT_ENCODING) -> str:
        return _decode(_cstring(self._field(LINKNAME_OFFSET, LINKNAME_LEN)), "linkname", encoding)


def looks_like_tar(data: bytes) -> bool:
    """True when data starts with a full header block carrying ustar magic."""
    if len(data) < BLOCK_SIZE:
        return False
    return Header(Block(data[:BLOCK_SIZE])).has_magic()
