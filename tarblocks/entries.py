from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO, Iterator, Optional

from .blocks import BlockReader
from .constants import BLOCK_SIZE, DEFAULT_ENCODING
from .errors import InvalidOctalDigitError, StructuralError, TruncatedArchiveError
from .header import Header


def num_data_blocks(size: int) -> int:
    """Number of 512-byte blocks needed to hold size bytes of member data."""
    if size < 0:
        raise ValueError("size must be non-negative")
    return (size + BLOCK_SIZE - 1) // BLOCK_SIZE


@dataclass
class Entry:
    index: int
    offset: int
    header: Header
    data_blocks: int = 0
    error: Optional[InvalidOctalDigitError] = None
    terminator: bool = False

    def is_null(self) -> bool:
        return self.header.is_null()

    def has_magic(self) -> bool:
        return self.header.has_magic()

    def name(self, encoding: str = DEFAULT_ENCODING) -> str:
        return self.header.name(encoding)

    def size(self) -> int:
        if self.error is not None:
            raise self.error
        return self.header.size()


class EntryIterator:
    """Turns a block stream into archive entries.

    Each non-null header's data blocks are consumed before the entry is
    returned. The first null header is returned once and ends iteration;
    anything after it is left unread.
    """

    def __init__(self, reader: BlockReader, *, strict_eof: bool = False):
        self.reader = reader
        self.strict_eof = strict_eof
        self.exhausted = False
        self.terminated = False
        self._count = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __iter__(self) -> Iterator[Entry]:
        return self

    def __next__(self) -> Entry:
        if self.exhausted:
            raise StopIteration
        try:
            return self._step()
        except StructuralError:
            self.close()
            raise

    def close(self):
        self.exhausted = True
        self.reader.close()

    def _is_terminator(self, header: Header) -> bool:
        if self.strict_eof:
            return header.is_zero_block()
        return header.is_null()

    def _step(self) -> Entry:
        offset = self.reader.offset
        block = self.reader.read_block()
        if block is None:
            # Stream ended without a terminator header.
            self.close()
            raise StopIteration
        header = Header(block)
        entry = Entry(index=self._count, offset=offset, header=header)
        self._count += 1
        if self._is_terminator(header):
            entry.terminator = True
            self.terminated = True
            self.close()
            return entry
        try:
            entry.data_blocks = num_data_blocks(header.size())
        except InvalidOctalDigitError as exc:
            # Data length unknown; resume at the next block.
            entry.error = exc
            return entry
        available = self.reader.skip(entry.data_blocks)
        if available != entry.data_blocks:
            raise TruncatedArchiveError(entry.index, entry.data_blocks, available)
        return entry


def iter_entries(stream: BinaryIO, *, strict_eof: bool = False) -> EntryIterator:
    return EntryIterator(BlockReader(stream), strict_eof=strict_eof)


def open_archive(path: str, *, strict_eof: bool = False) -> EntryIterator:
    return EntryIterator(BlockReader.open(path), strict_eof=strict_eof)
