from __future__ import annotations

from typing import BinaryIO, Iterator, Optional

from .constants import BLOCK_SIZE
from .errors import ShortBlockError, StreamError


class Block(bytes):
    """An immutable 512-byte unit of the archive stream."""

    __slots__ = ()

    def __new__(cls, data: bytes) -> "Block":
        if len(data) != BLOCK_SIZE:
            raise ValueError(f"Block must be exactly {BLOCK_SIZE} bytes, got {len(data)}")
        return super().__new__(cls, data)

    @classmethod
    def zero(cls) -> "Block":
        return cls(bytes(BLOCK_SIZE))

    def __repr__(self) -> str:
        return f"Block({bytes(self[:16])!r}...)"


def read_exact(f: BinaryIO, n: int) -> bytes:
    """Read up to n bytes, retrying short reads until n bytes or EOF."""
    chunks = []
    remaining = n
    while remaining > 0:
        b = f.read(remaining)
        if not b:
            break
        chunks.append(b)
        remaining -= len(b)
    return b"".join(chunks)


class BlockReader:
    """Pulls fixed-size blocks from a binary stream it owns.

    The stream is closed once the reader is exhausted, fails, or is closed.
    """

    def __init__(self, stream: BinaryIO):
        self.stream: Optional[BinaryIO] = stream
        self.blocks_read: int = 0
        self.offset: int = 0

    @classmethod
    def open(cls, path: str) -> "BlockReader":
        return cls(open(path, "rb"))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def __del__(self):
        self.close()

    def __iter__(self) -> Iterator[Block]:
        return self

    def __next__(self) -> Block:
        block = self.read_block()
        if block is None:
            raise StopIteration
        return block

    @property
    def closed(self) -> bool:
        return self.stream is None

    def close(self):
        if self.stream is not None:
            stream, self.stream = self.stream, None
            stream.close()

    def read_block(self) -> Optional[Block]:
        """Return the next block, or None at a clean end of stream."""
        if self.stream is None:
            return None
        try:
            raw = read_exact(self.stream, BLOCK_SIZE)
        except OSError as exc:
            self.close()
            raise StreamError(f"Read error at offset {self.offset}: {exc}") from exc
        if not raw:
            self.close()
            return None
        if len(raw) != BLOCK_SIZE:
            self.close()
            raise ShortBlockError(len(raw), self.offset)
        self.blocks_read += 1
        self.offset += BLOCK_SIZE
        return Block(raw)

    def skip(self, count: int) -> int:
        """Discard up to count blocks; returns how many were available."""
        skipped = 0
        while skipped < count:
            if self.read_block() is None:
                break
            skipped += 1
        return skipped
