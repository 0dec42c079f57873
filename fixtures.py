from __future__ import annotations

import io
import tarfile
from typing import Iterable, List, Optional, Tuple

from tarblocks.blocks import Block
from tarblocks.constants import (
    BLOCK_SIZE,
    CHECKSUM_OFFSET,
    GID_OFFSET,
    MAGIC_OFFSET,
    MODE_OFFSET,
    MTIME_OFFSET,
    NAME_OFFSET,
    SIZE_OFFSET,
    TYPEFLAG_OFFSET,
    UID_OFFSET,
    USTAR_MAGIC,
)


def block_from_visual(visual: str) -> Block:
    """Build a block from caret notation, where "^@" stands for one NUL byte.

    Remaining positions are zero-filled.
    """
    out = bytearray(BLOCK_SIZE)
    i = 0
    j = 0
    while i < len(visual):
        if visual.startswith("^@", i):
            i += 2
        else:
            out[j] = ord(visual[i])
            i += 1
        j += 1
    return Block(bytes(out))


def visual_header(magic: str = "ustar") -> str:
    """Header for a 0-byte "somefile" as printed by a hex viewer, magic last."""
    return (
        "somefile"
        + "^@" * 92
        + "000644 ^@000765 ^@000024 ^@00000000000 13124523641 013414^@ 0"
        + "^@" * 100
        + magic
    )


def header_block(
    name: bytes,
    size: int = 0,
    *,
    size_field: Optional[bytes] = None,
    magic: bytes = USTAR_MAGIC,
    typeflag: bytes = b"0",
    checksum: bytes = b"013414\x00 ",
) -> Block:
    raw = bytearray(BLOCK_SIZE)
    raw[NAME_OFFSET : NAME_OFFSET + len(name)] = name
    raw[MODE_OFFSET : MODE_OFFSET + 8] = b"000644 \x00"
    raw[UID_OFFSET : UID_OFFSET + 8] = b"000765 \x00"
    raw[GID_OFFSET : GID_OFFSET + 8] = b"000024 \x00"
    if size_field is None:
        size_field = b"%011o\x00" % size
    raw[SIZE_OFFSET : SIZE_OFFSET + 12] = size_field
    raw[MTIME_OFFSET : MTIME_OFFSET + 12] = b"13124523641 "
    raw[CHECKSUM_OFFSET : CHECKSUM_OFFSET + 8] = checksum
    raw[TYPEFLAG_OFFSET] = typeflag[0]
    raw[MAGIC_OFFSET : MAGIC_OFFSET + len(magic)] = magic
    return Block(bytes(raw))


def data_blocks(payload: bytes) -> List[Block]:
    out = []
    for pos in range(0, len(payload), BLOCK_SIZE):
        out.append(Block(payload[pos : pos + BLOCK_SIZE].ljust(BLOCK_SIZE, b"\x00")))
    return out


def join_blocks(blocks: Iterable[Block]) -> bytes:
    return b"".join(blocks)


def seven_block_stream() -> bytes:
    """Two members (1 and 513 bytes), a null header, then one stray header."""
    blocks = [header_block(b"1", 1)]
    blocks += data_blocks(b"a")
    blocks.append(header_block(b"513", 513))
    blocks += data_blocks(b"b" * 513)
    blocks.append(Block.zero())
    blocks.append(header_block(b"after", 0))
    assert len(blocks) == 7
    return join_blocks(blocks)


def tarfile_bytes(members: Iterable[Tuple[str, Optional[bytes]]]) -> bytes:
    """Write a ustar archive with the standard library; None data means a directory."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w", format=tarfile.USTAR_FORMAT) as tf:
        for name, data in members:
            ti = tarfile.TarInfo(name)
            ti.mtime = 1_700_000_000
            if data is None:
                ti.type = tarfile.DIRTYPE
                ti.mode = 0o755
                tf.addfile(ti)
            else:
                ti.size = len(data)
                tf.addfile(ti, io.BytesIO(data))
    return buf.getvalue()
