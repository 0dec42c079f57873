from __future__ import annotations

import argparse
import os
import sys
from typing import Callable, Optional

from tarblocks.constants import BLOCK_SIZE, CHECKSUM_OFFSET, SIZE_LEN, SIZE_OFFSET
from tarblocks.entries import open_archive
from tarblocks.errors import TarBlocksError


def _patch_byte(path: str, offset: int, change: Callable[[int], int]) -> int:
    """Replace the byte at offset with change(old); returns the new value."""
    if offset < 0:
        raise ValueError("Offset must be non-negative")
    with open(path, "r+b") as f:
        f.seek(offset)
        old = f.read(1)
        if not old:
            raise ValueError(f"Offset {offset} beyond end of file")
        new = change(old[0]) & 0xFF
        f.seek(offset)
        f.write(bytes([new]))
        f.flush()
        os.fsync(f.fileno())
    return new


def _header_offset(path: str, index: int) -> int:
    with open_archive(path) as it:
        for entry in it:
            if entry.index == index:
                if entry.terminator:
                    raise ValueError(f"Entry {index} is the end-of-archive header")
                return entry.offset
    raise ValueError(f"Entry index out of range: {index}")


def cmd_by_offset(args: argparse.Namespace) -> None:
    if args.index is not None:
        off = _header_offset(args.archive, args.index) + args.offset
    else:
        off = args.offset
    new = _patch_byte(args.archive, off, lambda b: b ^ args.xor)
    print(f"Byte at archive offset {off} is now 0x{new:02x}")


def cmd_null_header(args: argparse.Namespace) -> None:
    off = _header_offset(args.archive, args.index) + CHECKSUM_OFFSET
    _patch_byte(args.archive, off, lambda _b: 0)
    print(f"Zeroed checksum byte of entry {args.index} at archive offset {off}")


def cmd_size_digit(args: argparse.Namespace) -> None:
    if args.within < 0 or args.within >= SIZE_LEN - 1:
        raise ValueError(f"--within must be within the size digits (0..{SIZE_LEN - 2})")
    if len(args.digit) != 1 or ord(args.digit) > 0xFF:
        raise ValueError("--digit must be a single byte-sized character")
    off = _header_offset(args.archive, args.index) + SIZE_OFFSET + args.within
    _patch_byte(args.archive, off, lambda _b: ord(args.digit))
    print(f"Wrote {args.digit!r} into size field of entry {args.index} at archive offset {off}")


def cmd_truncate(args: argparse.Namespace) -> None:
    size = os.path.getsize(args.archive)
    if args.blocks is not None:
        new_size = args.blocks * BLOCK_SIZE + args.extra
    else:
        new_size = size - args.cut
    if new_size < 0 or new_size > size:
        raise ValueError(f"Resulting size out of range (0..{size})")
    with open(args.archive, "r+b") as f:
        f.truncate(new_size)
    print(f"Truncated archive from {size} to {new_size} bytes")


def main(argv: Optional[list[str]] = None) -> None:
    ap = argparse.ArgumentParser(prog="tarblocks.corrupt", description="Damage tar fixtures for testing")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_off = sub.add_parser("by-offset", help="XOR one byte, at an absolute offset or relative to an entry's header")
    p_off.add_argument("archive", help="Path to .tar archive")
    p_off.add_argument("--offset", type=int, required=True, help="Byte offset (absolute, or within the header with --index)")
    p_off.add_argument("--index", type=int, help="Entry index (0-based) whose header the offset is relative to")
    p_off.add_argument("--xor", type=lambda x: int(x, 0), default=0xFF, help="XOR mask to apply (default 0xFF)")
    p_off.set_defaults(func=cmd_by_offset)

    p_null = sub.add_parser("null-header", help="Zero the checksum byte so an entry reads as end of archive")
    p_null.add_argument("archive", help="Path to .tar archive")
    p_null.add_argument("--index", type=int, required=True, help="Entry index (0-based)")
    p_null.set_defaults(func=cmd_null_header)

    p_size = sub.add_parser("size-digit", help="Overwrite one digit of an entry's size field")
    p_size.add_argument("archive", help="Path to .tar archive")
    p_size.add_argument("--index", type=int, required=True, help="Entry index (0-based)")
    p_size.add_argument("--within", type=int, default=10, help="Digit position within the size field (default 10)")
    p_size.add_argument("--digit", default="9", help="Replacement character (default '9')")
    p_size.set_defaults(func=cmd_size_digit)

    p_trunc = sub.add_parser("truncate", help="Cut bytes off the end of the archive")
    p_trunc.add_argument("archive", help="Path to .tar archive")
    p_trunc.add_argument("--cut", type=int, default=1, help="Number of trailing bytes to remove (default 1)")
    p_trunc.add_argument("--blocks", type=int, help="Keep exactly this many whole blocks (overrides --cut)")
    p_trunc.add_argument("--extra", type=int, default=0, help="With --blocks, keep this many bytes of the next block")
    p_trunc.set_defaults(func=cmd_truncate)

    args = ap.parse_args(argv)
    try:
        args.func(args)
    except (TarBlocksError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
