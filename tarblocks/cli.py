from __future__ import annotations

import sys
import argparse
import json as _json

from typing import Any, Dict, List, Optional

from tarblocks.blocks import BlockReader
from tarblocks.constants import DEFAULT_ENCODING, NAME_PLACEHOLDER, SIZE_PLACEHOLDER, TYPE_NAMES
from tarblocks.entries import Entry, EntryIterator
from tarblocks.errors import InvalidOctalDigitError, InvalidTextError, TarBlocksError, TruncatedArchiveError
from tarblocks.header import Header


def _open_reader(archive: str) -> BlockReader:
    """Open a block reader over a path, or stdin when archive is "-"."""
    if archive == "-":
        return BlockReader(sys.stdin.buffer)
    return BlockReader.open(archive)


def _describe(entry: Entry, encoding: str, errors: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Collect printable fields for one entry, recording field-local failures.

    Args:
        entry: Entry produced by the iterator.
        encoding: Text encoding used for the name field.
        errors: Accumulator for {"index", "field", "message"} records.

    Returns:
        A dict with index, offset, name, size, type and null keys. Fields that
        failed to decode are replaced by placeholders.
    """
    info: Dict[str, Any] = {"index": entry.index, "offset": entry.offset, "null": entry.terminator}
    if info["null"]:
        info.update(name="", size=0, type="terminator")
        return info
    try:
        info["name"] = entry.name(encoding)
    except InvalidTextError as exc:
        errors.append({"index": entry.index, "field": exc.field, "message": str(exc)})
        info["name"] = NAME_PLACEHOLDER
    try:
        info["size"] = entry.size()
    except InvalidOctalDigitError as exc:
        errors.append({"index": entry.index, "field": exc.field, "message": str(exc)})
        info["size"] = None
    info["type"] = TYPE_NAMES.get(entry.header.typeflag(), "other")
    return info


def cmd_check(archive: str) -> bool:
    """Probe the first header for ustar magic.

    Args:
        archive: Archive path, or "-" for standard input.

    Returns:
        True when the first block carries the ustar magic.

    Raises:
        ShortBlockError: If the stream ends inside the first block.
        StreamError: If the underlying read fails.
    """
    with _open_reader(archive) as reader:
        block = reader.read_block()
    if block is not None and Header.from_block(block).has_magic():
        print("This looks like a valid tar file.")
        return True
    print("Bad magic in the first header.")
    return False


def cmd_list(
    archive: str,
    *,
    strict_eof: bool = False,
    encoding: str = DEFAULT_ENCODING,
    as_json: bool = False,
    include_terminator: bool = False,
) -> bool:
    """List archive entries in stream order.

    Field-local failures are reported per entry and listing continues.
    Structural failures propagate after the entries read so far are printed.

    Returns:
        True when no entry had a field decode error.
    """
    rows: List[Dict[str, Any]] = []
    errors: List[Dict[str, Any]] = []
    with EntryIterator(_open_reader(archive), strict_eof=strict_eof) as it:
        try:
            for entry in it:
                if entry.index == 0 and not entry.terminator and not entry.has_magic():
                    print("Warning: first header has no ustar magic; output may be garbage", file=sys.stderr)
                n_err = len(errors)
                row = _describe(entry, encoding, errors)
                if not as_json:
                    for err in errors[n_err:]:
                        print(f"Error: entry {err['index']}: {err['message']}", file=sys.stderr)
                if row["null"] and not include_terminator:
                    continue
                rows.append(row)
                if not as_json:
                    size = SIZE_PLACEHOLDER if row["size"] is None else row["size"]
                    name = "<end of archive>" if row["null"] else row["name"]
                    print(f"{row['index']:>5} {size:>12} {name}")
        finally:
            if as_json:
                print(_json.dumps({"entries": rows, "errors": errors, "terminated": it.terminated}))
    return not errors


def cmd_info(archive: str, *, strict_eof: bool = False) -> Dict[str, Any]:
    """Summarize an archive without printing entry names.

    Returns:
        A dict with entries, data_bytes, data_blocks, undecodable, terminated and magic keys.
    """
    stats: Dict[str, Any] = {
        "entries": 0,
        "data_bytes": 0,
        "data_blocks": 0,
        "undecodable": 0,
        "terminated": False,
        "magic": False,
    }
    with EntryIterator(_open_reader(archive), strict_eof=strict_eof) as it:
        for entry in it:
            if entry.index == 0:
                stats["magic"] = entry.has_magic()
            if entry.terminator:
                continue
            stats["entries"] += 1
            stats["data_blocks"] += entry.data_blocks
            if entry.error is not None:
                stats["undecodable"] += 1
            else:
                stats["data_bytes"] += entry.size()
        stats["terminated"] = it.terminated
    print(f"Archive: {archive}")
    print(f"  ustar magic: {'yes' if stats['magic'] else 'no'}")
    print(f"  Entries: {stats['entries']}")
    print(f"  Data bytes: {stats['data_bytes']}")
    print(f"  Data blocks: {stats['data_blocks']}")
    if stats["undecodable"]:
        print(f"  Entries with unreadable size: {stats['undecodable']}")
    print(f"  Terminator: {'present' if stats['terminated'] else 'missing'}")
    return stats


def main(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(
        prog="tarblocks",
        description="Inspect ustar archives block by block",
        epilog="Use '-' as the archive path to read standard input.",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_check = sub.add_parser("check", help="Check the first header for ustar magic")
    ap_check.add_argument("archive", help="Archive path or '-'")

    ap_list = sub.add_parser("list", help="List archive entries")
    ap_list.add_argument("archive", help="Archive path or '-'")
    ap_list.add_argument(
        "--strict-eof",
        action="store_true",
        help="Only treat an all-zero block as end of archive (default: zero checksum byte)",
    )
    ap_list.add_argument("--encoding", default=DEFAULT_ENCODING, help=f"Name encoding (default {DEFAULT_ENCODING})")
    ap_list.add_argument("--json", action="store_true", help="Emit a JSON document instead of text")
    ap_list.add_argument("--include-terminator", action="store_true", help="Also list the end-of-archive header")

    ap_info = sub.add_parser("info", help="Show archive summary")
    ap_info.add_argument("archive", help="Archive path or '-'")
    ap_info.add_argument("--strict-eof", action="store_true", help="Only treat an all-zero block as end of archive")

    args = ap.parse_args(argv)
    try:
        if args.cmd == "check":
            ok = cmd_check(args.archive)
            sys.exit(0 if ok else 1)
        elif args.cmd == "list":
            ok = cmd_list(
                args.archive,
                strict_eof=args.strict_eof,
                encoding=args.encoding,
                as_json=args.json,
                include_terminator=args.include_terminator,
            )
            sys.exit(0 if ok else 1)
        elif args.cmd == "info":
            cmd_info(args.archive, strict_eof=args.strict_eof)
        else:
            raise RuntimeError("Unknown command")
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except LookupError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except TruncatedArchiveError as e:
        print(f"Error: truncated archive: {e}", file=sys.stderr)
        sys.exit(2)
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except (TarBlocksError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
