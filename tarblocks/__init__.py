"""
tarblocks: streaming reader for POSIX ustar archives.

The archive is read strictly in order, one 512-byte block at a time:

- BlockReader pulls fixed-size blocks from a binary stream it owns.
- Header interprets one block as a ustar header (name, size, magic, ...).
- EntryIterator composes the two into entries, skipping each member's data
  blocks and stopping at the first null header.

Malformed input surfaces as typed errors from tarblocks.errors: structural
errors (short block, truncated archive, stream failure) end iteration, while
field decode errors (bad octal digit, undecodable name) are local to one entry.
"""

__version__ = "0.1"

__all__ = [
    "constants",
    "errors",
    "blocks",
    "header",
    "entries",
]

# Programmatic API lives in tarblocks.entries (iter_entries/open_archive) and
# the CLI functions in tarblocks.cli (cmd_check/cmd_list/cmd_info).
