from __future__ import annotations

from typing import Optional


class TarBlocksError(Exception):
    """Base class for tarblocks-specific errors."""


# Structural errors: the stream can no longer be parsed past this point
class StructuralError(TarBlocksError):
    pass


class StreamError(StructuralError):
    pass


class ShortBlockError(StructuralError):
    def __init__(self, received: int, offset: int):
        super().__init__(f"Expected to read 512 bytes at offset {offset} but got {received}")
        self.received = received
        self.offset = offset


class TruncatedArchiveError(StructuralError):
    def __init__(self, entry_index: int, expected_blocks: int, available_blocks: int):
        super().__init__(
            f"Entry {entry_index} declares {expected_blocks} data block(s) "
            f"but the stream ended after {available_blocks}"
        )
        self.entry_index = entry_index
        self.expected_blocks = expected_blocks
        self.available_blocks = available_blocks


# Field decoding errors: local to one header, iteration may continue
class FieldDecodeError(TarBlocksError, ValueError):
    pass


class InvalidOctalDigitError(FieldDecodeError):
    def __init__(self, field: str, position: int, value: int):
        super().__init__(f"Invalid octal digit {bytes([value])!r} at position {position} of {field} field")
        self.field = field
        self.position = position
        self.value = value


class InvalidTextError(FieldDecodeError):
    def __init__(self, field: str, encoding: str, reason: Optional[str] = None):
        msg = f"{field} field is not valid {encoding}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
        self.field = field
        self.encoding = encoding
