# Block geometry
BLOCK_SIZE = 512

# ustar header field widths, in on-disk order
NAME_LEN = 100
MODE_LEN = 8
UID_LEN = 8
GID_LEN = 8
SIZE_LEN = 12
MTIME_LEN = 12
CHECKSUM_LEN = 8
TYPEFLAG_LEN = 1
LINKNAME_LEN = 100
MAGIC_LEN = 6

NAME_OFFSET = 0
MODE_OFFSET = NAME_OFFSET + NAME_LEN            # 100
UID_OFFSET = MODE_OFFSET + MODE_LEN             # 108
GID_OFFSET = UID_OFFSET + UID_LEN               # 116
SIZE_OFFSET = GID_OFFSET + GID_LEN              # 124
MTIME_OFFSET = SIZE_OFFSET + SIZE_LEN           # 136
CHECKSUM_OFFSET = MTIME_OFFSET + MTIME_LEN      # 148
TYPEFLAG_OFFSET = CHECKSUM_OFFSET + CHECKSUM_LEN  # 156
LINKNAME_OFFSET = TYPEFLAG_OFFSET + TYPEFLAG_LEN  # 157
MAGIC_OFFSET = LINKNAME_OFFSET + LINKNAME_LEN   # 257

# Magic
USTAR_MAGIC = b"ustar\x00"  # 6 bytes: "ustar\0"

# Typeflags (subset; unknown flags are passed through untouched)
REGTYPE = "0"
AREGTYPE = "\x00"
LNKTYPE = "1"
SYMTYPE = "2"
CHRTYPE = "3"
BLKTYPE = "4"
DIRTYPE = "5"
FIFOTYPE = "6"
CONTTYPE = "7"

TYPE_NAMES = {
    REGTYPE: "file",
    LNKTYPE: "hardlink",
    SYMTYPE: "symlink",
    CHRTYPE: "chardev",
    BLKTYPE: "blockdev",
    DIRTYPE: "dir",
    FIFOTYPE: "fifo",
    CONTTYPE: "contiguous",
}

DEFAULT_ENCODING = "utf-8"
NAME_PLACEHOLDER = "<undecodable name>"
SIZE_PLACEHOLDER = "?"
