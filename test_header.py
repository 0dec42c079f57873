from __future__ import annotations

import unittest

from fixtures import block_from_visual, header_block, visual_header
from tarblocks.blocks import Block
from tarblocks.errors import FieldDecodeError, InvalidOctalDigitError, InvalidTextError
from tarblocks.header import Header, looks_like_tar, parse_octal


class VisualBlockTests(unittest.TestCase):
    def test_block_from_visual(self):
        block = block_from_visual(visual_header() + "^@" * 200 + "X")
        self.assertEqual(115, block[0])  # s
        self.assertEqual(101, block[7])  # e
        self.assertEqual(0, block[8])
        self.assertEqual(48, block[100])  # 0
        self.assertEqual(88, block[462])


class MagicTests(unittest.TestCase):
    def test_has_magic(self):
        good = Header.from_block(block_from_visual(visual_header("ustar")))
        bad = Header.from_block(block_from_visual(visual_header("nope!")))
        self.assertTrue(good.has_magic())
        self.assertFalse(bad.has_magic())

    def test_magic_is_exact_six_bytes(self):
        self.assertFalse(Header(header_block(b"f", magic=b"ustar ")).has_magic())
        self.assertFalse(Header(header_block(b"f", magic=b"ustaR\x00")).has_magic())
        self.assertFalse(Header(Block.zero()).has_magic())
        # GNU writes "ustar  \0"; the sixth byte is a space, not NUL.
        self.assertFalse(Header(header_block(b"f", magic=b"ustar  \x00")).has_magic())
        # ustar version digits follow the magic and are not part of it.
        self.assertTrue(Header(header_block(b"f", magic=b"ustar\x0000")).has_magic())

    def test_magic_with_undecodable_bytes_is_false(self):
        self.assertFalse(Header(header_block(b"f", magic=b"\xff\xfe\x00\x00\x00\x00")).has_magic())

    def test_looks_like_tar(self):
        raw = bytes(header_block(b"f"))
        self.assertTrue(looks_like_tar(raw))
        self.assertTrue(looks_like_tar(raw + b"trailing data"))
        self.assertFalse(looks_like_tar(raw[:511]))
        self.assertFalse(looks_like_tar(b""))


class NullTests(unittest.TestCase):
    def test_is_null_checks_checksum_byte_only(self):
        self.assertTrue(Header(Block.zero()).is_null())
        self.assertFalse(Header(header_block(b"f")).is_null())
        only_148 = Header(header_block(b"f", checksum=b"\x00013414 "))
        self.assertTrue(only_148.is_null())
        self.assertFalse(only_148.is_zero_block())

    def test_is_zero_block(self):
        self.assertTrue(Header(Block.zero()).is_zero_block())
        raw = bytearray(512)
        raw[511] = 1
        self.assertFalse(Header(Block(bytes(raw))).is_zero_block())
        self.assertTrue(Header(Block(bytes(raw))).is_null())


class NameTests(unittest.TestCase):
    def test_nul_terminated(self):
        self.assertEqual(Header(block_from_visual(visual_header())).name(), "somefile")

    def test_full_width_without_nul(self):
        name = b"n" * 100
        self.assertEqual(Header(header_block(name)).name(), "n" * 100)

    def test_empty_name(self):
        self.assertEqual(Header(Block.zero()).name(), "")

    def test_invalid_text_is_recoverable_error(self):
        h = Header(header_block(b"caf\xe9.txt", 5))
        with self.assertRaises(InvalidTextError) as ctx:
            h.name()
        self.assertEqual(ctx.exception.field, "name")
        self.assertIsInstance(ctx.exception, FieldDecodeError)
        self.assertIsInstance(ctx.exception, ValueError)
        # Size is independent of the name.
        self.assertEqual(h.size(), 5)
        self.assertEqual(h.name("latin-1"), "caf\xe9.txt")

    def test_utf8_name(self):
        self.assertEqual(Header(header_block("résumé.pdf".encode("utf-8"))).name(), "résumé.pdf")


class SizeTests(unittest.TestCase):
    def test_octal_decoding(self):
        self.assertEqual(Header(header_block(b"f", size_field=b"00000000013\x00")).size(), 11)
        self.assertEqual(Header(header_block(b"f", size_field=b"00000000000\x00")).size(), 0)
        self.assertEqual(Header(header_block(b"f", size_field=b"00000001001\x00")).size(), 513)
        self.assertEqual(Header(header_block(b"f", size_field=b"77777777777\x00")).size(), 8 ** 11 - 1)

    def test_terminator_byte_ignored(self):
        self.assertEqual(Header(header_block(b"f", size_field=b"00000000013 ")).size(), 11)
        self.assertEqual(Header(header_block(b"f", size_field=b"000000000139")).size(), 11)

    def test_from_visual(self):
        self.assertEqual(Header(block_from_visual(visual_header())).size(), 0)

    def test_invalid_digit(self):
        with self.assertRaises(InvalidOctalDigitError) as ctx:
            Header(header_block(b"f", size_field=b"00000000018\x00")).size()
        self.assertEqual(ctx.exception.field, "size")
        self.assertEqual(ctx.exception.position, 10)
        self.assertEqual(ctx.exception.value, ord("8"))

    def test_padding_inside_digits_is_invalid(self):
        with self.assertRaises(InvalidOctalDigitError):
            Header(header_block(b"f", size_field=b"      13\x00\x00\x00\x00")).size()
        with self.assertRaises(InvalidOctalDigitError):
            Header(Block.zero()).size()


class OtherFieldTests(unittest.TestCase):
    def setUp(self):
        self.h = Header(block_from_visual(visual_header()))

    def test_numeric_fields(self):
        self.assertEqual(self.h.mode(), 0o644)
        self.assertEqual(self.h.uid(), 0o765)
        self.assertEqual(self.h.gid(), 0o24)
        self.assertEqual(self.h.mtime(), 0o13124523641)

    def test_typeflag(self):
        self.assertEqual(self.h.typeflag(), "0")
        self.assertEqual(Header(header_block(b"d/", typeflag=b"5")).typeflag(), "5")
        self.assertEqual(Header(header_block(b"f", typeflag=b"\x00")).typeflag(), "0")

    def test_linkname_and_magic(self):
        self.assertEqual(self.h.linkname(), "")
        self.assertEqual(self.h.magic(), b"ustar\x00")

    def test_view_does_not_copy_or_mutate(self):
        block = header_block(b"f", 3)
        h = Header(block)
        before = bytes(block)
        h.name()
        h.size()
        h.has_magic()
        self.assertIs(h.block, block)
        self.assertEqual(bytes(block), before)


class ParseOctalTests(unittest.TestCase):
    def test_strict(self):
        self.assertEqual(parse_octal(b"0755", "mode"), 0o755)
        self.assertEqual(parse_octal(b"", "mode"), 0)
        with self.assertRaises(InvalidOctalDigitError):
            parse_octal(b"0755 ", "mode")

    def test_lenient(self):
        self.assertEqual(parse_octal(b"  755 \x00", "mode", strict=False), 0o755)
        self.assertEqual(parse_octal(b"\x00\x00\x00", "mode", strict=False), 0)
        with self.assertRaises(InvalidOctalDigitError) as ctx:
            parse_octal(b"07x5\x00", "mode", strict=False)
        self.assertEqual(ctx.exception.position, 2)


if __name__ == "__main__":
    unittest.main()
