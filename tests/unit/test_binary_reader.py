import unittest

from tcglog.binary_reader import BinaryReader, ShortReadError


class TestBinaryReader(unittest.TestCase):
    def test_integers(self):
        with BinaryReader(b"\x01\x02\x00\x03\x00\x00\x00\x04\x00\x00\x00\x00\x00\x00\x00") as br:
            self.assertEqual(br.read_u8(), 1)
            self.assertEqual(br.read_u16(), 2)
            self.assertEqual(br.read_u32(), 3)
            self.assertEqual(br.read_u64(), 4)
            self.assertEqual(br.remaining(), 0)

    def test_eof(self):
        with BinaryReader(b"\x01\x02") as br:
            with self.assertRaises(ShortReadError):
                br.read_u32()
            self.assertEqual(br.tell(), 2)
            with self.assertRaises(EOFError) as cm:
                br.read_u8()
            self.assertNotIsInstance(cm.exception, ShortReadError)
            self.assertEqual(br.read(0), b"")

    def test_huge_length(self):
        with BinaryReader(b"abc") as br:
            with self.assertRaises(ShortReadError):
                br.read(1 << 62)


if __name__ == '__main__':
    unittest.main()
