import unittest

from tcglog.binary_reader import ShortReadError
from tcglog.decode_result import DecodeError
from tcglog.event_data import AsciiStringEventData, InvalidEventData, InvalidReason, OpaqueEventData


class TestEventData(unittest.TestCase):
    def test_opaque(self):
        data = OpaqueEventData(b"\x01\x02\x03")
        self.assertEqual(data.display_text(), "")
        self.assertEqual(str(data), "")
        self.assertEqual(data.raw_bytes(), b"\x01\x02\x03")

    def test_payload_is_copied(self):
        buf = bytearray(b"abcd")
        data = OpaqueEventData(buf)
        buf[0] = 0x7a
        self.assertEqual(data.raw_bytes(), b"abcd")
        self.assertIsInstance(data.raw_bytes(), bytes)

    def test_invalid_truncated(self):
        data = InvalidEventData(b"\x01", ShortReadError("Hit EOF after 1/4 bytes"), InvalidReason.TRUNCATED)
        self.assertTrue(data.truncated)
        self.assertEqual(data.display_text(), "Invalid event data: event data smaller than expected")
        self.assertEqual(data.classification(), "event data smaller than expected")
        self.assertEqual(data.raw_bytes(), b"\x01")

    def test_invalid_malformed(self):
        data = InvalidEventData(b"\x01\x02", DecodeError("bad signature"))
        self.assertFalse(data.truncated)
        self.assertEqual(data.reason, InvalidReason.MALFORMED)
        self.assertEqual(data.display_text(), "Invalid event data: bad signature")
        self.assertEqual(data.classification(), "malformed event data: bad signature")
        self.assertNotEqual(data.classification(), InvalidEventData(b"", EOFError(), InvalidReason.TRUNCATED).classification())

    def test_ascii_string(self):
        data = AsciiStringEventData(b"Calling EFI Application from Boot Option")
        self.assertEqual(str(data), "Calling EFI Application from Boot Option")
        self.assertEqual(AsciiStringEventData(b"/boot/vmlinuz\0").display_text(), "/boot/vmlinuz")

    def test_event_data_is_immutable(self):
        data = OpaqueEventData(b"abc")
        with self.assertRaises(AttributeError):
            data.data = b"def"


if __name__ == '__main__':
    unittest.main()
