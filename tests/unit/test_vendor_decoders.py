import unittest

from tcglog import grub, systemd_stub
from tcglog.decode_result import DecodeError, Failed, Matched, NoMatch
from tcglog.event_data import AsciiStringEventData
from tcglog.grub import GrubStringEventData, GrubStringEventType
from tcglog.systemd_stub import SystemdEFIStubEventData, loader_decode_pcr8, loader_encode_pcr8
from tcglog.tpm_constants import TpmEventType


class TestGrub(unittest.TestCase):
    def test_kernel_cmdline(self):
        result = grub.decode_event_data(8, TpmEventType.IPL, b"kernel_cmdline: /vmlinuz-linux root=/dev/sda2 rw\0")
        self.assertIsInstance(result, Matched)
        self.assertIsInstance(result.data, GrubStringEventData)
        self.assertEqual(result.data.type, GrubStringEventType.KERNEL_CMDLINE)
        self.assertEqual(result.data.string, "/vmlinuz-linux root=/dev/sda2 rw")
        self.assertEqual(str(result.data), "kernel_cmdline{ /vmlinuz-linux root=/dev/sda2 rw }")

    def test_grub_cmd(self):
        result = grub.decode_event_data(8, TpmEventType.IPL, b"grub_cmd: set root=hd0,gpt2")
        self.assertEqual(result.data.type, GrubStringEventType.GRUB_CMD)
        self.assertEqual(result.data.string, "set root=hd0,gpt2")

    def test_unprefixed_pcr8_declines(self):
        self.assertIsInstance(grub.decode_event_data(8, TpmEventType.IPL, b"something else"), NoMatch)

    def test_pcr9_file(self):
        result = grub.decode_event_data(9, TpmEventType.IPL, b"/boot/grub/grub.cfg\0")
        self.assertIsInstance(result.data, AsciiStringEventData)
        self.assertEqual(str(result.data), "/boot/grub/grub.cfg")

    def test_declines_other_events(self):
        self.assertIsInstance(grub.decode_event_data(8, TpmEventType.EFI_ACTION, b"grub_cmd: ls"), NoMatch)
        self.assertIsInstance(grub.decode_event_data(4, TpmEventType.IPL, b"grub_cmd: ls"), NoMatch)


class TestSystemdStub(unittest.TestCase):
    def test_round_trip(self):
        self.assertEqual(loader_decode_pcr8(loader_encode_pcr8("initrd=\\initramfs.img quiet")),
                         "initrd=\\initramfs.img quiet")

    def test_odd_length(self):
        # strlen*2+1 bytes, as measured by older stubs
        data = loader_encode_pcr8("ro quiet")[:-1]
        self.assertEqual(len(data) % 2, 1)
        self.assertEqual(loader_decode_pcr8(data), "ro quiet")
        result = systemd_stub.decode_event_data(data)
        self.assertIsInstance(result.data, SystemdEFIStubEventData)
        self.assertEqual(result.data.cmdline, "ro quiet")
        self.assertEqual(result.data.raw_bytes(), data)

    def test_not_terminated(self):
        with self.assertRaises(DecodeError):
            loader_decode_pcr8("ab".encode("utf-16le"))
        result = systemd_stub.decode_event_data("ab".encode("utf-16le"))
        self.assertIsInstance(result, Failed)
        self.assertIsInstance(result.error, DecodeError)

    def test_not_from_the_stub(self):
        self.assertIsInstance(systemd_stub.decode_event_data(b"grub_cmd: ls"), NoMatch)

    def test_empty(self):
        result = systemd_stub.decode_event_data(b"")
        self.assertIsInstance(result, Failed)
        self.assertIsInstance(result.error, EOFError)


if __name__ == '__main__':
    unittest.main()
