# https://github.com/tianocore/edk2/blob/master/MdePkg/Include/Protocol/DevicePath.h

import struct

from .binary_reader import BinaryReader
from .decode_result import DecodeError
from .tpm_constants import (
    DEVICE_PATH_SUBTYPES,
    ACPIDevicePathSubtype,
    DevicePathType,
    EndDevicePathSubtype,
    HardwareDevicePathSubtype,
    MediaDevicePathSubtype,
)
from .util import guid_to_UUID, to_hex

_PCI_ROOT_HID = 0x0a0341d0
_PCIE_ROOT_HID = 0x0a0841d0


class Parseable():
    @classmethod
    def parse(cls, buf):
        return cls().parse_into(buf)


class DevicePathItem(dict, Parseable):
    def __init__(self):
        self.type = None
        self.subtype = None
        self.data = None

    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError:
            raise AttributeError(key) from None

    def __setattr__(self, key, val):
        self[key] = val

    def parse_into(self, buf):
        self.type       = DevicePathType(buf.read_u8())
        self.subtype    = buf.read_u8()
        length          = buf.read_u16()
        if length < 4:
            raise DecodeError("device path node length %d is too small" % length)
        self.data       = buf.read(length - (1 + 1 + 2))

        subtypes = DEVICE_PATH_SUBTYPES.get(self.type)
        if subtypes is not None and self.subtype in subtypes._value2member_map_:
            self.subtype = subtypes(self.subtype)

        if self.type == DevicePathType.MediaDevice:
            if self.subtype == MediaDevicePathSubtype.HardDrive:
                self._parse_hard_drive()

            elif self.subtype == MediaDevicePathSubtype.FilePath:
                self.file_path = self.data.decode("utf-16le").rstrip("\0")

        return self

    def _parse_hard_drive(self):
        (self.partition_number, self.partition_start, self.partition_size,
         signature, self.partition_format, signature_type) = struct.unpack_from("<LQQ16sBB", self.data)
        if signature_type == 0x02:
            self.part_uuid = guid_to_UUID(signature)
        else:
            self.mbr_signature = struct.unpack_from("<L", signature)[0]

    @property
    def is_end(self) -> bool:
        return self.type == DevicePathType.End and self.subtype == EndDevicePathSubtype.EndEntire

    def __str__(self):
        if self.type == DevicePathType.MediaDevice:
            if self.subtype == MediaDevicePathSubtype.FilePath:
                return self.file_path
            if self.subtype == MediaDevicePathSubtype.HardDrive:
                if "part_uuid" in self:
                    return "HD(%d,GPT,%s)" % (self.partition_number, self.part_uuid)
                return "HD(%d,MBR,0x%08x)" % (self.partition_number, self.mbr_signature)

        if self.type == DevicePathType.HardwareDevice and self.subtype == HardwareDevicePathSubtype.PCI \
                and len(self.data) == 2:
            function, device = struct.unpack("<BB", self.data)
            return "Pci(0x%x,0x%x)" % (device, function)

        if self.type == DevicePathType.ACPIDevice and self.subtype == ACPIDevicePathSubtype.ACPI \
                and len(self.data) == 8:
            hid, uid = struct.unpack("<LL", self.data)
            if hid == _PCI_ROOT_HID:
                return "PciRoot(0x%x)" % uid
            if hid == _PCIE_ROOT_HID:
                return "PcieRoot(0x%x)" % uid
            return "Acpi(0x%08x,0x%x)" % (hid, uid)

        return "Path(%d,%d,%s)" % (self.type, self.subtype, to_hex(self.data))


class DevicePath(list, Parseable):
    def parse_into(self, buf):
        while True:
            start = buf.tell()
            try:
                item = DevicePathItem.parse(buf)
            except EOFError:
                # running out between two nodes is fine, a node cut in half isn't
                if buf.tell() == start:
                    break
                raise
            if item.is_end:
                break
            self.append(item)
        return self

    def __str__(self):
        return "/".join(str(item) for item in self
                        if item.type != DevicePathType.End)


def parse_efi_device_path(buf: bytes) -> DevicePath:
    with BinaryReader(buf) as br:
        return DevicePath.parse(br)
