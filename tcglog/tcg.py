"""
Decoders for the event data structures defined by the TCG PC Client
specifications. These apply to any log, whatever firmware or bootloader
wrote it, and act as the fallback when no vendor specific decoder claimed
an event.

References:
  TCG PC Client Platform Firmware Profile Specification, rev 1.05, section 10
  TCG EFI Platform Specification 1.22, section 7
"""

import enum
import uuid
from dataclasses import dataclass

from .algorithms import algorithm_name
from .binary_reader import BinaryReader
from .decode_result import NO_MATCH, DecodeError, DecodeResult, Matched, decoder
from .device_path import DevicePath, parse_efi_device_path
from .event_data import AsciiStringEventData, EventData
from .tpm_constants import TpmAlgorithm, TpmEventType
from .util import nullterm8, nullterm16


class Spec(enum.Enum):
    UNKNOWN = 0
    PC_CLIENT = 1
    EFI_1_2 = 2
    EFI_2 = 3


_SPEC_ID_SIGNATURES = {
    b"Spec ID Event00\0": Spec.PC_CLIENT,
    b"Spec ID Event02\0": Spec.EFI_1_2,
    b"Spec ID Event03\0": Spec.EFI_2,
}

_STARTUP_LOCALITY_SIGNATURE = b"StartupLocality\0"

SEPARATOR_EVENT_ERROR_VALUE = 0x00000001


@dataclass(frozen=True)
class SpecIdEventData(EventData):
    spec: Spec
    platform_class: int
    spec_version_minor: int
    spec_version_major: int
    spec_errata: int
    uintn_size: int
    digest_sizes: dict
    vendor_info: bytes

    def display_text(self) -> str:
        text = "%s{ platformClass=%d, specVersion=%d.%d, specErrata=%d, uintnSize=%d" % (
            self.signature, self.platform_class, self.spec_version_major,
            self.spec_version_minor, self.spec_errata, self.uintn_size)
        if self.spec == Spec.EFI_2:
            algs = ", ".join("%s(%d)" % (algorithm_name(alg), size) for alg, size in self.digest_sizes.items())
            text += ", digestSizes=[%s]" % algs
        return text + " }"

    @property
    def signature(self) -> str:
        return nullterm8(self.data[:16])


@dataclass(frozen=True)
class StartupLocalityEventData(EventData):
    locality: int

    def display_text(self) -> str:
        return "EfiStartupLocalityEvent{ StartupLocality: %d }" % self.locality


@dataclass(frozen=True)
class SeparatorEventData(EventData):
    is_error: bool
    value: int | None = None

    def display_text(self) -> str:
        if not self.is_error:
            return ""
        if self.value is None:
            return "*ERROR*"
        return "*ERROR*: 0x%08x" % self.value


@dataclass(frozen=True)
class FirmwareBlobEventData(EventData):
    blob_base: int
    blob_length: int

    def display_text(self) -> str:
        return "UEFI_PLATFORM_FIRMWARE_BLOB{ BlobBase: 0x%x, BlobLength: %d }" % (self.blob_base, self.blob_length)


@dataclass(frozen=True)
class EFIVariableData(EventData):
    variable_name: uuid.UUID
    unicode_name: str
    variable_data: bytes

    def display_text(self) -> str:
        return "UEFI_VARIABLE_DATA{ VariableName: %s, UnicodeName: \"%s\" }" % (self.variable_name, self.unicode_name)


@dataclass(frozen=True)
class EFIImageLoadEventData(EventData):
    location_in_memory: int
    length_in_memory: int
    link_time_address: int
    device_path: DevicePath

    def display_text(self) -> str:
        return ("UEFI_IMAGE_LOAD_EVENT{ ImageLocationInMemory: 0x%016x, ImageLengthInMemory: %d, "
                "ImageLinkTimeAddress: 0x%016x, DevicePath: %s }" % (
                    self.location_in_memory, self.length_in_memory,
                    self.link_time_address, self.device_path))


@dataclass(frozen=True)
class GPTPartitionEntry:
    partition_type: uuid.UUID
    unique_partition_guid: uuid.UUID
    starting_lba: int
    ending_lba: int
    attributes: int
    partition_name: str


@dataclass(frozen=True)
class EFIGPTData(EventData):
    disk_guid: uuid.UUID
    partition_entry_lba: int
    partitions: tuple

    def display_text(self) -> str:
        names = ", ".join("\"%s\"" % p.partition_name for p in self.partitions)
        return "UEFI_GPT_DATA{ DiskGUID: %s, Partitions: [%s] }" % (self.disk_guid, names)


def _decode_no_action(data: bytes) -> DecodeResult:
    signature = data[:16]
    if signature in _SPEC_ID_SIGNATURES:
        return _decode_spec_id_event(data, _SPEC_ID_SIGNATURES[signature])
    if signature == _STARTUP_LOCALITY_SIGNATURE:
        with BinaryReader(data) as br:
            br.read(16)
            locality = br.read_u8()
            return Matched(StartupLocalityEventData(data, locality), br.remaining())
    return NO_MATCH


def _decode_spec_id_event(data: bytes, spec: Spec) -> DecodeResult:
    # TCG_PCClientSpecIDEventStruct and TCG_EfiSpecIdEventStruct
    with BinaryReader(data) as br:
        br.read(16)
        platform_class = br.read_u32()
        spec_version_minor = br.read_u8()
        spec_version_major = br.read_u8()
        spec_errata = br.read_u8()
        uintn_size = br.read_u8()

        digest_sizes = {}
        if spec == Spec.EFI_2:
            num_algorithms = br.read_u32()
            if num_algorithms == 0:
                raise DecodeError("Spec ID Event03 declares no digest algorithms")
            for i in range(num_algorithms):
                # struct TCG_EfiSpecIdEventAlgorithmSize
                alg_id = TpmAlgorithm(br.read_u16())
                digest_sizes[alg_id] = br.read_u16()

        vendor_info_len = br.read_u8()
        vendor_info = br.read(vendor_info_len)
        return Matched(SpecIdEventData(data, spec, platform_class, spec_version_minor, spec_version_major,
                                       spec_errata, uintn_size, digest_sizes, vendor_info), br.remaining())


def _decode_separator(data: bytes, has_digest_of_separator_error: bool) -> DecodeResult:
    if has_digest_of_separator_error:
        # After an error separator the firmware may record anything here.
        return Matched(SeparatorEventData(data, is_error=True))

    with BinaryReader(data) as br:
        value = br.read_u32()
        if br.remaining():
            raise DecodeError("separator event data is %d bytes, expected 4" % len(data))
    return Matched(SeparatorEventData(data, is_error=value == SEPARATOR_EVENT_ERROR_VALUE, value=value))


def _decode_firmware_blob(data: bytes) -> DecodeResult:
    # UEFI_PLATFORM_FIRMWARE_BLOB
    with BinaryReader(data) as br:
        blob_base = br.read_u64()
        blob_length = br.read_u64()
        return Matched(FirmwareBlobEventData(data, blob_base, blob_length), br.remaining())


def _decode_post_code(data: bytes) -> DecodeResult:
    # either a blob base/length pair, or a string like "ACPI DATA"
    if len(data) == 16:
        return _decode_firmware_blob(data)
    return Matched(AsciiStringEventData(data))


def _decode_efi_variable(data: bytes) -> DecodeResult:
    # https://docs.microsoft.com/en-us/windows-hardware/test/hlk/testref/trusted-execution-environment-efi-protocol
    with BinaryReader(data) as br:
        variable_name = br.read_guid()
        unicode_name_len = br.read_u64()
        variable_data_len = br.read_u64()
        unicode_name = nullterm16(br.read(unicode_name_len * 2))
        variable_data = br.read(variable_data_len)
        return Matched(EFIVariableData(data, variable_name, unicode_name, variable_data), br.remaining())


def _decode_efi_image_load(data: bytes) -> DecodeResult:
    # UEFI_IMAGE_LOAD_EVENT; the UINTN fields are 64 bits wide on every
    # platform we care about, whatever machine the log is read on.
    with BinaryReader(data) as br:
        location_in_memory = br.read_u64()
        length_in_memory = br.read_u64()
        link_time_address = br.read_u64()
        device_path_len = br.read_u64()
        device_path = parse_efi_device_path(br.read(device_path_len))
        return Matched(EFIImageLoadEventData(data, location_in_memory, length_in_memory,
                                             link_time_address, device_path), br.remaining())


def _decode_efi_gpt(data: bytes) -> DecodeResult:
    # UEFI_GPT_DATA: the GPT header, followed by the partition entries
    with BinaryReader(data) as br:
        signature = br.read(8)
        if signature != b"EFI PART":
            raise DecodeError("GPT header has bad signature %r" % signature)
        br.read(4)  # revision
        header_size = br.read_u32()
        br.read(4 + 4)  # header CRC32, reserved
        br.read(8 + 8 + 8 + 8)  # MyLBA, AlternateLBA, FirstUsableLBA, LastUsableLBA
        disk_guid = br.read_guid()
        partition_entry_lba = br.read_u64()
        br.read(4)  # NumberOfPartitionEntries
        entry_size = br.read_u32()
        br.read(4)  # PartitionEntryArrayCRC32
        if header_size < 92:
            raise DecodeError("GPT header size %d is too small" % header_size)
        br.read(header_size - 92)

        if entry_size < 128:
            raise DecodeError("GPT partition entry size %d is too small" % entry_size)
        num_partitions = br.read_u64()
        partitions = []
        for i in range(num_partitions):
            with BinaryReader(br.read(entry_size)) as entry:
                partitions.append(GPTPartitionEntry(
                    partition_type=entry.read_guid(),
                    unique_partition_guid=entry.read_guid(),
                    starting_lba=entry.read_u64(),
                    ending_lba=entry.read_u64(),
                    attributes=entry.read_u64(),
                    partition_name=nullterm16(entry.read(72)),
                ))
        return Matched(EFIGPTData(data, disk_guid, partition_entry_lba, tuple(partitions)), br.remaining())


@decoder
def decode_event_data(event_type: TpmEventType, data: bytes, has_digest_of_separator_error: bool = False) -> DecodeResult:
    if event_type == TpmEventType.NO_ACTION:
        return _decode_no_action(data)
    elif event_type == TpmEventType.SEPARATOR:
        return _decode_separator(data, has_digest_of_separator_error)
    elif event_type in [TpmEventType.ACTION, TpmEventType.EFI_ACTION]:
        return Matched(AsciiStringEventData(data))
    elif event_type == TpmEventType.POST_CODE:
        return _decode_post_code(data)
    elif event_type == TpmEventType.EFI_PLATFORM_FIRMWARE_BLOB:
        return _decode_firmware_blob(data)
    elif event_type in [TpmEventType.EFI_VARIABLE_DRIVER_CONFIG, TpmEventType.EFI_VARIABLE_BOOT,
                        TpmEventType.EFI_VARIABLE_BOOT2, TpmEventType.EFI_VARIABLE_AUTHORITY]:
        return _decode_efi_variable(data)
    elif event_type in [TpmEventType.EFI_BOOT_SERVICES_APPLICATION, TpmEventType.EFI_BOOT_SERVICES_DRIVER,
                        TpmEventType.EFI_RUNTIME_SERVICES_DRIVER]:
        return _decode_efi_image_load(data)
    elif event_type == TpmEventType.EFI_GPT_EVENT:
        return _decode_efi_gpt(data)
    else:
        return NO_MATCH
