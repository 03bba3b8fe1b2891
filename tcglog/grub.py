"""
Measurements made by GRUB's TPM module.

GRUB measures the commands it executes and the kernel command line as
EV_IPL events to PCR 8, and the files it loads as EV_IPL events to PCR 9.
"""

import enum
from dataclasses import dataclass

from .decode_result import NO_MATCH, DecodeResult, Matched
from .event_data import AsciiStringEventData, EventData
from .tpm_constants import TpmEventType

GRUB_PCRS = (8, 9)

KERNEL_CMDLINE_PREFIX = b"kernel_cmdline: "
GRUB_CMD_PREFIX = b"grub_cmd: "


class GrubStringEventType(enum.Enum):
    GRUB_CMD = "grub_cmd"
    KERNEL_CMDLINE = "kernel_cmdline"


@dataclass(frozen=True)
class GrubStringEventData(EventData):
    type: GrubStringEventType
    string: str

    def display_text(self) -> str:
        return "%s{ %s }" % (self.type.value, self.string)


def _grub_string(data: bytes, prefix: bytes, kind: GrubStringEventType) -> GrubStringEventData:
    string = data[len(prefix):].decode("utf-8", errors="replace").rstrip("\0")
    return GrubStringEventData(data, kind, string)


def decode_event_data(pcr_idx: int, event_type: TpmEventType, data: bytes) -> DecodeResult:
    # This decoder only ever declines, GRUB gives us nothing to validate against.
    if event_type != TpmEventType.IPL:
        return NO_MATCH

    if pcr_idx == 8:
        if data.startswith(KERNEL_CMDLINE_PREFIX):
            return Matched(_grub_string(data, KERNEL_CMDLINE_PREFIX, GrubStringEventType.KERNEL_CMDLINE))
        elif data.startswith(GRUB_CMD_PREFIX):
            return Matched(_grub_string(data, GRUB_CMD_PREFIX, GrubStringEventType.GRUB_CMD))
        return NO_MATCH
    elif pcr_idx == 9:
        return Matched(AsciiStringEventData(data))
    return NO_MATCH
