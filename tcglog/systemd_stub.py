"""
Kernel command line measurements made by the systemd EFI stub
(an EV_IPL event to PCR 8 up to systemd v250, PCR 12 afterwards).
"""

from dataclasses import dataclass

from .decode_result import NO_MATCH, DecodeError, DecodeResult, Matched, decoder
from .event_data import EventData


@dataclass(frozen=True)
class SystemdEFIStubEventData(EventData):
    cmdline: str

    def display_text(self) -> str:
        return self.cmdline


def loader_encode_pcr8(cmdline: str) -> bytes:
    """
    Encode kernel command line the same way systemd-stub does it before measuring.
    """
    return (cmdline + "\0").encode("utf-16le")


def loader_decode_pcr8(data: bytes) -> str:
    """
    Reverse the encoding for a kernel command line we've read from EV_IPL.
    """
    if len(data) % 2 != 0:
        # Older systemd-stub measured strlen*2+1 bytes, which cuts the
        # terminator down to a single zero byte.
        data += b"\0"
    if not data.endswith(b"\0\0"):
        raise DecodeError("kernel command line is not NUL terminated")
    return data.decode("utf-16le")[:-1]


@decoder
def decode_event_data(data: bytes) -> DecodeResult:
    if not data:
        raise EOFError("no kernel command line in event data")
    if data[-1] != 0:
        # not something the stub measured
        return NO_MATCH
    return Matched(SystemdEFIStubEventData(data, loader_decode_pcr8(data)))
