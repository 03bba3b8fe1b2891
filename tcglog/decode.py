from dataclasses import dataclass
from typing import Callable

from . import grub, systemd_stub, tcg
from . import logging
from .decode_result import DECODE_ERRORS, DecodeResult, Failed, Matched
from .event_data import EventData, InvalidEventData, InvalidReason, OpaqueEventData
from .options import DecodeOptions
from .tpm_constants import TpmEventType

logger = logging.getLogger('decode')


@dataclass(frozen=True)
class _VendorDecoder:
    name: str
    # whether this decoder should be tried for a (pcr_idx, event_type)
    applies: Callable[[int, TpmEventType, DecodeOptions], bool]
    decode: Callable[[int, TpmEventType, bytes], DecodeResult]
    # if set, a failure marks the event invalid instead of falling through
    errors_are_final: bool


def _vendor_decoders() -> tuple[_VendorDecoder, ...]:
    # Looked up on every call so that the module level decoders can be swapped out.
    return (
        _VendorDecoder(
            name="grub",
            applies=lambda pcr_idx, event_type, options:
                options.enable_grub and pcr_idx in grub.GRUB_PCRS,
            decode=lambda pcr_idx, event_type, data: grub.decode_event_data(pcr_idx, event_type, data),
            errors_are_final=False,
        ),
        _VendorDecoder(
            name="systemd-efi-stub",
            applies=lambda pcr_idx, event_type, options:
                options.enable_systemd_efi_stub and pcr_idx == options.systemd_efi_stub_pcr
                and event_type == TpmEventType.IPL,
            decode=lambda pcr_idx, event_type, data: systemd_stub.decode_event_data(data),
            errors_are_final=True,
        ),
    )


def _call(decode: Callable[..., DecodeResult], *args) -> DecodeResult:
    try:
        return decode(*args)
    except DECODE_ERRORS as e:
        return Failed(e)


def _classify(error: Exception) -> InvalidReason:
    # ShortReadError is an EOFError too, both mean the payload was too small
    if isinstance(error, EOFError):
        return InvalidReason.TRUNCATED
    return InvalidReason.MALFORMED


def _invalid(data: bytes, error: Exception) -> tuple[EventData, int]:
    reason = _classify(error)
    logger.verbose("invalid event data (%s): %s", reason.name.lower(), error)
    return InvalidEventData(data, error, reason), 0


def decode_event_data(pcr_idx: int, event_type: int, data: bytes, options: DecodeOptions,
                      has_digest_of_separator_error: bool = False) -> tuple[EventData, int]:
    """
    Decode the payload of a single event.

    The vendor decoders enabled in options get the first go, in order, then
    the generic TCG decoder. Returns the decoded data and the number of
    trailing bytes that the winning decoder left uninterpreted. Decoding
    problems are returned as InvalidEventData, never raised.
    """
    data = bytes(data)
    event_type = TpmEventType(event_type)

    for vendor in _vendor_decoders():
        if not vendor.applies(pcr_idx, event_type, options):
            continue
        result = _call(vendor.decode, pcr_idx, event_type, data)
        if isinstance(result, Matched):
            logger.debug("PCR %d %s decoded by the %s decoder", pcr_idx, event_type, vendor.name)
            return result.data, result.trailing_bytes
        if isinstance(result, Failed):
            if vendor.errors_are_final:
                return _invalid(data, result.error)
            logger.debug("%s decoder failed on PCR %d %s, ignoring: %s",
                         vendor.name, pcr_idx, event_type, result.error)
        else:
            logger.debug("%s decoder declined PCR %d %s", vendor.name, pcr_idx, event_type)

    result = _call(tcg.decode_event_data, event_type, data, has_digest_of_separator_error)
    if isinstance(result, Matched):
        return result.data, result.trailing_bytes
    if isinstance(result, Failed):
        return _invalid(data, result.error)
    return OpaqueEventData(data), 0
