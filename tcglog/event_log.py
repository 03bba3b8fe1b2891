import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

from . import logging
from .algorithms import algorithm_name, hash_data, is_supported
from .binary_reader import BinaryReader
from .decode import decode_event_data
from .event import DigestMap, Event
from .options import DecodeOptions
from .tcg import SEPARATOR_EVENT_ERROR_VALUE, Spec, SpecIdEventData
from .tpm_constants import TpmAlgorithm, TpmEventType

logger = logging.getLogger('event_log')

DEFAULT_LOG_PATH = Path("/sys/kernel/security/tpm0/binary_bios_measurements")

_SEPARATOR_ERROR_BYTES = struct.pack("<L", SEPARATOR_EVENT_ERROR_VALUE)


class LogFormatError(Exception):
    pass


@dataclass
class Log:
    spec: Spec
    algorithms: list[TpmAlgorithm]
    events: list[Event] = field(default_factory=list)


def _is_separator_error(digests: DigestMap, algorithms: list[TpmAlgorithm]) -> bool:
    # A separator measured with the error value means the firmware hit an
    # error, whatever its event data says.
    checked = False
    for alg in algorithms:
        if not is_supported(alg):
            continue
        if digests.get(alg) != hash_data(alg, _SEPARATOR_ERROR_BYTES):
            return False
        checked = True
    return checked


class _LogReader:
    """
    Walks the records of one log, in order.

    Once a separator has been measured with the error value, every later
    separator is decoded as error information, whatever PCR it is for.
    """

    def __init__(self, options: DecodeOptions, index_base: int):
        self.options = options
        self.index = index_base
        self.spec = Spec.UNKNOWN
        self.algorithms = [TpmAlgorithm.SHA1]
        # set once the log is known to be in the crypto agile format
        self.digest_sizes = None
        self.has_digest_of_separator_error = False

    def _read_digests(self, br: BinaryReader) -> DigestMap:
        digests = {}
        if self.digest_sizes is None:
            # section 5.1, SHA1 Event Log Entry Format
            digests[TpmAlgorithm.SHA1] = br.read(20)
        else:
            # section 5.2, Crypto Agile Log Entry Format
            count = br.read_u32()
            for i in range(count):
                alg_id = TpmAlgorithm(br.read_u16())
                if alg_id not in self.digest_sizes:
                    raise LogFormatError("event %d has a digest for algorithm %s, which the log header doesn't declare"
                                         % (self.index, algorithm_name(alg_id)))
                digests[alg_id] = br.read(self.digest_sizes[alg_id])
        return digests

    def _read_event(self, br: BinaryReader) -> Event:
        pcr_idx = br.read_u32()
        event_type = TpmEventType(br.read_u32())
        digests = self._read_digests(br)
        event_size = br.read_u32()
        data = br.read(event_size)

        event_data, trailing_bytes = decode_event_data(pcr_idx, event_type, data, self.options,
                                                       self.has_digest_of_separator_error)
        event = Event(self.index, pcr_idx, event_type, digests, event_data, trailing_bytes)

        if event_type == TpmEventType.SEPARATOR and _is_separator_error(digests, self.algorithms):
            logger.verbose("event %d is a separator for a firmware error", self.index)
            self.has_digest_of_separator_error = True
        return event

    def _check_spec_id(self, event: Event):
        if event.pcr_idx != 0 or event.type != TpmEventType.NO_ACTION:
            self.spec = Spec.PC_CLIENT
            return
        if not isinstance(event.data, SpecIdEventData):
            self.spec = Spec.PC_CLIENT
            return
        self.spec = event.data.spec
        if self.spec == Spec.EFI_2:
            self.digest_sizes = dict(event.data.digest_sizes)
            self.algorithms = list(self.digest_sizes)
            logger.verbose("crypto agile log with algorithms %s",
                           ", ".join(algorithm_name(alg) for alg in self.algorithms))

    def read_events(self, br: BinaryReader) -> Iterator[Event]:
        first = True
        while True:
            start = br.tell()
            try:
                event = self._read_event(br)
            except EOFError:
                if br.tell() == start:
                    break
                raise LogFormatError("log truncated inside event %d (offset 0x%x)" % (self.index, start)) from None
            if first:
                # The first event always uses the SHA1 format, it tells us what the rest look like.
                self._check_spec_id(event)
                first = False
            self.index += 1
            yield event


def _open(source: bytes | Path | str) -> BinaryReader:
    if isinstance(source, str):
        source = Path(source)
    if isinstance(source, Path):
        # securityfs and pipes can be read, but not seeked
        with open(source, "rb") as fh:
            source = fh.read()
    return BinaryReader(source)


def enum_log_entries(source: bytes | Path | str = DEFAULT_LOG_PATH, options: DecodeOptions | None = None,
                     index_base: int = 0) -> Iterator[Event]:
    reader = _LogReader(options or DecodeOptions(), index_base)
    with _open(source) as br:
        yield from reader.read_events(br)


def parse_log(source: bytes | Path | str = DEFAULT_LOG_PATH, options: DecodeOptions | None = None,
              index_base: int = 0) -> Log:
    reader = _LogReader(options or DecodeOptions(), index_base)
    with _open(source) as br:
        events = list(reader.read_events(br))
    return Log(reader.spec, reader.algorithms, events)
