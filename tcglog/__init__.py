from .algorithms import (
    UnsupportedAlgorithmError,
    algorithm_name,
    digest_size,
    hash_data,
    hash_of,
    is_supported,
    parse_algorithm,
)
from .decode import decode_event_data
from .decode_result import DecodeError, Failed, Matched, NoMatch
from .event import DigestMap, Event
from .event_data import AsciiStringEventData, EventData, InvalidEventData, InvalidReason, OpaqueEventData
from .event_log import DEFAULT_LOG_PATH, Log, LogFormatError, enum_log_entries, parse_log
from .grub import GrubStringEventData
from .options import DecodeOptions
from .systemd_stub import SystemdEFIStubEventData
from .tcg import (
    EFIGPTData,
    EFIImageLoadEventData,
    EFIVariableData,
    FirmwareBlobEventData,
    SeparatorEventData,
    Spec,
    SpecIdEventData,
    StartupLocalityEventData,
)
from .tpm_constants import TpmAlgorithm, TpmEventType, event_type_name
