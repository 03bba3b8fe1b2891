from dataclasses import dataclass, field

from .event_data import EventData
from .tpm_constants import TpmAlgorithm, TpmEventType

# Digests of a single event, by algorithm. Sizes are whatever the log
# declared for each algorithm, they are not checked here.
DigestMap = dict[TpmAlgorithm, bytes]


@dataclass(frozen=True)
class Event:
    index: int          # position of the event in the log
    pcr_idx: int
    type: TpmEventType
    digests: DigestMap = field(repr=False)
    data: EventData
    # bytes after the part of data that its decoder interpreted
    trailing_bytes: int = 0
