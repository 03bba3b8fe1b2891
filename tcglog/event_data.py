import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class InvalidReason(enum.Enum):
    TRUNCATED = "event data smaller than expected"
    MALFORMED = "malformed event data"


@dataclass(frozen=True)
class EventData(ABC):
    """
    Base class of every decoded event payload.

    Whatever the decoder made of the payload, the original bytes are kept
    so that callers can always dump or extract them.
    """
    data: bytes = field(repr=False)

    def __post_init__(self):
        # own an immutable copy, the caller may hand us a reusable buffer
        if not isinstance(self.data, bytes):
            object.__setattr__(self, "data", bytes(self.data))

    def raw_bytes(self) -> bytes:
        return self.data

    @abstractmethod
    def display_text(self) -> str:
        pass

    def __str__(self):
        return self.display_text()


@dataclass(frozen=True)
class OpaqueEventData(EventData):
    """Payload that no decoder claimed."""

    def display_text(self) -> str:
        return ""


@dataclass(frozen=True)
class InvalidEventData(EventData):
    """Payload that a decoder started on but could not make sense of."""
    error: Exception
    reason: InvalidReason = InvalidReason.MALFORMED

    @property
    def truncated(self) -> bool:
        return self.reason == InvalidReason.TRUNCATED

    def classification(self) -> str:
        if self.truncated:
            return InvalidReason.TRUNCATED.value
        return "%s: %s" % (InvalidReason.MALFORMED.value, self.error)

    def display_text(self) -> str:
        if self.truncated:
            return "Invalid event data: %s" % InvalidReason.TRUNCATED.value
        return "Invalid event data: %s" % self.error


@dataclass(frozen=True)
class AsciiStringEventData(EventData):
    def display_text(self) -> str:
        return self.data.decode("ascii", errors="replace").rstrip("\0")
