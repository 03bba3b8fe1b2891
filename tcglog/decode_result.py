import functools
import struct
from dataclasses import dataclass

from .event_data import EventData


class DecodeError(ValueError):
    """The payload has the expected shape but its content doesn't check out."""
    pass


@dataclass(frozen=True)
class NoMatch:
    """The decoder doesn't apply to this payload."""
    pass


@dataclass(frozen=True)
class Matched:
    data: EventData
    trailing_bytes: int = 0


@dataclass(frozen=True)
class Failed:
    error: Exception


DecodeResult = NoMatch | Matched | Failed

NO_MATCH = NoMatch()

# Errors that a decoder may hit while walking a payload
DECODE_ERRORS = (EOFError, ValueError, struct.error)


def decoder(func):
    """
    Let a decoder raise while parsing and turn the exception into Failed.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> DecodeResult:
        try:
            return func(*args, **kwargs)
        except DECODE_ERRORS as e:
            return Failed(e)
    return wrapper
