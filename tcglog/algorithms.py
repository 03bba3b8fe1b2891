import hashlib
from types import MappingProxyType
from typing import Callable

from .tpm_constants import TpmAlgorithm


class UnsupportedAlgorithmError(ValueError):
    pass


# The hash algorithms we can actually compute. Anything else may still show
# up in a log, it just can't be hashed.
_HASHES = MappingProxyType({
    TpmAlgorithm.SHA1: hashlib.sha1,
    TpmAlgorithm.SHA256: hashlib.sha256,
    TpmAlgorithm.SHA384: hashlib.sha384,
    TpmAlgorithm.SHA512: hashlib.sha512,
})

_DISPLAY_NAMES = MappingProxyType({
    TpmAlgorithm.SHA1: "SHA-1",
    TpmAlgorithm.SHA256: "SHA-256",
    TpmAlgorithm.SHA384: "SHA-384",
    TpmAlgorithm.SHA512: "SHA-512",
})


def hash_of(alg: int) -> Callable | None:
    return _HASHES.get(alg)


def is_supported(alg: int) -> bool:
    return alg in _HASHES


def digest_size(alg: int) -> int:
    """Size in bytes of a digest made with alg, or 0 if we can't hash with it."""
    constructor = _HASHES.get(alg)
    if constructor is None:
        return 0
    return constructor().digest_size


def hash_data(alg: int, data: bytes) -> bytes:
    constructor = _HASHES.get(alg)
    if constructor is None:
        raise UnsupportedAlgorithmError("no hash implementation for algorithm %s" % algorithm_name(alg))
    return constructor(data).digest()


def algorithm_name(alg: int) -> str:
    alg = TpmAlgorithm(alg)
    return _DISPLAY_NAMES.get(alg, str(alg))


def parse_algorithm(name: str) -> TpmAlgorithm:
    """Turn a user supplied name such as "sha256" or "SHA-256" into an id."""
    for key in (name.upper().replace("-", ""), name.upper().replace("-", "_")):
        if key in TpmAlgorithm.__members__:
            return TpmAlgorithm[key]
    raise UnsupportedAlgorithmError("unrecognized algorithm %r" % name)
