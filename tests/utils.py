import hashlib
import struct
import uuid

from tcglog.tpm_constants import TpmAlgorithm, TpmEventType

EFI_GLOBAL_VARIABLE = uuid.UUID("8be4df61-93ca-11d2-aa0d-00e098032b8c")

# digest sizes for algorithms hashlib can't compute for us
_OTHER_DIGEST_SIZES = {TpmAlgorithm.SM3_256: 32}


def digest_for(alg: TpmAlgorithm, data: bytes) -> bytes:
    if alg in _OTHER_DIGEST_SIZES:
        return b"\x5a" * _OTHER_DIGEST_SIZES[alg]
    return hashlib.new(alg.name.lower(), data).digest()


def digest_size_for(alg: TpmAlgorithm) -> int:
    return len(digest_for(alg, b""))


def spec_id_event03(algs=(TpmAlgorithm.SHA1, TpmAlgorithm.SHA256), vendor_info=b"") -> bytes:
    buf = struct.pack("<16sLBBBBL", b"Spec ID Event03\0", 0, 0, 2, 0, 2, len(algs))
    for alg in algs:
        buf += struct.pack("<HH", alg, digest_size_for(alg))
    return buf + struct.pack("<B", len(vendor_info)) + vendor_info


def pack_event_tcg1(pcr_idx: int, event_type: int, data: bytes, digest: bytes | None = None) -> bytes:
    if digest is None:
        digest = hashlib.sha1(data).digest()
    return struct.pack("<LL20sL", pcr_idx, event_type, digest, len(data)) + data


def pack_event_agile(pcr_idx: int, event_type: int, data: bytes, digests: dict) -> bytes:
    buf = struct.pack("<LLL", pcr_idx, event_type, len(digests))
    for alg, digest in digests.items():
        buf += struct.pack("<H", alg) + digest
    return buf + struct.pack("<L", len(data)) + data


def build_agile_log(events, algs=(TpmAlgorithm.SHA1, TpmAlgorithm.SHA256)) -> bytes:
    """
    events is a list of (pcr_idx, event_type, data) or
    (pcr_idx, event_type, data, digests) tuples.
    """
    buf = pack_event_tcg1(0, TpmEventType.NO_ACTION, spec_id_event03(algs), digest=bytes(20))
    for event in events:
        pcr_idx, event_type, data = event[:3]
        digests = event[3] if len(event) > 3 else {alg: digest_for(alg, data) for alg in algs}
        buf += pack_event_agile(pcr_idx, event_type, data, digests)
    return buf


def build_tcg1_log(events) -> bytes:
    return b"".join(pack_event_tcg1(pcr_idx, event_type, data) for pcr_idx, event_type, data in events)


def efi_variable_payload(name: str, var_data: bytes, guid: uuid.UUID = EFI_GLOBAL_VARIABLE) -> bytes:
    return guid.bytes_le + struct.pack("<QQ", len(name), len(var_data)) + name.encode("utf-16le") + var_data


def file_path_node(path: str) -> bytes:
    encoded = (path + "\0").encode("utf-16le")
    return struct.pack("<BBH", 0x04, 0x04, 4 + len(encoded)) + encoded


def hard_drive_node(partition_number: int, part_uuid: uuid.UUID) -> bytes:
    body = struct.pack("<LQQ16sBB", partition_number, 2048, 1048576, part_uuid.bytes_le, 0x02, 0x02)
    return struct.pack("<BBH", 0x04, 0x01, 4 + len(body)) + body


def pci_root_node(uid: int = 0) -> bytes:
    return struct.pack("<BBHLL", 0x02, 0x01, 12, 0x0a0341d0, uid)


def pci_node(device: int, function: int) -> bytes:
    return struct.pack("<BBHBB", 0x01, 0x01, 6, function, device)


END_NODE = struct.pack("<BBH", 0x7F, 0xFF, 4)


def image_load_payload(device_path: bytes, location: int = 0x7e5f0000, length: int = 0x1c000,
                       link_time_address: int = 0) -> bytes:
    return struct.pack("<QQQQ", location, length, link_time_address, len(device_path)) + device_path
