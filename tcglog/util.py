import binascii
import struct
import uuid


def to_hex(buf):
    return binascii.hexlify(buf).decode()


def hexdump(buf, max_len=None):
    # max_len must be smaller than len(buf), if defined
    max_len = min(max_len or len(buf), len(buf))

    hexdump_contents = []
    # print the hex codes and their ascii representation
    for i in range(0, max_len, 16):
        row = buf[i:i+16]
        hexs = ["  "] * 16 if len(row) < 16 else []
        text = [" "] * 16 if len(row) < 16 else []
        hexs[:len(row)] = ["%02x" % b for b in row]
        text[:len(row)] = [chr(b) if 0x20 <= b < 0x7f else "." for b in row]
        hexdump_contents.append(f'{i:08x}  {" ".join(hexs[:8])}  {" ".join(hexs[8:])}  |{"".join(text)}|')

    # notify the user in case there were bytes left unprinted
    if len(buf) > max_len:
        hexdump_contents.append(f"({len(buf) - max_len} more bytes)")

    return hexdump_contents


def guid_to_UUID(buf):
    buf = struct.pack(">LHH8B", *struct.unpack("<LHH8B", buf))
    return uuid.UUID(bytes=buf)


def nullterm8(buf: bytes) -> str:
    """Decode a (possibly) NUL terminated 8-bit string, dropping the terminator and anything after it."""
    return buf.split(b"\0", 1)[0].decode("ascii", errors="replace")


def nullterm16(buf: bytes) -> str:
    """Same as nullterm8, for UTF-16LE strings."""
    return buf.decode("utf-16le").split("\0", 1)[0]
